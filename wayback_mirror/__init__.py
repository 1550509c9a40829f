"""
Wayback Mirror - rebuild a website from its Internet Archive captures.

This package queries the Wayback Machine CDX index for every capture of a site,
downloads the original bytes of each capture along with the stylesheets,
scripts, and images its pages reference, and writes them to a local tree that
mirrors the site's URL structure.
"""

__version__ = "1.0.0"
__author__ = "Wayback Mirror Team"
