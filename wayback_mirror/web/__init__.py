"""
Web module for the wayback mirror.

Provides a Flask-based HTTP trigger for mirror runs.
"""

from .app import create_app

__all__ = ["create_app"]
