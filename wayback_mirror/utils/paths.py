"""
Path and URL utilities for the wayback mirror.

Maps archived URLs onto a local directory tree and manages output directories.
"""

import os
import re
from urllib.parse import urlparse

from .constants import DIRECTORY_INDEX, RESERVED_CHARS


# Matches any single character that is not allowed in local file names
_RESERVED_PATTERN = re.compile('[' + re.escape(RESERVED_CHARS) + ']')


def sanitize_filename(name: str) -> str:
    """
    Replace every reserved character in a name with an underscore.

    Args:
        name: Raw file or path name

    Returns:
        Name that is safe to use on any common filesystem
    """
    return _RESERVED_PATTERN.sub('_', name)


def get_origin(url: str) -> str:
    """
    Get the scheme and host of a URL (e.g. 'http://example.com').

    Args:
        url: Absolute URL

    Returns:
        Origin string
    """
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def get_hostname(url: str) -> str:
    """
    Extract the host name from a URL, without port or credentials.

    Args:
        url: URL to extract the host from

    Returns:
        Lower-cased host name, or an empty string if there is none
    """
    return urlparse(url).hostname or ''


def is_directory_like(url: str) -> bool:
    """
    Check whether a URL should be stored as a directory index.

    A URL is directory-like when its path is empty, ends with a slash, or its
    last segment has no extension. Any dot counts as an extension, so a
    segment such as 'v1.2' is treated as a file.

    Args:
        url: URL to classify

    Returns:
        True if the URL maps to '<path>/index.html'
    """
    path = urlparse(url).path
    if not path or path.endswith('/'):
        return True
    _, ext = os.path.splitext(path.rsplit('/', 1)[-1])
    return not ext


def derive_path(url: str) -> str:
    """
    Derive the relative local path for an archived URL.

    The result depends on the URL alone, so the same URL always lands on the
    same file regardless of which capture it came from.

    Args:
        url: Original (pre-archive) URL

    Returns:
        Relative path of the form '<host>/<path>' using '/' separators
    """
    parsed = urlparse(url)
    relative = parsed.path.lstrip('/')
    if parsed.query:
        relative = f"{relative}?{parsed.query}"

    segments = [get_hostname(url)]
    segments.extend(part for part in relative.split('/') if part not in ('', '.', '..'))
    if is_directory_like(url):
        segments.append(DIRECTORY_INDEX)

    return sanitize_filename('/'.join(segments))


def get_local_path(url: str, output_dir: str) -> str:
    """
    Convert an archived URL to an absolute local file path.

    Args:
        url: Original URL
        output_dir: Root output directory

    Returns:
        Local file path
    """
    return os.path.join(output_dir, *derive_path(url).split('/'))


def get_backup_root(site_url: str, output_dir: str) -> str:
    """
    Get the directory holding the mirror of a site.

    Args:
        site_url: Root URL of the mirrored site
        output_dir: Root output directory

    Returns:
        '<output_dir>/<sanitized host>'
    """
    return os.path.join(output_dir, sanitize_filename(get_hostname(site_url)))


def is_index_file(local_path: str) -> bool:
    """Check whether a local path points at a directory index file."""
    return os.path.basename(local_path) == DIRECTORY_INDEX


def ensure_dir(path: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    os.makedirs(path, exist_ok=True)


def ensure_parent_dir(file_path: str) -> None:
    """
    Ensure the parent directory of a file exists.

    Args:
        file_path: File path whose parent directory should exist
    """
    parent = os.path.dirname(file_path)
    if parent:
        ensure_dir(parent)
