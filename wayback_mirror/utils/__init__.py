"""
Utility modules for the wayback mirror.

Contains logging, path handling utilities, and constants.
"""

from .log import setup_logger, get_logger
from .paths import (
    sanitize_filename,
    derive_path,
    get_local_path,
    get_backup_root,
    ensure_dir,
)
from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    DIRECTORY_INDEX,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "sanitize_filename",
    "derive_path",
    "get_local_path",
    "get_backup_root",
    "ensure_dir",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONCURRENCY",
    "DIRECTORY_INDEX",
]
