"""
Mirror module for rebuilding sites from the Wayback Machine.

Contains components for resolving the capture index, downloading captures,
extracting page assets, and orchestrating a run.
"""

from .errors import MirrorError, IndexResolutionError, SnapshotFetchError
from .index import SnapshotEntry, SnapshotIndex
from .extractor import AssetExtractor
from .downloader import SnapshotDownloader
from .orchestrator import MirrorResult, MirrorTask, WaybackMirror

__all__ = [
    "MirrorError",
    "IndexResolutionError",
    "SnapshotFetchError",
    "SnapshotEntry",
    "SnapshotIndex",
    "AssetExtractor",
    "SnapshotDownloader",
    "MirrorResult",
    "MirrorTask",
    "WaybackMirror",
]
