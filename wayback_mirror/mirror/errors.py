"""
Exceptions raised by the mirror pipeline.
"""

from typing import Optional


class MirrorError(Exception):
    """Base class for all mirror failures."""


class IndexResolutionError(MirrorError):
    """The CDX index could not be queried or parsed. Always fatal for a run."""


class SnapshotFetchError(MirrorError):
    """
    A single capture could not be downloaded or written.

    Attributes:
        url: Original URL of the capture
        archive_url: Time-travel address that was requested
        status: HTTP status code, if the archive answered at all
    """

    def __init__(
        self,
        url: str,
        archive_url: str,
        reason: str,
        status: Optional[int] = None
    ):
        self.url = url
        self.archive_url = archive_url
        self.status = status
        super().__init__(f"{archive_url}: {reason}")
