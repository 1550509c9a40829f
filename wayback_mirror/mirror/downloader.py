"""
Snapshot downloader for fetching captures and saving them to the mirror tree.

Uses aiohttp to stream capture bodies straight to disk.
"""

import asyncio
import os
from typing import Dict

import aiohttp
from aiohttp import ClientError

from .errors import SnapshotFetchError
from .index import SnapshotEntry
from ..utils.constants import DEFAULT_CHUNK_SIZE
from ..utils.log import get_logger
from ..utils.paths import get_local_path, ensure_parent_dir


class SnapshotDownloader:
    """
    Downloads individual captures from the Wayback Machine.

    Writes to the same local path are serialized, so a URL that is both a
    top-level capture and a discovered asset never produces an interleaved
    file.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize the snapshot downloader.

        Args:
            chunk_size: Bytes read per chunk while streaming
        """
        self.chunk_size = chunk_size
        self.logger = get_logger("downloader")

        # Local path -> lock guarding writes to it
        self._path_locks: Dict[str, asyncio.Lock] = {}

    def reset(self) -> None:
        """Drop per-path locks left over from a previous run."""
        self._path_locks.clear()

    def _lock_for(self, local_path: str) -> asyncio.Lock:
        lock = self._path_locks.get(local_path)
        if lock is None:
            lock = self._path_locks[local_path] = asyncio.Lock()
        return lock

    async def fetch_and_store(
        self,
        session: aiohttp.ClientSession,
        entry: SnapshotEntry,
        output_dir: str
    ) -> str:
        """
        Download one capture and write it under the output directory.

        Args:
            session: aiohttp session
            entry: Capture to download
            output_dir: Root output directory

        Returns:
            Local file path the capture was written to

        Raises:
            SnapshotFetchError: If the download or the write fails
        """
        archive_url = entry.archive_url
        local_path = get_local_path(entry.original_url, output_dir)

        async with self._lock_for(local_path):
            try:
                ensure_parent_dir(local_path)
                await self._stream_to_file(session, entry, local_path)
            except (ClientError, asyncio.TimeoutError, OSError) as e:
                raise SnapshotFetchError(
                    entry.original_url,
                    archive_url,
                    str(e) or type(e).__name__
                ) from e

        self.logger.info(f"{archive_url} -> {local_path}")
        return local_path

    async def _stream_to_file(
        self,
        session: aiohttp.ClientSession,
        entry: SnapshotEntry,
        local_path: str
    ) -> None:
        """
        Stream a capture body to a temporary file, then move it into place.

        The temporary file is removed if anything goes wrong, leaving any
        earlier copy of the file untouched.
        """
        archive_url = entry.archive_url
        part_path = local_path + '.part'

        async with session.get(archive_url, allow_redirects=True) as response:
            if not 200 <= response.status < 300:
                raise SnapshotFetchError(
                    entry.original_url,
                    archive_url,
                    f"HTTP {response.status}",
                    status=response.status
                )

            try:
                with open(part_path, 'wb') as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        f.write(chunk)
                os.replace(part_path, local_path)
            except BaseException:
                if os.path.exists(part_path):
                    os.remove(part_path)
                raise
