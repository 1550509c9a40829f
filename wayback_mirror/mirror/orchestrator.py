"""
Main mirror orchestrator.

Drives a run end to end: resolves the capture index, downloads every capture,
and downloads the stylesheets, scripts, and images referenced by archived
pages.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set

import aiohttp
from aiohttp import ClientTimeout

from .downloader import SnapshotDownloader
from .errors import SnapshotFetchError
from .extractor import AssetExtractor
from .index import SnapshotEntry, SnapshotIndex
from ..utils.constants import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..utils.log import get_logger
from ..utils.paths import get_backup_root, get_origin, is_index_file


@dataclass(frozen=True)
class MirrorTask:
    """A capture waiting to be downloaded. Depth 0 is an index entry, 1 an asset."""

    entry: SnapshotEntry
    depth: int = 0

    @property
    def is_asset(self) -> bool:
        return self.depth > 0


@dataclass
class MirrorResult:
    """Results of a mirror run."""

    url: str = ''
    backup_path: str = ''
    snapshots_resolved: int = 0
    files_written: int = 0
    assets_failed: int = 0
    duplicates_skipped: int = 0
    errors: List[Dict] = field(default_factory=list)
    duration_seconds: float = 0.0


class WaybackMirror:
    """
    Main mirror class.

    Coordinates the index resolver, downloader, and asset extractor to
    rebuild a site from its archived captures.

    Work is kept on a single worklist. A page's assets are pushed to the
    front of the list, so with one worker the order is: page, its assets in
    document order, next page. Assets are stored but never scanned.
    """

    # Assets are discovered on top-level pages only
    MAX_DEPTH = 1

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        user_agent: str = DEFAULT_USER_AGENT,
        dedupe: bool = False,
        continue_on_error: bool = False,
        from_timestamp: Optional[str] = None,
        to_timestamp: Optional[str] = None,
        limit: Optional[int] = None
    ):
        """
        Initialize the mirror.

        Args:
            timeout: Per-request timeout in seconds
            concurrency: Number of download workers
            user_agent: User agent string for requests
            dedupe: Download each original URL at most once per run
            continue_on_error: Log and skip failed index entries instead of
                aborting the run
            from_timestamp: Only mirror captures at or after this timestamp
            to_timestamp: Only mirror captures at or before this timestamp
            limit: Maximum number of index entries to mirror
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        self.timeout = ClientTimeout(total=timeout)
        self.concurrency = concurrency
        self.user_agent = user_agent
        self.dedupe = dedupe
        self.continue_on_error = continue_on_error

        self.logger = get_logger("mirror")

        # Initialize components
        self.index = SnapshotIndex(
            from_timestamp=from_timestamp,
            to_timestamp=to_timestamp,
            limit=limit
        )
        self.downloader = SnapshotDownloader()
        self.extractor = AssetExtractor()

        self._reset()

    def _reset(self) -> None:
        self._pending: Deque[MirrorTask] = deque()
        self._in_flight = 0
        self._fetched_urls: Set[str] = set()
        self._fatal: Optional[BaseException] = None
        self._result = MirrorResult()
        self.downloader.reset()

    def create_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session used for a run."""
        return aiohttp.ClientSession(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent}
        )

    async def run(self, base_url: str, output_dir: str) -> MirrorResult:
        """
        Mirror every archived capture of a site.

        Args:
            base_url: Root URL of the site to mirror
            output_dir: Root output directory; the site lands in
                '<output_dir>/<host>'

        Returns:
            MirrorResult with statistics and error records

        Raises:
            IndexResolutionError: If the capture index cannot be resolved
            SnapshotFetchError: If an index entry fails and
                continue_on_error is off
        """
        start_time = time.time()
        self._reset()
        result = self._result
        result.url = base_url
        result.backup_path = get_backup_root(base_url, output_dir)

        async with self.create_session() as session:
            entries = await self.index.resolve(session, base_url)
            result.snapshots_resolved = len(entries)

            self._pending.extend(MirrorTask(entry) for entry in entries)
            await self._drain(session, output_dir)

        result.duration_seconds = time.time() - start_time
        self.logger.info(
            f"Mirrored {result.files_written} files from "
            f"{result.snapshots_resolved} captures in {result.duration_seconds:.1f}s "
            f"({result.assets_failed} assets failed)"
        )
        return result

    async def _drain(self, session: aiohttp.ClientSession, output_dir: str) -> None:
        """Run the workers until the worklist is empty or a fatal error occurs."""
        condition = asyncio.Condition()
        workers = [
            self._worker(session, output_dir, condition)
            for _ in range(self.concurrency)
        ]
        await asyncio.gather(*workers, return_exceptions=True)

        if self._fatal is not None:
            raise self._fatal

    async def _worker(
        self,
        session: aiohttp.ClientSession,
        output_dir: str,
        condition: asyncio.Condition
    ) -> None:
        while True:
            async with condition:
                while not self._pending and self._in_flight and self._fatal is None:
                    await condition.wait()
                if not self._pending or self._fatal is not None:
                    return
                task = self._pending.popleft()
                self._in_flight += 1

            children: List[MirrorTask] = []
            try:
                children = await self._process(session, task, output_dir)
            except BaseException as e:
                self._fatal = e
                self._pending.clear()
                raise
            finally:
                async with condition:
                    self._in_flight -= 1
                    if self._fatal is None:
                        self._pending.extendleft(reversed(children))
                    condition.notify_all()

    async def _process(
        self,
        session: aiohttp.ClientSession,
        task: MirrorTask,
        output_dir: str
    ) -> List[MirrorTask]:
        """
        Download one capture and return the asset tasks it produced.

        Args:
            session: aiohttp session
            task: Capture to download
            output_dir: Root output directory

        Returns:
            Asset tasks discovered on the page, in document order
        """
        entry = task.entry

        if self.dedupe:
            if entry.original_url in self._fetched_urls:
                self._result.duplicates_skipped += 1
                self.logger.debug(f"Already fetched, skipping: {entry.original_url}")
                return []
            self._fetched_urls.add(entry.original_url)

        try:
            local_path = await self.downloader.fetch_and_store(session, entry, output_dir)
        except Exception as e:
            # Any asset failure is contained to that asset
            if task.is_asset:
                self._record_error(entry, e, 'asset_error')
                self._result.assets_failed += 1
                self.logger.warning(f"Failed to download asset {entry.original_url}: {e}")
                return []
            if self.continue_on_error and isinstance(e, SnapshotFetchError):
                self._record_error(entry, e, 'snapshot_error')
                self.logger.error(f"Failed to download {entry.original_url}: {e}")
                return []
            self.logger.error(f"Aborting run, failed to download {entry.original_url}: {e}")
            raise

        self._result.files_written += 1

        if task.depth >= self.MAX_DEPTH or not is_index_file(local_path):
            return []

        with open(local_path, 'r', encoding='utf-8', errors='ignore') as f:
            html = f.read()

        asset_urls = self.extractor.extract(html, get_origin(entry.original_url))
        return [
            MirrorTask(SnapshotEntry(entry.timestamp, asset_url), depth=task.depth + 1)
            for asset_url in asset_urls
        ]

    def _record_error(self, entry: SnapshotEntry, error: Exception, kind: str) -> None:
        self._result.errors.append({
            'url': entry.original_url,
            'timestamp': entry.timestamp,
            'archive_url': getattr(error, 'archive_url', entry.archive_url),
            'status': getattr(error, 'status', None),
            'error': str(error) or type(error).__name__,
            'type': kind
        })
