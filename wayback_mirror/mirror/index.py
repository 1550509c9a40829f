"""
Snapshot index resolver.

Queries the Wayback Machine CDX server for every successful capture under a
site and turns the tabular response into snapshot entries.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Dict, List, Optional

import aiohttp
from aiohttp import ClientError

from .errors import IndexResolutionError
from ..utils.constants import CDX_ENDPOINT, SNAPSHOT_URL_TEMPLATE
from ..utils.log import get_logger


@dataclass(frozen=True)
class SnapshotEntry:
    """One capture of one URL: the timestamp token and the original URL."""

    timestamp: str
    original_url: str

    @property
    def archive_url(self) -> str:
        """Time-travel address returning the capture's original bytes."""
        return SNAPSHOT_URL_TEMPLATE.format(
            timestamp=self.timestamp,
            url=self.original_url
        )


class SnapshotIndex:
    """
    Resolves the list of captures to download for a site.

    Entries come back in the order the CDX server returns them; duplicates
    are kept.
    """

    def __init__(
        self,
        endpoint: str = CDX_ENDPOINT,
        from_timestamp: Optional[str] = None,
        to_timestamp: Optional[str] = None,
        limit: Optional[int] = None
    ):
        """
        Initialize the resolver.

        Args:
            endpoint: CDX search endpoint
            from_timestamp: Only include captures at or after this timestamp
            to_timestamp: Only include captures at or before this timestamp
            limit: Maximum number of captures the index should return
        """
        self.endpoint = endpoint
        self.from_timestamp = from_timestamp
        self.to_timestamp = to_timestamp
        self.limit = limit
        self.logger = get_logger("index")

    def build_params(self, base_url: str) -> Dict[str, str]:
        """
        Build the CDX query parameters for a site.

        Args:
            base_url: Root URL of the site

        Returns:
            Query parameter mapping
        """
        params = {
            'url': f"{base_url.rstrip('/')}/*",
            'output': 'json',
            'fl': 'timestamp,original',
            'filter': 'statuscode:200',
        }
        if self.from_timestamp:
            params['from'] = self.from_timestamp
        if self.to_timestamp:
            params['to'] = self.to_timestamp
        if self.limit is not None:
            params['limit'] = str(self.limit)
        return params

    async def resolve(
        self,
        session: aiohttp.ClientSession,
        base_url: str
    ) -> List[SnapshotEntry]:
        """
        Query the index and return the captures for a site.

        Args:
            session: aiohttp session
            base_url: Root URL of the site

        Returns:
            Snapshot entries in index order

        Raises:
            IndexResolutionError: If the index cannot be queried or parsed
        """
        params = self.build_params(base_url)
        self.logger.info(f"Querying capture index for {params['url']}")

        try:
            async with session.get(self.endpoint, params=params) as response:
                if not 200 <= response.status < 300:
                    raise IndexResolutionError(
                        f"CDX query for {base_url} returned HTTP {response.status}"
                    )
                body = await response.text()
        except (ClientError, asyncio.TimeoutError) as e:
            raise IndexResolutionError(f"CDX query for {base_url} failed: {e}") from e

        entries = self.parse(body)
        self.logger.info(f"Found {len(entries)} captures for {base_url}")
        return entries

    def parse(self, body: str) -> List[SnapshotEntry]:
        """
        Parse a JSON CDX response.

        The first row is the column header and is always dropped.

        Args:
            body: Raw response text

        Returns:
            Snapshot entries in response order

        Raises:
            IndexResolutionError: If the body is not a JSON list of rows
        """
        if not body.strip():
            return []

        try:
            rows = json.loads(body)
        except ValueError as e:
            raise IndexResolutionError(f"Malformed CDX response: {e}") from e

        if not isinstance(rows, list):
            raise IndexResolutionError("Malformed CDX response: expected a list of rows")

        entries = []
        for row in rows[1:]:
            if not isinstance(row, list) or len(row) < 2:
                self.logger.warning(f"Skipping malformed index row: {row!r}")
                continue
            entries.append(SnapshotEntry(timestamp=str(row[0]), original_url=str(row[1])))
        return entries
