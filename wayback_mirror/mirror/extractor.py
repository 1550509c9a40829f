"""
Asset extractor for parsing archived HTML and finding embedded resources.

Uses BeautifulSoup for HTML parsing.
"""

from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..utils.log import get_logger


class AssetExtractor:
    """
    Extracts stylesheet, script, and image references from HTML content.

    References are returned in document order and are not deduplicated.
    """

    # Elements whose reference attribute points at a page asset
    ASSET_SELECTOR = 'link[rel="stylesheet"], script[src], img[src]'

    # Schemes that can be fetched from the archive
    FETCHABLE_SCHEMES = ('http', 'https')

    def __init__(self):
        """Initialize the asset extractor."""
        self.logger = get_logger("extractor")

    def extract(self, html: str, base_origin: str) -> List[str]:
        """
        Extract absolute asset URLs from HTML content.

        Args:
            html: HTML content to parse
            base_origin: Scheme and host of the original page

        Returns:
            List of absolute asset URLs, duplicates included
        """
        try:
            soup = BeautifulSoup(html, 'lxml')
        except Exception:
            # Fallback to html.parser if lxml fails
            soup = BeautifulSoup(html, 'html.parser')

        assets = []
        for element in soup.select(self.ASSET_SELECTOR):
            reference = (element.get('href') or element.get('src') or '').strip()
            if not reference:
                continue

            asset_url = self.resolve(reference, base_origin)
            if asset_url:
                assets.append(asset_url)

        self.logger.debug(f"Extracted {len(assets)} assets for {base_origin}")
        return assets

    def resolve(self, reference: str, base_origin: str) -> Optional[str]:
        """
        Resolve a single reference against the page origin.

        Args:
            reference: Raw href/src value
            base_origin: Scheme and host of the original page

        Returns:
            Absolute URL, or None if the reference cannot be fetched
        """
        try:
            asset_url = urljoin(base_origin, reference)
            parsed = urlparse(asset_url)
            # Accessing port validates it
            parsed.port
        except ValueError as e:
            self.logger.debug(f"Skipping unresolvable reference {reference!r}: {e}")
            return None

        if parsed.scheme not in self.FETCHABLE_SCHEMES or not parsed.netloc:
            self.logger.debug(f"Skipping non-fetchable reference {reference!r}")
            return None

        return asset_url
