"""Strategy reading icons from the site's web application manifest"""

import logging
from typing import Any, Optional

from favicon_finder.models import CandidateURL, FaviconType, StrategyKind
from favicon_finder.strategies.document import DocumentLoader
from favicon_finder.utils.url import (
    is_svg_favicon,
    join_url,
    parse_largest_size,
    resolve_favicon_url,
)

logger = logging.getLogger(__name__)

MANIFEST_SELECTOR: str = 'link[rel="manifest"][href]'


class WebManifestStrategy:
    """Find the largest icon listed in the manifest linked from the site's HTML."""

    kind = StrategyKind.WEB_APPLICATION_MANIFEST_FILE

    def __init__(self, document_loader: DocumentLoader) -> None:
        self.document_loader = document_loader

    async def locate(
        self,
        site_url: str,
        hint: Optional[str] = None,
        follow_meta_refresh_redirect: bool = False,
    ) -> Optional[CandidateURL]:
        """Return the largest manifest icon. `hint` is the manifest path to read."""
        manifest_url = await self._find_manifest_url(
            site_url, hint, follow_meta_refresh_redirect
        )
        if manifest_url is None:
            return None

        icons = await self.scrape_manifest_icons(manifest_url)
        best_src = self.select_largest_icon(icons)
        if best_src is None:
            logger.debug(f"Manifest {manifest_url} lists no usable icons")
            return None

        url = resolve_favicon_url(best_src, manifest_url)
        if url is None:
            return None
        return CandidateURL(url=url, kind=self.kind, icon_type=FaviconType.MANIFEST)

    async def scrape_manifest_icons(self, manifest_url: str) -> list[dict[str, Any]]:
        """Download manifest JSON and extract its icons array."""
        response = await self.document_loader.get(manifest_url)
        if response is None:
            return []
        try:
            json_data = response.json()
        except ValueError:
            logger.debug(f"Failed to parse manifest JSON from {manifest_url}")
            return []
        if not isinstance(json_data, dict):
            return []
        icons = json_data.get("icons", [])
        if not isinstance(icons, list):
            return []
        return [icon for icon in icons if isinstance(icon, dict)]

    @staticmethod
    def select_largest_icon(icons: list[dict[str, Any]]) -> Optional[str]:
        """Return the `src` of the largest non-SVG icon. Ties keep manifest order."""
        best_src: Optional[str] = None
        best_size = -1
        for icon in icons:
            src = icon.get("src")
            if not isinstance(src, str) or not src:
                continue
            mime_type = icon.get("type")
            if is_svg_favicon(src, mime_type if isinstance(mime_type, str) else None):
                continue
            size = parse_largest_size(icon.get("sizes"))
            if size > best_size:
                best_src, best_size = src, size
        return best_src

    async def _find_manifest_url(
        self, site_url: str, hint: Optional[str], follow_meta_refresh_redirect: bool
    ) -> Optional[str]:
        if hint and not follow_meta_refresh_redirect:
            return join_url(site_url, hint)

        document = await self.document_loader.load(site_url, follow_meta_refresh_redirect)
        if document is None:
            return None
        if hint:
            return join_url(document.url, hint)

        link = document.page.select_one(MANIFEST_SELECTOR)
        if link is None:
            return None
        return join_url(document.base_url, str(link["href"]))
