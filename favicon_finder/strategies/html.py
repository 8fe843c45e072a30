"""Strategy locating favicons declared with `<link rel=...>` tags"""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from favicon_finder.models import CandidateURL, FaviconType, HTML_FAVICON_TYPES, StrategyKind
from favicon_finder.strategies.document import DocumentLoader
from favicon_finder.utils.url import is_svg_favicon, resolve_favicon_url

logger = logging.getLogger(__name__)


def normalize_rel(rel) -> str:
    """Normalize a `rel` attribute (a list with html.parser) into a lower-case string."""
    tokens = rel if isinstance(rel, list) else str(rel).split()
    tokens = [token.lower() for token in tokens]
    # "icon shortcut" is seen in the wild as often as "shortcut icon".
    if sorted(tokens) == ["icon", "shortcut"]:
        return FaviconType.SHORTCUT_ICON.value
    return " ".join(tokens)


class HTMLStrategy:
    """Find the favicon declared in the site's HTML head."""

    kind = StrategyKind.HTML

    def __init__(self, document_loader: DocumentLoader) -> None:
        self.document_loader = document_loader

    async def locate(
        self,
        site_url: str,
        hint: Optional[str] = None,
        follow_meta_refresh_redirect: bool = False,
    ) -> Optional[CandidateURL]:
        """Return the best `<link>` icon, or the one whose rel equals `hint`."""
        document = await self.document_loader.load(site_url, follow_meta_refresh_redirect)
        if document is None:
            return None

        icon_links = self.scrape_icon_links(document.page)
        if hint:
            wanted = [normalize_rel(hint)]
        else:
            wanted = [favicon_type.value for favicon_type in HTML_FAVICON_TYPES]

        for rel in wanted:
            for link_rel, href in icon_links:
                if link_rel != rel:
                    continue
                url = resolve_favicon_url(href, document.base_url)
                if url is None:
                    continue
                return CandidateURL(url=url, kind=self.kind, icon_type=self._icon_type(rel))

        logger.debug(f"No <link> favicon matching {wanted} on {document.url}")
        return None

    @staticmethod
    def scrape_icon_links(page: BeautifulSoup) -> list[tuple[str, str]]:
        """Collect `(rel, href)` pairs of every link tag with both attributes, in page order.

        SVG icons are skipped since they cannot be decoded into an image.
        """
        return [
            (normalize_rel(link.get("rel", [])), str(link["href"]))
            for link in page.select("link[rel][href]")
            if not is_svg_favicon(str(link["href"]), link.get("type"))
        ]

    @staticmethod
    def _icon_type(rel: str) -> Optional[FaviconType]:
        try:
            return FaviconType(rel)
        except ValueError:
            return None
