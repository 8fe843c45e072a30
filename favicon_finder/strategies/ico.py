"""Strategy probing the conventional `/favicon.ico` location"""

import logging
from typing import Optional

from favicon_finder.models import CandidateURL, FaviconType, StrategyKind
from favicon_finder.strategies.document import DocumentLoader
from favicon_finder.utils.url import join_url

logger = logging.getLogger(__name__)

DEFAULT_ICO_PATH: str = "/favicon.ico"


class ICOStrategy:
    """Check whether the site serves a favicon at its well-known path."""

    kind = StrategyKind.ICO

    def __init__(self, document_loader: DocumentLoader) -> None:
        self.document_loader = document_loader

    async def locate(
        self,
        site_url: str,
        hint: Optional[str] = None,
        follow_meta_refresh_redirect: bool = False,
    ) -> Optional[CandidateURL]:
        """Probe `/favicon.ico`, or the path or file name given as `hint`.

        A relative `hint` resolves against the site URL, so "favicon.png" looks next to
        the page while "/favicon.png" looks at the root.
        """
        base_url = site_url
        if follow_meta_refresh_redirect:
            document = await self.document_loader.load(site_url, follow_meta_refresh_redirect)
            if document is None:
                return None
            base_url = document.url

        ico_url = join_url(base_url, hint or DEFAULT_ICO_PATH)
        response = await self.document_loader.get(ico_url)
        if response is None or not response.content:
            return None

        # Sites without the file often answer with their HTML 404 page and a 200.
        content_type = response.headers.get("Content-Type", "")
        if content_type.lower().startswith("text/html"):
            logger.debug(f"{ico_url} served HTML instead of an icon")
            return None

        return CandidateURL(
            url=str(response.url),
            kind=self.kind,
            icon_type=FaviconType.ICO,
            content=response.content,
            content_type=content_type or None,
        )
