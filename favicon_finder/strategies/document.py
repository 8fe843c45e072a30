"""Shared page loading for the discovery strategies"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from favicon_finder.configs import settings
from favicon_finder.exceptions import NetworkFailureError
from favicon_finder.utils.url import join_url, parse_meta_refresh_url

logger = logging.getLogger(__name__)

PARSER: str = "html.parser"

META_REFRESH_SELECTOR: str = 'meta[http-equiv="refresh" i]'


@dataclass(frozen=True)
class Document:
    """A parsed HTML page and the URL it was finally served from."""

    url: str
    page: BeautifulSoup

    @property
    def base_url(self) -> str:
        """URL relative references resolve against, honouring `<base href>`."""
        base = self.page.select_one("base[href]")
        if base is not None and base.get("href"):
            return join_url(self.url, str(base["href"]))
        return self.url


class DocumentLoader:
    """Fetch and parse pages with a shared HTTP client."""

    def __init__(
        self, http_client: httpx.AsyncClient, max_meta_refresh_hops: Optional[int] = None
    ) -> None:
        self.http_client = http_client
        self.max_meta_refresh_hops = (
            max_meta_refresh_hops
            if max_meta_refresh_hops is not None
            else settings.search.max_meta_refresh_hops
        )

    async def get(self, url: str) -> Optional[httpx.Response]:
        """GET `url`, returning the response if it succeeded and None otherwise.

        Raises:
            NetworkFailureError: On transport-level failures.
        """
        try:
            response = await self.http_client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            raise NetworkFailureError(url, f"Failed to fetch {url}: {e}") from e
        if not response.is_success:
            logger.debug(f"Fetching {url} returned status {response.status_code}")
            return None
        return response

    async def load(
        self, url: str, follow_meta_refresh_redirect: bool = False
    ) -> Optional[Document]:
        """Load and parse the page at `url`.

        With `follow_meta_refresh_redirect`, meta refresh redirects are followed up to
        `max_meta_refresh_hops` times and the last document is returned. If a redirect
        target cannot be loaded, None is returned rather than the original page.
        """
        document = await self._load_one(url)
        if document is None or not follow_meta_refresh_redirect:
            return document

        for _ in range(self.max_meta_refresh_hops):
            target = self.find_meta_refresh_target(document)
            if target is None or target == document.url:
                break
            logger.debug(f"Following meta refresh redirect from {document.url} to {target}")
            document = await self._load_one(target)
            if document is None:
                return None

        return document

    @staticmethod
    def find_meta_refresh_target(document: Document) -> Optional[str]:
        """Return the absolute URL a meta refresh tag in `document` points to, if any."""
        meta = document.page.select_one(META_REFRESH_SELECTOR)
        if meta is None:
            return None
        target = parse_meta_refresh_url(meta.get("content"))
        if target is None:
            return None
        return join_url(document.url, target)

    async def _load_one(self, url: str) -> Optional[Document]:
        response = await self.get(url)
        if response is None:
            return None
        return Document(url=str(response.url), page=BeautifulSoup(response.text, PARSER))
