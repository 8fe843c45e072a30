"""Async image fetcher for downloading and validating located favicons"""

import logging
from typing import Optional

import httpx

from favicon_finder.configs import settings
from favicon_finder.exceptions import EmptyBodyError, InvalidImageError, NetworkFailureError
from favicon_finder.io.image_decoder import ImageDecoder, PillowImageDecoder
from favicon_finder.models import CandidateURL, Favicon, StrategyKind

logger = logging.getLogger(__name__)


class ImageFetcher:
    """Download a candidate favicon and decode it into a `Favicon`."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        decoder: Optional[ImageDecoder] = None,
        max_size: Optional[int] = None,
    ) -> None:
        self.http_client = http_client
        self.decoder = decoder or PillowImageDecoder()
        self.max_size = max_size if max_size is not None else settings.image.max_size

    async def fetch(
        self, candidate: CandidateURL, strategy_used: Optional[StrategyKind] = None
    ) -> Favicon:
        """Download and decode the favicon at `candidate.url`.

        A candidate that already carries the icon body is decoded without another request.

        Raises:
            NetworkFailureError: On transport errors or a non-successful status.
            EmptyBodyError: If the response has no body.
            InvalidImageError: If the body is too large or does not decode.
        """
        url = candidate.url
        if candidate.content is not None:
            content, content_type = candidate.content, candidate.content_type
        else:
            content, content_type = await self._download(url)

        if not content:
            raise EmptyBodyError(url, f"Empty response body for favicon {url}")

        if len(content) > self.max_size:
            raise InvalidImageError(
                url, f"Favicon {url} is {len(content)} bytes, larger than {self.max_size}"
            )

        try:
            image = self.decoder.decode(content)
        except Exception as e:
            logger.debug(f"Could not decode favicon from {url}: {e}")
            raise InvalidImageError(url, f"Could not decode favicon from {url}") from e

        return Favicon(
            decoded_image=image,
            raw_bytes=content,
            content_type=content_type,
            source_url=url,
            kind=candidate.kind,
            strategy_used=strategy_used or candidate.kind,
            icon_type=candidate.icon_type,
        )

    async def _download(self, url: str) -> tuple[bytes, Optional[str]]:
        try:
            response = await self.http_client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            raise NetworkFailureError(url, f"Failed to download favicon from {url}: {e}") from e

        if not response.is_success:
            raise NetworkFailureError(
                url, f"Unexpected status {response.status_code} downloading favicon {url}"
            )
        return response.content, response.headers.get("Content-Type")
