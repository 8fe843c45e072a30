"""Favicon-finder specific exceptions.

Every failure raised by a strategy, the image fetcher or the finder carries an
`ErrorKind` tag so callers (and logs) can tell them apart without isinstance
checks. Cancellation is not part of this hierarchy: a cancelled search raises
`asyncio.CancelledError` like any other coroutine.
"""

from enum import Enum


class ErrorKind(Enum):
    """Tags for the ways a favicon search can fail."""

    NOT_FOUND = "not_found"
    NETWORK_FAILURE = "network_failure"
    EMPTY_BODY = "empty_body"
    INVALID_IMAGE = "invalid_image"
    ALL_STRATEGIES_EXHAUSTED = "all_strategies_exhausted"


class FaviconError(Exception):
    """Base class of all favicon-finder errors."""

    kind: ErrorKind


class NotFoundError(FaviconError):
    """A strategy could not locate a candidate favicon URL."""

    kind = ErrorKind.NOT_FOUND


class FetchError(FaviconError):
    """Downloading or decoding a located favicon failed."""

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        super().__init__(message or f"Failed to fetch favicon from {url}")


class NetworkFailureError(FetchError):
    """Transport-level failure or a non-successful HTTP status."""

    kind = ErrorKind.NETWORK_FAILURE


class EmptyBodyError(FetchError):
    """The server answered with a zero-byte body."""

    kind = ErrorKind.EMPTY_BODY


class InvalidImageError(FetchError):
    """The body could not be decoded into an image."""

    kind = ErrorKind.INVALID_IMAGE


class AllStrategiesExhaustedError(FaviconError):
    """Raised when every strategy in the attempt order failed."""

    kind = ErrorKind.ALL_STRATEGIES_EXHAUSTED

    def __init__(self, site_url: str, failures: dict | None = None) -> None:
        self.site_url = site_url
        # Maps each attempted StrategyKind to the ErrorKind that ended it.
        self.failures = failures or {}
        super().__init__(f"Failed to find a favicon for {site_url}")
