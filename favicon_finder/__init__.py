"""Locate and download the favicon of a website."""

from favicon_finder.exceptions import (
    AllStrategiesExhaustedError,
    EmptyBodyError,
    ErrorKind,
    FaviconError,
    FetchError,
    InvalidImageError,
    NetworkFailureError,
    NotFoundError,
)
from favicon_finder.finder import FaviconFinder, attempt_order, find_favicon
from favicon_finder.main import lifespan
from favicon_finder.models import (
    CandidateURL,
    Favicon,
    FaviconType,
    SearchConfig,
    StrategyKind,
)

__all__ = [
    "AllStrategiesExhaustedError",
    "CandidateURL",
    "EmptyBodyError",
    "ErrorKind",
    "Favicon",
    "FaviconError",
    "FaviconFinder",
    "FaviconType",
    "FetchError",
    "InvalidImageError",
    "NetworkFailureError",
    "NotFoundError",
    "SearchConfig",
    "StrategyKind",
    "attempt_order",
    "find_favicon",
    "lifespan",
]
