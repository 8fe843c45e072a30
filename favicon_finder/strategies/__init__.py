"""Favicon discovery strategies"""

import httpx

from favicon_finder.models import StrategyKind
from favicon_finder.strategies.document import Document, DocumentLoader
from favicon_finder.strategies.html import HTMLStrategy
from favicon_finder.strategies.ico import ICOStrategy
from favicon_finder.strategies.protocol import FaviconStrategy
from favicon_finder.strategies.web_manifest import WebManifestStrategy


def build_default_strategies(
    http_client: httpx.AsyncClient,
) -> dict[StrategyKind, FaviconStrategy]:
    """Create the built-in strategy for every `StrategyKind`, sharing one page loader."""
    document_loader = DocumentLoader(http_client)
    return {
        StrategyKind.HTML: HTMLStrategy(document_loader),
        StrategyKind.ICO: ICOStrategy(document_loader),
        StrategyKind.WEB_APPLICATION_MANIFEST_FILE: WebManifestStrategy(document_loader),
    }


__all__ = [
    "Document",
    "DocumentLoader",
    "FaviconStrategy",
    "HTMLStrategy",
    "ICOStrategy",
    "WebManifestStrategy",
    "build_default_strategies",
]
