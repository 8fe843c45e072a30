"""Favicon finder: the ordered fallback search across discovery strategies"""

import logging
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Mapping, Optional

import aiodogstatsd
import httpx

from favicon_finder.exceptions import (
    AllStrategiesExhaustedError,
    ErrorKind,
    FaviconError,
    FetchError,
)
from favicon_finder.io.image_fetcher import ImageFetcher
from favicon_finder.metrics import get_metrics_client
from favicon_finder.models import (
    DEFAULT_STRATEGY_ORDER,
    Favicon,
    SearchConfig,
    SearchState,
    StrategyKind,
)
from favicon_finder.strategies import FaviconStrategy, build_default_strategies
from favicon_finder.utils.http_client import create_http_client

logger = logging.getLogger(__name__)


def attempt_order(
    preferred: StrategyKind, default_order: tuple[StrategyKind, ...] = DEFAULT_STRATEGY_ORDER
) -> list[StrategyKind]:
    """Return `default_order` with `preferred` moved to the front."""
    return [preferred] + [kind for kind in default_order if kind != preferred]


@dataclass
class SearchContext:
    """Progress of one `find` call. Created per call and never shared."""

    site_url: str
    config: SearchConfig
    remaining: deque[StrategyKind]
    state: SearchState = SearchState.IDLE
    current: Optional[StrategyKind] = None
    failures: dict[StrategyKind, ErrorKind] = field(default_factory=dict)

    @classmethod
    def start(cls, site_url: str, config: SearchConfig) -> "SearchContext":
        """Create the context for a new search."""
        return cls(
            site_url=site_url,
            config=config,
            remaining=deque(attempt_order(config.preferred_strategy)),
        )

    def next_kind(self) -> Optional[StrategyKind]:
        """Advance to the next strategy, or to FAILED when none remain."""
        if not self.remaining:
            self.current = None
            self.transition(SearchState.FAILED)
            return None
        self.current = self.remaining.popleft()
        self.transition(SearchState.SEARCHING)
        return self.current

    def transition(self, state: SearchState) -> None:
        """Move to `state`, logging the step."""
        logger.debug(
            f"Favicon search for {self.site_url}: {self.state.value} -> {state.value}",
            extra={"strategy": self.current.value if self.current else None},
        )
        self.state = state

    def record_failure(self, error_kind: ErrorKind) -> None:
        """Remember why the current strategy failed."""
        if self.current is not None:
            self.failures[self.current] = error_kind


class FaviconFinder:
    """Search a site's favicon by falling back through strategies in priority order.

    The finder holds only its collaborators; all per-search progress lives in a
    `SearchContext`, so a single instance can serve concurrent `find` calls.
    Strategies run strictly one after another and the first one whose favicon
    is located (and, unless only URLs are requested, downloaded) wins.
    """

    strategies: dict[StrategyKind, FaviconStrategy]
    image_fetcher: ImageFetcher
    metrics_client: aiodogstatsd.Client

    def __init__(
        self,
        strategies: Mapping[StrategyKind, FaviconStrategy],
        image_fetcher: ImageFetcher,
        metrics_client: Optional[aiodogstatsd.Client] = None,
    ) -> None:
        self.strategies = dict(strategies)
        self.image_fetcher = image_fetcher
        self.metrics_client = metrics_client or get_metrics_client()

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        http_client: Optional[httpx.AsyncClient] = None,
        metrics_client: Optional[aiodogstatsd.Client] = None,
    ) -> AsyncIterator["FaviconFinder"]:
        """Build a finder with the built-in strategies and a shared HTTP client.

        A client created here is closed on exit; a client passed in is left open.
        """
        client = http_client or create_http_client()
        try:
            yield cls(
                strategies=build_default_strategies(client),
                image_fetcher=ImageFetcher(client),
                metrics_client=metrics_client,
            )
        finally:
            if http_client is None:
                await client.aclose()

    async def find(self, site_url: str, config: Optional[SearchConfig] = None) -> Favicon:
        """Find the favicon of `site_url`.

        Args:
            site_url: Base URL of the site.
            config: Search options. Defaults to the `[search]` settings.
        Returns:
            The favicon found by the first successful strategy.
        Raises:
            AllStrategiesExhaustedError: If every strategy failed.
            asyncio.CancelledError: If the calling task was cancelled; the in-flight
                request is aborted and no other strategy is started.
        """
        context = SearchContext.start(site_url, config or SearchConfig.from_settings())
        self.metrics_client.increment("finder.search.requests")

        with self.metrics_client.timeit("finder.search.duration"):
            while (kind := context.next_kind()) is not None:
                favicon = await self._attempt(context, kind)
                if favicon is not None:
                    context.transition(SearchState.DONE)
                    self.metrics_client.increment(
                        "finder.search.success", tags={"strategy": kind.value}
                    )
                    return favicon

        logger.info(
            f"Failed to find a favicon for {site_url}",
            extra={
                "failures": {
                    kind.value: error.value for kind, error in context.failures.items()
                }
            },
        )
        self.metrics_client.increment("finder.search.exhausted")
        raise AllStrategiesExhaustedError(site_url, context.failures)

    async def _attempt(self, context: SearchContext, kind: StrategyKind) -> Optional[Favicon]:
        """Run one strategy: locate, then fetch unless only the URL is wanted."""
        strategy = self.strategies.get(kind)
        if strategy is None:
            logger.debug(f"No strategy registered for {kind.value}")
            return self._locate_failed(context, kind, ErrorKind.NOT_FOUND)

        config = context.config
        try:
            candidate = await strategy.locate(
                context.site_url,
                config.hint_for(kind),
                config.follow_meta_refresh_redirect,
            )
        except FaviconError as e:
            logger.debug(f"{kind.value} strategy failed for {context.site_url}: {e}")
            return self._locate_failed(context, kind, e.kind)
        except Exception as e:
            logger.warning(
                f"Unexpected error in {kind.value} strategy for {context.site_url}: {e}"
            )
            return self._locate_failed(context, kind, ErrorKind.NOT_FOUND)

        if candidate is None:
            return self._locate_failed(context, kind, ErrorKind.NOT_FOUND)

        context.transition(SearchState.LOCATED)
        if not config.fetch_image_bytes:
            return Favicon.url_only(candidate, strategy_used=kind)

        context.transition(SearchState.FETCHING)
        try:
            return await self.image_fetcher.fetch(candidate, strategy_used=kind)
        except FetchError as e:
            logger.debug(f"{kind.value} strategy located {candidate.url} but fetching failed: {e}")
            context.record_failure(e.kind)
            self.metrics_client.increment(
                "finder.fetch.failed", tags={"strategy": kind.value, "reason": e.kind.value}
            )
            return None

    def _locate_failed(
        self, context: SearchContext, kind: StrategyKind, error_kind: ErrorKind
    ) -> None:
        context.record_failure(error_kind)
        self.metrics_client.increment(
            "finder.strategy.not_found", tags={"strategy": kind.value, "reason": error_kind.value}
        )
        return None


async def find_favicon(
    site_url: str,
    config: Optional[SearchConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Favicon:
    """Find the favicon of `site_url` with a throwaway finder. See `FaviconFinder.find`."""
    async with FaviconFinder.create(http_client=http_client) as finder:
        return await finder.find(site_url, config)
