"""Library startup point"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from favicon_finder.config_logging import configure_logging
from favicon_finder.metrics import configure_metrics, get_metrics_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan() -> AsyncIterator[None]:
    """Configure logging and connect the metrics client for the duration of the block.

    Wrap the part of an application that runs favicon searches in it once; finders
    created inside send their metrics through the connected client.
    """
    configure_logging()
    await configure_metrics()
    try:
        yield
    finally:
        await get_metrics_client().close()
