"""Client class for recording and sending StatsD metrics."""

import logging
from functools import cache
from typing import Mapping

import aiodogstatsd

from favicon_finder.configs import settings

logger = logging.getLogger(__name__)

# Type definition for tags in aiodogstatsd metrics
MetricTags = Mapping[str, float | int | str]


@cache
def get_metrics_client() -> aiodogstatsd.Client:
    """Instantiate and memoize the StatsD client."""
    constant_tags: MetricTags = {"application": "favicon-finder"}

    return aiodogstatsd.Client(
        host=settings.metrics.host,
        port=settings.metrics.port,
        namespace="favicon_finder",
        constant_tags=constant_tags,
    )


async def configure_metrics() -> None:
    """Connect the metrics client. Call once the event loop is running."""
    client = get_metrics_client()
    if settings.metrics.dev_logger:
        client._protocol = _LocalDatagramLogger()
    await client.connect()


class _LocalDatagramLogger(aiodogstatsd.client.DatagramProtocol):
    """Log StatsD datagrams instead of writing them to a socket.
    Handy for seeing which strategies win while developing locally.
    """

    def send(self, data: bytes) -> None:
        logger.debug("sending metrics", extra={"data": data.decode("utf8")})

    def error_received(self, exc) -> None:
        logger.exception(exc)
