"""A helper to create the asynchronous HTTP client (via `httpx.AsyncClient`)
shared by the strategies and the image fetcher.
"""

from httpx import AsyncClient, AsyncBaseTransport, Limits, Timeout

from favicon_finder.configs import settings

# Browser-like headers; some sites serve an empty page to unknown clients.
REQUEST_HEADERS: dict[str, str] = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-GB,en-US;q=0.9,en;q=0.8",
    "DNT": "1",
}


def create_http_client(
    max_connections: int | None = None,
    connect_timeout: float | None = None,
    request_timeout: float | None = None,
    pool_timeout: float | None = None,
    transport: AsyncBaseTransport | None = None,
) -> AsyncClient:
    """Create a new `httpx.AsyncClient` that follows redirects.

    Args:
      - `max_connections` {int | None}: Max connections of the connection pool.
      - `connect_timeout` {float | None}: The timeout for establishing a connection to the host.
      - `request_timeout` {float | None}: The timeout for handling a request to the host.
      - `pool_timeout` {float | None}: The timeout for acquiring a connection from the pool.
      - `transport` {AsyncBaseTransport | None}: A custom transport, mostly useful in tests.
    Any argument left as `None` falls back to the `[http]` settings table.

    Returns:
      - {AsyncClient}: An async HTTP client.
    """
    http_settings = settings.http
    return AsyncClient(
        headers={**REQUEST_HEADERS, "User-Agent": http_settings.user_agent},
        follow_redirects=True,
        limits=Limits(
            max_connections=_or_setting(max_connections, http_settings.max_connections)
        ),
        timeout=Timeout(
            _or_setting(request_timeout, http_settings.request_timeout_sec),
            connect=_or_setting(connect_timeout, http_settings.connect_timeout_sec),
            pool=_or_setting(pool_timeout, http_settings.pool_timeout_sec),
        ),
        transport=transport,
    )


def _or_setting(value, setting):
    return value if value is not None else setting
