# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Integration tests running the finder with the built-in strategies against a fake site."""

import asyncio
from io import BytesIO
from typing import Any

import aiodogstatsd
import httpx
import pytest
from PIL import Image as PILImage
from pytest_mock import MockerFixture

from favicon_finder import (
    AllStrategiesExhaustedError,
    FaviconFinder,
    SearchConfig,
    StrategyKind,
    find_favicon,
)
from favicon_finder.models import FaviconType

SITE_URL = "https://example.com/"


def image_bytes(image_format: str, size: int = 16) -> bytes:
    """Return an encoded square image."""
    buffer = BytesIO()
    PILImage.new("RGBA", (size, size), (0, 128, 0, 255)).save(buffer, format=image_format)
    return buffer.getvalue()


def site_handler(routes: dict[str, httpx.Response]):
    """Return a handler answering `routes` by full URL and 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    return handler


@pytest.fixture(name="statsd_mock")
def fixture_statsd_mock(mocker: MockerFixture) -> Any:
    """Return mock for the StatsD client."""
    return mocker.MagicMock(spec=aiodogstatsd.Client)


async def run_find(routes: dict[str, httpx.Response], config: SearchConfig, statsd_mock: Any):
    """Run a search against a fake site made of `routes`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(site_handler(routes)))
    async with FaviconFinder.create(http_client=client, metrics_client=statsd_mock) as finder:
        favicon = await finder.find(SITE_URL, config)
    await client.aclose()
    return favicon


@pytest.mark.asyncio
async def test_html_favicon_is_downloaded(statsd_mock: Any) -> None:
    """Test the default search downloading the favicon declared in HTML."""
    png = image_bytes("PNG", 32)
    routes = {
        SITE_URL: httpx.Response(
            200, html='<html><head><link rel="icon" href="/icon.png"></head></html>'
        ),
        "https://example.com/icon.png": httpx.Response(
            200, content=png, headers={"Content-Type": "image/png"}
        ),
    }

    favicon = await run_find(routes, SearchConfig(), statsd_mock)

    assert favicon.kind == StrategyKind.HTML
    assert favicon.icon_type == FaviconType.ICON
    assert favicon.source_url == "https://example.com/icon.png"
    assert favicon.raw_bytes == png
    assert favicon.decoded_image.size == (32, 32)


@pytest.mark.asyncio
async def test_preferred_ico_wins_over_html(statsd_mock: Any) -> None:
    """Test that a preferred ico strategy is used although html would succeed."""
    routes = {
        SITE_URL: httpx.Response(
            200, html='<html><head><link rel="icon" href="/icon.png"></head></html>'
        ),
        "https://example.com/icon.png": httpx.Response(200, content=image_bytes("PNG")),
        "https://example.com/favicon.ico": httpx.Response(
            200, content=image_bytes("ICO"), headers={"Content-Type": "image/x-icon"}
        ),
    }

    favicon = await run_find(
        routes, SearchConfig(preferred_strategy=StrategyKind.ICO), statsd_mock
    )

    assert favicon.kind == StrategyKind.ICO
    assert favicon.source_url == "https://example.com/favicon.ico"


@pytest.mark.asyncio
async def test_empty_html_favicon_falls_back_to_ico(statsd_mock: Any) -> None:
    """Test that an empty html favicon makes the search fall through to ico."""
    routes = {
        SITE_URL: httpx.Response(
            200, html='<html><head><link rel="icon" href="/empty.png"></head></html>'
        ),
        "https://example.com/empty.png": httpx.Response(200, content=b""),
        "https://example.com/favicon.ico": httpx.Response(200, content=image_bytes("ICO")),
    }

    favicon = await run_find(routes, SearchConfig(), statsd_mock)

    assert favicon.kind == StrategyKind.ICO
    assert favicon.strategy_used == StrategyKind.ICO


@pytest.mark.asyncio
async def test_manifest_is_last_resort(statsd_mock: Any) -> None:
    """Test that the manifest icon is used when html and ico find nothing."""
    routes = {
        SITE_URL: httpx.Response(
            200, html='<html><head><link rel="manifest" href="/manifest.json"></head></html>'
        ),
        "https://example.com/manifest.json": httpx.Response(
            200, json={"icons": [{"src": "/android-192.png", "sizes": "192x192"}]}
        ),
        "https://example.com/android-192.png": httpx.Response(
            200, content=image_bytes("PNG", 192)
        ),
    }

    favicon = await run_find(routes, SearchConfig(), statsd_mock)

    assert favicon.kind == StrategyKind.WEB_APPLICATION_MANIFEST_FILE
    assert favicon.decoded_image.size == (192, 192)


@pytest.mark.asyncio
async def test_nothing_found(statsd_mock: Any) -> None:
    """Test that a site without any favicon exhausts the search."""
    routes = {SITE_URL: httpx.Response(200, html="<html><head></head></html>")}

    with pytest.raises(AllStrategiesExhaustedError):
        await run_find(routes, SearchConfig(), statsd_mock)


@pytest.mark.asyncio
async def test_meta_refresh_redirect_is_followed(statsd_mock: Any) -> None:
    """Test that the favicon of the meta refresh target is found, not the original's."""
    routes = {
        SITE_URL: httpx.Response(
            200,
            html="""
            <html><head>
                <meta http-equiv="refresh" content="0; url=https://www.example.com/home">
                <link rel="icon" href="/original.png">
            </head></html>
            """,
        ),
        "https://www.example.com/home": httpx.Response(
            200, html='<html><head><link rel="icon" href="/redirected.png"></head></html>'
        ),
    }

    favicon = await run_find(
        routes,
        SearchConfig(follow_meta_refresh_redirect=True, fetch_image_bytes=False),
        statsd_mock,
    )

    assert favicon.source_url == "https://www.example.com/redirected.png"
    assert favicon.decoded_image is None


@pytest.mark.asyncio
async def test_cancel_aborts_in_flight_download(statsd_mock: Any) -> None:
    """Test that cancelling the search while the image downloads starts nothing else."""
    download_started = asyncio.Event()
    requested: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        if request.url.path == "/":
            return httpx.Response(
                200, html='<html><head><link rel="icon" href="/slow.png"></head></html>'
            )
        download_started.set()
        await asyncio.Event().wait()
        return httpx.Response(500)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with FaviconFinder.create(http_client=client, metrics_client=statsd_mock) as finder:
        task = asyncio.create_task(finder.find(SITE_URL, SearchConfig()))
        await download_started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    await client.aclose()
    assert requested == [SITE_URL, "https://example.com/slow.png"]


@pytest.mark.asyncio
async def test_find_favicon_with_shared_client(mocker: MockerFixture, statsd_mock: Any) -> None:
    """Test the one-off helper, leaving a caller-provided client open."""
    mocker.patch("favicon_finder.finder.get_metrics_client", return_value=statsd_mock)
    routes = {"https://example.com/favicon.ico": httpx.Response(200, content=image_bytes("ICO"))}
    client = httpx.AsyncClient(transport=httpx.MockTransport(site_handler(routes)))

    favicon = await find_favicon(SITE_URL, SearchConfig(), http_client=client)

    assert favicon.kind == StrategyKind.ICO
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_svg_icons_are_passed_over(statsd_mock: Any) -> None:
    """Test that SVG icons next to bitmap icons do not fail the html and manifest strategies."""
    svg = b'<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16"></svg>'
    routes = {
        SITE_URL: httpx.Response(
            200,
            html=(
                '<html><head><link rel="manifest" href="/manifest.json">'
                '<link rel="icon" type="image/svg+xml" href="/icon.svg">'
                '<link rel="icon" href="/icon.png"></head></html>'
            ),
        ),
        "https://example.com/manifest.json": httpx.Response(
            200,
            json={
                "icons": [
                    {"src": "/icon-192.png", "sizes": "192x192"},
                    {"src": "/icon.svg", "sizes": "any"},
                ]
            },
        ),
        "https://example.com/icon.svg": httpx.Response(
            200, content=svg, headers={"Content-Type": "image/svg+xml"}
        ),
        "https://example.com/icon.png": httpx.Response(200, content=image_bytes("PNG")),
        "https://example.com/icon-192.png": httpx.Response(200, content=image_bytes("PNG", 192)),
    }

    from_html = await run_find(routes, SearchConfig(), statsd_mock)
    from_manifest = await run_find(
        routes,
        SearchConfig(preferred_strategy=StrategyKind.WEB_APPLICATION_MANIFEST_FILE),
        statsd_mock,
    )

    assert from_html.source_url == "https://example.com/icon.png"
    assert from_manifest.kind == StrategyKind.WEB_APPLICATION_MANIFEST_FILE
    assert from_manifest.source_url == "https://example.com/icon-192.png"
    assert from_manifest.decoded_image.size == (192, 192)


@pytest.mark.asyncio
async def test_ico_favicon_is_requested_once(statsd_mock: Any) -> None:
    """Test that the probed favicon.ico body is reused instead of downloaded twice."""
    requested: list[str] = []
    handler = site_handler(
        {
            "https://example.com/favicon.ico": httpx.Response(
                200, content=image_bytes("ICO"), headers={"Content-Type": "image/x-icon"}
            )
        }
    )

    def counting_handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(counting_handler))
    async with FaviconFinder.create(http_client=client, metrics_client=statsd_mock) as finder:
        favicon = await finder.find(SITE_URL, SearchConfig(preferred_strategy=StrategyKind.ICO))
    await client.aclose()

    assert favicon.kind == StrategyKind.ICO
    assert favicon.content_type == "image/x-icon"
    assert requested == ["https://example.com/favicon.ico"]
