# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the unit test directory."""

from io import BytesIO
from typing import Any, Callable

import aiodogstatsd
import httpx
import pytest
from PIL import Image as PILImage
from pytest_mock import MockerFixture

HandlerFixture = Callable[[httpx.Request], httpx.Response]
ClientFactoryFixture = Callable[[HandlerFixture], httpx.AsyncClient]


@pytest.fixture(name="statsd_mock")
def fixture_statsd_mock(mocker: MockerFixture) -> Any:
    """Return mock for the StatsD client."""
    return mocker.MagicMock(spec=aiodogstatsd.Client)


@pytest.fixture(name="png_bytes", scope="session")
def fixture_png_bytes() -> bytes:
    """Return the bytes of a small, valid PNG image."""
    buffer = BytesIO()
    PILImage.new("RGBA", (32, 32), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(name="ico_bytes", scope="session")
def fixture_ico_bytes() -> bytes:
    """Return the bytes of a small, valid ICO image."""
    buffer = BytesIO()
    PILImage.new("RGBA", (16, 16), (0, 0, 255, 255)).save(buffer, format="ICO")
    return buffer.getvalue()


@pytest.fixture(name="http_client_factory")
def fixture_http_client_factory() -> ClientFactoryFixture:
    """Return a function building an `httpx.AsyncClient` served by a request handler."""

    def http_client_factory(handler: HandlerFixture) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return http_client_factory
