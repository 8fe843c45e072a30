# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for the metrics.py module."""

import aiodogstatsd
import pytest
from pytest_mock import MockerFixture

from favicon_finder.metrics import _LocalDatagramLogger, configure_metrics, get_metrics_client


def test_get_metrics_client_is_memoized() -> None:
    """Test that a single StatsD client is shared."""
    assert get_metrics_client() is get_metrics_client()


@pytest.mark.asyncio
async def test_configure_metrics_dev_logger(mocker: MockerFixture) -> None:
    """Test that the dev logger replaces the socket protocol in testing."""
    client = mocker.MagicMock(spec=aiodogstatsd.Client)
    client.connect = mocker.AsyncMock()
    mocker.patch("favicon_finder.metrics.get_metrics_client", return_value=client)

    await configure_metrics()

    assert isinstance(client._protocol, _LocalDatagramLogger)
    client.connect.assert_awaited_once()
