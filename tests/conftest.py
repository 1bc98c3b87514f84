"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from unicex.errors import TransportError

BASE_URL = "http://localhost:4243"


class FakeHttpClient:
    """Stands in for HttpClient: serves canned payloads and records requests.

    Routes are keyed by URL path and, for Poloniex-style APIs, the
    ``command`` parameter. Registering several payloads for one route serves
    them in order; the last one keeps being served.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str | None], list[Any]] = {}
        self.requests: list[SimpleNamespace] = []
        self.closed = False

    def route(self, path: str, *payloads: Any, command: str | None = None) -> "FakeHttpClient":
        self.routes.setdefault((path, command), []).extend(payloads)
        return self

    def count(self, path: str, command: str | None = None) -> int:
        return sum(
            1
            for r in self.requests
            if urlsplit(r.url).path == path and (command is None or r.command == command)
        )

    @staticmethod
    def _command(params: Any, data: Any) -> str | None:
        if params and "command" in params:
            return params["command"]
        if isinstance(data, str) and "command=" in data:
            return parse_qs(data)["command"][0]
        return None

    async def request(self, method, url, *, params=None, data=None, headers=None) -> bytes:
        path = urlsplit(url).path
        command = self._command(params, data)
        self.requests.append(
            SimpleNamespace(
                method=method, url=url, params=params, data=data, headers=headers, command=command
            )
        )
        queue = self.routes.get((path, command)) or self.routes.get((path, None))
        if not queue:
            raise TransportError(f"{method} request failed", url=url, status=404)
        payload = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, bytes):
            return payload
        if isinstance(payload, str):
            return payload.encode()
        return json.dumps(payload).encode()

    async def get(self, url, **kwargs) -> bytes:
        return await self.request("GET", url, **kwargs)

    async def post(self, url, **kwargs) -> bytes:
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def lbank_ticker_response():
    return [
        {"symbol": "eth_btc", "ticker": {"latest": "0.0712", "vol": "1520.5", "high": "0.073"}},
        {"symbol": "zec_btc", "ticker": {"latest": "0.0195", "vol": "88.1", "high": "0.02"}},
        {"symbol": "btc_usdt", "ticker": {"latest": "6512.3", "vol": "301.25", "high": "6600"}},
    ]


@pytest.fixture
def poloniex_ticker_response():
    return {
        "BTC_ETH": {"last": "0.07120000", "baseVolume": "108.2", "quoteVolume": "1520.5", "isFrozen": "0"},
        "BTC_XMR": {"last": "0.01830000", "baseVolume": "12.1", "quoteVolume": "661.2", "isFrozen": "0"},
        "USDT_BTC": {"last": "6510.00000000", "baseVolume": "990000", "quoteVolume": "152.1", "isFrozen": "0"},
    }


@pytest.fixture
def bitflyer_balance_response():
    return [
        {"currency_code": "JPY", "amount": 1024078, "available": 508000},
        {"currency_code": "BTC", "amount": 6.12, "available": 4.12},
        {"currency_code": "ETH", "amount": 20.48, "available": 16.38},
    ]


@pytest.fixture
def client_options(fake_http, clock):
    """Options wiring a client to the fake transport and clock."""
    return {"base_url": BASE_URL, "http": fake_http, "clock": clock}


@pytest.fixture
def lbank(client_options):
    from unicex.exchanges.lbank import LbankClient

    return LbankClient(**client_options)


@pytest.fixture
def bitflyer(client_options):
    from unicex.exchanges.bitflyer import BitflyerClient

    return BitflyerClient(**client_options)


@pytest.fixture
def bitflyer_private(client_options, api_key, api_secret):
    from unicex.exchanges.bitflyer import BitflyerPrivateClient

    return BitflyerPrivateClient(api_key, api_secret, **client_options)


@pytest.fixture
def poloniex(client_options):
    from unicex.exchanges.poloniex import PoloniexClient

    return PoloniexClient(**client_options)


@pytest.fixture
def poloniex_private(client_options, api_key, api_secret):
    from unicex.exchanges.poloniex import PoloniexPrivateClient

    return PoloniexPrivateClient(api_key, api_secret, **client_options)
