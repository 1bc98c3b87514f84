"""Factory for creating exchange client instances."""

from __future__ import annotations

from typing import Any, Type

from ..errors import UnknownExchangeError
from .base import BaseExchangeClient, BasePrivateClient
from .bitflyer import BitflyerClient, BitflyerPrivateClient
from .http import ProxyConfig
from .lbank import LbankClient
from .poloniex import PoloniexClient, PoloniexPrivateClient


PUBLIC_CLIENTS: dict[str, Type[BaseExchangeClient]] = {
    "bitflyer": BitflyerClient,
    "lbank": LbankClient,
    "poloniex": PoloniexClient,
}

PRIVATE_CLIENTS: dict[str, Type[BasePrivateClient]] = {
    "bitflyer": BitflyerPrivateClient,
    "poloniex": PoloniexPrivateClient,
}


def _lookup(exchange: str, registry: dict[str, Any], kind: str) -> Any:
    exchange_lower = exchange.strip().lower()
    if exchange_lower not in registry:
        supported = ", ".join(sorted(registry))
        raise UnknownExchangeError(
            f"Unsupported exchange for {kind} client: {exchange}. Supported exchanges: {supported}"
        )
    return registry[exchange_lower]


def _client_options(proxy: dict[str, Any] | None, options: dict[str, Any]) -> dict[str, Any]:
    kwargs = dict(options)
    if proxy:
        kwargs["proxy"] = ProxyConfig(
            url=proxy.get("url"),
            username=proxy.get("username"),
            password=proxy.get("password"),
        )
    return kwargs


def create_public_client(
    exchange: str,
    *,
    proxy: dict[str, Any] | None = None,
    **options: Any,
) -> BaseExchangeClient:
    """Create a market data client.

    Args:
        exchange: Exchange name (bitflyer, lbank, poloniex), case-insensitive
        proxy: Proxy configuration (url, username, password)
        **options: base_url, rate_cache_duration, currency_pairs_cache_duration,
            timeout, http and exchange-specific options

    Returns:
        Client with empty caches; the first call fetches

    Raises:
        UnknownExchangeError: If exchange is not supported
    """
    client_class = _lookup(exchange, PUBLIC_CLIENTS, "public")
    return client_class(**_client_options(proxy, options))


def create_private_client(
    exchange: str,
    api_key: str,
    api_secret: str,
    *,
    proxy: dict[str, Any] | None = None,
    **options: Any,
) -> BasePrivateClient:
    """Create an account client.

    Args:
        exchange: Exchange name (bitflyer, poloniex), case-insensitive
        api_key: API key
        api_secret: API secret
        proxy: Proxy configuration (url, username, password)
        **options: Same options as create_public_client

    Returns:
        Configured private client

    Raises:
        UnknownExchangeError: If exchange has no private adapter
        ValueError: If credentials are missing
    """
    client_class = _lookup(exchange, PRIVATE_CLIENTS, "private")

    if not api_key or not api_secret:
        raise ValueError(f"{exchange} private client requires api_key and api_secret")

    return client_class(api_key, api_secret, **_client_options(proxy, options))
