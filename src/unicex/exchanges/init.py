"""Exchange client initialization from settings."""

from __future__ import annotations

import logging
from typing import Any

from .base import BaseExchangeClient
from .factory import create_private_client, create_public_client
from ..settings import ExchangeSettings, Settings

logger = logging.getLogger(__name__)


def client_options(settings: Settings, exchange_config: ExchangeSettings) -> dict[str, Any]:
    """Translate one exchange's settings into factory keyword arguments."""
    options: dict[str, Any] = dict(exchange_config.options)
    options["timeout"] = exchange_config.timeout or settings.http.timeout
    if exchange_config.base_url:
        options["base_url"] = exchange_config.base_url
    if exchange_config.rate_cache_seconds is not None:
        options["rate_cache_duration"] = exchange_config.rate_cache_seconds
    if exchange_config.currency_pairs_cache_seconds is not None:
        options["currency_pairs_cache_duration"] = exchange_config.currency_pairs_cache_seconds
    proxy = settings.proxy.as_options()
    if proxy:
        options["proxy"] = proxy
    return options


def create_client_from_settings(settings: Settings, exchange_name: str) -> BaseExchangeClient:
    """Build a private client if credentials are configured, a public one otherwise."""
    exchange_config = settings.exchanges.get(exchange_name.lower(), ExchangeSettings())
    options = client_options(settings, exchange_config)

    credentials = exchange_config.credentials
    if credentials is None:
        return create_public_client(exchange_name, **options)
    return create_private_client(
        exchange_name,
        credentials.api_key.get_secret_value(),
        credentials.api_secret.get_secret_value(),
        **options,
    )


def create_clients_from_settings(settings: Settings) -> dict[str, BaseExchangeClient]:
    """Create clients for every enabled exchange in the settings.

    Raises:
        UnknownExchangeError: If a configured exchange has no adapter
    """
    clients: dict[str, BaseExchangeClient] = {}

    for exchange_name, exchange_config in settings.exchanges.items():
        if not exchange_config.enabled:
            logger.debug("Exchange %s is disabled, skipping", exchange_name)
            continue

        clients[exchange_name] = create_client_from_settings(settings, exchange_name)
        kind = "private" if exchange_config.credentials else "public"
        logger.info("Initialized %s client for %s", kind, exchange_name)

    return clients
