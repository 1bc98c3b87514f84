"""Base client classes for exchange adapters."""

from __future__ import annotations

import functools
import hashlib
import hmac
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..errors import PairNotFoundError, ParseError, UnsupportedOperationError
from .cache import TimedCache
from .http import DEFAULT_TIMEOUT, HttpClient, ProxyConfig
from .models import (
    ActiveOrder,
    Balances,
    Board,
    CompleteBalances,
    CurrencyPair,
    OrderType,
    RateMap,
    RateTable,
    TradeFeeRates,
    VolumeMap,
)
from .normalization import unique_pairs, unique_settlements

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_CACHE_DURATION = 30.0
CURRENCY_PAIRS_CACHE_DURATION = 7 * 24 * 60 * 60.0


@functools.lru_cache(maxsize=None)
def _type_adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def parse_json(schema: type[T] | Any, payload: bytes, what: str) -> T:
    """Validate a raw JSON payload against a response schema.

    Args:
        schema: Pydantic model or type expression describing the payload
        payload: Raw response body
        what: Human readable name of the payload, used in error messages

    Returns:
        The validated payload

    Raises:
        ParseError: If the payload is not valid JSON or does not match the schema
    """
    try:
        return _type_adapter(schema).validate_json(payload)
    except ValidationError as e:
        raise ParseError(f"Failed to parse {what}: {e}") from e


class CurrencyPairListing(NamedTuple):
    pairs: list[CurrencyPair]
    settlements: list[str]


def _copy_table(table: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
    return {trading: dict(row) for trading, row in table.items()}


def _lookup(table: dict[str, dict[str, float]], trading: str, settlement: str) -> float:
    try:
        return table[trading][settlement]
    except KeyError:
        raise PairNotFoundError(trading, settlement) from None


class BaseExchangeClient(ABC):
    """Base class for all public exchange adapters.

    Owns two independent caches: the ticker table (rates and volumes, short
    TTL) and the currency pair listing (long TTL). Both start empty and stale,
    so the first access fetches.
    """

    default_base_url = "https://api.example.com"

    def __init__(
        self,
        name: str,
        *,
        base_url: str | None = None,
        rate_cache_duration: float = RATE_CACHE_DURATION,
        currency_pairs_cache_duration: float = CURRENCY_PAIRS_CACHE_DURATION,
        timeout: float = DEFAULT_TIMEOUT,
        proxy: ProxyConfig | None = None,
        http: HttpClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        **options: Any,
    ):
        """Initialize exchange client.

        Args:
            name: Exchange name
            base_url: Override of the REST API root
            rate_cache_duration: Seconds a fetched ticker table stays fresh
            currency_pairs_cache_duration: Seconds a fetched market listing stays fresh
            timeout: HTTP timeout in seconds
            proxy: Proxy configuration
            http: HTTP collaborator (a new HttpClient by default)
            clock: Monotonic time source used by the caches
            **options: Additional exchange-specific options
        """
        self.name = name
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.http = http or HttpClient(timeout=timeout, proxy=proxy)
        self.options = options
        self._rate_cache: TimedCache[RateTable] = TimedCache(
            rate_cache_duration, name=f"{name} rates", clock=clock
        )
        self._currency_pair_cache: TimedCache[CurrencyPairListing] = TimedCache(
            currency_pairs_cache_duration, name=f"{name} currency pairs", clock=clock
        )

    @property
    def rate_cache_duration(self) -> float:
        return self._rate_cache.duration

    @rate_cache_duration.setter
    def rate_cache_duration(self, value: float) -> None:
        self._rate_cache.duration = value

    @property
    def currency_pairs_cache_duration(self) -> float:
        return self._currency_pair_cache.duration

    @currency_pairs_cache_duration.setter
    def currency_pairs_cache_duration(self, value: float) -> None:
        self._currency_pair_cache.duration = value

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _get(self, path: str, schema: Any, what: str, *, params: dict[str, Any] | None = None) -> Any:
        """GET a public endpoint and validate the response against ``schema``."""
        payload = await self.http.get(self.url(path), params=params)
        return parse_json(schema, payload, what)

    @abstractmethod
    async def _fetch_rates(self) -> RateTable:
        """Fetch last price and volume for every market in one refresh."""
        ...

    @abstractmethod
    async def _fetch_currency_pairs(self) -> list[CurrencyPair]:
        """Fetch the exchange's market listing."""
        ...

    @abstractmethod
    async def board(self, trading: str, settlement: str) -> Board:
        """Fetch a fresh order book snapshot."""
        ...

    async def _load_currency_pairs(self) -> CurrencyPairListing:
        pairs = unique_pairs(await self._fetch_currency_pairs())
        logger.debug("%s lists %d currency pairs", self.name, len(pairs))
        return CurrencyPairListing(pairs, unique_settlements(pairs))

    async def currency_pairs(self) -> list[CurrencyPair]:
        return await self._currency_pair_cache.get(
            self._load_currency_pairs, lambda listing: list(listing.pairs)
        )

    async def settlements(self) -> list[str]:
        return await self._currency_pair_cache.get(
            self._load_currency_pairs, lambda listing: list(listing.settlements)
        )

    async def rate_map(self) -> RateMap:
        return await self._rate_cache.get(self._fetch_rates, lambda table: _copy_table(table.rates))

    async def volume_map(self) -> VolumeMap:
        return await self._rate_cache.get(self._fetch_rates, lambda table: _copy_table(table.volumes))

    async def rate(self, trading: str, settlement: str) -> float:
        trading, settlement = trading.upper(), settlement.upper()
        if trading == settlement:
            return 1.0
        return await self._rate_cache.get(
            self._fetch_rates, lambda table: _lookup(table.rates, trading, settlement)
        )

    async def volume(self, trading: str, settlement: str) -> float:
        trading, settlement = trading.upper(), settlement.upper()
        return await self._rate_cache.get(
            self._fetch_rates, lambda table: _lookup(table.volumes, trading, settlement)
        )

    async def frozen_currency(self) -> list[str]:
        return []

    async def close(self) -> None:
        """Close connections."""
        await self.http.close()

    async def __aenter__(self) -> BaseExchangeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class BasePrivateClient(BaseExchangeClient):
    """Base class for adapters that also implement account operations."""

    def __init__(self, name: str, api_key: str, api_secret: str, **kwargs: Any):
        super().__init__(name, **kwargs)
        self.api_key = api_key
        self.api_secret = api_secret

    @staticmethod
    def generate_signature(secret: str, message: str, method: str = "hmac-sha256") -> str:
        """Generate an HMAC signature.

        Args:
            secret: Secret key
            message: Message to sign
            method: Signature method (hmac-sha256 or hmac-sha512)

        Returns:
            Hex-encoded signature
        """
        if method == "hmac-sha256":
            return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()
        elif method == "hmac-sha512":
            return hmac.new(secret.encode(), message.encode(), hashlib.sha512).hexdigest()
        else:
            raise ValueError(f"Unsupported signature method: {method}")

    @abstractmethod
    async def balances(self) -> Balances:
        ...

    @abstractmethod
    async def complete_balances(self) -> CompleteBalances:
        ...

    @abstractmethod
    async def active_orders(self) -> list[ActiveOrder]:
        ...

    @abstractmethod
    async def order(
        self,
        trading: str,
        settlement: str,
        side: OrderType,
        price: float,
        amount: float,
    ) -> str:
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str, symbol: str) -> None:
        ...

    @abstractmethod
    async def trade_fee_rate(self) -> TradeFeeRates:
        ...

    @abstractmethod
    async def purchase_fee_rate(self) -> float:
        ...

    @abstractmethod
    async def sell_fee_rate(self) -> float:
        ...

    async def transfer_fee(self) -> dict[str, float]:
        """Withdrawal fee per currency.

        Default implementation raises UnsupportedOperationError.
        """
        raise UnsupportedOperationError(self.name, "transfer_fee")

    async def transfer(self, currency: str, destination: str, amount: float, fee: float) -> None:
        """Withdraw funds.

        Default implementation raises UnsupportedOperationError.
        Override in subclasses whose exchange exposes a withdrawal endpoint.
        """
        raise UnsupportedOperationError(self.name, "transfer")

    async def address(self, currency: str) -> str:
        """Deposit address lookup.

        Default implementation raises UnsupportedOperationError.
        """
        raise UnsupportedOperationError(self.name, "address")
