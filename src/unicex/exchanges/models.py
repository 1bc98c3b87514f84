"""Canonical data model produced by every exchange adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OrderType(Enum):
    """Canonical order side."""

    BID = "bid"
    ASK = "ask"


@dataclass(frozen=True, slots=True)
class CurrencyPair:
    """A tradable market, e.g. trading=BTC priced in settlement=JPY."""

    trading: str
    settlement: str

    def __str__(self) -> str:
        return f"{self.trading}/{self.settlement}"


@dataclass(frozen=True, slots=True)
class BoardOrder:
    price: float
    amount: float
    type: OrderType


@dataclass(slots=True)
class Board:
    """Point-in-time order book snapshot."""

    bids: list[BoardOrder] = field(default_factory=list)
    asks: list[BoardOrder] = field(default_factory=list)

    @property
    def best_bid(self) -> BoardOrder | None:
        if not self.bids:
            return None
        return max(self.bids, key=lambda o: o.price)

    @property
    def best_ask(self) -> BoardOrder | None:
        if not self.asks:
            return None
        return min(self.asks, key=lambda o: o.price)


@dataclass(frozen=True, slots=True)
class CompleteBalance:
    available: float
    on_orders: float

    @property
    def total(self) -> float:
        return self.available + self.on_orders


@dataclass(frozen=True, slots=True)
class FeeRate:
    maker_fee: float
    taker_fee: float


@dataclass(frozen=True, slots=True)
class ActiveOrder:
    """An open order, normalized from the exchange's native vocabulary."""

    exchange_order_id: str
    trading: str
    settlement: str
    type: OrderType
    price: float
    amount: float


@dataclass(slots=True)
class RateTable:
    """Last price and traded volume for every market, keyed trading -> settlement."""

    rates: dict[str, dict[str, float]] = field(default_factory=dict)
    volumes: dict[str, dict[str, float]] = field(default_factory=dict)

    def add(self, pair: CurrencyPair, rate: float, volume: float) -> None:
        self.rates.setdefault(pair.trading, {})[pair.settlement] = rate
        self.volumes.setdefault(pair.trading, {})[pair.settlement] = volume


RateMap = dict[str, dict[str, float]]
VolumeMap = dict[str, dict[str, float]]
Balances = dict[str, float]
CompleteBalances = dict[str, CompleteBalance]
TradeFeeRates = dict[str, dict[str, FeeRate]]
