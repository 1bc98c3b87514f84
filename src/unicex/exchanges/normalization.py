"""Symbol and side normalization utilities for exchange payloads."""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import ParseError
from .models import Board, BoardOrder, CurrencyPair, OrderType

logger = logging.getLogger(__name__)

_SIDES = {
    "buy": OrderType.BID,
    "bid": OrderType.BID,
    "sell": OrderType.ASK,
    "ask": OrderType.ASK,
}


def split_symbol(
    symbol: str,
    separator: str = "_",
    *,
    settlement_first: bool = False,
) -> CurrencyPair | None:
    """Split a native market identifier into a canonical currency pair.

    Handles the position conventions used by the supported exchanges:
    - btc_jpy -> BTC/JPY (trading first)
    - BTC_ETH -> ETH/BTC (settlement first, as Poloniex lists markets)

    Args:
        symbol: Market identifier in the exchange's native format
        separator: Character separating the two legs
        settlement_first: True if the settlement currency is the first leg

    Returns:
        CurrencyPair with upper-cased codes, or None if the identifier does not
        consist of exactly two non-empty legs
    """
    if not symbol:
        return None

    parts = [p.strip().upper() for p in symbol.strip().split(separator)]
    if len(parts) != 2 or not all(parts):
        return None

    if settlement_first:
        return CurrencyPair(trading=parts[1], settlement=parts[0])
    return CurrencyPair(trading=parts[0], settlement=parts[1])


def parse_symbol(
    symbol: str,
    separator: str = "_",
    *,
    settlement_first: bool = False,
) -> CurrencyPair:
    """Like split_symbol, but raises ParseError for malformed identifiers."""
    pair = split_symbol(symbol, separator, settlement_first=settlement_first)
    if pair is None:
        raise ParseError(f"Malformed market symbol: {symbol!r}")
    return pair


def join_symbol(
    pair: CurrencyPair,
    separator: str = "_",
    *,
    settlement_first: bool = False,
    lower: bool = False,
) -> str:
    """Render a currency pair in an exchange's native market format."""
    legs = (pair.settlement, pair.trading) if settlement_first else (pair.trading, pair.settlement)
    symbol = separator.join(legs)
    return symbol.lower() if lower else symbol.upper()


def normalize_side(side: str) -> OrderType:
    """Map native order side vocabulary (BUY, sell, bid, ...) onto OrderType."""
    try:
        return _SIDES[side.strip().lower()]
    except (KeyError, AttributeError):
        raise ParseError(f"Unknown order side: {side!r}") from None


def unique_pairs(pairs: Iterable[CurrencyPair]) -> list[CurrencyPair]:
    """Drop duplicate pairs, keeping the first occurrence."""
    seen: set[CurrencyPair] = set()
    result: list[CurrencyPair] = []
    for pair in pairs:
        if pair in seen:
            logger.debug("Dropping duplicate currency pair %s", pair)
            continue
        seen.add(pair)
        result.append(pair)
    return result


def unique_settlements(pairs: Iterable[CurrencyPair]) -> list[str]:
    """Settlement currencies in order of first appearance."""
    seen: set[str] = set()
    result: list[str] = []
    for pair in pairs:
        if pair.settlement not in seen:
            seen.add(pair.settlement)
            result.append(pair.settlement)
    return result


def board_from_levels(
    bids: Iterable[tuple[float, float]],
    asks: Iterable[tuple[float, float]],
) -> Board:
    """Build a Board from parallel [price, amount] sequences.

    Side tags come from which sequence an entry belongs to.
    """
    return Board(
        bids=[BoardOrder(price=price, amount=amount, type=OrderType.BID) for price, amount in bids],
        asks=[BoardOrder(price=price, amount=amount, type=OrderType.ASK) for price, amount in asks],
    )
