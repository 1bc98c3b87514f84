"""LBank exchange adapter (public market data only)."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, FiniteFloat

from .base import BaseExchangeClient
from .models import Board, CurrencyPair, RateTable
from .normalization import board_from_levels, join_symbol, split_symbol

logger = logging.getLogger(__name__)


class LbankTicker(BaseModel):
    latest: FiniteFloat
    vol: FiniteFloat


class LbankTickerEntry(BaseModel):
    symbol: str
    ticker: LbankTicker


class LbankDepth(BaseModel):
    bids: list[tuple[FiniteFloat, FiniteFloat]]
    asks: list[tuple[FiniteFloat, FiniteFloat]]


class LbankClient(BaseExchangeClient):
    """LBank public client.

    Markets are identified as ``eth_btc``: trading first, lower case.
    """

    default_base_url = "https://api.lbkex.com"

    def __init__(self, **options: Any):
        super().__init__("lbank", **options)

    async def _fetch_rates(self) -> RateTable:
        entries = await self._get(
            "/v1/ticker.do", list[LbankTickerEntry], "lbank ticker", params={"symbol": "all"}
        )
        table = RateTable()
        for entry in entries:
            pair = split_symbol(entry.symbol)
            if pair is None:
                logger.debug("Skipping lbank market with unexpected symbol %r", entry.symbol)
                continue
            table.add(pair, entry.ticker.latest, entry.ticker.vol)
        return table

    async def _fetch_currency_pairs(self) -> list[CurrencyPair]:
        symbols = await self._get("/v1/currencyPairs.do", list[str], "lbank currency pairs")
        return [pair for pair in map(split_symbol, symbols) if pair is not None]

    async def board(self, trading: str, settlement: str) -> Board:
        symbol = join_symbol(CurrencyPair(trading, settlement), lower=True)
        depth = await self._get("/v1/depth.do", LbankDepth, "lbank depth", params={"symbol": symbol})
        return board_from_levels(depth.bids, depth.asks)
