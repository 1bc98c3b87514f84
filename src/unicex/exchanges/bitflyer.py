"""bitFlyer exchange adapter."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, FiniteFloat

from .base import BaseExchangeClient, BasePrivateClient, parse_json
from .models import (
    ActiveOrder,
    Balances,
    Board,
    BoardOrder,
    CompleteBalance,
    CompleteBalances,
    CurrencyPair,
    FeeRate,
    OrderType,
    RateTable,
    TradeFeeRates,
)
from .normalization import join_symbol, normalize_side, parse_symbol, split_symbol

logger = logging.getLogger(__name__)

# Product used for the account-wide purchase/sell commission.
DEFAULT_PRODUCT = "BTC_JPY"

# Published withdrawal fee schedule; bitFlyer has no endpoint for it.
WITHDRAWAL_FEES: dict[str, float] = {
    "BTC": 0.0004,
    "BCH": 0.0002,
    "ETH": 0.005,
    "ETC": 0.005,
    "LTC": 0.001,
    "MONA": 0.001,
    "LSK": 0.1,
}

_SIDE_NAMES = {OrderType.BID: "BUY", OrderType.ASK: "SELL"}


class BitflyerMarket(BaseModel):
    product_code: str


class BitflyerTicker(BaseModel):
    product_code: str
    ltp: FiniteFloat
    volume_by_product: FiniteFloat


class BitflyerBoardLevel(BaseModel):
    price: FiniteFloat
    size: FiniteFloat


class BitflyerBoard(BaseModel):
    bids: list[BitflyerBoardLevel]
    asks: list[BitflyerBoardLevel]


class BitflyerBalance(BaseModel):
    currency_code: str
    amount: FiniteFloat
    available: FiniteFloat


class BitflyerChildOrder(BaseModel):
    child_order_acceptance_id: str
    product_code: str
    side: str
    price: FiniteFloat
    size: FiniteFloat


class BitflyerOrderAccepted(BaseModel):
    child_order_acceptance_id: str


class BitflyerCommission(BaseModel):
    commission_rate: FiniteFloat


class BitflyerClient(BaseExchangeClient):
    """bitFlyer public client.

    Products are identified as ``BTC_JPY``: trading first. Derivative
    products (``FX_BTC_JPY``, dated futures) do not split into two legs and
    are left out of listings.
    """

    default_base_url = "https://api.bitflyer.com"

    def __init__(self, **options: Any):
        super().__init__("bitflyer", **options)

    async def _fetch_markets(self) -> list[CurrencyPair]:
        markets = await self._get("/v1/getmarkets", list[BitflyerMarket], "bitflyer markets")
        pairs = []
        for market in markets:
            pair = split_symbol(market.product_code)
            if pair is None:
                logger.debug("Skipping bitflyer product %s", market.product_code)
                continue
            pairs.append(pair)
        return pairs

    async def _fetch_ticker(self, pair: CurrencyPair) -> BitflyerTicker:
        return await self._get(
            "/v1/getticker",
            BitflyerTicker,
            "bitflyer ticker",
            params={"product_code": join_symbol(pair)},
        )

    async def _fetch_rates(self) -> RateTable:
        # No batch ticker endpoint: list markets, then issue one concurrent
        # getticker request per product (1 + N requests per refresh).
        pairs = await self._fetch_markets()
        tickers = await asyncio.gather(*(self._fetch_ticker(pair) for pair in pairs))
        table = RateTable()
        for pair, ticker in zip(pairs, tickers):
            table.add(pair, ticker.ltp, ticker.volume_by_product)
        return table

    async def _fetch_currency_pairs(self) -> list[CurrencyPair]:
        return await self._fetch_markets()

    async def board(self, trading: str, settlement: str) -> Board:
        product_code = join_symbol(CurrencyPair(trading, settlement))
        data = await self._get(
            "/v1/board", BitflyerBoard, "bitflyer board", params={"product_code": product_code}
        )
        return Board(
            bids=[BoardOrder(price=b.price, amount=b.size, type=OrderType.BID) for b in data.bids],
            asks=[BoardOrder(price=a.price, amount=a.size, type=OrderType.ASK) for a in data.asks],
        )


class BitflyerPrivateClient(BitflyerClient, BasePrivateClient):
    """bitFlyer private client.

    Requests are signed with HMAC-SHA256 over
    ``timestamp + method + path + body``. Withdrawals and deposit address
    lookups are not supported.
    """

    def __init__(self, api_key: str, api_secret: str, **options: Any):
        BasePrivateClient.__init__(self, "bitflyer", api_key, api_secret, **options)

    def _get_headers(self, timestamp: str, signature: str) -> dict[str, str]:
        return {
            "ACCESS-KEY": self.api_key,
            "ACCESS-TIMESTAMP": timestamp,
            "ACCESS-SIGN": signature,
            "Content-Type": "application/json",
        }

    async def _private(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> bytes:
        """Issue a signed request and return the raw response body."""
        if params:
            path = f"{path}?{urlencode(params)}"
        data = json.dumps(body) if body is not None else ""
        timestamp = str(int(time.time()))
        signature = self.generate_signature(self.api_secret, timestamp + method + path + data)
        return await self.http.request(
            method,
            self.url(path),
            data=data or None,
            headers=self._get_headers(timestamp, signature),
        )

    async def _fetch_balances(self) -> list[BitflyerBalance]:
        payload = await self._private("GET", "/v1/me/getbalance")
        return parse_json(list[BitflyerBalance], payload, "bitflyer balances")

    async def balances(self) -> Balances:
        return {b.currency_code.upper(): b.available for b in await self._fetch_balances()}

    async def complete_balances(self) -> CompleteBalances:
        return {
            b.currency_code.upper(): CompleteBalance(
                available=b.available,
                on_orders=b.amount - b.available,
            )
            for b in await self._fetch_balances()
        }

    async def active_orders(self) -> list[ActiveOrder]:
        # Without product_code bitFlyer only reports BTC_JPY orders.
        orders = []
        for pair in await self.currency_pairs():
            payload = await self._private(
                "GET",
                "/v1/me/getchildorders",
                params={"product_code": join_symbol(pair), "child_order_state": "ACTIVE"},
            )
            for o in parse_json(list[BitflyerChildOrder], payload, "bitflyer child orders"):
                orders.append(
                    ActiveOrder(
                        exchange_order_id=o.child_order_acceptance_id,
                        trading=pair.trading,
                        settlement=pair.settlement,
                        type=normalize_side(o.side),
                        price=o.price,
                        amount=o.size,
                    )
                )
        return orders

    async def order(
        self,
        trading: str,
        settlement: str,
        side: OrderType,
        price: float,
        amount: float,
    ) -> str:
        body = {
            "product_code": join_symbol(CurrencyPair(trading, settlement)),
            "child_order_type": "LIMIT",
            "side": _SIDE_NAMES[side],
            "price": price,
            "size": amount,
        }
        payload = await self._private("POST", "/v1/me/sendchildorder", body=body)
        accepted = parse_json(BitflyerOrderAccepted, payload, "bitflyer order response")
        logger.info("Placed bitflyer %s order %s", side.value, accepted.child_order_acceptance_id)
        return accepted.child_order_acceptance_id

    async def cancel_order(self, order_id: str, symbol: str) -> None:
        body = {
            "product_code": join_symbol(parse_symbol(symbol)),
            "child_order_acceptance_id": order_id,
        }
        await self._private("POST", "/v1/me/cancelchildorder", body=body)
        logger.info("Cancelled bitflyer order %s", order_id)

    async def _commission(self, product_code: str) -> float:
        payload = await self._private(
            "GET", "/v1/me/gettradingcommission", params={"product_code": product_code}
        )
        return parse_json(BitflyerCommission, payload, "bitflyer commission").commission_rate

    async def trade_fee_rate(self) -> TradeFeeRates:
        fees: TradeFeeRates = {}
        for pair in await self.currency_pairs():
            rate = await self._commission(join_symbol(pair))
            fees.setdefault(pair.trading, {})[pair.settlement] = FeeRate(maker_fee=rate, taker_fee=rate)
        return fees

    async def purchase_fee_rate(self) -> float:
        return await self._commission(DEFAULT_PRODUCT)

    async def sell_fee_rate(self) -> float:
        return await self._commission(DEFAULT_PRODUCT)

    async def transfer_fee(self) -> dict[str, float]:
        return dict(WITHDRAWAL_FEES)
