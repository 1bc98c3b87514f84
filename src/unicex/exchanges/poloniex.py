"""Poloniex exchange adapter."""

from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

from ..errors import ExchangeAPIError
from .base import BaseExchangeClient, BasePrivateClient, parse_json
from .models import (
    ActiveOrder,
    Balances,
    Board,
    CompleteBalance,
    CompleteBalances,
    CurrencyPair,
    FeeRate,
    OrderType,
    RateTable,
    TradeFeeRates,
)
from .normalization import board_from_levels, join_symbol, normalize_side, split_symbol

logger = logging.getLogger(__name__)

DEFAULT_BOARD_DEPTH = 100

_SIDE_COMMANDS = {OrderType.BID: "buy", OrderType.ASK: "sell"}


class PoloniexTicker(BaseModel):
    last: FiniteFloat
    quote_volume: FiniteFloat = Field(alias="quoteVolume")


class PoloniexCurrency(BaseModel):
    tx_fee: FiniteFloat = Field(alias="txFee")
    frozen: bool = False
    disabled: bool = False


class PoloniexOrderBook(BaseModel):
    bids: list[tuple[FiniteFloat, FiniteFloat]]
    asks: list[tuple[FiniteFloat, FiniteFloat]]


class PoloniexCompleteBalance(BaseModel):
    available: FiniteFloat
    on_orders: FiniteFloat = Field(alias="onOrders")


class PoloniexOpenOrder(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_number: str = Field(alias="orderNumber")
    type: str
    rate: FiniteFloat
    amount: FiniteFloat


class PoloniexOrderPlaced(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_number: str = Field(alias="orderNumber")


class PoloniexCancelResult(BaseModel):
    success: int
    message: str = ""


class PoloniexFeeInfo(BaseModel):
    maker_fee: FiniteFloat = Field(alias="makerFee")
    taker_fee: FiniteFloat = Field(alias="takerFee")


class PoloniexWithdrawal(BaseModel):
    response: str


def _error_message(payload: bytes) -> str | None:
    """Extract the message of a ``{"error": ...}`` document, if that is what we got."""
    try:
        doc = json.loads(payload)
    except ValueError:
        return None
    if isinstance(doc, dict) and isinstance(doc.get("error"), str):
        return doc["error"]
    return None


def _decimal(value: float) -> str:
    """Plain decimal with at most 8 places; the trading API rejects ``3e-07``."""
    text = f"{value:.8f}".rstrip("0").rstrip(".")
    return text or "0"


def _market(pair: CurrencyPair) -> str:
    return join_symbol(pair, settlement_first=True)


class PoloniexClient(BaseExchangeClient):
    """Poloniex public client.

    Markets are identified as ``BTC_ETH``: settlement first, so ``BTC_ETH``
    is ETH priced in BTC. The whole ticker table comes back in one request.
    """

    default_base_url = "https://poloniex.com"

    def __init__(self, **options: Any):
        super().__init__("poloniex", **options)

    def _decode(self, schema: Any, payload: bytes, what: str) -> Any:
        message = _error_message(payload)
        if message is not None:
            raise ExchangeAPIError(f"poloniex rejected {what}: {message}")
        return parse_json(schema, payload, what)

    async def _public(self, command: str, schema: Any, what: str, **params: Any) -> Any:
        payload = await self.http.get(self.url("/public"), params={"command": command, **params})
        return self._decode(schema, payload, what)

    async def _fetch_tickers(self) -> dict[str, PoloniexTicker]:
        return await self._public("returnTicker", dict[str, PoloniexTicker], "poloniex ticker")

    async def _fetch_currencies(self) -> dict[str, PoloniexCurrency]:
        return await self._public("returnCurrencies", dict[str, PoloniexCurrency], "poloniex currencies")

    async def _fetch_rates(self) -> RateTable:
        table = RateTable()
        for market, ticker in (await self._fetch_tickers()).items():
            pair = split_symbol(market, settlement_first=True)
            if pair is None:
                logger.debug("Skipping poloniex market with unexpected symbol %r", market)
                continue
            table.add(pair, ticker.last, ticker.quote_volume)
        return table

    async def _fetch_currency_pairs(self) -> list[CurrencyPair]:
        markets = await self._fetch_tickers()
        pairs = (split_symbol(market, settlement_first=True) for market in markets)
        return [pair for pair in pairs if pair is not None]

    async def board(self, trading: str, settlement: str) -> Board:
        book = await self._public(
            "returnOrderBook",
            PoloniexOrderBook,
            "poloniex order book",
            currencyPair=_market(CurrencyPair(trading.upper(), settlement.upper())),
            depth=self.options.get("board_depth", DEFAULT_BOARD_DEPTH),
        )
        return board_from_levels(book.bids, book.asks)

    async def frozen_currency(self) -> list[str]:
        currencies = await self._fetch_currencies()
        return [code.upper() for code, c in currencies.items() if c.frozen or c.disabled]


class PoloniexPrivateClient(PoloniexClient, BasePrivateClient):
    """Poloniex private client.

    Trading API calls are form-encoded POSTs signed with HMAC-SHA512 over the
    body, with a strictly increasing nonce.
    """

    def __init__(self, api_key: str, api_secret: str, **options: Any):
        BasePrivateClient.__init__(self, "poloniex", api_key, api_secret, **options)
        self._nonce = 0

    def _next_nonce(self) -> int:
        self._nonce = max(int(time.time() * 1000), self._nonce + 1)
        return self._nonce

    async def _trading_api(self, command: str, schema: Any, what: str, **params: Any) -> Any:
        data = urlencode({"command": command, "nonce": self._next_nonce(), **params})
        headers = {
            "Key": self.api_key,
            "Sign": self.generate_signature(self.api_secret, data, "hmac-sha512"),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        payload = await self.http.post(self.url("/tradingApi"), data=data, headers=headers)
        return self._decode(schema, payload, what)

    async def balances(self) -> Balances:
        balances = await self._trading_api("returnBalances", dict[str, FiniteFloat], "poloniex balances")
        return {code.upper(): amount for code, amount in balances.items()}

    async def complete_balances(self) -> CompleteBalances:
        balances = await self._trading_api(
            "returnCompleteBalances",
            dict[str, PoloniexCompleteBalance],
            "poloniex complete balances",
        )
        return {
            code.upper(): CompleteBalance(available=b.available, on_orders=b.on_orders)
            for code, b in balances.items()
        }

    async def active_orders(self) -> list[ActiveOrder]:
        markets = await self._trading_api(
            "returnOpenOrders",
            dict[str, list[PoloniexOpenOrder]],
            "poloniex open orders",
            currencyPair="all",
        )
        orders = []
        for market, open_orders in markets.items():
            if not open_orders:
                continue
            pair = split_symbol(market, settlement_first=True)
            if pair is None:
                raise ExchangeAPIError(f"poloniex returned orders for unexpected market {market!r}")
            for o in open_orders:
                orders.append(
                    ActiveOrder(
                        exchange_order_id=o.order_number,
                        trading=pair.trading,
                        settlement=pair.settlement,
                        type=normalize_side(o.type),
                        price=o.rate,
                        amount=o.amount,
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
        placed = await self._trading_api(
            _SIDE_COMMANDS[side],
            PoloniexOrderPlaced,
            "poloniex order",
            currencyPair=_market(CurrencyPair(trading.upper(), settlement.upper())),
            rate=_decimal(price),
            amount=_decimal(amount),
        )
        logger.info("Placed poloniex %s order %s", side.value, placed.order_number)
        return placed.order_number

    async def cancel_order(self, order_id: str, symbol: str) -> None:
        # Order numbers are unique across markets; the symbol is not sent.
        result = await self._trading_api(
            "cancelOrder", PoloniexCancelResult, "poloniex cancel", orderNumber=order_id
        )
        if result.success != 1:
            raise ExchangeAPIError(f"poloniex failed to cancel order {order_id}: {result.message}")
        logger.info("Cancelled poloniex order %s", order_id)

    async def _fee_info(self) -> PoloniexFeeInfo:
        return await self._trading_api("returnFeeInfo", PoloniexFeeInfo, "poloniex fee info")

    async def trade_fee_rate(self) -> TradeFeeRates:
        info = await self._fee_info()
        fees: TradeFeeRates = {}
        for pair in await self.currency_pairs():
            fees.setdefault(pair.trading, {})[pair.settlement] = FeeRate(
                maker_fee=info.maker_fee, taker_fee=info.taker_fee
            )
        return fees

    async def purchase_fee_rate(self) -> float:
        return (await self._fee_info()).taker_fee

    async def sell_fee_rate(self) -> float:
        return (await self._fee_info()).taker_fee

    async def transfer_fee(self) -> dict[str, float]:
        currencies = await self._fetch_currencies()
        return {code.upper(): c.tx_fee for code, c in currencies.items()}

    async def transfer(self, currency: str, destination: str, amount: float, fee: float) -> None:
        # Poloniex deducts its own txFee from the withdrawn amount.
        result = await self._trading_api(
            "withdraw",
            PoloniexWithdrawal,
            "poloniex withdrawal",
            currency=currency.upper(),
            amount=_decimal(amount),
            address=destination,
        )
        logger.info("Poloniex withdrawal of %s %s (fee %s): %s", amount, currency, fee, result.response)

    async def address(self, currency: str) -> str:
        addresses = await self._trading_api(
            "returnDepositAddresses", dict[str, str], "poloniex deposit addresses"
        )
        try:
            return addresses[currency.upper()]
        except KeyError:
            raise ExchangeAPIError(f"poloniex has no deposit address for {currency}") from None
