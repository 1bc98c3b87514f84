"""Protocol definitions for exchange clients."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import (
    ActiveOrder,
    Balances,
    Board,
    CompleteBalances,
    CurrencyPair,
    OrderType,
    RateMap,
    TradeFeeRates,
    VolumeMap,
)


@runtime_checkable
class PublicClient(Protocol):
    """Market data available without credentials."""

    name: str

    async def currency_pairs(self) -> list[CurrencyPair]:
        """List every market the exchange trades.

        Returns:
            De-duplicated currency pairs with upper-cased codes
        """
        ...

    async def settlements(self) -> list[str]:
        """Settlement currencies in order of first appearance in the listing."""
        ...

    async def rate_map(self) -> RateMap:
        """Last traded price for every market, keyed trading -> settlement."""
        ...

    async def volume_map(self) -> VolumeMap:
        """Traded volume for every market, keyed trading -> settlement."""
        ...

    async def rate(self, trading: str, settlement: str) -> float:
        """Last traded price of one market.

        Args:
            trading: Asset being priced (e.g., 'BTC')
            settlement: Denominating asset (e.g., 'JPY')

        Returns:
            The rate; 1.0 when trading == settlement

        Raises:
            PairNotFoundError: If the market is not listed
        """
        ...

    async def volume(self, trading: str, settlement: str) -> float:
        """Traded volume of one market."""
        ...

    async def board(self, trading: str, settlement: str) -> Board:
        """Fetch a fresh order book snapshot.

        Args:
            trading: Trading currency
            settlement: Settlement currency

        Returns:
            Board with bids and asks kept as separate sequences
        """
        ...

    async def frozen_currency(self) -> list[str]:
        """Currencies whose deposits/withdrawals are currently suspended."""
        ...

    async def close(self) -> None:
        """Close connections (HTTP session)."""
        ...


@runtime_checkable
class PrivateClient(PublicClient, Protocol):
    """Account operations requiring API credentials."""

    async def balances(self) -> Balances:
        """Available amount per currency."""
        ...

    async def complete_balances(self) -> CompleteBalances:
        """Available and on-order amounts per currency."""
        ...

    async def active_orders(self) -> list[ActiveOrder]:
        """Open orders across every market."""
        ...

    async def order(
        self,
        trading: str,
        settlement: str,
        side: OrderType,
        price: float,
        amount: float,
    ) -> str:
        """Place a limit order.

        Args:
            trading: Trading currency
            settlement: Settlement currency
            side: OrderType.BID to buy, OrderType.ASK to sell
            price: Limit price in settlement currency
            amount: Quantity of trading currency

        Returns:
            Exchange-assigned order id
        """
        ...

    async def cancel_order(self, order_id: str, symbol: str) -> None:
        """Cancel an open order.

        Args:
            order_id: Exchange order id
            symbol: Market identifier in the exchange's native format
        """
        ...

    async def trade_fee_rate(self) -> TradeFeeRates:
        """Maker/taker fee for every market, keyed trading -> settlement."""
        ...

    async def purchase_fee_rate(self) -> float:
        ...

    async def sell_fee_rate(self) -> float:
        ...

    async def transfer_fee(self) -> dict[str, float]:
        """Withdrawal fee per currency."""
        ...

    async def transfer(self, currency: str, destination: str, amount: float, fee: float) -> None:
        """Withdraw funds to an external address."""
        ...

    async def address(self, currency: str) -> str:
        """Deposit address for a currency."""
        ...
