"""Error taxonomy shared by every exchange adapter."""

from __future__ import annotations


class ExchangeError(Exception):
    """Base class for all errors raised by exchange clients."""


class TransportError(ExchangeError):
    """The HTTP request failed: connection error, timeout or non-2xx status."""

    def __init__(self, message: str, *, url: str, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is not None:
            return f"{base} (url={self.url}, status={self.status})"
        return f"{base} (url={self.url})"


class ParseError(ExchangeError):
    """The exchange answered with a payload we could not normalize."""


class ExchangeAPIError(ExchangeError):
    """The exchange answered with an explicit error document."""


class PairNotFoundError(ExchangeError, KeyError):
    """A trading/settlement pair is not present in the exchange's data."""

    def __init__(self, trading: str, settlement: str):
        super().__init__(f"{trading}/{settlement}")
        self.trading = trading
        self.settlement = settlement

    def __str__(self) -> str:
        return f"pair not found: {self.trading}/{self.settlement}"


class UnsupportedOperationError(ExchangeError, NotImplementedError):
    """The exchange does not expose the requested capability."""

    def __init__(self, exchange: str, operation: str):
        super().__init__(f"{exchange} does not support {operation}")
        self.exchange = exchange
        self.operation = operation


class UnknownExchangeError(ExchangeError, ValueError):
    """No adapter is registered under the requested exchange identifier."""
