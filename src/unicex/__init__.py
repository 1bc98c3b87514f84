"""unicex: one client interface over several cryptocurrency exchanges."""

from .settings import Settings
from .errors import (
    ExchangeAPIError,
    ExchangeError,
    PairNotFoundError,
    ParseError,
    TransportError,
    UnknownExchangeError,
    UnsupportedOperationError,
)
from .exchanges import (
    CurrencyPair,
    OrderType,
    PrivateClient,
    PublicClient,
    create_private_client,
    create_public_client,
)

__all__ = [
    "Settings",
    "ExchangeAPIError",
    "ExchangeError",
    "PairNotFoundError",
    "ParseError",
    "TransportError",
    "UnknownExchangeError",
    "UnsupportedOperationError",
    "CurrencyPair",
    "OrderType",
    "PrivateClient",
    "PublicClient",
    "create_private_client",
    "create_public_client",
]
