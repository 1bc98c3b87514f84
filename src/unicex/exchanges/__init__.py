"""Exchange adapters and the canonical client interfaces."""

from .protocol import PublicClient, PrivateClient
from .models import (
    ActiveOrder,
    Board,
    BoardOrder,
    CompleteBalance,
    CurrencyPair,
    FeeRate,
    OrderType,
)
from .normalization import normalize_side, parse_symbol, split_symbol
from .factory import (
    PRIVATE_CLIENTS,
    PUBLIC_CLIENTS,
    create_private_client,
    create_public_client,
)
from .base import BaseExchangeClient, BasePrivateClient
from .http import HttpClient, ProxyConfig

__all__ = [
    "PublicClient",
    "PrivateClient",
    "ActiveOrder",
    "Board",
    "BoardOrder",
    "CompleteBalance",
    "CurrencyPair",
    "FeeRate",
    "OrderType",
    "normalize_side",
    "parse_symbol",
    "split_symbol",
    "PRIVATE_CLIENTS",
    "PUBLIC_CLIENTS",
    "create_private_client",
    "create_public_client",
    "BaseExchangeClient",
    "BasePrivateClient",
    "HttpClient",
    "ProxyConfig",
]
