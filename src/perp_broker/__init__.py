"""
Perp Broker - normalized broker interface for perpetual-futures exchanges.

This package provides an exchange-neutral ``Broker`` contract and a BingX
implementation that maps the exchange's loosely typed JSON onto a common
domain model.
"""

from .broker import Broker
from .bingx_client import BingXClient, create_bingx_client
from .errors import (
    APIError,
    AuthenticationError,
    BrokerError,
    DecodeError,
    InsufficientBalanceError,
    NoDataError,
    NotFoundError,
    OrderNotFoundError,
    ParseError,
    PositionNotFoundError,
    RateLimitError,
    RequestCanceledError,
    RequestTimeoutError,
    TransportError,
    UnsupportedShapeError,
)
from .models import (
    # Configuration
    ConnectionConfig,
    # Account
    Balance,
    Position,
    PositionFilter,
    # Orders
    Order,
    OrderFilter,
    OrderRequest,
    OrderStatus,
    OrderType,
    Side,
    StopLossConfig,
    TakeProfitConfig,
    TimeInForce,
    TrailingConfig,
    WorkingType,
    # Capabilities
    Features,
)
from .utils import decode_number

__all__ = [
    # Main Clients
    "Broker",
    "BingXClient",
    "create_bingx_client",
    "ConnectionConfig",
    "Balance",
    "Position",
    "PositionFilter",
    "Order",
    "OrderFilter",
    "OrderRequest",
    "OrderStatus",
    "OrderType",
    "Side",
    "StopLossConfig",
    "TakeProfitConfig",
    "TimeInForce",
    "TrailingConfig",
    "WorkingType",
    "Features",
    "decode_number",
    # Errors
    "BrokerError",
    "TransportError",
    "DecodeError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "InsufficientBalanceError",
    "NoDataError",
    "NotFoundError",
    "PositionNotFoundError",
    "OrderNotFoundError",
    "ParseError",
    "UnsupportedShapeError",
    "RequestTimeoutError",
    "RequestCanceledError",
]
