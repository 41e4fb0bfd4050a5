"""
Data models for the broker abstraction.

This package contains the broker-neutral domain model shared by every
exchange implementation, following the state-first principle with
immutable data structures.
"""

from .config import ConnectionConfig
from .account import Balance, Position, PositionFilter
from .orders import (
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
    TRIGGER_ORDER_TYPES,
)
from .features import Features

__all__ = [
    # Configuration
    "ConnectionConfig",
    # Account
    "Balance",
    "Position",
    "PositionFilter",
    # Orders
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
    "TRIGGER_ORDER_TYPES",
    # Capabilities
    "Features",
]
