"""
Account-related models for the broker abstraction.

Immutable data structures for balance and position information.
"""

from dataclasses import dataclass
from typing import Optional

from .orders import Side


@dataclass(frozen=True)
class Balance:
    """Balance data structure.

    ``in_use`` is the exchange-reported used margin, not ``total - available``.
    """
    asset: str
    total: float
    available: float
    in_use: float
    unrealized_pnl: float
    realized_pnl: float
    timestamp: int  # observation time, Unix milliseconds


@dataclass(frozen=True)
class Position:
    """Position data structure.

    ``size`` is always a positive magnitude; direction is carried by ``side``.
    A ``liquidation_price`` of 0.0 means the exchange reported none.
    """
    symbol: str
    side: Side
    size: float
    entry_price: float
    mark_price: float
    liquidation_price: float
    leverage: int
    unrealized_pnl: float
    realized_pnl: float
    margin: float
    maintenance_margin: float
    timestamp: int


@dataclass(frozen=True)
class PositionFilter:
    """Position filter. Empty symbol means all symbols, None side means both."""
    symbol: str = ""
    side: Optional[Side] = None
