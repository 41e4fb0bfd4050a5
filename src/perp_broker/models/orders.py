"""
Order-related models for the broker abstraction.

Immutable data structures for order management.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Side(str, Enum):
    """Position direction."""
    LONG = "LONG"
    SHORT = "SHORT"


class OrderType(str, Enum):
    """Order type enumeration."""
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"
    STOP_MARKET = "STOP_MARKET"
    TAKE_PROFIT = "TAKE_PROFIT"
    TAKE_PROFIT_MARKET = "TAKE_PROFIT_MARKET"
    TRAILING_STOP = "TRAILING_STOP_MARKET"


class OrderStatus(str, Enum):
    """Order status enumeration.

    PENDING is synthetic: a trigger order the exchange reports as NEW
    has not fired yet.
    """
    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELED = "CANCELED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    PENDING = "PENDING"


class TimeInForce(str, Enum):
    """Time in force enumeration."""
    GTC = "GTC"
    IOC = "IOC"
    FOK = "FOK"
    POST_ONLY = "PostOnly"


class WorkingType(str, Enum):
    """Price reference used to evaluate a trigger condition."""
    MARK_PRICE = "MARK_PRICE"
    LAST_PRICE = "LAST_PRICE"


TRIGGER_ORDER_TYPES = frozenset({
    OrderType.STOP.value,
    OrderType.STOP_MARKET.value,
    OrderType.TAKE_PROFIT.value,
    OrderType.TAKE_PROFIT_MARKET.value,
})


@dataclass(frozen=True)
class StopLossConfig:
    """Stop-loss leg attached to an entry order."""
    trigger_price: float
    order_price: float = 0.0  # 0 sends the trigger price as limit price
    working_type: WorkingType = WorkingType.MARK_PRICE


@dataclass(frozen=True)
class TakeProfitConfig:
    """Take-profit leg attached to an entry order."""
    trigger_price: float
    order_price: float = 0.0
    working_type: WorkingType = WorkingType.MARK_PRICE


@dataclass(frozen=True)
class TrailingConfig:
    """Trailing stop parameters."""
    activation_price: float
    callback_rate: float  # 0.005 = 0.5%


@dataclass(frozen=True)
class OrderRequest:
    """Order request data structure.

    Nothing is validated client-side; the exchange is the only judge.
    """
    symbol: str
    side: Side
    order_type: OrderType
    size: float
    price: float = 0.0  # required by the exchange for LIMIT
    stop_price: float = 0.0  # required by the exchange for trigger types
    time_in_force: Optional[TimeInForce] = None  # GTC when omitted on LIMIT
    reduce_only: bool = False
    stop_loss: Optional[StopLossConfig] = None
    take_profit: Optional[TakeProfitConfig] = None
    trailing: Optional[TrailingConfig] = None

    @property
    def has_bracket(self) -> bool:
        """True when a stop-loss or take-profit leg is attached."""
        return self.stop_loss is not None or self.take_profit is not None


@dataclass(frozen=True)
class Order:
    """Order data structure.

    Enumerated fields hold the enum member when the wire token is known
    and the raw token otherwise.
    """
    order_id: str
    client_order_id: Optional[str]
    symbol: str
    side: Side
    order_type: Union[OrderType, str]
    status: Union[OrderStatus, str]
    size: float
    price: float
    stop_price: float
    filled_size: float
    average_price: float
    reduce_only: bool
    time_in_force: Union[TimeInForce, str, None]
    created_at: int
    updated_at: int


@dataclass(frozen=True)
class OrderFilter:
    """Order filter. Empty symbol means all symbols, None status means any."""
    symbol: str = ""
    status: Optional[OrderStatus] = None
