"""
Abstract broker contract.

Every exchange implementation subclasses ``Broker`` so callers can work
against the normalized interface and branch on ``supported_features()``
instead of on concrete types.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import (
    Balance,
    Features,
    Order,
    OrderFilter,
    OrderRequest,
    Position,
    PositionFilter,
)


class Broker(ABC):
    """Interface all exchange implementations must satisfy.

    Every I/O operation is a coroutine doing one request/response round
    trip and accepts an optional ``timeout`` in seconds.
    """

    # Account operations
    @abstractmethod
    async def get_balance(self, timeout: Optional[float] = None) -> Balance:
        """Return the account balance; NoDataError when none is reported."""

    # Position operations
    @abstractmethod
    async def get_positions(
        self, position_filter: Optional[PositionFilter] = None, timeout: Optional[float] = None
    ) -> List[Position]:
        """Return open positions, possibly empty."""

    @abstractmethod
    async def get_position(self, symbol: str, timeout: Optional[float] = None) -> Position:
        """Return the first open position for symbol; NotFoundError when none."""

    # Order operations
    @abstractmethod
    async def place_order(self, order: OrderRequest, timeout: Optional[float] = None) -> Order:
        """Submit an order and return the exchange acknowledgement."""

    @abstractmethod
    async def get_orders(
        self, order_filter: Optional[OrderFilter] = None, timeout: Optional[float] = None
    ) -> List[Order]:
        """Return open orders, possibly empty."""

    @abstractmethod
    async def cancel_order(self, symbol: str, order_id: str, timeout: Optional[float] = None) -> None:
        """Cancel one order."""

    @abstractmethod
    async def cancel_all_orders(self, symbol: str = "", timeout: Optional[float] = None) -> None:
        """Cancel all open orders for symbol, or for every symbol when empty."""

    # Market data
    @abstractmethod
    async def get_current_price(self, symbol: str, timeout: Optional[float] = None) -> float:
        """Return the last traded price for symbol."""

    # Configuration
    @abstractmethod
    async def set_leverage(
        self, symbol: str, side: str, leverage: int, timeout: Optional[float] = None
    ) -> None:
        """Set leverage for one side of a symbol."""

    # Metadata
    @abstractmethod
    def name(self) -> str:
        """Broker identifier; constant, no I/O."""

    @abstractmethod
    def supported_features(self) -> Features:
        """Capability descriptor; constant, no I/O."""
