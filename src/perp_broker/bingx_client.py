"""
BingX broker - Main orchestration module.

This module provides the BingXClient class, the ``Broker`` implementation
for BingX perpetual swaps. It coordinates the pieces without holding any
per-call state:
- Data models are immutable structures in models/
- Signing is handled by auth.py
- HTTP execution is handled by http_client.py
- Envelope mapping is in response.py, payload normalization in normalizer.py
- Session management is handled by session_manager.py
- Endpoint compositions are implemented in api_methods.py
"""

import asyncio
import os
import logging
from typing import List, Optional

from dotenv import load_dotenv

from .api_methods import APIMethods
from .auth import ApiCredentials, BingXSigner
from .broker import Broker
from .constants import (
    BROKER_NAME,
    DEFAULT_TIMEOUT,
    ENDPOINT_BALANCE,
    ENDPOINT_CANCEL_ALL,
    ENDPOINT_LEVERAGE,
    ENDPOINT_OPEN_ORDERS,
    ENDPOINT_ORDER,
    ENDPOINT_POSITIONS,
    ENDPOINT_PRICE,
    ENDPOINT_SERVER_TIME,
    MAX_LEVERAGE,
    SUCCESS_STATUS_CODE,
)
from .errors import (
    APIError,
    BrokerError,
    OrderNotFoundError,
    PositionNotFoundError,
    RequestTimeoutError,
)
from .http_client import HttpClient
from .models import (
    Balance,
    ConnectionConfig,
    Features,
    Order,
    OrderFilter,
    OrderRequest,
    Position,
    PositionFilter,
)
from .monitoring import PerformanceMonitor, Statistics
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class BingXClient(Broker):
    """
    Broker implementation for BingX USDT-M perpetual swaps.

    Safe for concurrent use from several tasks: signer, mapper and
    normalizer are stateless and the aiohttp session owns the connection
    pool. Nothing is retried; layer retries on top for idempotent calls only.
    """

    def __init__(self, config: ConnectionConfig):
        """Initialize BingX client with configuration."""
        self._config = config
        self._signer = BingXSigner(ApiCredentials(config.api_key, config.api_secret))
        self._session_manager = SessionManager(config)
        self._http_client = HttpClient(config, self._signer)
        self._api_methods = APIMethods(self._http_client, config.margin_asset)
        self._monitor = PerformanceMonitor()
        self._closed = False

    @classmethod
    def from_env(cls, demo_mode: Optional[bool] = None) -> "BingXClient":
        """Create client from environment variables (``.env`` is loaded first)."""
        load_dotenv()

        api_key = os.getenv("BINGX_API_KEY", "")
        api_secret = os.getenv("BINGX_SECRET_KEY", "")

        if demo_mode is None:
            demo_mode = os.getenv("BINGX_DEMO_MODE", "false").lower() in ("1", "true", "yes")

        config = ConnectionConfig(
            api_key=api_key,
            api_secret=api_secret,
            demo_mode=demo_mode,
        )

        return cls(config)

    # Metadata
    def name(self) -> str:
        """Return the broker name."""
        return BROKER_NAME

    def supported_features(self) -> Features:
        """Return the features supported by BingX."""
        return Features(
            trailing_stop=True,
            multiple_tp=True,
            bracket_orders=True,
            max_leverage=MAX_LEVERAGE,
            reduce_only_orders=True,
        )

    # Account methods
    async def get_balance(self, timeout: Optional[float] = None) -> Balance:
        """Get account balance."""
        return await self._execute_with_monitoring(
            self._api_methods.get_balance, "GET", ENDPOINT_BALANCE, timeout=timeout
        )

    # Position methods
    async def get_positions(
        self, position_filter: Optional[PositionFilter] = None, timeout: Optional[float] = None
    ) -> List[Position]:
        """Get open positions, zero-size entries excluded."""
        return await self._execute_with_monitoring(
            self._api_methods.get_positions, "GET", ENDPOINT_POSITIONS,
            position_filter, timeout=timeout
        )

    async def get_position(self, symbol: str, timeout: Optional[float] = None) -> Position:
        """
        Get the position for a symbol.

        Returns the first element of the exchange's list without any sorting,
        so with hedge-mode positions on both sides the exchange order decides.

        Raises:
            PositionNotFoundError: No open position for symbol
        """
        positions = await self.get_positions(PositionFilter(symbol=symbol), timeout=timeout)
        if not positions:
            raise PositionNotFoundError(BROKER_NAME, f"position not found for {symbol}")
        return positions[0]

    # Order methods
    async def place_order(self, order: OrderRequest, timeout: Optional[float] = None) -> Order:
        """Place a new order."""
        return await self._execute_with_monitoring(
            self._api_methods.place_order, "POST", ENDPOINT_ORDER, order, timeout=timeout
        )

    async def get_orders(
        self, order_filter: Optional[OrderFilter] = None, timeout: Optional[float] = None
    ) -> List[Order]:
        """Get open orders, optionally filtered by symbol and status."""
        return await self._execute_with_monitoring(
            self._api_methods.get_orders, "GET", ENDPOINT_OPEN_ORDERS,
            order_filter, timeout=timeout
        )

    async def get_order(
        self, symbol: str, order_id: Optional[str] = None, timeout: Optional[float] = None
    ) -> Order:
        """
        Get one open order for a symbol, optionally matching an order id.

        Same first-element semantics as ``get_position``.

        Raises:
            OrderNotFoundError: No matching open order
        """
        orders = await self.get_orders(OrderFilter(symbol=symbol), timeout=timeout)
        if order_id is not None:
            orders = [o for o in orders if o.order_id == str(order_id)]
        if not orders:
            raise OrderNotFoundError(BROKER_NAME, f"order not found for {symbol}")
        return orders[0]

    async def cancel_order(self, symbol: str, order_id: str, timeout: Optional[float] = None) -> None:
        """Cancel an existing order."""
        await self._execute_with_monitoring(
            self._api_methods.cancel_order, "DELETE", ENDPOINT_ORDER,
            symbol, order_id, timeout=timeout
        )

    async def cancel_all_orders(self, symbol: str = "", timeout: Optional[float] = None) -> None:
        """Cancel all open orders for a symbol (all symbols when empty)."""
        await self._execute_with_monitoring(
            self._api_methods.cancel_all_orders, "DELETE", ENDPOINT_CANCEL_ALL,
            symbol, timeout=timeout
        )

    # Market data
    async def get_current_price(self, symbol: str, timeout: Optional[float] = None) -> float:
        """Get last traded price for symbol."""
        return await self._execute_with_monitoring(
            self._api_methods.get_current_price, "GET", ENDPOINT_PRICE,
            symbol, timeout=timeout
        )

    # Configuration
    async def set_leverage(
        self, symbol: str, side: str, leverage: int, timeout: Optional[float] = None
    ) -> None:
        """Set leverage for one side of a symbol."""
        await self._execute_with_monitoring(
            self._api_methods.set_leverage, "POST", ENDPOINT_LEVERAGE,
            symbol, side, leverage, timeout=timeout
        )

    async def get_server_time(self, timeout: Optional[float] = None) -> int:
        """Get exchange server time in milliseconds."""
        return await self._execute_with_monitoring(
            self._api_methods.get_server_time, "GET", ENDPOINT_SERVER_TIME, timeout=timeout
        )

    # Monitoring and health
    async def health_check(self) -> bool:
        """Check client health."""
        try:
            await self._session_manager.create_session()
            return await self._session_manager.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    def get_statistics(self) -> Statistics:
        """Get performance statistics."""
        return self._monitor.statistics

    def get_endpoint_stats(self, endpoint: str, method: str) -> dict:
        """Get statistics for one endpoint."""
        return self._monitor.get_endpoint_stats(endpoint, method)

    async def close(self) -> None:
        """Close client and cleanup resources."""
        if not self._closed:
            await self._session_manager.close_session()
            self._closed = True
            logger.info("BingX client closed")

    async def _execute_with_monitoring(
        self, api_method, method: str, endpoint: str, *args, timeout: Optional[float] = None
    ):
        """Execute API method with performance monitoring and an optional deadline."""
        if self._closed:
            raise RuntimeError("Client is closed")

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        session = await self._session_manager.create_session()

        try:
            call = api_method(session, *args, timeout=timeout)
            if timeout is not None:
                result = await asyncio.wait_for(call, timeout)
            else:
                result = await call
        except asyncio.TimeoutError as e:
            error = RequestTimeoutError(
                BROKER_NAME, f"{method} {endpoint} exceeded {timeout}s deadline"
            )
            self._monitor.record_request(
                endpoint, method, (loop.time() - start_time) * 1000, error.code
            )
            raise error from e
        except BrokerError as e:
            if isinstance(e, APIError):
                # rejected inside a 200 envelope
                status_code = SUCCESS_STATUS_CODE
            else:
                status_code = getattr(e, "status_code", None)
            self._monitor.record_request(
                endpoint, method, (loop.time() - start_time) * 1000, e.code, status_code
            )
            raise

        self._monitor.record_request(
            endpoint, method, (loop.time() - start_time) * 1000, status_code=SUCCESS_STATUS_CODE
        )
        return result

    # Context manager support
    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def __del__(self):
        """Cleanup on deletion."""
        if hasattr(self, '_closed') and not self._closed:
            logger.warning("BingXClient not properly closed - call close() explicitly")


def create_bingx_client(
    api_key: str,
    api_secret: str,
    demo_mode: bool = False,
    base_url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    margin_asset: str = "USDT",
) -> BingXClient:
    """
    Factory function to create a BingX client with common configuration.

    Args:
        api_key: API key for authentication
        api_secret: API secret for authentication
        demo_mode: Use the demo (VST) environment
        base_url: Override the base URL derived from demo_mode
        timeout: Session-wide request timeout in seconds
        margin_asset: Asset whose balance get_balance reports

    Returns:
        Configured BingXClient instance
    """
    config = ConnectionConfig(
        api_key=api_key,
        api_secret=api_secret,
        demo_mode=demo_mode,
        base_url=base_url,
        timeout=timeout,
        margin_asset=margin_asset,
    )

    return BingXClient(config)
