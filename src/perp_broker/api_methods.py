"""
API method implementations for the BingX client.

Each method is one round trip: build parameters, execute through the
HTTP client, map the envelope, normalize the payload.
"""

import logging
from typing import List, Optional

from aiohttp import ClientSession

from .constants import (
    BROKER_NAME,
    ENDPOINT_BALANCE,
    ENDPOINT_CANCEL_ALL,
    ENDPOINT_LEVERAGE,
    ENDPOINT_OPEN_ORDERS,
    ENDPOINT_ORDER,
    ENDPOINT_POSITIONS,
    ENDPOINT_PRICE,
    ENDPOINT_SERVER_TIME,
)
from .errors import DecodeError
from .http_client import HttpClient
from .models import (
    Balance,
    Order,
    OrderFilter,
    OrderRequest,
    Position,
    PositionFilter,
)
from .normalizer import (
    normalize_balance,
    normalize_orders,
    normalize_placed_order,
    normalize_positions,
    normalize_price,
    order_request_params,
)
from .response import parse_envelope
from .utils import decode_field, to_exchange_symbol

logger = logging.getLogger(__name__)


class APIMethods:
    """Container for all API method implementations."""

    def __init__(self, http_client: HttpClient, margin_asset: str = "USDT"):
        """Initialize API methods with HTTP client."""
        self._http_client = http_client
        self._margin_asset = margin_asset

    async def get_balance(self, session: ClientSession, timeout: Optional[float] = None) -> Balance:
        """Get the margin-asset balance."""
        response = await self._http_client.request(
            session, "GET", ENDPOINT_BALANCE, timeout=timeout
        )
        data = parse_envelope(response)
        return normalize_balance(data, self._margin_asset)

    async def get_positions(
        self,
        session: ClientSession,
        position_filter: Optional[PositionFilter] = None,
        timeout: Optional[float] = None,
    ) -> List[Position]:
        """Get open positions. Symbol filters on the wire, side client-side."""
        params = {}
        if position_filter is not None and position_filter.symbol:
            params["symbol"] = to_exchange_symbol(position_filter.symbol)

        response = await self._http_client.request(
            session, "GET", ENDPOINT_POSITIONS, params=params, timeout=timeout
        )
        data = parse_envelope(response, require_data=False)
        return normalize_positions(data, position_filter)

    async def place_order(
        self, session: ClientSession, order: OrderRequest, timeout: Optional[float] = None
    ) -> Order:
        """Place a new order. Validation is left to the exchange."""
        params = order_request_params(order)

        logger.info(
            f"Placing {params['type']} {params['side']}/{params['positionSide']} "
            f"{params['quantity']} {params['symbol']}"
            + (" with bracket" if order.has_bracket else "")
        )

        # bracket legs embed JSON documents and need the payload signing routine
        response = await self._http_client.request(
            session,
            "POST",
            ENDPOINT_ORDER,
            params=params,
            payload=order.has_bracket,
            timeout=timeout,
        )
        data = parse_envelope(response)
        placed = normalize_placed_order(data, order)

        logger.info(f"Order {placed.order_id} acknowledged with status {placed.status}")
        return placed

    async def get_orders(
        self,
        session: ClientSession,
        order_filter: Optional[OrderFilter] = None,
        timeout: Optional[float] = None,
    ) -> List[Order]:
        """Get open orders. Symbol filters on the wire, status client-side."""
        params = {}
        if order_filter is not None and order_filter.symbol:
            params["symbol"] = to_exchange_symbol(order_filter.symbol)

        response = await self._http_client.request(
            session, "GET", ENDPOINT_OPEN_ORDERS, params=params, timeout=timeout
        )
        data = parse_envelope(response, require_data=False)
        return normalize_orders(data, order_filter)

    async def cancel_order(
        self,
        session: ClientSession,
        symbol: str,
        order_id: str,
        timeout: Optional[float] = None,
    ) -> None:
        """Cancel an existing order."""
        params = {"symbol": to_exchange_symbol(symbol), "orderId": str(order_id)}

        response = await self._http_client.request(
            session, "DELETE", ENDPOINT_ORDER, params=params, timeout=timeout
        )
        parse_envelope(response, require_data=False)
        logger.info(f"Cancelled order {order_id} on {params['symbol']}")

    async def cancel_all_orders(
        self, session: ClientSession, symbol: str = "", timeout: Optional[float] = None
    ) -> None:
        """Cancel all open orders for a symbol, or every symbol when empty."""
        params = {}
        if symbol:
            params["symbol"] = to_exchange_symbol(symbol)

        response = await self._http_client.request(
            session, "DELETE", ENDPOINT_CANCEL_ALL, params=params, timeout=timeout
        )
        parse_envelope(response, require_data=False)
        logger.info(f"Cancelled all open orders for {params.get('symbol', 'all symbols')}")

    async def get_current_price(
        self, session: ClientSession, symbol: str, timeout: Optional[float] = None
    ) -> float:
        """Get last traded price for symbol."""
        response = await self._http_client.request(
            session,
            "GET",
            ENDPOINT_PRICE,
            params={"symbol": to_exchange_symbol(symbol)},
            timeout=timeout,
        )
        data = parse_envelope(response)
        return normalize_price(data)

    async def set_leverage(
        self,
        session: ClientSession,
        symbol: str,
        side: str,
        leverage: int,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Set leverage for one side of a symbol.

        Args:
            side: "LONG", "SHORT" (hedge mode) or "BOTH" (one-way mode)
        """
        params = {
            "symbol": to_exchange_symbol(symbol),
            "side": str(getattr(side, "value", side)).upper(),
            "leverage": str(int(leverage)),
        }

        response = await self._http_client.request(
            session, "POST", ENDPOINT_LEVERAGE, params=params, timeout=timeout
        )
        parse_envelope(response, require_data=False)
        logger.info(f"Leverage for {params['symbol']} {params['side']} set to {leverage}x")

    async def get_server_time(
        self, session: ClientSession, timeout: Optional[float] = None
    ) -> int:
        """Get exchange server time in milliseconds (unsigned endpoint)."""
        response = await self._http_client.request(
            session, "GET", ENDPOINT_SERVER_TIME, signed=False, timeout=timeout
        )
        data = parse_envelope(response)
        if not isinstance(data, dict):
            raise DecodeError(BROKER_NAME, "Server time payload is not an object")
        return int(decode_field(data, "serverTime", required=True))
