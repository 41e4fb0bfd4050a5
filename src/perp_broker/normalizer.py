"""
Normalization of BingX payloads into the broker-neutral domain model.

Pure functions only. Each numeric field goes through the string-or-number
decoder and failures propagate; nothing a caller might trade on is
defaulted to zero behind its back.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Union

from .constants import BROKER_NAME
from .errors import DecodeError, NoDataError
from .models import (
    Balance,
    Order,
    OrderFilter,
    OrderRequest,
    OrderStatus,
    OrderType,
    Position,
    PositionFilter,
    Side,
    StopLossConfig,
    TakeProfitConfig,
    TimeInForce,
    TRIGGER_ORDER_TYPES,
)
from .utils import (
    convert_timestamp_ms,
    decode_field,
    decode_int,
    format_compact,
    format_number,
    now_ms,
    to_exchange_symbol,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

def map_side(position_side: Optional[str]) -> Side:
    """Map a wire position direction onto Long/Short.

    Only the exact token "LONG" is Long. Everything else, including "BOTH",
    empty or unknown tokens, is Short; there is no third state.
    """
    if position_side == Side.LONG.value:
        return Side.LONG
    return Side.SHORT


def map_order_status(raw_status: str, order_type: str) -> Union[OrderStatus, str]:
    """Normalize an order status.

    A trigger order (STOP, STOP_MARKET, TAKE_PROFIT, TAKE_PROFIT_MARKET)
    reported as NEW has not fired yet and becomes PENDING. Every other
    (type, status) pair keeps the exchange's status.
    """
    if order_type in TRIGGER_ORDER_TYPES and raw_status == OrderStatus.NEW.value:
        return OrderStatus.PENDING
    return _as_enum(OrderStatus, raw_status)


def infer_reduce_only(action: Optional[str], position_side: Optional[str]) -> bool:
    """Guess reduce-only intent for an open order.

    The open-orders endpoint carries no explicit reduce-only flag. A SELL
    against a LONG position or a BUY against a SHORT one closes exposure,
    so it is reported as reduce-only. This is an approximation: the wire
    format cannot tell a closing order from an ordinary one tagged the same
    way, and the result is not a guarantee of the order's real flag.
    """
    return (action == "SELL" and position_side == "LONG") or (
        action == "BUY" and position_side == "SHORT"
    )


def _as_enum(enum_cls, token: Optional[str]):
    """Return the enum member for a known token, the raw token otherwise."""
    if token is None:
        return None
    try:
        return enum_cls(token)
    except ValueError:
        return token


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------

def normalize_balance(data: List[Dict[str, Any]], margin_asset: str = "USDT") -> Balance:
    """Build a Balance from the v3 balance list.

    The entry for ``margin_asset`` wins; otherwise the first entry is used.
    ``in_use`` comes from ``usedMargin`` and is not derived from the others.
    """
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise DecodeError(BROKER_NAME, "Balance payload is not a list of objects")
    if not data:
        raise NoDataError(BROKER_NAME, "No balance data returned")

    entry = next((item for item in data if item.get("asset") == margin_asset), data[0])

    return Balance(
        asset=entry.get("asset", ""),
        total=decode_field(entry, "equity", required=True),
        available=decode_field(entry, "availableMargin", required=True),
        in_use=decode_field(entry, "usedMargin", required=True),
        unrealized_pnl=decode_field(entry, "unrealizedProfit"),
        realized_pnl=decode_field(entry, "realisedProfit"),
        timestamp=now_ms(),
    )


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------

def normalize_position(data: Dict[str, Any]) -> Optional[Position]:
    """Build a Position, or None when the exchange reports zero size."""
    size = decode_field(data, "positionAmt", required=True)
    if size == 0:
        return None

    return Position(
        symbol=data.get("symbol", ""),
        side=map_side(data.get("positionSide")),
        size=abs(size),
        entry_price=decode_field(data, "avgPrice", required=True),
        mark_price=decode_field(data, "markPrice"),
        liquidation_price=decode_field(data, "liquidationPrice"),
        leverage=decode_int(data, "leverage", required=True),
        unrealized_pnl=decode_field(data, "unrealizedProfit"),
        realized_pnl=decode_field(data, "realisedProfit"),
        margin=decode_field(data, "initialMargin"),
        maintenance_margin=decode_field(data, "maintenanceMargin"),
        timestamp=convert_timestamp_ms(decode_field(data, "updateTime")) or now_ms(),
    )


def normalize_positions(
    data: Optional[Iterable[Dict[str, Any]]], position_filter: Optional[PositionFilter] = None
) -> List[Position]:
    """Normalize a position list, drop zero-size entries, then apply the side filter."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(BROKER_NAME, "Positions payload is not a list")

    positions = []
    for item in data:
        position = normalize_position(item)
        if position is None:
            logger.debug(f"Skipping zero-size position for {item.get('symbol')}")
            continue
        if position_filter is not None and position_filter.side is not None:
            if position.side != position_filter.side:
                continue
        positions.append(position)

    return positions


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

def normalize_order(data: Dict[str, Any], reduce_only: Optional[bool] = None) -> Order:
    """Build an Order from an order object.

    When ``reduce_only`` is not given it is inferred from the action and
    position direction with ``infer_reduce_only``.
    """
    order_type = data.get("type", "")
    position_side = data.get("positionSide")

    if reduce_only is None:
        reduce_only = infer_reduce_only(data.get("side"), position_side)

    order_id = data.get("orderId", data.get("orderID", ""))

    return Order(
        order_id=str(order_id),
        client_order_id=data.get("clientOrderId") or data.get("clientOrderID") or None,
        symbol=data.get("symbol", ""),
        side=map_side(position_side),
        order_type=_as_enum(OrderType, order_type),
        status=map_order_status(data.get("status", ""), order_type),
        size=decode_field(data, "origQty", required=True),
        price=decode_field(data, "price"),
        stop_price=decode_field(data, "stopPrice"),
        filled_size=decode_field(data, "executedQty"),
        average_price=decode_field(data, "avgPrice"),
        reduce_only=reduce_only,
        time_in_force=_as_enum(TimeInForce, data.get("timeInForce") or None),
        created_at=convert_timestamp_ms(decode_field(data, "time")) or 0,
        updated_at=convert_timestamp_ms(decode_field(data, "updateTime")) or 0,
    )


def normalize_placed_order(data: Dict[str, Any], request: OrderRequest) -> Order:
    """Build the Order acknowledged by the place-order endpoint.

    Accepts both the flat payload and the nested ``{"order": {...}}`` form.
    Reduce-only is taken from the request since the acknowledgement may omit it.
    """
    if isinstance(data, dict) and isinstance(data.get("order"), dict):
        data = data["order"]
    if not isinstance(data, dict):
        raise DecodeError(BROKER_NAME, "Order payload is not an object")

    if "origQty" not in data and "quantity" in data:
        data = dict(data, origQty=data["quantity"])

    order = normalize_order(data, reduce_only=request.reduce_only)
    if order.created_at == 0:
        stamp = now_ms()
        order = replace(order, created_at=stamp, updated_at=order.updated_at or stamp)
    return order


def normalize_orders(
    data: Any, order_filter: Optional[OrderFilter] = None
) -> List[Order]:
    """Normalize the open-orders payload and apply the status filter.

    Status filtering compares against the normalized status, so filtering by
    PENDING selects untriggered stop and take-profit orders.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("orders") or []
    if not isinstance(data, list):
        raise DecodeError(BROKER_NAME, "Orders payload is not a list")

    orders = []
    for item in data:
        order = normalize_order(item)
        if order_filter is not None and order_filter.status is not None:
            if order.status != order_filter.status:
                continue
        orders.append(order)

    return orders


def normalize_price(data: Dict[str, Any]) -> float:
    """Extract the last price from a ticker payload."""
    if not isinstance(data, dict):
        raise DecodeError(BROKER_NAME, "Price payload is not an object")
    return decode_field(data, "price", required=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def order_request_params(order: OrderRequest) -> Dict[str, str]:
    """Translate an OrderRequest into flat BingX query parameters.

    ``side`` is the direction of the trade itself: Long is BUY and Short is
    SELL. An opening order targets the same leg (BUY/LONG, SELL/SHORT); a
    reduce-only order targets the opposite leg so it closes it (SELL/LONG
    closes a long, BUY/SHORT closes a short).
    Bracket legs become JSON documents under ``stopLoss``/``takeProfit``.
    """
    if order.side == Side.LONG:
        action, position_side = "BUY", "LONG"
    else:
        action, position_side = "SELL", "SHORT"
    if order.reduce_only:
        position_side = "SHORT" if position_side == "LONG" else "LONG"

    order_type = order.order_type.value if isinstance(order.order_type, OrderType) else str(order.order_type)

    params = {
        "symbol": to_exchange_symbol(order.symbol),
        "side": action,
        "positionSide": position_side,
        "type": order_type,
        "quantity": format_number(order.size),
    }

    if order.price > 0:
        params["price"] = format_number(order.price)
    if order.stop_price > 0:
        params["stopPrice"] = format_number(order.stop_price)

    if order.time_in_force is not None:
        params["timeInForce"] = TimeInForce(order.time_in_force).value
    elif order_type == OrderType.LIMIT.value:
        params["timeInForce"] = TimeInForce.GTC.value

    if order.reduce_only:
        params["reduceOnly"] = "true"

    if order.trailing is not None:
        params["activationPrice"] = format_number(order.trailing.activation_price)
        params["priceRate"] = format_compact(order.trailing.callback_rate)

    if order.stop_loss is not None:
        params["stopLoss"] = encode_bracket_leg(OrderType.STOP, order.stop_loss)
    if order.take_profit is not None:
        params["takeProfit"] = encode_bracket_leg(OrderType.TAKE_PROFIT, order.take_profit)

    return params


def encode_bracket_leg(
    leg_type: OrderType, leg: Union[StopLossConfig, TakeProfitConfig]
) -> str:
    """Serialize one stop-loss/take-profit leg as the compact JSON BingX expects."""
    document = {
        "type": leg_type.value,
        "stopPrice": leg.trigger_price,
        "price": leg.order_price or leg.trigger_price,
        "workingType": leg.working_type.value,
    }
    return json.dumps(document, separators=(",", ":"))
