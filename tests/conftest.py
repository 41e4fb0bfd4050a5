# -*- coding: utf-8 -*-
"""
Shared fixtures and utilities for testing the BingX broker.
"""

import asyncio
import json
import pytest
from typing import Any, Dict, List, Optional

from perp_broker.auth import ApiCredentials, BingXSigner
from perp_broker.bingx_client import BingXClient
from perp_broker.http_client import HttpClient
from perp_broker.models import ConnectionConfig
from perp_broker.response import RawResponse


TEST_API_KEY = "test_api_key_0123456789abcdef"
TEST_API_SECRET = "test_api_secret_0123456789abcdef"


def make_response(data: Any = None, code: int = 0, msg: str = "", status: int = 200) -> RawResponse:
    """Build a raw response carrying a BingX envelope."""
    envelope = {"code": code, "msg": msg, "data": data}
    return RawResponse(status=status, body=json.dumps(envelope).encode("utf-8"))


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body


class FakeRequestContext:
    """Async context manager returned by FakeSession.request."""

    def __init__(self, response: Optional[FakeResponse], error: Optional[BaseException],
                 delay: float = 0.0):
        self._response = response
        self._error = error
        self._delay = delay

    async def __aenter__(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._response

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requests and replays a canned response or error."""

    def __init__(self, status: int = 200, body: bytes = b'{"code":0,"msg":"","data":{}}',
                 error: Optional[BaseException] = None, delay: float = 0.0):
        self.calls: List[Dict[str, Any]] = []
        self._response = FakeResponse(status, body)
        self._error = error
        self._delay = delay
        self.closed = False

    def request(self, **kwargs):
        self.calls.append(kwargs)
        return FakeRequestContext(self._response, self._error, self._delay)


# Configuration fixtures
@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection config with test credentials (production URL)."""
    return ConnectionConfig(api_key=TEST_API_KEY, api_secret=TEST_API_SECRET)


@pytest.fixture
def demo_config() -> ConnectionConfig:
    """Connection config pointing at the demo environment."""
    return ConnectionConfig(api_key=TEST_API_KEY, api_secret=TEST_API_SECRET, demo_mode=True)


@pytest.fixture
def signer() -> BingXSigner:
    """Signer with test credentials."""
    return BingXSigner(ApiCredentials(TEST_API_KEY, TEST_API_SECRET))


@pytest.fixture
def http_client(connection_config, signer) -> HttpClient:
    """HTTP client over the test config."""
    return HttpClient(connection_config, signer)


@pytest.fixture
def bingx_client(connection_config) -> BingXClient:
    """Fresh BingX client."""
    client = BingXClient(connection_config)
    yield client
    # nothing was opened; silence the unclosed-client warning
    client._closed = True


# Payload fixtures
@pytest.fixture
def balance_payload() -> List[Dict[str, Any]]:
    """v3 balance payload with a single USDT entry."""
    return [
        {
            "userId": "123456",
            "asset": "USDT",
            "balance": "1000.00",
            "equity": "1050.00",
            "unrealizedProfit": "50.00",
            "realisedProfit": "12.50",
            "availableMargin": "950.00",
            "usedMargin": "100.00",
            "freezedMargin": "0.00",
            "shortUid": "7890",
        }
    ]


@pytest.fixture
def positions_payload() -> List[Dict[str, Any]]:
    """Positions with string leverage, numeric leverage and a zero-size entry."""
    return [
        {
            "symbol": "BTC-USDT",
            "positionSide": "LONG",
            "positionAmt": "0.1",
            "availableAmt": "0.1",
            "unrealizedProfit": "15.5",
            "realisedProfit": "-1.2",
            "initialMargin": "300.0",
            "maintenanceMargin": "12.0",
            "leverage": "10",
            "avgPrice": "30000.0",
            "liquidationPrice": "",
            "markPrice": "30155.0",
        },
        {
            "symbol": "ETH-USDT",
            "positionSide": "SHORT",
            "positionAmt": "-2.5",
            "unrealizedProfit": "-4.0",
            "realisedProfit": "0",
            "initialMargin": "200.0",
            "maintenanceMargin": "8.0",
            "leverage": 25,
            "avgPrice": "2000.0",
            "liquidationPrice": 2075.5,
            "markPrice": "2001.6",
        },
        {
            "symbol": "SOL-USDT",
            "positionSide": "LONG",
            "positionAmt": "0",
            "leverage": "5",
            "avgPrice": "0",
            "liquidationPrice": "",
            "markPrice": "150.0",
        },
    ]


@pytest.fixture
def open_orders_payload() -> Dict[str, Any]:
    """Open orders payload: a take-profit, a stop-market and a limit order."""
    return {
        "orders": [
            {
                "orderId": 1735950000000000001,
                "symbol": "BTC-USDT",
                "side": "SELL",
                "positionSide": "LONG",
                "type": "TAKE_PROFIT_MARKET",
                "origQty": "0.1000",
                "price": "0",
                "stopPrice": "32000.0",
                "executedQty": "0",
                "avgPrice": "0.0",
                "status": "NEW",
                "timeInForce": "GTC",
                "clientOrderId": "",
                "workingType": "MARK_PRICE",
                "time": 1700000000000,
                "updateTime": 1700000000500,
            },
            {
                "orderId": 1735950000000000002,
                "symbol": "BTC-USDT",
                "side": "SELL",
                "positionSide": "LONG",
                "type": "STOP_MARKET",
                "origQty": "0.1000",
                "price": "0",
                "stopPrice": "29000.0",
                "executedQty": "0",
                "avgPrice": "0.0",
                "status": "NEW",
                "timeInForce": "GTC",
                "clientOrderId": "sl-1",
                "workingType": "MARK_PRICE",
                "time": 1700000001000,
                "updateTime": 1700000001000,
            },
            {
                "orderId": 1735950000000000003,
                "symbol": "BTC-USDT",
                "side": "BUY",
                "positionSide": "LONG",
                "type": "LIMIT",
                "origQty": "0.0500",
                "price": "29500.0",
                "stopPrice": "",
                "executedQty": "0.0100",
                "avgPrice": "29500.0",
                "status": "PARTIALLY_FILLED",
                "timeInForce": "GTC",
                "clientOrderId": "entry-7",
                "workingType": "MARK_PRICE",
                "time": 1700000002000,
                "updateTime": 1700000003000,
            },
        ]
    }


@pytest.fixture
def placed_order_payload() -> Dict[str, Any]:
    """Place-order acknowledgement in BingX's nested form."""
    return {
        "order": {
            "orderId": 1735950000000000010,
            "symbol": "BTC-USDT",
            "side": "BUY",
            "positionSide": "LONG",
            "type": "LIMIT",
            "origQty": "0.1",
            "price": "30000",
            "status": "NEW",
            "clientOrderID": "",
        }
    }


@pytest.fixture
def price_payload() -> Dict[str, Any]:
    """Ticker price payload."""
    return {"symbol": "BTC-USDT", "price": "30123.4", "time": 1700000000000}


@pytest.fixture
def fake_session():
    """Factory for fake aiohttp sessions."""
    return FakeSession


@pytest.fixture
def envelope():
    """Factory for raw envelope responses."""
    return make_response
