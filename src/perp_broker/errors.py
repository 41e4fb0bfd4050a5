"""
Error taxonomy for broker operations.

Every failure raised by this package is a ``BrokerError`` carrying the
originating broker name, a stable code and a human-readable message.
Underlying causes are chained with ``raise ... from`` and stay available
on ``__cause__``.
"""

import asyncio
from typing import Optional

from .constants import (
    API_AUTH_FAILED_CODES,
    API_INSUFFICIENT_BALANCE_CODES,
    API_RATE_LIMITED_CODES,
)


class BrokerError(Exception):
    """Base exception for all broker errors."""

    retryable = False

    def __init__(self, broker: str, code: str, message: str):
        super().__init__(f"{broker} error [{code}]: {message}")
        self.broker = broker
        self.code = code
        self.message = message


class TransportError(BrokerError):
    """Network failure or non-success HTTP status."""

    retryable = True

    def __init__(
        self,
        broker: str,
        code: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(broker, code, message)
        self.status_code = status_code


class DecodeError(BrokerError):
    """Response body is not a valid {code, msg, data} envelope."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "DECODE_ERROR", message)


class APIError(BrokerError):
    """Exchange rejected the request with a non-zero code."""

    def __init__(self, broker: str, api_code: int, message: str):
        super().__init__(broker, f"API_{api_code}", message)
        self.api_code = api_code


class AuthenticationError(APIError):
    """Invalid API key or signature."""


class RateLimitError(APIError):
    """Request frequency limit hit."""

    retryable = True


class InsufficientBalanceError(APIError):
    """Not enough margin for the requested order."""


class NoDataError(BrokerError):
    """Success envelope with an empty payload."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "NO_DATA", message)


class NotFoundError(BrokerError):
    """Single-entity lookup found nothing."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "NOT_FOUND", message)


class PositionNotFoundError(NotFoundError):
    """No open position matched the lookup."""


class OrderNotFoundError(NotFoundError):
    """No open order matched the lookup."""


class ParseError(BrokerError):
    """A numeric wire field could not be decoded."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "PARSE_ERROR", message)


class UnsupportedShapeError(ParseError):
    """Wire value is neither a JSON string nor a JSON number."""


class RequestTimeoutError(BrokerError):
    """Caller deadline or session timeout expired before a response."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "TIMEOUT", message)


class RequestCanceledError(BrokerError, asyncio.CancelledError):
    """In-flight request aborted by task cancellation."""

    def __init__(self, broker: str, message: str):
        super().__init__(broker, "CANCELED", message)


def api_error_for_code(broker: str, api_code: int, message: str) -> APIError:
    """Build the APIError subclass matching a known exchange error code."""
    if api_code in API_AUTH_FAILED_CODES:
        return AuthenticationError(broker, api_code, message)
    if api_code in API_RATE_LIMITED_CODES:
        return RateLimitError(broker, api_code, message)
    if api_code in API_INSUFFICIENT_BALANCE_CODES:
        return InsufficientBalanceError(broker, api_code, message)
    return APIError(broker, api_code, message)
