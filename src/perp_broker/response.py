"""
Response envelope mapping for the BingX API.

Turns one raw HTTP response into the ``data`` payload of a success
envelope or raises the matching error from the taxonomy. Pure: no I/O.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from .constants import API_SUCCESS_CODE, BROKER_NAME, SUCCESS_STATUS_CODE
from .errors import DecodeError, NoDataError, TransportError, api_error_for_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """What the transport hands back: HTTP status and undecoded body."""
    status: int
    body: bytes


def _preview(body: bytes, limit: int = 200) -> str:
    return body[:limit].decode("utf-8", errors="replace")


def parse_envelope(response: RawResponse, require_data: bool = True) -> Any:
    """
    Map a raw response onto its success payload.

    Checks run in a fixed order: HTTP status, envelope shape, envelope code,
    then payload presence.

    Args:
        response: Raw transport response
        require_data: Raise NoDataError when ``data`` is absent or empty

    Returns:
        The envelope's ``data`` value (None when absent and not required)

    Raises:
        TransportError: HTTP status is not 200, whatever the body holds
        DecodeError: Body is not a JSON ``{code, msg, data}`` object
        APIError: Envelope code is not 0 (subclass chosen by code)
        NoDataError: Success envelope without payload
    """
    if response.status != SUCCESS_STATUS_CODE:
        raise TransportError(
            BROKER_NAME,
            "HTTP_ERROR",
            f"HTTP {response.status}: {_preview(response.body)}",
            status_code=response.status,
        )

    try:
        envelope = json.loads(response.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(
            BROKER_NAME, f"Invalid JSON response: {_preview(response.body)}"
        ) from e

    if not isinstance(envelope, dict) or "code" not in envelope:
        raise DecodeError(
            BROKER_NAME, f"Unexpected response envelope: {_preview(response.body)}"
        )

    code = envelope["code"]
    # bool passes isinstance(int); it is not a valid code
    if not isinstance(code, int) or isinstance(code, bool):
        raise DecodeError(BROKER_NAME, f"Envelope code is not an integer: {code!r}")

    if code != API_SUCCESS_CODE:
        message = envelope.get("msg") or envelope.get("message") or ""
        logger.warning(f"BingX rejected request: code={code} msg={message}")
        raise api_error_for_code(BROKER_NAME, code, message)

    data = envelope.get("data")
    if require_data and (data is None or data == [] or data == {}):
        raise NoDataError(BROKER_NAME, "Success response carried no data")

    return data
