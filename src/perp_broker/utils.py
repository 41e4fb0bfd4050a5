"""
Utility functions for the broker.

Wire-value decoding and formatting helpers following functional
programming principles.
"""

import json
import math
import re
import time
from typing import Any, Dict, Optional, Union

from .constants import BROKER_NAME
from .errors import ParseError, UnsupportedShapeError

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def decode_number(value: Any, field: str = "value") -> float:
    """Decode a wire value that may arrive as a JSON string or a JSON number.

    An empty string decodes to 0.0 ("not set"). A non-numeric string raises
    ParseError, as does a non-finite number. Anything that is neither a
    string nor a number (null, bool, object, array) raises
    UnsupportedShapeError.
    """
    if isinstance(value, str):
        if value == "":
            return 0.0
        # float() alone would also take "nan", "inf", "1_000" and padding
        if not _DECIMAL_RE.fullmatch(value):
            raise ParseError(BROKER_NAME, f"{field}: {value!r} is not a valid number")
        number = float(value)
        if not math.isfinite(number):
            raise ParseError(BROKER_NAME, f"{field}: {value!r} is not a valid number")
        return number

    # bool is an int subclass, but true/false is not a number on the wire
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError as e:
            raise ParseError(BROKER_NAME, f"{field}: integer out of float range") from e
        # json.loads accepts NaN and Infinity literals
        if not math.isfinite(number):
            raise ParseError(BROKER_NAME, f"{field}: {value!r} is not a finite number")
        return number

    raise UnsupportedShapeError(
        BROKER_NAME,
        f"{field}: expected a JSON string or number, got {json.dumps(value, default=str)}",
    )


def decode_field(data: Dict[str, Any], key: str, required: bool = False) -> float:
    """Decode one numeric field of a payload object.

    Absent optional fields yield 0.0; absent required fields raise ParseError.
    Present fields always go through decode_number, so malformed values are
    never silently zeroed.
    """
    if key not in data:
        if required:
            raise ParseError(BROKER_NAME, f"{key}: required field is missing")
        return 0.0
    return decode_number(data[key], key)


def decode_int(data: Dict[str, Any], key: str, required: bool = False) -> int:
    """Decode a numeric field and truncate it to an integer."""
    return int(decode_field(data, key, required))


def format_number(value: float) -> str:
    """Format a quantity or price for the wire (fixed eight decimals)."""
    return f"{value:.8f}"


def format_compact(value: float) -> str:
    """Format a number for embedded JSON documents (shortest repr)."""
    return f"{value:g}"


def to_exchange_symbol(symbol: str) -> str:
    """Normalize a symbol into the hyphenated BASE-QUOTE notation."""
    return symbol.strip().upper().replace("/", "-").replace("_", "-")


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def convert_timestamp_ms(timestamp: Union[int, float, str, None]) -> Optional[int]:
    """Convert timestamp to milliseconds if needed."""
    if timestamp is None or timestamp == "":
        return None
    timestamp = float(timestamp)
    if timestamp > 1e10:  # Already in milliseconds
        return int(timestamp)
    else:  # Convert from seconds to milliseconds
        return int(timestamp * 1000)

