"""
Capability descriptor for broker implementations.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Features:
    """What a broker implementation supports."""
    trailing_stop: bool
    multiple_tp: bool  # advertised only; orders carry a single TP leg
    bracket_orders: bool
    max_leverage: int
    reduce_only_orders: bool
