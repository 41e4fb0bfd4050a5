"""
Configuration models for the BingX broker.

Immutable configuration structures following state-first design.
"""

from dataclasses import dataclass
from typing import Optional

from ..constants import (
    BASE_URL_DEMO,
    BASE_URL_PROD,
    DEFAULT_MARGIN_ASSET,
    DEFAULT_TIMEOUT,
)


@dataclass(frozen=True)
class ConnectionConfig:
    """Configuration for a BingX client connection."""
    api_key: str
    api_secret: str
    demo_mode: bool = False
    base_url: Optional[str] = None  # derived from demo_mode when omitted
    timeout: float = DEFAULT_TIMEOUT
    margin_asset: str = DEFAULT_MARGIN_ASSET

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_credential("API key", self.api_key)
        self._validate_credential("API secret", self.api_secret)

        if self.base_url is None:
            # frozen dataclass: bypass __setattr__ for the derived default
            object.__setattr__(
                self, "base_url", BASE_URL_DEMO if self.demo_mode else BASE_URL_PROD
            )
        elif not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must be a valid HTTP/HTTPS URL, got {self.base_url!r}")
        else:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")

    @staticmethod
    def _validate_credential(label: str, value: str):
        """Validate a credential is present and of plausible length."""
        if not value:
            raise ValueError(f"{label} cannot be empty")

        if len(value) > 256:
            raise ValueError(
                f"{label} appears to be too long (expected max 256 characters, got {len(value)})"
            )
