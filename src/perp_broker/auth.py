"""
Authentication and signing utilities for the BingX API
"""

from dataclasses import dataclass
from typing import Dict, Optional
import hashlib
import hmac
import time
from urllib.parse import urlencode

from .constants import API_KEY_HEADER


@dataclass
class ApiCredentials:
    """Container for API credentials"""
    api_key: str
    api_secret: str


class BingXSigner:
    """
    Handles request signing for BingX API authentication.

    Every signed request carries a millisecond ``timestamp`` and an
    HMAC-SHA256 ``signature`` over the canonical (key-sorted) parameter
    string. The signer keeps no state besides the credentials.
    """

    def __init__(self, credentials: ApiCredentials):
        """
        Initialize the signer with API credentials.

        Args:
            credentials: API credentials containing key and secret
        """
        self.credentials = credentials

    def sign_params(
        self, params: Optional[Dict[str, str]] = None, timestamp: Optional[int] = None
    ) -> str:
        """
        Inject the timestamp and return the signed query string.

        Used for flat parameter sets. The canonical string is the standard
        URL-encoding of the sorted parameters, and the same string is sent
        on the wire with ``&signature=...`` appended.

        Args:
            params: Request parameters; ``timestamp`` is written into it
            timestamp: Milliseconds since epoch (defaults to now)

        Returns:
            Query string including the trailing signature parameter
        """
        if params is None:
            params = {}

        self._inject_timestamp(params, timestamp)
        query_string = self.canonical_query(params)
        signature = self.generate_signature(query_string)

        return f"{query_string}&signature={signature}"

    def sign_payload_params(
        self, params: Dict[str, str], timestamp: Optional[int] = None
    ) -> str:
        """
        Sign parameters whose values embed structured documents.

        Bracket legs are JSON documents inside a single parameter. The exchange
        verifies the signature over the raw ``key=value`` pairs, so the
        signable string here is built without escaping while the returned
        query string is URL-encoded for transport.

        Args:
            params: Request parameters; ``timestamp`` is written into it
            timestamp: Milliseconds since epoch (defaults to now)

        Returns:
            URL-encoded query string including the trailing signature
        """
        self._inject_timestamp(params, timestamp)
        raw_string = self.raw_query(params)
        signature = self.generate_signature(raw_string)

        return f"{self.canonical_query(params)}&signature={signature}"

    @staticmethod
    def canonical_query(params: Dict[str, str]) -> str:
        """URL-encode parameters with keys in sorted order."""
        return urlencode(sorted(params.items()))

    @staticmethod
    def raw_query(params: Dict[str, str]) -> str:
        """Join sorted parameters as unescaped ``key=value`` pairs."""
        return "&".join(f"{key}={value}" for key, value in sorted(params.items()))

    def generate_signature(self, payload: str) -> str:
        """
        Generate HMAC-SHA256 signature for the given string.

        Args:
            payload: Canonical parameter string (never includes ``signature``)

        Returns:
            Lowercase hex-encoded HMAC-SHA256 signature
        """
        return hmac.new(
            self.credentials.api_secret.encode("utf-8"),
            payload.encode("utf-8"),
            hashlib.sha256
        ).hexdigest()

    def get_auth_headers(self) -> Dict[str, str]:
        """
        Get authentication headers for API requests.

        Returns:
            Dictionary containing required authentication headers
        """
        return {
            API_KEY_HEADER: self.credentials.api_key
        }

    @staticmethod
    def _inject_timestamp(params: Dict[str, str], timestamp: Optional[int]) -> None:
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        params["timestamp"] = str(timestamp)
        params.pop("signature", None)
