"""
HTTP client for the BingX API.

Handles request construction, signing and execution, returning the raw
status and body. Response interpretation lives in ``response.py``.

No retries are performed: requests are authenticated and may place orders,
so resending is left to the caller.
"""

import asyncio
import logging
from typing import Dict, Optional

import aiohttp
from aiohttp import ClientSession
from yarl import URL

from .auth import BingXSigner
from .constants import BROKER_NAME
from .errors import RequestCanceledError, RequestTimeoutError, TransportError
from .models.config import ConnectionConfig
from .response import RawResponse

logger = logging.getLogger(__name__)


class HttpClient:
    """HTTP client specialized for BingX API interactions."""

    def __init__(self, config: ConnectionConfig, signer: BingXSigner):
        """Initialize HTTP client with configuration and signer."""
        self._config = config
        self._signer = signer

    def build_url(
        self,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        signed: bool = True,
        payload: bool = False,
    ) -> str:
        """
        Build the full request URL.

        Signed requests get ``timestamp`` and ``signature`` query parameters.
        ``payload`` selects the signing routine for parameters that embed
        JSON documents (bracket legs).
        """
        request_params = dict(params or {})

        if signed and payload:
            query_string = self._signer.sign_payload_params(request_params)
        elif signed:
            query_string = self._signer.sign_params(request_params)
        else:
            query_string = BingXSigner.canonical_query(request_params)

        url = f"{self._config.base_url}{endpoint}"
        return f"{url}?{query_string}" if query_string else url

    async def request(
        self,
        session: ClientSession,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        signed: bool = True,
        payload: bool = False,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """
        Execute one request. Parameters always travel in the query string,
        including for POST and DELETE.

        Raises:
            TransportError: Connection-level failure
            RequestTimeoutError: Request or session timeout expired
            RequestCanceledError: Awaiting task was cancelled
        """
        url = self.build_url(endpoint, params, signed=signed, payload=payload)
        headers = self._signer.get_auth_headers() if signed else {}

        request_kwargs = {
            "method": method,
            # already percent-encoded; yarl must not requote the signed string
            "url": URL(url, encoded=True),
            "headers": headers,
        }
        if timeout is not None:
            request_kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        logger.debug(f"{method} {endpoint} params={sorted((params or {}).keys())}")

        try:
            async with session.request(**request_kwargs) as response:
                body = await response.read()
                return RawResponse(status=response.status, body=body)
        except asyncio.CancelledError as e:
            raise RequestCanceledError(
                BROKER_NAME, f"{method} {endpoint} cancelled"
            ) from e
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(
                BROKER_NAME, f"{method} {endpoint} timed out"
            ) from e
        except aiohttp.ClientError as e:
            logger.error(f"HTTP request {method} {endpoint} failed: {e}")
            raise TransportError(
                BROKER_NAME, "REQUEST_FAILED", f"HTTP request failed: {e}"
            ) from e
