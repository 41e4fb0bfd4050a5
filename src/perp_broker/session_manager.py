"""
aiohttp session ownership for the BingX client.

One ``ClientSession`` (and therefore one connection pool) is shared by
every concurrent call on a client. It is created lazily on first use,
guarded by a lock so racing tasks never open two pools.
"""

import asyncio
import json
import logging
from typing import Optional

import aiohttp

from .constants import API_SUCCESS_CODE, ENDPOINT_SERVER_TIME
from .models.config import ConnectionConfig

logger = logging.getLogger(__name__)

HEALTH_CHECK_TIMEOUT = 5.0


class SessionManager:
    """Creates, shares and closes the client's HTTP session."""

    def __init__(self, config: ConnectionConfig):
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock: Optional[asyncio.Lock] = None

    async def create_session(self) -> aiohttp.ClientSession:
        """Return the open session, creating it on first use."""
        if self._session is not None and not self._session.closed:
            return self._session

        # created here so the lock binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._session is None or self._session.closed:
                self._session = self._new_session()
                logger.debug(f"Opened HTTP session for {self._config.base_url}")

        return self._session

    def _new_session(self) -> aiohttp.ClientSession:
        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=20,
            ttl_dns_cache=300,
        )

        # parameters travel in the query string; requests have no body
        headers = {
            "User-Agent": "perp-broker/1.0",
            "Accept": "application/json",
        }

        return aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            headers=headers,
        )

    async def close_session(self) -> None:
        """Close the session if one is open."""
        session, self._session = self._session, None
        if session is not None and not session.closed:
            await session.close()
            logger.debug("Closed HTTP session")

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        """Current session without creating one."""
        return self._session

    async def health_check(self) -> bool:
        """True when the unauthenticated server-time endpoint answers code 0."""
        if self._session is None or self._session.closed:
            return False

        try:
            async with self._session.get(
                f"{self._config.base_url}{ENDPOINT_SERVER_TIME}",
                timeout=aiohttp.ClientTimeout(total=HEALTH_CHECK_TIMEOUT),
            ) as response:
                if response.status != 200:
                    return False
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError) as e:
            logger.warning(f"Health check request failed: {e}")
            return False

        try:
            envelope = json.loads(body)
        except ValueError:
            return False
        return isinstance(envelope, dict) and envelope.get("code") == API_SUCCESS_CODE
