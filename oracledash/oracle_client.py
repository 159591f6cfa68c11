"""
Oracle HTTP client.

Fetches the raw price payload with a single GET. No parameters, headers
or authentication are sent, and nothing is retried here: the refresh
schedule is the retry.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp
import orjson

from .errors import TransportFailure

logger = logging.getLogger(__name__)


class OracleClient:
    """Client for the price oracle endpoint."""

    DEFAULT_URL = "https://ai-price-oracle.onrender.com/price"

    def __init__(self, url: str = DEFAULT_URL, timeout_s: float = 5.0):
        """
        Initialize the client.

        Args:
            url: Oracle endpoint returning a JSON array of records
            timeout_s: Total request timeout
        """
        self.url = url
        self.timeout_s = timeout_s
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "OracleClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self) -> Any:
        """
        Fetch and decode the latest payload.

        Returns:
            Decoded JSON body (shape is checked by the normalizer)

        Raises:
            TransportFailure: on network error, timeout, non-2xx or bad JSON
        """
        session = await self._get_session()

        try:
            async with session.get(self.url) as resp:
                if not 200 <= resp.status < 300:
                    raise TransportFailure(f"HTTP {resp.status} from {self.url}")
                body = await resp.read()
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"Timed out after {self.timeout_s}s fetching {self.url}") from e
        except aiohttp.ClientError as e:
            raise TransportFailure(f"Request to {self.url} failed: {e}") from e

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise TransportFailure(f"Invalid JSON from {self.url}: {e}") from e
