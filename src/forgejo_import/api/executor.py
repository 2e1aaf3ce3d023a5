"""Rate limited, timeout bounded request execution."""

import asyncio
import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import aiohttp
from loguru import logger
from pydantic import BaseModel

from .exceptions import RequestTimeoutError, TransportError
from .rate_limiter import RateLimiter


class APIResponse(BaseModel):
    """A completed HTTP exchange, body fully read."""

    status_code: int
    headers: Dict[str, str]
    content: bytes = b''
    success: bool

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    def data(self) -> Any:
        """Decode the body as JSON.

        Returns:
            Parsed JSON, or None for an empty body
        """
        if not self.content:
            return None
        return json.loads(self.content)


class RequestExecutor:
    """Sole gateway for outbound calls of one API client.

    Every request waits on the rate limiter, carries the fixed headers given
    at construction and, when ``timeout`` is set, must complete (including
    reading the body) within that many seconds.
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        rate_limiter: RateLimiter,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize request executor.

        Args:
            headers: Headers sent with every request
            rate_limiter: Throttle shared by all requests of this executor
            timeout: Ceiling in seconds for a single request, None for unbounded
            session: Transport to use; created lazily when omitted
        """
        self._headers = MappingProxyType(dict(headers))
        self.rate_limiter = rate_limiter
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            # The executor enforces its own ceiling, so aiohttp's default is off.
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None)
            )
        return self._session

    async def execute(self, method: str, url: str, **kwargs) -> APIResponse:
        """Send a request through the throttle.

        Args:
            method: HTTP method
            url: Absolute URL
            **kwargs: Additional arguments for ``aiohttp.ClientSession.request``

        Returns:
            The completed response, whatever its status

        Raises:
            RequestTimeoutError: If the request exceeded the timeout
            TransportError: If the request could not be completed
        """
        if not self.rate_limiter.can_proceed():
            wait = self.rate_limiter.time_until_next_request()
            logger.debug(f'Rate limit reached, waiting {wait:.2f}s before {method} {url}')

        await self.rate_limiter.acquire()

        logger.debug(f'{method} {url}')

        try:
            if self.timeout is None:
                return await self._send(method, url, **kwargs)
            return await asyncio.wait_for(
                self._send(method, url, **kwargs), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise RequestTimeoutError(
                f'{method} {url} did not complete within {self.timeout} seconds',
                timeout=self.timeout,
            )
        except aiohttp.ClientError as e:
            logger.error(f'Network error during {method} request to {url}: {e}')
            raise TransportError(f'Network error: {e}')

    async def _send(self, method: str, url: str, **kwargs) -> APIResponse:
        session = self._get_session()

        async with session.request(
            method, url, headers=dict(self._headers), **kwargs
        ) as response:
            content = await response.read()

            return APIResponse(
                status_code=response.status,
                headers=dict(response.headers),
                content=content,
                success=200 <= response.status < 300,
            )

    async def close(self) -> None:
        """Close the transport if this executor created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None
