"""Shared API client behaviour."""

from typing import Optional, Type
from urllib.parse import urljoin

import aiohttp
from loguru import logger

from .exceptions import AuthenticationError, UnexpectedStatusError
from .executor import APIResponse, RequestExecutor
from .rate_limiter import RateLimiter

USER_AGENT = 'forgejo-import/0.1.0'


class BaseAPIClient:
    """API client bound to one upstream, one executor and fixed headers.

    Subclasses set the throttle, timeout and authorization scheme. Calls go
    through either ``_request``, which requires a 2xx status, or ``_probe``,
    which treats 404 as "absent".
    """

    rate_limit_requests: int = 10
    rate_limit_period: float = 10.0
    timeout: Optional[float] = None
    auth_scheme: str = 'Bearer'
    error_class: Type[UnexpectedStatusError] = UnexpectedStatusError

    def __init__(
        self,
        base_url: str,
        token: str,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize API client.

        Args:
            base_url: Root URL that endpoints are resolved against
            token: Access token for the upstream
            session: Optional transport, mainly for tests
        """
        if not token:
            raise AuthenticationError(
                f'No authentication token provided for {self.__class__.__name__}'
            )

        self.base_url = base_url.rstrip('/')
        self.executor = RequestExecutor(
            headers={
                'User-Agent': USER_AGENT,
                'Accept': 'application/json',
                'Authorization': f'{self.auth_scheme} {token}',
            },
            rate_limiter=RateLimiter(self.rate_limit_requests, self.rate_limit_period),
            timeout=self.timeout,
            session=session,
        )
        self.logger = logger.bind(component=self.__class__.__name__)

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Absolute URLs are returned unchanged.

        Args:
            endpoint: API endpoint path or absolute URL

        Returns:
            Full URL
        """
        if endpoint.startswith(('http://', 'https://')):
            return endpoint
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: APIResponse) -> APIResponse:
        """Require a success status.

        Raises:
            UnexpectedStatusError: For any non-2xx status, 404 included
        """
        if not response.success:
            raise self.error_class(response.status_code, response.text)
        return response

    def _handle_probe_response(self, response: APIResponse) -> bool:
        """Interpret an existence probe.

        Returns:
            True for 2xx, False for 404

        Raises:
            UnexpectedStatusError: For any other status
        """
        if response.status_code == 404:
            return False
        return self._handle_response(response).success

    async def _request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        response = await self.executor.execute(
            method, self._build_url(endpoint), **kwargs
        )
        return self._handle_response(response)

    async def _probe(self, endpoint: str) -> bool:
        response = await self.executor.execute('GET', self._build_url(endpoint))
        exists = self._handle_probe_response(response)
        self.logger.debug(f'Probe {endpoint}: exists={exists}')
        return exists

    async def close(self) -> None:
        """Close the client session."""
        await self.executor.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
