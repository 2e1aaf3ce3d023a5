"""HTTP layer shared by the GitHub and Forgejo clients."""

from .exceptions import (
    APIError,
    AuthenticationError,
    ForgejoAPIError,
    GitHubAPIError,
    RequestTimeoutError,
    TransportError,
    UnexpectedStatusError,
)
from .executor import APIResponse, RequestExecutor
from .forgejo import ForgejoClient
from .github import GitHubClient
from .pagination import fetch_all
from .rate_limiter import RateLimiter

__all__ = [
    'APIError',
    'APIResponse',
    'AuthenticationError',
    'ForgejoAPIError',
    'ForgejoClient',
    'GitHubAPIError',
    'GitHubClient',
    'RateLimiter',
    'RequestExecutor',
    'RequestTimeoutError',
    'TransportError',
    'UnexpectedStatusError',
    'fetch_all',
]
