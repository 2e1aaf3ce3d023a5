"""Forgejo import API exceptions."""

from typing import Optional


class APIError(Exception):
    """Base exception for upstream API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ):
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_text: Raw response body
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class UnexpectedStatusError(APIError):
    """An upstream answered with a non-success status code."""

    service = 'Upstream'

    def __init__(self, status_code: int, response_text: str):
        super().__init__(
            f'{self.service} API returned {status_code} '
            f'with error message: {response_text}',
            status_code=status_code,
            response_text=response_text,
        )


class GitHubAPIError(UnexpectedStatusError):
    """Non-success status from the GitHub API."""

    service = 'GitHub'


class ForgejoAPIError(UnexpectedStatusError):
    """Non-success status from the Forgejo API."""

    service = 'Forgejo'


class TransportError(APIError):
    """The request could not be delivered or the response could not be read."""

    pass


class RequestTimeoutError(APIError):
    """The upstream did not finish the request within the allowed time."""

    def __init__(self, message: str, timeout: Optional[float] = None, **kwargs):
        """Initialize timeout error.

        Args:
            message: Error message
            timeout: The ceiling, in seconds, that expired
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.timeout = timeout


class AuthenticationError(APIError):
    """No usable credential was provided for an API client."""

    pass
