"""GitHub API client (mirror source)."""

from typing import List, Optional

import aiohttp

from ..models.github import GitHubOwner, GitHubRepository
from .client import BaseAPIClient
from .exceptions import GitHubAPIError
from .pagination import fetch_all

API_URL = 'https://api.github.com'


class GitHubClient(BaseAPIClient):
    """Read-only client for users, organisations and their repositories."""

    rate_limit_requests = 10
    rate_limit_period = 10.0
    timeout = None
    auth_scheme = 'Bearer'
    error_class = GitHubAPIError

    def __init__(
        self,
        token: str,
        api_url: str = API_URL,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(api_url, token, session=session)

    async def get_user(self, name: str) -> GitHubOwner:
        response = await self._request('GET', f'/users/{name}')
        return GitHubOwner.model_validate(response.data())

    async def get_organisation(self, name: str) -> GitHubOwner:
        response = await self._request('GET', f'/orgs/{name}')
        return GitHubOwner.model_validate(response.data())

    async def get_avatar(self, owner: GitHubOwner) -> bytes:
        """Download the avatar image of an already fetched owner.

        Args:
            owner: User or organisation carrying ``avatar_url``

        Returns:
            Raw image bytes
        """
        if not owner.avatar_url:
            raise ValueError(f'{owner.login} has no avatar URL')

        response = await self._request('GET', owner.avatar_url)
        return response.content

    async def get_repositories_of_user(self, name: str) -> List[GitHubRepository]:
        return await self._list_repositories(f'/users/{name}/repos')

    async def get_repositories_of_org(self, name: str) -> List[GitHubRepository]:
        return await self._list_repositories(f'/orgs/{name}/repos')

    async def get_repository(self, owner: str, name: str) -> GitHubRepository:
        response = await self._request('GET', f'/repos/{owner}/{name}')
        return GitHubRepository.model_validate(response.data())

    async def _list_repositories(self, endpoint: str) -> List[GitHubRepository]:
        """List every repository behind a paginated endpoint, smallest first."""

        async def fetch_page(page: int, per_page: int) -> List[GitHubRepository]:
            response = await self._request(
                'GET', endpoint, params={'page': page, 'per_page': per_page}
            )
            return [GitHubRepository.model_validate(item) for item in response.data()]

        repos = await fetch_all(fetch_page)
        self.logger.info(f'Retrieved {len(repos)} repositories from {endpoint}')

        return sorted(repos, key=lambda repo: repo.size)
