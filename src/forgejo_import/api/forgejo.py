"""Forgejo API client (mirror destination)."""

import base64
from typing import List, Optional

import aiohttp

from ..config.config import ForgejoInstanceConfig
from ..models.forgejo import (
    CreateOrganisationRequest,
    ForgejoRepository,
    MigrateRepositoryRequest,
    UpdateAvatarRequest,
)
from .client import BaseAPIClient
from .exceptions import ForgejoAPIError
from .pagination import fetch_all

API_VERSION = '1'


class ForgejoClient(BaseAPIClient):
    """Client for organisation and repository management on Forgejo.

    Migrations clone the source repository synchronously on the server, so the
    per-request ceiling is generous.
    """

    rate_limit_requests = 15
    rate_limit_period = 5.0
    timeout = 300.0
    auth_scheme = 'token'
    error_class = ForgejoAPIError

    def __init__(
        self,
        config: ForgejoInstanceConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize Forgejo client.

        Args:
            config: Forgejo instance configuration
            session: Optional transport, mainly for tests
        """
        super().__init__(
            f'{config.url.rstrip("/")}/api/v{API_VERSION}', config.token, session=session
        )
        self.config = config

    async def create_organisation(self, request: CreateOrganisationRequest) -> None:
        await self._request('POST', '/orgs', json=request.model_dump(mode='json'))

    async def organisation_exists(self, name: str) -> bool:
        return await self._probe(f'/orgs/{name}')

    async def set_organisation_avatar(self, name: str, avatar: bytes) -> None:
        """Upload an organisation avatar.

        Args:
            name: Organisation username
            avatar: Raw image bytes, sent base64 encoded
        """
        body = UpdateAvatarRequest(image=base64.b64encode(avatar).decode('ascii'))
        await self._request('POST', f'/orgs/{name}/avatar', json=body.model_dump())

    async def delete_organisation(self, name: str) -> None:
        await self._request('DELETE', f'/orgs/{name}')

    async def get_organisation_repositories(self, name: str) -> List[ForgejoRepository]:
        endpoint = f'/orgs/{name}/repos'

        async def fetch_page(page: int, per_page: int) -> List[ForgejoRepository]:
            response = await self._request(
                'GET', endpoint, params={'page': page, 'per_page': per_page}
            )
            return [ForgejoRepository.model_validate(item) for item in response.data()]

        repos = await fetch_all(fetch_page)
        self.logger.info(f'Retrieved {len(repos)} repositories from {endpoint}')
        return repos

    async def mirror_repository(self, request: MigrateRepositoryRequest) -> None:
        await self._request(
            'POST', '/repos/migrate', json=request.model_dump(mode='json')
        )

    async def repository_exists(self, owner: str, name: str) -> bool:
        return await self._probe(f'/repos/{owner}/{name}')

    async def delete_repository(self, owner: str, name: str) -> None:
        await self._request('DELETE', f'/repos/{owner}/{name}')
