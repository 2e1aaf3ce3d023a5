"""Migration engine - one entry point per command."""

from typing import Optional

import aiohttp
from loguru import logger

from ..api.forgejo import ForgejoClient
from ..api.github import GitHubClient
from ..config.config import (
    DeleteOrganisationParams,
    ForgejoInstanceConfig,
    MirrorOrganisationParams,
    MirrorRepositoryParams,
    MirrorUserParams,
)
from .orchestrator import MirrorOrchestrator, MirrorSummary


class ClientFactory:
    """Factory for creating the upstream API clients."""

    @staticmethod
    def create_github_client(
        token: str, session: Optional[aiohttp.ClientSession] = None
    ) -> GitHubClient:
        return GitHubClient(token, session=session)

    @staticmethod
    def create_forgejo_client(
        config: ForgejoInstanceConfig, session: Optional[aiohttp.ClientSession] = None
    ) -> ForgejoClient:
        return ForgejoClient(config, session=session)


async def mirror_organisation(params: MirrorOrganisationParams) -> MirrorSummary:
    """Mirror a GitHub organisation and all its repositories to Forgejo."""
    logger.info(f'Mirroring GitHub organisation {params.github_organisation_name}')

    async with ClientFactory.create_github_client(
        params.github_token
    ) as github, ClientFactory.create_forgejo_client(params.forgejo) as forgejo:
        orchestrator = MirrorOrchestrator(github, forgejo, dry_run=params.dry_run)
        return await orchestrator.mirror_organisation(params)


async def mirror_user(params: MirrorUserParams) -> MirrorSummary:
    """Mirror a GitHub user's repositories into a Forgejo organisation."""
    logger.info(f'Mirroring GitHub user {params.github_user_name}')

    async with ClientFactory.create_github_client(
        params.github_token
    ) as github, ClientFactory.create_forgejo_client(params.forgejo) as forgejo:
        orchestrator = MirrorOrchestrator(github, forgejo, dry_run=params.dry_run)
        return await orchestrator.mirror_user(params)


async def mirror_repository(params: MirrorRepositoryParams) -> MirrorSummary:
    """Mirror a single GitHub repository to a Forgejo owner."""
    logger.info(f'Mirroring GitHub repository {params.github_repository_url}')

    async with ClientFactory.create_github_client(
        params.github_token
    ) as github, ClientFactory.create_forgejo_client(params.forgejo) as forgejo:
        orchestrator = MirrorOrchestrator(github, forgejo, dry_run=params.dry_run)
        return await orchestrator.mirror_repository(params)


async def delete_organisation(params: DeleteOrganisationParams) -> MirrorSummary:
    """Delete a Forgejo organisation including all of its repositories."""
    logger.info(f'Deleting Forgejo organisation {params.forgejo_organisation_name}')

    async with ClientFactory.create_forgejo_client(params.forgejo) as forgejo:
        orchestrator = MirrorOrchestrator(None, forgejo, dry_run=params.dry_run)
        return await orchestrator.delete_organisation(params)
