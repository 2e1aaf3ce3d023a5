"""Mirror orchestrator: idempotent GitHub to Forgejo mirroring."""

import re
from typing import Iterable, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from ..api.exceptions import APIError
from ..api.forgejo import ForgejoClient
from ..api.github import GitHubClient
from ..config.config import (
    DeleteOrganisationParams,
    MirrorFeatures,
    MirrorOrganisationParams,
    MirrorRepositoryParams,
    MirrorUserParams,
)
from ..models.forgejo import (
    CreateOrganisationRequest,
    MigrateRepoService,
    MigrateRepositoryRequest,
    Visibility,
)
from ..models.github import GitHubOwner, GitHubRepository

MIRROR_PREFIX = '[MIRROR] '

REPOSITORY_URL_PATTERN = re.compile(
    r'(?:git@|https://)github\.com[:/]'
    r'(?P<owner>[^/\s]+)/(?P<name>[^/\s?#]+?)(?:\.git)?(?:[/?#].*)?$'
)


class InvalidRepositoryURLError(ValueError):
    """A repository URL does not point at a GitHub repository."""

    def __init__(self, url: str):
        super().__init__(
            f'Not a GitHub repository URL: {url!r} '
            '(expected https://github.com/<owner>/<name> or '
            'git@github.com:<owner>/<name>.git)'
        )
        self.url = url


class MirrorSummary(BaseModel):
    """Outcome of one command."""

    owner: str = Field(..., description='Destination owner')
    created_owner: bool = Field(default=False, description='Owner was created')
    mirrored: List[str] = Field(
        default_factory=list, description='Repositories migrated'
    )
    skipped: List[str] = Field(
        default_factory=list, description='Repositories that already existed'
    )
    deleted: List[str] = Field(default_factory=list, description='Repositories deleted')
    deleted_owner: bool = Field(default=False, description='Owner was deleted')
    dry_run: bool = Field(default=False, description='No changes were made')


def parse_repository_url(url: str) -> Tuple[str, str]:
    """Extract owner and repository name from a GitHub URL.

    Raises:
        InvalidRepositoryURLError: If the URL is not a GitHub repository URL
    """
    match = REPOSITORY_URL_PATTERN.search(url.strip())
    if match is None:
        raise InvalidRepositoryURLError(url)
    return match.group('owner'), match.group('name')


def mirror_description(description: Optional[str]) -> str:
    return f'{MIRROR_PREFIX}{description or ""}'


def owner_description(owner: GitHubOwner) -> str:
    description = f'Mirror of {owner.html_url or owner.login}'
    if owner.about:
        description += f'\n\n{owner.about}'
    return description


def build_organisation_request(
    owner: GitHubOwner,
    username: str,
    display_name: Optional[str],
    visibility: Visibility,
) -> CreateOrganisationRequest:
    """Build the creation payload for a destination organisation.

    ``full_name`` is only sent when it differs from ``username``.
    """
    full_name = display_name if display_name and display_name != username else None

    return CreateOrganisationRequest(
        username=username,
        full_name=full_name,
        description=owner_description(owner),
        website=owner.blog or None,
        visibility=visibility,
        repo_admin_change_team_access=False,
    )


def build_base_request(
    auth_token: str,
    repo_owner: str,
    features: MirrorFeatures,
    private: bool,
) -> MigrateRepositoryRequest:
    """Template shared by every repository of one run."""
    return MigrateRepositoryRequest(
        auth_token=auth_token,
        clone_addr='',
        repo_name='',
        repo_owner=repo_owner,
        description=None,
        service=MigrateRepoService.GITHUB,
        mirror=True,
        private=private,
        **features.model_dump(),
    )


def build_migration_request(
    base: MigrateRepositoryRequest,
    repo: GitHubRepository,
    repo_name: Optional[str] = None,
) -> MigrateRepositoryRequest:
    return base.model_copy(
        update={
            'repo_name': repo_name or repo.name,
            'clone_addr': repo.clone_url,
            'description': mirror_description(repo.description),
        }
    )


class MirrorOrchestrator:
    """Runs mirror and delete commands against one GitHub and one Forgejo client.

    Repositories are handled strictly one after another; the destination
    existence probe is the only idempotency guard.
    """

    def __init__(
        self,
        github: Optional[GitHubClient],
        forgejo: ForgejoClient,
        dry_run: bool = False,
    ):
        """Initialize mirror orchestrator.

        Args:
            github: Source client, may be None for delete-only use
            forgejo: Destination client
            dry_run: Probe and read, but make no changes on Forgejo
        """
        self.github = github
        self.forgejo = forgejo
        self.dry_run = dry_run
        self.logger = logger.bind(component='MirrorOrchestrator')

    async def mirror_organisation(
        self, params: MirrorOrganisationParams
    ) -> MirrorSummary:
        gh_org = await self.github.get_organisation(params.github_organisation_name)

        owner = params.org_username or gh_org.login
        display_name = params.org_display_name or gh_org.name

        created = await self._ensure_organisation(
            gh_org, owner, display_name, params.visibility
        )

        self.logger.debug(f'Fetching repositories of organisation: {gh_org.display_name}')
        repos = await self.github.get_repositories_of_org(gh_org.login)

        base = build_base_request(
            params.github_token,
            owner,
            params.features,
            private=params.visibility == Visibility.PRIVATE,
        )
        mirrored, skipped = await self._create_migrations_if_not_exist(
            owner, base, repos
        )

        return MirrorSummary(
            owner=owner,
            created_owner=created,
            mirrored=mirrored,
            skipped=skipped,
            dry_run=self.dry_run,
        )

    async def mirror_user(self, params: MirrorUserParams) -> MirrorSummary:
        gh_user = await self.github.get_user(params.github_user_name)

        owner = params.output_organisation_name or gh_user.login

        created = await self._ensure_organisation(
            gh_user, owner, gh_user.name, params.visibility
        )

        self.logger.debug(f'Fetching repositories of user: {gh_user.display_name}')
        repos = await self.github.get_repositories_of_user(gh_user.login)

        base = build_base_request(
            params.github_token,
            owner,
            params.features,
            private=params.visibility == Visibility.PRIVATE,
        )
        mirrored, skipped = await self._create_migrations_if_not_exist(
            owner, base, repos
        )

        return MirrorSummary(
            owner=owner,
            created_owner=created,
            mirrored=mirrored,
            skipped=skipped,
            dry_run=self.dry_run,
        )

    async def mirror_repository(self, params: MirrorRepositoryParams) -> MirrorSummary:
        source_owner, source_name = parse_repository_url(params.github_repository_url)

        self.logger.debug(f'Fetching repository: {source_owner}/{source_name}')
        repo = await self.github.get_repository(source_owner, source_name)

        base = build_base_request(
            params.github_token,
            params.output_owner,
            params.features,
            private=params.private,
        )
        request = build_migration_request(base, repo, params.output_repository_name)

        mirrored = await self._create_migration_if_not_exist(
            params.output_owner, request
        )

        return MirrorSummary(
            owner=params.output_owner,
            mirrored=[request.repo_name] if mirrored else [],
            skipped=[] if mirrored else [request.repo_name],
            dry_run=self.dry_run,
        )

    async def delete_organisation(
        self, params: DeleteOrganisationParams
    ) -> MirrorSummary:
        """Delete every repository of an organisation, then the organisation.

        Forgejo refuses to delete an organisation that still owns repositories.
        """
        name = params.forgejo_organisation_name
        repos = await self.forgejo.get_organisation_repositories(name)

        deleted = []
        for repo in repos:
            if self.dry_run:
                self.logger.info(f'[dry run] Would delete repository: {name}/{repo.name}')
            else:
                await self.forgejo.delete_repository(name, repo.name)
                self.logger.info(f'Deleted repository: {name}/{repo.name}')
            deleted.append(repo.name)

        if self.dry_run:
            self.logger.info(f'[dry run] Would delete organisation: {name}')
        else:
            await self.forgejo.delete_organisation(name)
            self.logger.info(f'Deleted organisation: {name}')

        return MirrorSummary(
            owner=name, deleted=deleted, deleted_owner=True, dry_run=self.dry_run
        )

    async def _ensure_organisation(
        self,
        source: GitHubOwner,
        owner: str,
        display_name: Optional[str],
        visibility: Visibility,
    ) -> bool:
        """Create and brand the destination organisation if it is missing.

        Returns:
            True if the organisation was (or, in a dry run, would be) created
        """
        exists = await self.forgejo.organisation_exists(owner)
        self.logger.debug(f'Organisation {owner} exists: {exists}')

        if exists:
            return False

        request = build_organisation_request(source, owner, display_name, visibility)

        if self.dry_run:
            self.logger.info(f'[dry run] Would create organisation: {owner}')
            return True

        await self.forgejo.create_organisation(request)
        self.logger.info(f'Created organisation: {owner}')

        await self._set_avatar(source, owner)
        return True

    async def _set_avatar(self, source: GitHubOwner, owner: str) -> None:
        if not source.avatar_url:
            self.logger.warning(f'{source.login} has no avatar, not setting one for {owner}')
            return

        try:
            avatar = await self.github.get_avatar(source)

            self.logger.debug(f'Setting avatar for organisation: {owner}')
            await self.forgejo.set_organisation_avatar(owner, avatar)
        except APIError as e:
            self.logger.warning(f'Could not set avatar for organisation {owner}: {e}')
            return

        self.logger.info(f'Updated avatar for organisation: {owner}')

    async def _create_migrations_if_not_exist(
        self,
        owner: str,
        base: MigrateRepositoryRequest,
        repos: Iterable[GitHubRepository],
    ) -> Tuple[List[str], List[str]]:
        mirrored = []
        skipped = []

        for repo in repos:
            request = build_migration_request(base, repo)

            if await self._create_migration_if_not_exist(owner, request):
                mirrored.append(request.repo_name)
            else:
                skipped.append(request.repo_name)

        return mirrored, skipped

    async def _create_migration_if_not_exist(
        self, owner: str, request: MigrateRepositoryRequest
    ) -> bool:
        """Migrate one repository unless it already exists on Forgejo.

        Returns:
            False if the repository was skipped
        """
        if await self.forgejo.repository_exists(owner, request.repo_name):
            self.logger.warning(
                f'Repository already exists: {owner}/{request.repo_name}, skipping'
            )
            return False

        if self.dry_run:
            self.logger.info(
                f'[dry run] Would mirror {request.clone_addr} to {owner}/{request.repo_name}'
            )
            return True

        self.logger.debug(f'Migrating repository: {request.repo_name}')
        await self.forgejo.mirror_repository(request)
        self.logger.info(f'Repository mirrored: {owner}/{request.repo_name}')

        return True
