"""Data models for GitHub and Forgejo entities."""

from .forgejo import (
    CreateOrganisationRequest,
    ForgejoRepository,
    MigrateRepoService,
    MigrateRepositoryRequest,
    UpdateAvatarRequest,
    Visibility,
)
from .github import GitHubOwner, GitHubRepository

__all__ = [
    'GitHubOwner',
    'GitHubRepository',
    'CreateOrganisationRequest',
    'ForgejoRepository',
    'MigrateRepoService',
    'MigrateRepositoryRequest',
    'UpdateAvatarRequest',
    'Visibility',
]
