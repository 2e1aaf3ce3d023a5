"""Forgejo request and entity models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Visibility(str, Enum):
    """Forgejo organisation visibility."""

    PUBLIC = 'public'
    LIMITED = 'limited'
    PRIVATE = 'private'


class MigrateRepoService(str, Enum):
    """Services Forgejo can migrate from."""

    GIT = 'git'
    GITHUB = 'github'
    GITEA = 'gitea'
    GITLAB = 'gitlab'
    GOGS = 'gogs'
    ONEDEV = 'onedev'
    GITBUCKET = 'gitbucket'
    CODEBASE = 'codebase'


class CreateOrganisationRequest(BaseModel):
    """Body of ``POST /orgs``."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., description='Organisation username')
    full_name: Optional[str] = Field(default=None, description='Display name')
    description: Optional[str] = Field(default=None, description='Description')
    email: Optional[str] = Field(default=None, description='Contact email')
    location: Optional[str] = Field(default=None, description='Location')
    website: Optional[str] = Field(default=None, description='Website')
    visibility: Optional[Visibility] = Field(default=None, description='Visibility')
    repo_admin_change_team_access: Optional[bool] = Field(
        default=False, description='Repository admins may change team access'
    )


class MigrateRepositoryRequest(BaseModel):
    """Body of ``POST /repos/migrate``."""

    model_config = ConfigDict(frozen=True)

    auth_token: str = Field(..., description='Token Forgejo uses to clone')
    clone_addr: str = Field(..., description='Source clone address')
    repo_name: str = Field(..., description='Destination repository name')
    repo_owner: str = Field(..., description='Destination owner')
    description: Optional[str] = Field(default=None, description='Description')
    service: MigrateRepoService = Field(default=MigrateRepoService.GITHUB)
    mirror: bool = Field(default=True, description='Keep syncing from source')
    mirror_interval: Optional[str] = Field(default=None)
    private: bool = Field(default=False)
    issues: bool = Field(default=False)
    labels: bool = Field(default=False)
    lfs: bool = Field(default=False)
    lfs_endpoint: Optional[str] = Field(default=None)
    milestones: bool = Field(default=False)
    pull_requests: bool = Field(default=False)
    releases: bool = Field(default=False)
    wiki: bool = Field(default=False)


class UpdateAvatarRequest(BaseModel):
    """Body of ``POST /orgs/{name}/avatar``."""

    image: str = Field(..., description='Base64 encoded image')


class ForgejoOwner(BaseModel):
    """Owner as embedded in Forgejo repository payloads."""

    model_config = ConfigDict(frozen=True)

    login: str
    full_name: Optional[str] = None


class ForgejoRepository(BaseModel):
    """Repository as listed by Forgejo."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description='Repository name')
    full_name: Optional[str] = Field(default=None, description='owner/name')
    owner: Optional[ForgejoOwner] = Field(default=None, description='Owner')
    size: int = Field(default=0, description='Size in kilobytes')
    mirror: bool = Field(default=False, description='Repository is a mirror')
    private: bool = Field(default=False, description='Private repository')
