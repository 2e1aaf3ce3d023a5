"""GitHub entity models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GitHubOwner(BaseModel):
    """GitHub user or organisation."""

    model_config = ConfigDict(frozen=True)

    login: str = Field(..., description='Username or organisation login')
    name: Optional[str] = Field(default=None, description='Display name')
    html_url: Optional[str] = Field(default=None, description='Profile URL')
    description: Optional[str] = Field(
        default=None, description='Organisation description'
    )
    bio: Optional[str] = Field(default=None, description='User bio')
    avatar_url: Optional[str] = Field(default=None, description='Avatar URL')
    blog: Optional[str] = Field(default=None, description='Website')

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @property
    def about(self) -> str:
        """Organisation description or user bio, empty if neither is set."""
        return self.description or self.bio or ''


class GitHubRepository(BaseModel):
    """GitHub repository snapshot."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description='Repository name')
    clone_url: str = Field(..., description='HTTPS clone URL')
    html_url: Optional[str] = Field(default=None, description='Web URL')
    description: Optional[str] = Field(default=None, description='Description')
    size: int = Field(default=0, description='Size in kilobytes')
    private: bool = Field(default=False, description='Private repository')
    owner: Optional[GitHubOwner] = Field(default=None, description='Owner')
