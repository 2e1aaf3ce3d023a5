"""Configuration management for forgejo-import."""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.forgejo import Visibility

PROJECT_NAME = 'forgejo_import'
CONFIG_FILE_STEM = 'forgejo_import.config'
CONFIG_FILE_EXTENSIONS = ('.json', '.yaml', '.yml')

DEFAULTABLE_SETTINGS = (
    'forgejo_url',
    'forgejo_token',
    'github_token',
    'migrate_wiki',
    'migrate_lfs',
)

VALID_LOG_LEVELS = ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']


class MissingRequiredArgumentError(ValueError):
    """A required setting was given neither on the CLI nor in the config file."""

    def __init__(self, argument: str):
        super().__init__(
            f"You didn't specify the argument {argument} in either the CLI or "
            'the config file. Please specify it in one of those places.'
        )
        self.argument = argument


class FileConfig(BaseModel):
    """Defaults read from a config file or the environment."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra='forbid'
    )

    forgejo_url: Optional[str] = Field(default=None, description='Forgejo URL')
    forgejo_token: Optional[str] = Field(default=None, description='Forgejo token')
    github_token: Optional[str] = Field(default=None, description='GitHub token')
    migrate_wiki: Optional[bool] = Field(default=None, description='Migrate wikis')
    migrate_lfs: Optional[bool] = Field(default=None, description='Migrate LFS')
    log_level: Optional[str] = Field(default=None, description='Log level')
    log_file: Optional[str] = Field(default=None, description='Log file path')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if v is None:
            return v
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'Log level must be one of: {VALID_LOG_LEVELS}')
        return v.upper()

    @classmethod
    def from_file(cls, config_path: str) -> 'FileConfig':
        """Load configuration from a JSON or YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            if config_file.suffix == '.json':
                config_data = json.load(f)
            else:
                config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'FileConfig':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'forgejo_url': os.getenv('FORGEJO_URL'),
            'forgejo_token': os.getenv('FORGEJO_TOKEN'),
            'github_token': os.getenv('GITHUB_TOKEN'),
            'migrate_wiki': _env_flag('MIGRATE_WIKI'),
            'migrate_lfs': _env_flag('MIGRATE_LFS'),
            'log_level': os.getenv('LOG_LEVEL'),
            'log_file': os.getenv('LOG_FILE'),
        }

        return cls(**{k: v for k, v in config_data.items() if v is not None})

    def merged_with(self, fallback: 'FileConfig') -> 'FileConfig':
        """Fill every unset value of this config from ``fallback``."""
        values = self.model_dump()
        for key, value in fallback.model_dump().items():
            if values.get(key) is None:
                values[key] = value
        return FileConfig(**values)

    def apply_to(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Fill unset command values from this config.

        Only keys present in ``values`` are considered, so a command that takes
        no GitHub token never receives one.

        Args:
            values: Command option values where None means "not given"

        Returns:
            A new dictionary with defaults applied
        """
        resolved = dict(values)
        for key in DEFAULTABLE_SETTINGS:
            if key in resolved and resolved[key] is None:
                resolved[key] = getattr(self, key)
        return resolved


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == '':
        return None
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def require(values: Dict[str, Any], names: Iterable[str]) -> None:
    """Raise for the first required setting that is still unset.

    Raises:
        MissingRequiredArgumentError: Naming the setting by its CLI flag
    """
    for name in names:
        if not values.get(name):
            raise MissingRequiredArgumentError(name.replace('_', '-'))


def candidate_config_paths() -> List[Path]:
    """Directories searched for a config file, in priority order."""
    directories = [Path.cwd()]

    if sys.platform == 'win32' and os.getenv('APPDATA'):
        directories.append(Path(os.environ['APPDATA']) / PROJECT_NAME)

    if os.getenv('XDG_CONFIG_HOME'):
        directories.append(Path(os.environ['XDG_CONFIG_HOME']) / PROJECT_NAME)

    home = Path.home()
    directories.append(home / '.config' / PROJECT_NAME)
    directories.append(home)

    return [
        directory / f'{CONFIG_FILE_STEM}{extension}'
        for directory in directories
        for extension in CONFIG_FILE_EXTENSIONS
    ]


def search_config_in_default_locations() -> Optional[Path]:
    """Find the first existing config file.

    Returns:
        Path of the config file, or None if there is none
    """
    for path in candidate_config_paths():
        if path.is_file():
            return path
    return None


def load_config(config_path: Optional[str] = None) -> FileConfig:
    """Load config file defaults, backed by the environment.

    Args:
        config_path: Explicit file; default locations are searched when omitted

    Returns:
        Resolved file configuration
    """
    if config_path is None:
        found = search_config_in_default_locations()
        config_path = str(found) if found else None

    env_config = FileConfig.from_env()
    if config_path is None:
        return env_config

    return FileConfig.from_file(config_path).merged_with(env_config)


class ForgejoInstanceConfig(BaseModel):
    """Connection settings of the destination Forgejo instance."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description='Forgejo instance URL')
    token: str = Field(..., description='Forgejo API token')

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate Forgejo URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')


class MirrorFeatures(BaseModel):
    """Optional content Forgejo migrates along with the git data."""

    model_config = ConfigDict(frozen=True)

    lfs: bool = False
    wiki: bool = False
    labels: bool = False
    issues: bool = False
    pull_requests: bool = False
    releases: bool = False
    milestones: bool = False


class MirrorOrganisationParams(BaseModel):
    """Inputs of the mirror-org command."""

    model_config = ConfigDict(frozen=True)

    forgejo: ForgejoInstanceConfig
    github_token: str
    github_organisation_name: str
    visibility: Visibility = Visibility.PUBLIC
    org_display_name: Optional[str] = None
    org_username: Optional[str] = None
    features: MirrorFeatures = Field(default_factory=MirrorFeatures)
    dry_run: bool = False


class MirrorUserParams(BaseModel):
    """Inputs of the mirror-user command."""

    model_config = ConfigDict(frozen=True)

    forgejo: ForgejoInstanceConfig
    github_token: str
    github_user_name: str
    visibility: Visibility = Visibility.PUBLIC
    output_organisation_name: Optional[str] = None
    features: MirrorFeatures = Field(default_factory=MirrorFeatures)
    dry_run: bool = False


class MirrorRepositoryParams(BaseModel):
    """Inputs of the mirror-repo command."""

    model_config = ConfigDict(frozen=True)

    forgejo: ForgejoInstanceConfig
    github_token: str
    github_repository_url: str
    output_owner: str
    output_repository_name: Optional[str] = None
    private: bool = False
    features: MirrorFeatures = Field(default_factory=MirrorFeatures)
    dry_run: bool = False


class DeleteOrganisationParams(BaseModel):
    """Inputs of the delete-org command."""

    model_config = ConfigDict(frozen=True)

    forgejo: ForgejoInstanceConfig
    forgejo_organisation_name: str
    dry_run: bool = False


def create_template(output_path: str) -> None:
    """Write a configuration template file.

    The file is JSON when ``output_path`` ends in ``.json``, YAML otherwise.
    """
    template_config = {
        'forgejoUrl': 'https://forgejo.example.com',
        'forgejoToken': 'your-forgejo-access-token',
        'githubToken': 'your-github-personal-access-token',
        'migrateWiki': False,
        'migrateLfs': False,
        'logLevel': 'INFO',
    }

    config_file = Path(output_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, 'w', encoding='utf-8') as f:
        if config_file.suffix == '.json':
            json.dump(template_config, f, indent=2)
        else:
            yaml.dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )
