"""Configuration loading and command parameter bundles."""

from .config import (
    DeleteOrganisationParams,
    FileConfig,
    ForgejoInstanceConfig,
    MirrorFeatures,
    MirrorOrganisationParams,
    MirrorRepositoryParams,
    MirrorUserParams,
    MissingRequiredArgumentError,
    load_config,
    require,
)

__all__ = [
    'DeleteOrganisationParams',
    'FileConfig',
    'ForgejoInstanceConfig',
    'MirrorFeatures',
    'MirrorOrganisationParams',
    'MirrorRepositoryParams',
    'MirrorUserParams',
    'MissingRequiredArgumentError',
    'load_config',
    'require',
]
