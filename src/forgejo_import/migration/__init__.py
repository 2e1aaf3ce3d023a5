"""Mirror orchestration and command entry points."""

from .engine import (
    ClientFactory,
    delete_organisation,
    mirror_organisation,
    mirror_repository,
    mirror_user,
)
from .orchestrator import (
    InvalidRepositoryURLError,
    MirrorOrchestrator,
    MirrorSummary,
    parse_repository_url,
)

__all__ = [
    'ClientFactory',
    'InvalidRepositoryURLError',
    'MirrorOrchestrator',
    'MirrorSummary',
    'delete_organisation',
    'mirror_organisation',
    'mirror_repository',
    'mirror_user',
    'parse_repository_url',
]
