"""Data models for GitHub entities."""

from .organization import OrganizationMappingError, OrganizationPair
from .repository import (
    MigrationOutcome,
    MigrationStatus,
    Repository,
    RepositoryCreate,
)

__all__ = [
    'OrganizationMappingError',
    'OrganizationPair',
    'MigrationOutcome',
    'MigrationStatus',
    'Repository',
    'RepositoryCreate',
]
