"""Migration engine and components."""

from .context import MigrationContext
from .verifier import OrganizationVerifier
from .enumerator import RepositoryEnumerator
from .migrator import RepositoryMigrator
from .orchestrator import MigrationOrchestrator, MigrationSummary, RunState
from .engine import MigrationEngine

__all__ = [
    'MigrationContext',
    'OrganizationVerifier',
    'RepositoryEnumerator',
    'RepositoryMigrator',
    'MigrationOrchestrator',
    'MigrationSummary',
    'RunState',
    'MigrationEngine',
]
