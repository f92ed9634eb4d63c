"""Migration orchestrator for mirroring organization pairs."""

import time
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..api.exceptions import GitHubAPIError
from ..git.executor import GitNotFoundError
from ..git.operations import GitOperations
from ..models.organization import OrganizationPair
from ..models.repository import MigrationOutcome, MigrationStatus, Repository
from .context import MigrationContext
from .enumerator import RepositoryEnumerator
from .migrator import RepositoryMigrator
from .verifier import OrganizationVerifier

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_VERIFICATION_FAILED = 3
EXIT_GIT_NOT_FOUND = 4

ProgressCallback = Callable[[OrganizationPair, Repository, int, int], None]


class RunState(str, Enum):
    """Lifecycle of one mirroring run."""

    INIT = 'init'
    VERIFYING = 'verifying'
    ABORTED = 'aborted'
    MIGRATING = 'migrating'
    SUMMARIZING = 'summarizing'
    SUCCESS = 'success'
    PARTIAL_FAILURE = 'partial_failure'


class MigrationSummary(BaseModel):
    """Summary of a mirroring run."""

    state: RunState = Field(default=RunState.INIT, description='Final run state')
    dry_run: bool = Field(default=False, description='Run was a dry run')

    total: int = Field(default=0, description='Repositories processed')
    succeeded: int = Field(default=0, description='Repositories mirrored')
    failed: int = Field(default=0, description='Repositories that failed')
    skipped: int = Field(default=0, description='Repositories only planned (dry run)')

    organizations_processed: int = Field(default=0)
    organizations_skipped: int = Field(default=0)

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    outcomes: List[MigrationOutcome] = Field(default_factory=list)

    def record(self, outcome: MigrationOutcome) -> None:
        """Add one repository outcome to the counters."""
        self.outcomes.append(outcome)
        self.total += 1
        if outcome.status == MigrationStatus.SUCCESS:
            self.succeeded += 1
        elif outcome.status == MigrationStatus.FAILED:
            self.failed += 1
        else:
            self.skipped += 1

    @property
    def failures(self) -> List[MigrationOutcome]:
        return [o for o in self.outcomes if o.status == MigrationStatus.FAILED]

    @property
    def exit_code(self) -> int:
        """Process exit code for this run.

        Repository failures are reported through the counters only; the run
        itself fails only when it was aborted before migrating.
        """
        if self.state == RunState.ABORTED:
            return EXIT_VERIFICATION_FAILED
        return EXIT_SUCCESS


class MigrationOrchestrator:
    """Verifies organizations, then mirrors every repository of every pair."""

    def __init__(self, context: MigrationContext, git_operations: GitOperations):
        """Initialize migration orchestrator.

        Args:
            context: Migration context with clients and settings
            git_operations: Mirror clone/push workflow
        """
        self.context = context
        self.git_operations = git_operations
        self.logger = logger.bind(component='MigrationOrchestrator')

        self.verifier = OrganizationVerifier(context)
        self.enumerator = RepositoryEnumerator(context)
        self.migrator = RepositoryMigrator(context, git_operations)

    def execute_migration(
        self,
        pairs: List[OrganizationPair],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> MigrationSummary:
        """Mirror every organization pair in order.

        Args:
            pairs: Organization pairs, processed in the given order
            progress_callback: Called before each repository with the pair,
                the repository, its 1-based index and the pair's total

        Returns:
            Migration summary
        """
        summary = MigrationSummary(dry_run=self.context.dry_run)
        self._log_banner(pairs)

        summary.state = RunState.VERIFYING
        if not self.verifier.verify_pairs(pairs):
            self.logger.error(
                'Organization verification failed, aborting before any changes'
            )
            summary.state = RunState.ABORTED
            return self._summarize(summary)

        summary.state = RunState.MIGRATING
        self.git_operations.prepare_work_dir()

        first_repository = True
        for pair_index, pair in enumerate(pairs, start=1):
            self.logger.info(
                f'[{pair_index}/{len(pairs)}] Processing organization pair {pair}'
            )

            try:
                repositories = self.enumerator.list_all(pair.source)
            except GitHubAPIError as e:
                self.logger.error(
                    f'Failed to list repositories of {pair.source}, '
                    f'skipping this organization: {e}'
                )
                summary.organizations_skipped += 1
                continue

            total = len(repositories)
            for index, repository in enumerate(repositories, start=1):
                if not first_repository and self.context.repository_delay > 0:
                    time.sleep(self.context.repository_delay)
                first_repository = False

                if progress_callback:
                    progress_callback(pair, repository, index, total)

                self.logger.info(f'[{index}/{total}] {pair.source}/{repository.name}')
                summary.record(self._migrate_one(repository, pair))

            summary.organizations_processed += 1

        return self._summarize(summary)

    def _migrate_one(
        self, repository: Repository, pair: OrganizationPair
    ) -> MigrationOutcome:
        try:
            return self.migrator.migrate(repository, pair)
        except GitNotFoundError:
            raise
        except Exception as e:
            self.logger.exception(
                f'Unexpected error migrating {pair.source}/{repository.name}'
            )
            return MigrationOutcome(
                repository=repository.name,
                source_org=pair.source,
                destination_org=pair.destination,
                status=MigrationStatus.FAILED,
                error=f'Unexpected error: {e}',
                completed_at=datetime.now(),
            )

    def _log_banner(self, pairs: List[OrganizationPair]) -> None:
        source = self.context.source_enterprise or 'source'
        destination = self.context.destination_enterprise or 'destination'
        mode = 'DRY RUN' if self.context.dry_run else 'LIVE'
        self.logger.info(
            f'Starting {mode} mirror from enterprise {source} to {destination} '
            f'for {len(pairs)} organization pair(s)'
        )

    def _summarize(self, summary: MigrationSummary) -> MigrationSummary:
        if summary.state != RunState.ABORTED:
            summary.state = RunState.SUMMARIZING
        summary.completed_at = datetime.now()

        self.logger.info(
            f'Summary: total={summary.total} succeeded={summary.succeeded} '
            f'failed={summary.failed} skipped={summary.skipped}'
        )

        if summary.state == RunState.ABORTED:
            return summary

        if summary.failed or summary.organizations_skipped:
            summary.state = RunState.PARTIAL_FAILURE
            self.logger.warning(
                f'Completed with failures: {summary.failed} repositories failed, '
                f'{summary.organizations_skipped} organizations skipped'
            )
        else:
            summary.state = RunState.SUCCESS
            self.logger.success('All repositories processed successfully')

        return summary
