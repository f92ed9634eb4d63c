"""Migration engine - main entry point for mirroring runs."""

from typing import Optional

from loguru import logger

from ..api.client import GitHubClientFactory
from ..config.config import Config
from ..git.executor import DryRunGitExecutor, GitExecutor, SubprocessGitExecutor
from ..git.operations import GitOperations
from .context import MigrationContext
from .orchestrator import MigrationOrchestrator, MigrationSummary, ProgressCallback


class MigrationEngine:
    """Wires clients, git executor and orchestrator from configuration."""

    def __init__(self, config: Config, executor: Optional[GitExecutor] = None):
        """Initialize migration engine.

        Args:
            config: Tool configuration
            executor: Git executor; chosen from ``migration.dry_run`` if omitted

        Raises:
            ValueError: If a given executor does not match ``migration.dry_run``
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = GitHubClientFactory.create_client(config.source)
        self.destination_client = GitHubClientFactory.create_client(
            config.destination
        )

        self.context = MigrationContext(
            source_client=self.source_client,
            destination_client=self.destination_client,
            dry_run=config.migration.dry_run,
            per_page=config.migration.per_page,
            repository_delay=config.migration.repository_delay,
            source_enterprise=config.source.enterprise,
            destination_enterprise=config.destination.enterprise,
        )

        if executor is None:
            executor_class = (
                DryRunGitExecutor if config.migration.dry_run else SubprocessGitExecutor
            )
            executor = executor_class(
                executable=config.git.executable, timeout=config.git.timeout
            )
        self.executor = executor

        self.git_operations = GitOperations(executor, config.git.work_dir)
        self.orchestrator = MigrationOrchestrator(self.context, self.git_operations)

    def migrate(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> MigrationSummary:
        """Run the mirror for every configured organization pair.

        Raises:
            GitNotFoundError: If git is not installed
        """
        try:
            version = self.executor.ensure_available()
            self.logger.debug(f'Using {version}')

            return self.orchestrator.execute_migration(
                self.config.organizations, progress_callback=progress_callback
            )
        finally:
            self.close()

    def validate(self) -> bool:
        """Check git, both tokens and every organization pair, changing nothing.

        Raises:
            GitNotFoundError: If git is not installed
        """
        try:
            self.executor.ensure_available()

            for side, client in (
                ('source', self.source_client),
                ('destination', self.destination_client),
            ):
                if not client.test_connection():
                    self.logger.error(
                        f'The {side} token was rejected by {client.base_url}'
                    )
                    return False

            return self.orchestrator.verifier.verify_pairs(self.config.organizations)
        finally:
            self.close()

    def close(self) -> None:
        """Close both API sessions."""
        self.source_client.close()
        self.destination_client.close()
