"""Per-repository mirroring: create if absent, clone, push, clean up."""

from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger

from ..api.exceptions import GitHubAPIError, GitHubNotFoundError, GitHubValidationError
from ..git.operations import GitOperations
from ..models.organization import OrganizationPair
from ..models.repository import (
    MigrationOutcome,
    MigrationStatus,
    Repository,
    RepositoryCreate,
)
from ..utils.security import authenticated_url
from .context import MigrationContext


class RepositoryMigrator:
    """Mirrors a single repository into its destination organization.

    A failure in any step ends the work on that repository only; the caller
    receives a failed outcome and carries on with the next repository.
    """

    def __init__(self, context: MigrationContext, git_operations: GitOperations):
        """Initialize repository migrator.

        Args:
            context: Run context with clients and settings
            git_operations: Mirror clone/push workflow

        Raises:
            ValueError: If the context and the git executor disagree on dry-run
        """
        if context.dry_run != git_operations.dry_run:
            raise ValueError(
                f'Dry-run mismatch: run context dry_run={context.dry_run} but git '
                f'executor {type(git_operations.executor).__name__} has '
                f'dry_run={git_operations.dry_run}'
            )

        self.context = context
        self.git_operations = git_operations
        self.logger = logger.bind(component='RepositoryMigrator')

    def migrate(
        self, repository: Repository, pair: OrganizationPair
    ) -> MigrationOutcome:
        """Mirror one repository.

        Args:
            repository: Source repository
            pair: Source and destination organizations

        Returns:
            Migration outcome
        """
        label = (
            f'{pair.source}/{repository.name} -> {pair.destination}/{repository.name}'
        )
        dry_run = self.context.dry_run
        started_at = datetime.now()
        created = False

        self.logger.info(f'Migrating {label}')

        try:
            destination = self._find_destination(pair.destination, repository.name)

            if destination is not None:
                self.logger.info(
                    f'Repository {pair.destination}/{repository.name} already exists, '
                    'skipping creation'
                )
            elif dry_run:
                self.logger.info(
                    f'[DRY RUN] Would create repository '
                    f'{pair.destination}/{repository.name} '
                    f'(private={repository.private}, '
                    f'default_branch={repository.default_branch})'
                )
            else:
                destination = self._create_destination(pair.destination, repository)
                created = destination is not None

            mirror_result = self.git_operations.mirror_repository(
                self._source_url(repository, pair.source),
                self._destination_url(destination, pair.destination, repository.name),
                self.git_operations.workspace_path(pair.source, repository.name),
            )

        except GitHubAPIError as e:
            return self._failed(repository, pair, label, started_at, created, str(e))
        except (OSError, ValueError) as e:
            return self._failed(
                repository, pair, label, started_at, created, f'Workspace error: {e}'
            )

        if not mirror_result.success:
            return self._failed(
                repository, pair, label, started_at, created, mirror_result.error
            )

        if dry_run:
            self.logger.info(f'[DRY RUN] Planned mirror of {label}')
            status = MigrationStatus.SKIPPED_DRY_RUN
        else:
            self.logger.success(f'Mirrored {label}')
            status = MigrationStatus.SUCCESS

        return MigrationOutcome(
            repository=repository.name,
            source_org=pair.source,
            destination_org=pair.destination,
            status=status,
            created=created,
            started_at=started_at,
            completed_at=datetime.now(),
        )

    def _find_destination(
        self, org_name: str, repository_name: str
    ) -> Optional[Dict[str, Any]]:
        """Return the destination repository, or None if it does not exist."""
        try:
            response = self.context.destination_client.get(
                f'/repos/{org_name}/{repository_name}'
            )
        except GitHubNotFoundError:
            return None
        return response.data or {}

    def _create_destination(
        self, org_name: str, repository: Repository
    ) -> Optional[Dict[str, Any]]:
        payload = RepositoryCreate.from_repository(repository).to_payload()

        try:
            response = self.context.destination_client.post(
                f'/orgs/{org_name}/repos', data=payload
            )
        except GitHubValidationError as e:
            self.logger.warning(
                f'Repository {org_name}/{repository.name} was not created, '
                f'continuing with mirror: {e}'
            )
            return None

        self.logger.info(f'Created repository {org_name}/{repository.name}')
        return response.data or {}

    def _source_url(self, repository: Repository, org_name: str) -> str:
        config = self.context.source_client.config
        url = repository.clone_url or f'{config.web_url}/{org_name}/{repository.name}.git'
        return authenticated_url(url, config.token)

    def _destination_url(
        self,
        destination: Optional[Dict[str, Any]],
        org_name: str,
        repository_name: str,
    ) -> str:
        config = self.context.destination_client.config
        url = (destination or {}).get('clone_url') or (
            f'{config.web_url}/{org_name}/{repository_name}.git'
        )
        return authenticated_url(url, config.token)

    def _failed(
        self,
        repository: Repository,
        pair: OrganizationPair,
        label: str,
        started_at: datetime,
        created: bool,
        error: Optional[str],
    ) -> MigrationOutcome:
        self.logger.error(f'Failed to migrate {label}: {error}')
        return MigrationOutcome(
            repository=repository.name,
            source_org=pair.source,
            destination_org=pair.destination,
            status=MigrationStatus.FAILED,
            error=error,
            created=created,
            started_at=started_at,
            completed_at=datetime.now(),
        )
