"""Mirror workflow over a local workspace."""

import os
import re
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .clone import GitCloner
from .executor import GitExecutor
from .push import GitPusher


@dataclass
class MirrorResult:
    """Result of cloning and pushing one repository."""

    success: bool
    error: Optional[str] = None
    repository_path: Optional[str] = None


class GitOperations:
    """Clone, push and clean up mirror clones inside a working directory."""

    def __init__(self, executor: GitExecutor, work_dir: str):
        """Initialize Git operations.

        Args:
            executor: Executor running git and filesystem changes
            work_dir: Directory holding one mirror clone per repository
        """
        self.executor = executor
        self.work_dir = work_dir
        self.cloner = GitCloner(executor)
        self.pusher = GitPusher(executor)
        self.logger = logger.bind(component='GitOperations')

    @property
    def dry_run(self) -> bool:
        return self.executor.dry_run

    def prepare_work_dir(self) -> None:
        """Create the working directory if it does not exist."""
        self.executor.make_dirs(self.work_dir)

    def workspace_path(self, source_org: str, repository_name: str) -> str:
        """Deterministic clone location for a source repository."""
        slot = f'{_safe_segment(source_org)}__{_safe_segment(repository_name)}.git'
        return os.path.join(self.work_dir, slot)

    def mirror_repository(
        self, source_url: str, destination_url: str, repository_path: str
    ) -> MirrorResult:
        """Mirror one repository from source to destination.

        Any leftover clone at ``repository_path`` is removed first. The clone
        is removed again afterwards whether or not the push succeeded.

        Args:
            source_url: Authenticated source URL
            destination_url: Authenticated destination URL
            repository_path: Local clone location

        Returns:
            Mirror result

        Raises:
            OSError: If a leftover clone cannot be removed
        """
        self.executor.remove_tree(repository_path)

        try:
            clone_result = self.cloner.clone_mirror(source_url, repository_path)
            if not clone_result.success:
                return MirrorResult(
                    success=False, error=f'Clone failed: {clone_result.error}'
                )

            push_result = self.pusher.push_mirror(destination_url, repository_path)
            if not push_result.success:
                return MirrorResult(
                    success=False, error=f'Push failed: {push_result.error}'
                )

            return MirrorResult(success=True, repository_path=repository_path)

        finally:
            self.cleanup_workspace(repository_path)

    def cleanup_workspace(self, repository_path: str) -> None:
        """Remove a clone, logging instead of raising on failure."""
        try:
            self.executor.remove_tree(repository_path)
        except OSError as e:
            self.logger.warning(f'Failed to clean up {repository_path}: {e}')


def _safe_segment(name: str) -> str:
    return re.sub(r'[^A-Za-z0-9._-]', '-', name).strip('.') or '_'
