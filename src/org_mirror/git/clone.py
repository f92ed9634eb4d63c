"""Git mirror clone operations."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .executor import GitExecutor


@dataclass
class CloneResult:
    """Result of a git clone operation."""

    success: bool
    error: Optional[str] = None
    repository_path: Optional[str] = None


class GitCloner:
    """Handles mirror clones from the source organization."""

    def __init__(self, executor: GitExecutor):
        """Initialize git cloner.

        Args:
            executor: Executor running the git commands
        """
        self.executor = executor
        self.logger = logger.bind(component='GitCloner')

    def clone_mirror(self, clone_url: str, destination_path: str) -> CloneResult:
        """Clone every ref of a repository into a bare mirror.

        Args:
            clone_url: Authenticated source URL
            destination_path: Local path of the mirror clone

        Returns:
            Clone operation result
        """
        self.logger.info(f'Cloning mirror into {destination_path}')

        result = self.executor.run(['clone', '--mirror', clone_url, destination_path])

        if not result.success:
            error_output = result.stderr.strip() or 'Unknown error'
            self.logger.error(
                f'Git clone failed with return code {result.returncode}: {error_output}'
            )
            return CloneResult(
                success=False,
                error=f'git clone --mirror exited with {result.returncode}: {error_output}',
            )

        return CloneResult(success=True, repository_path=destination_path)
