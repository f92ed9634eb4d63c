"""Git mirror push operations."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .executor import GitExecutor


@dataclass
class PushResult:
    """Result of a git push operation."""

    success: bool
    error: Optional[str] = None


class GitPusher:
    """Handles mirror pushes to the destination organization."""

    def __init__(self, executor: GitExecutor):
        """Initialize git pusher.

        Args:
            executor: Executor running the git commands
        """
        self.executor = executor
        self.logger = logger.bind(component='GitPusher')

    def push_mirror(self, push_url: str, repository_path: str) -> PushResult:
        """Push all refs and tags of a mirror clone.

        The destination's refs are overwritten to match the clone, and refs
        missing from the clone are deleted on the destination.

        Args:
            push_url: Authenticated destination URL
            repository_path: Local mirror clone

        Returns:
            Push operation result
        """
        self.logger.info(f'Pushing mirror from {repository_path}')

        result = self.executor.run(['push', '--mirror', push_url], cwd=repository_path)

        if not result.success:
            error_output = result.stderr.strip() or 'Unknown error'
            self.logger.error(f'Git push failed: {error_output}')
            return PushResult(
                success=False,
                error=f'git push --mirror exited with {result.returncode}: {error_output}',
            )

        return PushResult(success=True)
