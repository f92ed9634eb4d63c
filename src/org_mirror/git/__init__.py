"""Git operations module for repository mirroring."""

from .executor import (
    CommandResult,
    DryRunGitExecutor,
    GitExecutor,
    GitNotFoundError,
    SubprocessGitExecutor,
)
from .operations import GitOperations, MirrorResult
from .clone import GitCloner
from .push import GitPusher

__all__ = [
    'CommandResult',
    'DryRunGitExecutor',
    'GitExecutor',
    'GitNotFoundError',
    'SubprocessGitExecutor',
    'GitOperations',
    'MirrorResult',
    'GitCloner',
    'GitPusher',
]
