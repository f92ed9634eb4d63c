"""Executors that run (or only announce) git commands and workspace changes."""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..utils.security import mask_credentials


class GitNotFoundError(RuntimeError):
    """The git executable is not available."""

    pass


@dataclass
class CommandResult:
    """Result of one git invocation."""

    args: List[str]
    returncode: int
    stdout: str = ''
    stderr: str = ''

    @property
    def success(self) -> bool:
        return self.returncode == 0


class GitExecutor(ABC):
    """Runs git commands and manages the local mirror workspace."""

    dry_run = False

    def __init__(self, executable: str = 'git', timeout: int = 3600):
        """Initialize executor.

        Args:
            executable: Git executable name or path
            timeout: Timeout in seconds for a single git command
        """
        self.executable = executable
        self.timeout = timeout
        self.logger = logger.bind(component=type(self).__name__)

    def describe(self, args: List[str]) -> str:
        """Printable command line with credentials masked."""
        return mask_credentials(' '.join([self.executable, *args]))

    @abstractmethod
    def ensure_available(self) -> str:
        """Check that git can be run.

        Returns:
            Git version string

        Raises:
            GitNotFoundError: If git is missing
        """

    @abstractmethod
    def run(self, args: List[str], cwd: Optional[str] = None) -> CommandResult:
        """Run ``git <args>``."""

    @abstractmethod
    def make_dirs(self, path: str) -> None:
        """Create a directory and its parents if absent."""

    @abstractmethod
    def remove_tree(self, path: str) -> None:
        """Remove a directory tree if present."""


class SubprocessGitExecutor(GitExecutor):
    """Executor that invokes git as an external process."""

    def ensure_available(self) -> str:
        if shutil.which(self.executable) is None:
            raise GitNotFoundError(
                f'Git executable not found: {self.executable}. '
                'Install git or set git.executable in the configuration'
            )

        result = self.run(['--version'])
        if not result.success:
            raise GitNotFoundError(
                f'Git executable is not usable: {result.stderr.strip()}'
            )
        return result.stdout.strip()

    def run(self, args: List[str], cwd: Optional[str] = None) -> CommandResult:
        cmd = [self.executable, *args]
        self.logger.debug(f'Executing git command: {self.describe(args)}')

        env = os.environ.copy()
        env['GIT_TERMINAL_PROMPT'] = '0'

        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            self.logger.error(
                f'Git command timed out after {self.timeout} seconds: '
                f'{self.describe(args)}'
            )
            return CommandResult(
                args=args,
                returncode=-1,
                stderr=f'timed out after {self.timeout} seconds',
            )
        except FileNotFoundError as e:
            raise GitNotFoundError(f'Git executable not found: {self.executable}') from e

        stdout = mask_credentials(completed.stdout or '')
        stderr = mask_credentials(completed.stderr or '')

        self.logger.debug(f'Git command return code: {completed.returncode}')
        if stdout:
            self.logger.debug(f'Git stdout: {stdout.strip()}')
        if stderr:
            # git writes progress to stderr even on success
            self.logger.debug(f'Git stderr: {stderr.strip()}')

        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    def make_dirs(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)
        self.logger.debug(f'Ensured directory exists: {path}')

    def remove_tree(self, path: str) -> None:
        if os.path.exists(path):
            shutil.rmtree(path)
            self.logger.debug(f'Removed directory: {path}')


class DryRunGitExecutor(GitExecutor):
    """Executor that logs every intended action and changes nothing."""

    dry_run = True

    def ensure_available(self) -> str:
        if shutil.which(self.executable) is None:
            self.logger.warning(
                f'Git executable not found: {self.executable} '
                '(ignored in dry-run mode)'
            )
        return 'dry-run'

    def run(self, args: List[str], cwd: Optional[str] = None) -> CommandResult:
        location = f' (in {cwd})' if cwd else ''
        self.logger.info(f'[DRY RUN] Would run: {self.describe(args)}{location}')
        return CommandResult(args=args, returncode=0)

    def make_dirs(self, path: str) -> None:
        self.logger.info(f'[DRY RUN] Would create directory: {path}')

    def remove_tree(self, path: str) -> None:
        self.logger.info(f'[DRY RUN] Would remove directory: {path}')
