"""Shared fixtures."""

import contextlib
import os
import sys
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest
from loguru import logger

from org_mirror.api.client import APIResponse, GitHubClient
from org_mirror.config.config import GitHubInstanceConfig
from org_mirror.git.executor import CommandResult, GitExecutor
from org_mirror.migration.context import MigrationContext


class RecordingExecutor(GitExecutor):
    """Executor that records calls and fails on demand."""

    def __init__(self, failures: Optional[Dict[str, str]] = None):
        super().__init__()
        self.failures = failures or {}
        self.calls: List[tuple] = []

    def ensure_available(self) -> str:
        return 'git version test'

    def run(self, args, cwd=None):
        self.calls.append(('run', tuple(args), cwd))
        for marker, stderr in self.failures.items():
            if marker in args:
                return CommandResult(args=list(args), returncode=128, stderr=stderr)
        return CommandResult(args=list(args), returncode=0)

    def make_dirs(self, path):
        self.calls.append(('make_dirs', path))

    def remove_tree(self, path):
        self.calls.append(('remove_tree', path))

    def commands(self) -> List[str]:
        """git subcommands run so far, e.g. ['clone', 'push']."""
        return [call[1][0] for call in self.calls if call[0] == 'run']


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
    logger.add(sys.stderr, level='WARNING')


@pytest.fixture
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record['message']), level='DEBUG')
    yield messages
    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


@pytest.fixture
def recording_executor():
    return RecordingExecutor()


@pytest.fixture
def executor_factory():
    return RecordingExecutor


@pytest.fixture
def source_config():
    return GitHubInstanceConfig(token='src-token-123456', enterprise='source-ent')


@pytest.fixture
def destination_config():
    return GitHubInstanceConfig(token='dst-token-654321', enterprise='dest-ent')


@pytest.fixture
def make_context(source_config, destination_config):
    def _make(dry_run: bool = False, repository_delay: float = 0.0):
        source_client = Mock(spec=GitHubClient)
        source_client.config = source_config
        destination_client = Mock(spec=GitHubClient)
        destination_client.config = destination_config
        return MigrationContext(
            source_client=source_client,
            destination_client=destination_client,
            dry_run=dry_run,
            repository_delay=repository_delay,
            source_enterprise=source_config.enterprise,
            destination_enterprise=destination_config.enterprise,
        )

    return _make


@pytest.fixture
def api_response():
    def _make(data=None, status_code: int = 200) -> APIResponse:
        return APIResponse(status_code=status_code, data=data, headers={}, success=True)

    return _make


@pytest.fixture
def repo_payload():
    def _make(name: str, org: str = 'demo', **overrides) -> dict:
        payload = {
            'name': name,
            'full_name': f'{org}/{name}',
            'description': f'{name} description',
            'private': True,
            'visibility': 'private',
            'default_branch': 'main',
            'has_issues': True,
            'has_projects': False,
            'has_wiki': False,
            'has_downloads': True,
            'clone_url': f'https://github.com/{org}/{name}.git',
            'archived': False,
            'fork': False,
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def tmp_cwd(tmp_path):
    original = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original)
