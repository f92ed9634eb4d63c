"""Repository listing for source organizations."""

from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from ..api.client import GitHubClient
from ..models.repository import Repository
from .context import MigrationContext


class RepositoryEnumerator:
    """Lists every repository of an organization."""

    def __init__(self, context: MigrationContext):
        self.context = context
        self.logger = logger.bind(component='RepositoryEnumerator')

    def list_all(
        self, org_name: str, client: Optional[GitHubClient] = None
    ) -> List[Repository]:
        """List all repositories, including forks, archived and private ones.

        Args:
            org_name: Organization login
            client: Client to use; defaults to the source client

        Returns:
            Every repository of the organization

        Raises:
            GitHubAPIError: If a listing page cannot be fetched
        """
        client = client or self.context.source_client
        items = client.get_paginated(
            f'/orgs/{org_name}/repos',
            params={'type': 'all'},
            per_page=self.context.per_page,
        )

        repositories = []
        for item in items:
            try:
                repositories.append(Repository(**item))
            except (ValidationError, TypeError) as e:
                self.logger.warning(
                    f'Failed to parse repository data in {org_name}: {e}'
                )
                continue

        self.logger.info(f'Found {len(repositories)} repositories in {org_name}')
        return repositories
