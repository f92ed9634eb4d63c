"""Organization access checks run before any repository is touched."""

from typing import List

from loguru import logger

from ..api.client import GitHubClient
from ..api.exceptions import GitHubAPIError, GitHubNotFoundError, GitHubPermissionError
from ..models.organization import OrganizationPair
from .context import MigrationContext


class OrganizationVerifier:
    """Confirms that organizations exist and are reachable with each token."""

    def __init__(self, context: MigrationContext):
        self.context = context
        self.logger = logger.bind(component='OrganizationVerifier')

    def verify(self, org_name: str, client: GitHubClient, role: str) -> bool:
        """Check one organization.

        Args:
            org_name: Organization login
            client: Client holding the token for this side
            role: 'source' or 'destination', used in diagnostics

        Returns:
            True if the organization could be read
        """
        try:
            client.get(f'/orgs/{org_name}')
        except GitHubNotFoundError:
            self.logger.error(
                f'{role.capitalize()} organization {org_name!r} not found '
                'or not visible to the token'
            )
            return False
        except GitHubPermissionError as e:
            self.logger.error(
                f'Access to {role} organization {org_name!r} denied (HTTP 403): {e}'
            )
            return False
        except GitHubAPIError as e:
            status = e.status_code if e.status_code is not None else 'no response'
            self.logger.error(
                f'Could not verify {role} organization {org_name!r} '
                f'(status {status}): {e}'
            )
            return False

        self.logger.info(f'Verified {role} organization: {org_name}')
        return True

    def verify_pairs(self, pairs: List[OrganizationPair]) -> bool:
        """Check every source and destination organization.

        All entries are checked, so every bad mapping is reported in one run.

        Returns:
            True only if every organization was verified
        """
        self.logger.info(f'Verifying {len(pairs)} organization pair(s)')

        all_verified = True
        for pair in pairs:
            source_ok = self.verify(pair.source, self.context.source_client, 'source')
            destination_ok = self.verify(
                pair.destination, self.context.destination_client, 'destination'
            )
            all_verified = all_verified and source_ok and destination_ok

        return all_verified
