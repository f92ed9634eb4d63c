"""Run context shared by the migration components."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..api.client import GitHubClient


class MigrationContext(BaseModel):
    """Context for one mirroring run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_client: GitHubClient = Field(..., description='Source GitHub client')
    destination_client: GitHubClient = Field(
        ..., description='Destination GitHub client'
    )

    dry_run: bool = Field(default=False, description='Perform dry run without changes')
    per_page: int = Field(default=100, description='Page size for listing calls')
    repository_delay: float = Field(
        default=0.0, description='Fixed pause in seconds between repositories'
    )

    source_enterprise: Optional[str] = Field(default=None)
    destination_enterprise: Optional[str] = Field(default=None)
