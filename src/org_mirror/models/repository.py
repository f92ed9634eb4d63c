"""Repository entity models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Repository(BaseModel):
    """GitHub repository as listed by GET /orgs/{org}/repos."""

    name: str = Field(..., description='Repository name')
    full_name: Optional[str] = Field(default=None, description='owner/name')
    description: Optional[str] = Field(default=None, description='Description')

    # Visibility
    private: bool = Field(default=True, description='Repository is private')
    visibility: Optional[str] = Field(
        default=None, description='public, private or internal'
    )

    default_branch: Optional[str] = Field(
        default=None, description='Default branch name'
    )

    # Feature flags
    has_issues: bool = Field(default=True, description='Issues enabled')
    has_projects: bool = Field(default=True, description='Projects enabled')
    has_wiki: bool = Field(default=True, description='Wiki enabled')
    has_downloads: bool = Field(default=True, description='Downloads enabled')

    clone_url: Optional[str] = Field(default=None, description='HTTPS clone URL')
    archived: bool = Field(default=False, description='Repository is archived')
    fork: bool = Field(default=False, description='Repository is a fork')


class RepositoryCreate(BaseModel):
    """Request body for POST /orgs/{org}/repos.

    Only the name, description, visibility, feature flags and default branch
    are carried over. Branch protection, webhooks and Actions settings are
    not part of the payload.
    """

    name: str = Field(..., description='Repository name')
    description: Optional[str] = Field(default=None, description='Description')
    private: bool = Field(default=True, description='Create as private')
    visibility: Optional[str] = Field(default=None, description='Visibility')
    has_issues: bool = Field(default=True, description='Enable issues')
    has_projects: bool = Field(default=True, description='Enable projects')
    has_wiki: bool = Field(default=True, description='Enable wiki')
    has_downloads: bool = Field(default=True, description='Enable downloads')
    default_branch: Optional[str] = Field(
        default=None, description='Default branch name'
    )

    @classmethod
    def from_repository(cls, repository: Repository) -> 'RepositoryCreate':
        """Build a creation payload mirroring a source repository."""
        return cls(
            name=repository.name,
            description=repository.description,
            private=repository.private,
            visibility=repository.visibility,
            has_issues=repository.has_issues,
            has_projects=repository.has_projects,
            has_wiki=repository.has_wiki,
            has_downloads=repository.has_downloads,
            default_branch=repository.default_branch,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body, dropping unset fields."""
        return self.model_dump(exclude_none=True)


class MigrationStatus(str, Enum):
    """Outcome of mirroring one repository."""

    SUCCESS = 'success'
    FAILED = 'failed'
    SKIPPED_DRY_RUN = 'skipped_dry_run'


class MigrationOutcome(BaseModel):
    """Result of mirroring one repository in one run."""

    repository: str = Field(..., description='Repository name')
    source_org: str = Field(..., description='Source organization')
    destination_org: str = Field(..., description='Destination organization')
    status: MigrationStatus = Field(..., description='Outcome status')
    error: Optional[str] = Field(default=None, description='Error detail')
    created: bool = Field(
        default=False, description='Destination repository was created in this run'
    )

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    @property
    def success(self) -> bool:
        return self.status == MigrationStatus.SUCCESS
