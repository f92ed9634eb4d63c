"""Configuration management for the organization mirroring tool."""

from typing import Optional, Dict, Any, List
from pathlib import Path
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml
from dotenv import load_dotenv

from ..models.organization import OrganizationPair


class GitHubInstanceConfig(BaseModel):
    """Configuration for one side (source or destination) of the mirror."""

    api_url: str = Field(
        default='https://api.github.com', description='GitHub REST API base URL'
    )
    web_url: str = Field(
        default='https://github.com', description='GitHub web/git host URL'
    )
    token: str = Field(..., repr=False, description='Personal access token')
    enterprise: Optional[str] = Field(default=None, description='Enterprise slug')
    api_version: str = Field(default='2022-11-28', description='REST API version')
    timeout: int = Field(default=30, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=10.0, description='API requests per second limit'
    )
    rate_limit_min_remaining: int = Field(
        default=0,
        description='Wait for the quota reset once this few requests remain',
    )
    rate_limit_max_wait: float = Field(
        default=900.0, description='Longest single wait for a quota reset'
    )

    @field_validator('api_url', 'web_url')
    @classmethod
    def validate_url(cls, v):
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('token')
    @classmethod
    def validate_token(cls, v):
        """Validate that a token is provided."""
        if not v or not v.strip():
            raise ValueError('A personal access token must be provided')
        return v.strip()

    @field_validator('rate_limit_per_second')
    @classmethod
    def validate_rate_limit(cls, v):
        """Validate rate limit is positive."""
        if v <= 0:
            raise ValueError('Rate limit must be positive')
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v


class MigrationConfig(BaseModel):
    """Migration-specific configuration."""

    dry_run: bool = Field(default=False, description='Perform dry run without changes')
    repository_delay: float = Field(
        default=0.0, description='Fixed pause in seconds between repositories'
    )
    per_page: int = Field(default=100, description='Page size for listing calls')

    @field_validator('repository_delay')
    @classmethod
    def validate_delay(cls, v):
        """Validate delay is not negative."""
        if v < 0:
            raise ValueError('Repository delay must not be negative')
        return v

    @field_validator('per_page')
    @classmethod
    def validate_per_page(cls, v):
        """GitHub caps page size at 100."""
        if not 1 <= v <= 100:
            raise ValueError('per_page must be between 1 and 100')
        return v


class GitConfig(BaseModel):
    """Git operations configuration."""

    executable: str = Field(default='git', description='Git executable')
    work_dir: str = Field(
        default='./mirror-workspace',
        description='Directory holding one mirror clone per repository',
    )
    timeout: int = Field(
        default=3600, description='Git operation timeout in seconds (default: 1 hour)'
    )

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Git timeout must be positive')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default='migration.log', description='Log file path')
    format: Optional[str] = Field(default=None, description='Console log format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for the organization mirroring tool."""

    model_config = ConfigDict(extra='forbid')

    source: GitHubInstanceConfig = Field(..., description='Source side')
    destination: GitHubInstanceConfig = Field(..., description='Destination side')
    organizations: List[OrganizationPair] = Field(
        ..., description='Organization pairs, processed in order'
    )
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    git: GitConfig = Field(default_factory=GitConfig, description='Git settings')
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @field_validator('organizations')
    @classmethod
    def validate_organizations(cls, v):
        """At least one pair is required."""
        if not v:
            raise ValueError('At least one organization pair must be configured')
        return v

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        return cls(**cls._read_file(config_path))

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> 'Config':
        """Load configuration from a file (or the environment) plus overrides.

        Overrides are applied before validation, so a file may leave out
        values such as tokens that are supplied on the command line. None
        values in ``overrides`` are ignored.
        """
        if config_path:
            config_data = cls._read_file(config_path)
        else:
            load_dotenv()
            config_data = cls.env_data()

        if overrides:
            config_data = _deep_merge(config_data, cls._remove_none_values(overrides))

        return cls(**config_data)

    @staticmethod
    def _read_file(config_path: str) -> Dict[str, Any]:
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f'Configuration file must contain a mapping: {config_path}')

        return config_data

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        load_dotenv()

        return cls(**cls.env_data())

    @classmethod
    def env_data(cls) -> Dict[str, Any]:
        """Collect configuration values from environment variables."""
        config_data: Dict[str, Any] = {
            'source': {
                'api_url': os.getenv('SOURCE_GITHUB_API_URL'),
                'token': os.getenv('SOURCE_GITHUB_TOKEN'),
                'enterprise': os.getenv('SOURCE_ENTERPRISE'),
            },
            'destination': {
                'api_url': os.getenv('DEST_GITHUB_API_URL'),
                'token': os.getenv('DEST_GITHUB_TOKEN'),
                'enterprise': os.getenv('DEST_ENTERPRISE'),
            },
            'migration': {
                'dry_run': _env_flag('DRY_RUN'),
            },
            'git': {
                'work_dir': os.getenv('MIGRATION_WORK_DIR'),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        sources = _env_list('SOURCE_ORGS')
        destinations = _env_list('DEST_ORGS')
        if sources or destinations:
            config_data['organizations'] = [
                pair.model_dump()
                for pair in OrganizationPair.from_lists(sources, destinations)
            ]

        return cls._remove_none_values(config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        template_config = {
            'source': {
                'api_url': 'https://api.github.com',
                'token': 'your-source-personal-access-token',
                'enterprise': 'source-enterprise',
            },
            'destination': {
                'api_url': 'https://api.github.com',
                'token': 'your-destination-personal-access-token',
                'enterprise': 'destination-enterprise',
            },
            'organizations': [
                {'source': 'demo', 'destination': 'demo-mirror'},
            ],
            'migration': {
                'dry_run': True,
                'repository_delay': 0,
            },
            'git': {
                'work_dir': './mirror-workspace',
                'timeout': 3600,
            },
            'logging': {
                'level': 'INFO',
                'file': 'migration.log',
            },
        }

        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str) -> List[str]:
    value = os.getenv(name, '')
    if not value.strip():
        return []
    # blank items stay in place so positional pairing can reject them
    return [item.strip() for item in value.split(',')]


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
