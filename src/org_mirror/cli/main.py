"""Main CLI entry point for the organization mirroring tool."""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..api.exceptions import GitHubAPIError
from ..config.config import Config
from ..git.executor import GitNotFoundError
from ..migration.engine import MigrationEngine
from ..migration.enumerator import RepositoryEnumerator
from ..migration.orchestrator import (
    EXIT_CONFIG_ERROR,
    EXIT_EXECUTION_ERROR,
    EXIT_GIT_NOT_FOUND,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    MigrationSummary,
)
from ..models.organization import OrganizationPair
from ..utils.logging import setup_logging

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.org-mirror.yaml']

# ValidationError and OrganizationMappingError are ValueErrors
CONFIG_ERRORS = (ValueError, FileNotFoundError, yaml.YAMLError)


@click.group()
@click.version_option(version='0.1.0', prog_name='org-mirror')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """GitHub Organization Mirror - Mirror every repository between GitHub Enterprise Cloud organizations."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Basic console logging until the configuration is loaded
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]GitHub Organization Mirror[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)
    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(EXIT_EXECUTION_ERROR)

    console.print(f'[green]✓[/green] Configuration template created at: {output}')
    console.print(
        f'[yellow]Please edit {output} with your tokens and organizations[/yellow]'
    )


@cli.command()
@click.option('--dry-run', is_flag=True, help='Log intended changes without making them')
@click.option(
    '--source-token', envvar='SOURCE_GITHUB_TOKEN', help='Source personal access token'
)
@click.option(
    '--destination-token',
    envvar='DEST_GITHUB_TOKEN',
    help='Destination personal access token',
)
@click.option(
    '--source-org',
    'source_orgs',
    multiple=True,
    help='Source organization (repeatable, paired by position)',
)
@click.option(
    '--destination-org',
    'destination_orgs',
    multiple=True,
    help='Destination organization (repeatable, paired by position)',
)
@click.option('--source-enterprise', help='Source enterprise name')
@click.option('--destination-enterprise', help='Destination enterprise name')
@click.option('--work-dir', help='Directory for temporary mirror clones')
@click.option('--log-file', help='Log file path')
@click.pass_context
def migrate(
    ctx: click.Context,
    dry_run: bool,
    source_token: Optional[str],
    destination_token: Optional[str],
    source_orgs: Tuple[str, ...],
    destination_orgs: Tuple[str, ...],
    source_enterprise: Optional[str],
    destination_enterprise: Optional[str],
    work_dir: Optional[str],
    log_file: Optional[str],
) -> None:
    """Mirror every repository of each organization pair."""
    console.print(
        Panel.fit(
            '[bold blue]GitHub Organization Mirror[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    overrides: Dict[str, Any] = {
        'source': {'token': source_token, 'enterprise': source_enterprise},
        'destination': {
            'token': destination_token,
            'enterprise': destination_enterprise,
        },
        'git': {'work_dir': work_dir},
        'logging': {'file': log_file},
    }
    if dry_run:
        overrides['migration'] = {'dry_run': True}

    try:
        if source_orgs or destination_orgs:
            overrides['organizations'] = [
                pair.model_dump()
                for pair in OrganizationPair.from_lists(source_orgs, destination_orgs)
            ]
        config = _load_config(ctx, overrides)
    except CONFIG_ERRORS as e:
        console.print(f'[red]✗[/red] Configuration error: {e}')
        sys.exit(EXIT_CONFIG_ERROR)

    _setup_logging_with_config(ctx, config)

    try:
        summary = _run_migration(config)
    except GitNotFoundError as e:
        console.print(f'[red]✗[/red] {e}')
        sys.exit(EXIT_GIT_NOT_FOUND)
    except Exception as e:
        logger.exception('Migration failed')
        console.print(f'[red]✗[/red] Migration failed: {e}')
        sys.exit(EXIT_EXECUTION_ERROR)

    _display_migration_summary(summary)
    sys.exit(summary.exit_code)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Verify organization access and git availability without changing anything."""
    console.print(
        Panel.fit(
            '[bold cyan]GitHub Organization Mirror[/bold cyan]\n'
            'Validating configuration...',
            border_style='cyan',
        )
    )

    try:
        config = _load_config(ctx)
    except CONFIG_ERRORS as e:
        console.print(f'[red]✗[/red] Configuration error: {e}')
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        verified = MigrationEngine(config).validate()
    except GitNotFoundError as e:
        console.print(f'[red]✗[/red] {e}')
        sys.exit(EXIT_GIT_NOT_FOUND)

    if not verified:
        console.print('[red]✗[/red] Organization verification failed')
        sys.exit(EXIT_VERIFICATION_FAILED)

    console.print('[green]✓[/green] Organization verification passed')
    console.print('[green]✓[/green] Configuration validation completed')


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]GitHub Organization Mirror[/bold magenta]\nConfiguration',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)
    except CONFIG_ERRORS as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        sys.exit(EXIT_CONFIG_ERROR)

    table = Table(title='Migration Configuration')
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')

    table.add_row('Source API', config.source.api_url)
    table.add_row('Source Enterprise', config.source.enterprise or '-')
    table.add_row('Source Token', _mask_token(config.source.token))
    table.add_row('Destination API', config.destination.api_url)
    table.add_row('Destination Enterprise', config.destination.enterprise or '-')
    table.add_row('Destination Token', _mask_token(config.destination.token))
    table.add_row('Dry Run', '✓' if config.migration.dry_run else '✗')
    table.add_row('Work Directory', config.git.work_dir)
    table.add_row('Log File', config.logging.file or '-')
    console.print(table)

    pairs = Table(title='Organization Pairs')
    pairs.add_column('#', style='blue')
    pairs.add_column('Source', style='cyan')
    pairs.add_column('Destination', style='green')
    for index, pair in enumerate(config.organizations, start=1):
        pairs.add_row(str(index), pair.source, pair.destination)
    console.print(pairs)


@cli.command(name='list-repos')
@click.option(
    '--destination',
    is_flag=True,
    help='List the destination organizations instead of the sources',
)
@click.pass_context
def list_repos(ctx: click.Context, destination: bool) -> None:
    """List repositories of the configured organizations."""
    try:
        config = _load_config(ctx)
    except CONFIG_ERRORS as e:
        console.print(f'[red]✗[/red] Configuration error: {e}')
        sys.exit(EXIT_CONFIG_ERROR)

    engine = MigrationEngine(config)
    enumerator = RepositoryEnumerator(engine.context)
    client = engine.destination_client if destination else engine.source_client

    exit_code = EXIT_SUCCESS
    try:
        for pair in config.organizations:
            org_name = pair.destination if destination else pair.source
            try:
                repositories = enumerator.list_all(org_name, client=client)
            except GitHubAPIError as e:
                console.print(f'[red]✗[/red] {org_name}: {e}')
                exit_code = EXIT_EXECUTION_ERROR
                continue

            table = Table(title=f'{org_name} ({len(repositories)} repositories)')
            table.add_column('Name', style='cyan')
            table.add_column('Visibility', style='green')
            table.add_column('Default Branch', style='blue')
            table.add_column('Archived', style='yellow')
            table.add_column('Fork', style='yellow')
            for repository in repositories:
                table.add_row(
                    repository.name,
                    repository.visibility
                    or ('private' if repository.private else 'public'),
                    repository.default_branch or '-',
                    '✓' if repository.archived else '',
                    '✓' if repository.fork else '',
                )
            console.print(table)
    finally:
        engine.close()

    sys.exit(exit_code)


def _load_config(
    ctx: click.Context, overrides: Optional[Dict[str, Any]] = None
) -> Config:
    """Load configuration from file or environment, then apply overrides."""
    config_path = (ctx.obj or {}).get('config_path')

    if not config_path:
        for path in DEFAULT_CONFIG_PATHS:
            if Path(path).exists():
                config_path = path
                break

    return Config.load(config_path, overrides=overrides)


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = (ctx.obj or {}).get('verbose', False)

    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )


def _run_migration(config: Config) -> MigrationSummary:
    """Run the migration."""
    engine = MigrationEngine(config)
    return engine.migrate()


def _mask_token(token: str) -> str:
    if len(token) <= 8:
        return '***'
    return f'{token[:4]}...{token[-4:]}'


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('State', style='cyan')
    table.add_column('Total', style='blue')
    table.add_column('Succeeded', style='green')
    table.add_column('Failed', style='red')
    table.add_column('Skipped', style='yellow')

    table.add_row(
        summary.state.value,
        str(summary.total),
        str(summary.succeeded),
        str(summary.failed),
        str(summary.skipped),
    )
    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')

    if summary.organizations_skipped:
        console.print(
            f'[yellow]{summary.organizations_skipped} organization(s) skipped '
            'because their repositories could not be listed[/yellow]'
        )

    failures = summary.failures
    if failures:
        console.print(f'\n[red]Errors ({len(failures)}):[/red]')
        for outcome in failures[:5]:  # Show first 5 errors
            console.print(
                f'  • {outcome.source_org}/{outcome.repository} -> '
                f'{outcome.destination_org}: {outcome.error}'
            )
        if len(failures) > 5:
            console.print(f'  ... and {len(failures) - 5} more errors')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(EXIT_EXECUTION_ERROR)


if __name__ == '__main__':
    main()
