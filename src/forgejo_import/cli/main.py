"""Main CLI entry point for forgejo-import."""

import asyncio
import sys
from typing import Any, Dict, Iterable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config.config import (
    DeleteOrganisationParams,
    FileConfig,
    ForgejoInstanceConfig,
    MirrorFeatures,
    MirrorOrganisationParams,
    MirrorRepositoryParams,
    MirrorUserParams,
    create_template,
    load_config,
    require,
    search_config_in_default_locations,
)
from ..migration import engine
from ..migration.orchestrator import MirrorSummary
from ..models.forgejo import Visibility
from ..utils.logging import setup_logging

console = Console()

FORGEJO_REQUIRED = ('forgejo_url', 'forgejo_token')
MIRROR_REQUIRED = FORGEJO_REQUIRED + ('github_token',)

FORGEJO_OPTIONS = [
    click.option('--forgejo-url', help='the url of the forgejo instance to use'),
    click.option('--forgejo-token', help='the api token to use for forgejo'),
]

GITHUB_OPTIONS = [
    click.option(
        '--github-token',
        help='the github token to use for obtaining information from the github api',
    ),
]

FEATURE_OPTIONS = [
    click.option(
        '--migrate-lfs/--no-migrate-lfs',
        default=None,
        help='also migrate the L(arge) F(ile) S(torage) of the repositories',
    ),
    click.option(
        '--migrate-wiki/--no-migrate-wiki',
        default=None,
        help='also migrate the wiki of the repositories',
    ),
    click.option(
        '--migrate-labels', is_flag=True, help='also migrate the labels of the repositories'
    ),
    click.option(
        '--migrate-issues', is_flag=True, help='also migrate the issues of the repositories'
    ),
    click.option(
        '--migrate-pull-requests',
        is_flag=True,
        help='also migrate the pull requests of the repositories',
    ),
    click.option(
        '--migrate-releases',
        is_flag=True,
        help='also migrate the releases of the repositories',
    ),
    click.option(
        '--migrate-milestones',
        is_flag=True,
        help='also migrate the milestones of the repositories',
    ),
]

DRY_RUN_OPTION = click.option(
    '--dry-run', is_flag=True, help='Check what would be done without making changes'
)

VISIBILITY_OPTION = click.option(
    '--visibility',
    type=click.Choice([v.value for v in Visibility]),
    default=Visibility.PUBLIC.value,
    show_default=True,
    help='the visibility of the created forgejo organisation',
)


def _add_options(options):
    def decorator(f):
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


@click.group()
@click.version_option(version='0.1.0', prog_name='forgejo-import')
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
    """forgejo-import - Mirror GitHub users, organisations and repositories to Forgejo."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    setup_logging('DEBUG' if verbose else None)


@cli.command('mirror-org')
@_add_options(FORGEJO_OPTIONS + GITHUB_OPTIONS)
@VISIBILITY_OPTION
@click.option(
    '--org-display-name',
    help='the display name of the forgejo organisation to create, '
    'defaults to the one of the github organisation',
)
@click.option(
    '--org-username',
    help='the username of the forgejo organisation to create, '
    'defaults to the one of the github organisation',
)
@_add_options(FEATURE_OPTIONS)
@DRY_RUN_OPTION
@click.argument('github_organisation_name')
@click.pass_context
def mirror_org(
    ctx: click.Context,
    github_organisation_name: str,
    visibility: str,
    org_display_name: Optional[str],
    org_username: Optional[str],
    dry_run: bool,
    **options,
) -> None:
    """Mirror a github organisation, including all repositories you have access to."""
    _banner(f'Mirroring GitHub organisation {github_organisation_name}', 'blue', dry_run)

    try:
        values = _resolve_options(ctx, options, MIRROR_REQUIRED)

        params = MirrorOrganisationParams(
            forgejo=_forgejo_config(values),
            github_token=values['github_token'],
            github_organisation_name=github_organisation_name,
            visibility=Visibility(visibility),
            org_display_name=org_display_name,
            org_username=org_username,
            features=_features(values),
            dry_run=dry_run,
        )

        summary = asyncio.run(engine.mirror_organisation(params))
        _display_summary(summary)

    except Exception as e:
        _fail(ctx, 'Mirroring failed', e)


@cli.command('mirror-user')
@_add_options(FORGEJO_OPTIONS + GITHUB_OPTIONS)
@VISIBILITY_OPTION
@click.option(
    '--output-organisation-name',
    help='the name of the forgejo organisation to create the repositories in, '
    'defaults to the name of the github user',
)
@_add_options(FEATURE_OPTIONS)
@DRY_RUN_OPTION
@click.argument('github_user_name')
@click.pass_context
def mirror_user(
    ctx: click.Context,
    github_user_name: str,
    visibility: str,
    output_organisation_name: Optional[str],
    dry_run: bool,
    **options,
) -> None:
    """Mirror a github user, including all repositories you have access to."""
    _banner(f'Mirroring GitHub user {github_user_name}', 'blue', dry_run)

    try:
        values = _resolve_options(ctx, options, MIRROR_REQUIRED)

        params = MirrorUserParams(
            forgejo=_forgejo_config(values),
            github_token=values['github_token'],
            github_user_name=github_user_name,
            visibility=Visibility(visibility),
            output_organisation_name=output_organisation_name,
            features=_features(values),
            dry_run=dry_run,
        )

        summary = asyncio.run(engine.mirror_user(params))
        _display_summary(summary)

    except Exception as e:
        _fail(ctx, 'Mirroring failed', e)


@cli.command('mirror-repo')
@_add_options(FORGEJO_OPTIONS + GITHUB_OPTIONS)
@click.option(
    '--output-owner',
    required=True,
    help='the forgejo owner (user or organisation) to create the repository in',
)
@click.option(
    '--output-repository-name',
    help='the name of the forgejo repository, defaults to the github one',
)
@click.option(
    '--private',
    '-p',
    is_flag=True,
    help='make the repository private instead of inheriting the owner visibility',
)
@_add_options(FEATURE_OPTIONS)
@DRY_RUN_OPTION
@click.argument('github_repository_url')
@click.pass_context
def mirror_repo(
    ctx: click.Context,
    github_repository_url: str,
    output_owner: str,
    output_repository_name: Optional[str],
    private: bool,
    dry_run: bool,
    **options,
) -> None:
    """Mirror a github repository."""
    _banner(f'Mirroring {github_repository_url}', 'blue', dry_run)

    try:
        values = _resolve_options(ctx, options, MIRROR_REQUIRED)

        params = MirrorRepositoryParams(
            forgejo=_forgejo_config(values),
            github_token=values['github_token'],
            github_repository_url=github_repository_url,
            output_owner=output_owner,
            output_repository_name=output_repository_name,
            private=private,
            features=_features(values),
            dry_run=dry_run,
        )

        summary = asyncio.run(engine.mirror_repository(params))
        _display_summary(summary)

    except Exception as e:
        _fail(ctx, 'Mirroring failed', e)


@cli.command('delete-org')
@_add_options(FORGEJO_OPTIONS)
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@DRY_RUN_OPTION
@click.argument('forgejo_organisation_name')
@click.pass_context
def delete_org(
    ctx: click.Context,
    forgejo_organisation_name: str,
    yes: bool,
    dry_run: bool,
    **options,
) -> None:
    """Delete a forgejo organisation including all repositories."""
    _banner(f'Deleting Forgejo organisation {forgejo_organisation_name}', 'red', dry_run)

    if not yes and not dry_run:
        click.confirm(
            f'Delete {forgejo_organisation_name} and all of its repositories?',
            abort=True,
        )

    try:
        values = _resolve_options(ctx, options, FORGEJO_REQUIRED)

        params = DeleteOrganisationParams(
            forgejo=_forgejo_config(values),
            forgejo_organisation_name=forgejo_organisation_name,
            dry_run=dry_run,
        )

        summary = asyncio.run(engine.delete_organisation(params))
        _display_summary(summary)

    except Exception as e:
        _fail(ctx, 'Deletion failed', e)


@cli.command()
@click.option(
    '--output',
    '-o',
    default='forgejo_import.config.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]forgejo-import[/bold green]\nInitializing configuration...',
            border_style='green',
        )
    )

    try:
        create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your Forgejo and GitHub details[/yellow]'
        )

    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {escape(str(e))}')
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the configuration defaults that commands will use."""
    console.print(
        Panel.fit(
            '[bold magenta]forgejo-import[/bold magenta]\nConfiguration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)

        source = ctx.obj.get('config_path') or search_config_in_default_locations()

        table = Table(title='Resolved Configuration')
        table.add_column('Setting', style='cyan')
        table.add_column('Value', style='green')

        table.add_row('Config File', str(source) if source else '(environment only)')
        table.add_row('Forgejo URL', config.forgejo_url or '-')
        table.add_row('Forgejo Token', _mask(config.forgejo_token))
        table.add_row('GitHub Token', _mask(config.github_token))
        table.add_row('Migrate Wiki', '✓' if config.migrate_wiki else '✗')
        table.add_row('Migrate LFS', '✓' if config.migrate_lfs else '✗')
        table.add_row('Log Level', config.log_level or 'INFO')

        console.print(table)

    except Exception as e:
        _fail(ctx, 'Failed to load configuration', e)


def _banner(message: str, style: str, dry_run: bool = False) -> None:
    console.print(
        Panel.fit(
            f'[bold {style}]forgejo-import[/bold {style}]\n{escape(message)}',
            border_style=style,
        )
    )
    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )


def _fail(ctx: click.Context, message: str, error: Exception) -> None:
    console.print(f'[red]✗[/red] {message}: {escape(str(error))}')
    if ctx.obj.get('verbose'):
        console.print_exception()
    sys.exit(1)


def _mask(token: Optional[str]) -> str:
    if not token:
        return '-'
    return token[:4] + '*' * max(len(token) - 4, 4)


def _load_config(ctx: click.Context) -> FileConfig:
    """Load file and environment defaults."""
    return load_config(ctx.obj.get('config_path'))


def _setup_logging_with_config(ctx: click.Context, config: FileConfig) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    log_level = 'DEBUG' if verbose else config.log_level
    setup_logging(level=log_level, log_file=config.log_file)


def _resolve_options(
    ctx: click.Context, options: Dict[str, Any], required: Iterable[str]
) -> Dict[str, Any]:
    """Apply config defaults to unset options and check required settings."""
    config = _load_config(ctx)
    _setup_logging_with_config(ctx, config)

    values = config.apply_to(options)
    require(values, required)
    return values


def _forgejo_config(values: Dict[str, Any]) -> ForgejoInstanceConfig:
    return ForgejoInstanceConfig(url=values['forgejo_url'], token=values['forgejo_token'])


def _features(values: Dict[str, Any]) -> MirrorFeatures:
    return MirrorFeatures(
        lfs=bool(values.get('migrate_lfs')),
        wiki=bool(values.get('migrate_wiki')),
        labels=values.get('migrate_labels', False),
        issues=values.get('migrate_issues', False),
        pull_requests=values.get('migrate_pull_requests', False),
        releases=values.get('migrate_releases', False),
        milestones=values.get('migrate_milestones', False),
    )


def _display_summary(summary: MirrorSummary) -> None:
    """Display the repositories handled by a command."""
    prefix = 'would be ' if summary.dry_run else ''

    if summary.created_owner:
        console.print(f'[green]✓[/green] Organisation {prefix}created: {summary.owner}')
    if summary.deleted_owner:
        console.print(f'[green]✓[/green] Organisation {prefix}deleted: {summary.owner}')

    table = Table(title=f'Summary for {summary.owner}')
    table.add_column('Repository', style='cyan')
    table.add_column('Result')

    for name in summary.mirrored:
        table.add_row(name, f'[green]{prefix}mirrored[/green]')
    for name in summary.skipped:
        table.add_row(name, '[yellow]skipped, already exists[/yellow]')
    for name in summary.deleted:
        table.add_row(name, f'[red]{prefix}deleted[/red]')

    console.print(table)
    console.print(
        f'[green]✓[/green] {len(summary.mirrored)} mirrored, '
        f'{len(summary.skipped)} skipped, {len(summary.deleted)} deleted'
    )


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Interrupted by user[/red]')
        sys.exit(1)
    except Exception as e:
        console.print(f'[red]Error: {escape(str(e))}[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
