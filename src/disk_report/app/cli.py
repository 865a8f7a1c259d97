"""Command-line interface for disk-report."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TYPE_CHECKING

import click

from disk_report.core.config import ConfigurationError

if TYPE_CHECKING:
    from disk_report.app.runner import ApplicationRunner

# Configuration file discovery paths in order of precedence
# 1. Current directory
CURRENT_DIR_CONFIG_FILES = [
    'disk-report.yaml',
    'disk-report.yml',
]

# 2. User home directory
HOME_CONFIG_FILES = [
    '.disk-report.yaml',
    '.disk-report.yml',
]

# 3. System configuration directories
SYSTEM_CONFIG_PATHS = [
    Path('/etc/disk-report/config.yaml'),
    Path('/usr/local/etc/disk-report/config.yaml'),
]


def discover_config_file() -> Path | None:
    """Discover configuration file in standard locations.

    Searches for configuration files in the following order of precedence:
    1. Current directory (disk-report.yaml, disk-report.yml)
    2. User home directory (~/.disk-report.yaml, ~/.disk-report.yml)
    3. System directories (/etc/disk-report/, /usr/local/etc/disk-report/)

    Returns:
        Path to the first configuration file found, or None when the
        built-in defaults should be used.
    """
    for config_file in CURRENT_DIR_CONFIG_FILES:
        config_path = Path(config_file)
        if config_path.is_file():
            return config_path

    try:
        home_dir = Path.home()
    except (OSError, RuntimeError):
        # Path.home() can fail in some environments
        home_dir = None

    if home_dir is not None:
        for config_file in HOME_CONFIG_FILES:
            config_path = home_dir / config_file
            if config_path.is_file():
                return config_path

    for config_path in SYSTEM_CONFIG_PATHS:
        if config_path.is_file():
            return config_path

    return None


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate configuration file path.

    Raises:
        click.BadParameter: If the path is a directory or not a YAML file
    """
    if value is None:
        return value

    if value.is_dir():
        raise click.BadParameter('Configuration path must be a file, not a directory')

    valid_extensions = {'.yaml', '.yml'}
    if value.suffix.lower() not in valid_extensions:
        extensions_str = ", ".join(sorted(valid_extensions))
        raise click.BadParameter(
            f'Invalid configuration file extension. Supported extensions: {extensions_str}'
        )

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If the level is not a known logging level
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()

    valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
    if normalized_value not in valid_levels:
        raise click.BadParameter(
            f'Invalid log level "{value}". Valid options: {", ".join(sorted(valid_levels))}'
        )

    return normalized_value


try:
    __version__ = version("disk-report")
except PackageNotFoundError:
    __version__ = "unknown"


def _create_runner(ctx: click.Context) -> ApplicationRunner:
    """Build the ApplicationRunner from the group options stored on the context."""
    from disk_report.app.runner import ApplicationRunner

    options: dict[str, object] = ctx.ensure_object(dict)
    config: Path | None = options.get('config')  # pyright: ignore[reportAssignmentType]
    log_level: str | None = options.get('log_level')  # pyright: ignore[reportAssignmentType]
    config_path = config if config is not None else discover_config_file()

    try:
        return ApplicationRunner(config_path=config_path, log_level=log_level)
    except ConfigurationError as e:
        raise click.ClickException(f"Configuration error:\n{e}") from e


@click.group(invoke_without_command=True)
@click.option(
    '--config', '-c',
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help='Configuration file path (.yaml or .yml). If not specified, searches for config files in standard locations.'
)
@click.option(
    '--log-level', '-l',
    type=str,
    default=None,
    callback=validate_log_level,
    help='Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL)'
)
@click.version_option(version=__version__, prog_name='disk-report')
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    log_level: str | None,
) -> None:
    """disk-report - Show volume capacity and the largest top-level directories.

    Without a command, an interactive menu lets you scan the main volume,
    the attached volumes or all volumes, and list what is mounted.

    Examples:

        # Start the interactive menu
        disk-report

        # Report on the main volume without the menu
        disk-report scan

        # Report on every volume with a combined total
        disk-report scan --all

        # List mounted volumes
        disk-report volumes
    """
    options: dict[str, object] = ctx.ensure_object(dict)
    options['config'] = config
    options['log_level'] = log_level

    if ctx.invoked_subcommand is None:
        runner = _create_runner(ctx)
        try:
            ctx.exit(runner.run())
        except KeyboardInterrupt:
            click.echo("\nExiting program.")


@cli.command()
@click.argument('volumes', nargs=-1)
@click.option(
    '--all', '-a', 'all_volumes',
    is_flag=True,
    help='Scan every mounted volume and print the combined total'
)
@click.pass_context
def scan(ctx: click.Context, volumes: tuple[str, ...], all_volumes: bool) -> None:
    """Report capacity and top-level directory sizes for VOLUMES.

    Scans the main volume when no volume is given.
    """
    if volumes and all_volumes:
        raise click.UsageError('Pass volumes or --all, not both')

    runner = _create_runner(ctx)
    _ = runner.scan(volumes, all_volumes=all_volumes)


@cli.command(name='volumes')
@click.pass_context
def volumes_command(ctx: click.Context) -> None:
    """List the currently mounted volumes."""
    runner = _create_runner(ctx)
    _ = runner.list_volumes()


if __name__ == '__main__':
    cli()
