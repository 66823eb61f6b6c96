"""
Command Line Interface for ProxyLogs.

This module provides a CLI for launching the live console and performing
one-shot operations on the proxy log store from the command line.
"""

import click
import sys
from pathlib import Path
from typing import List, Optional
import os

from .main import (
    run_app, run_show, run_export, run_clear, run_emit, run_stats,
    run_config_commands, run_init
)
from .__version__ import __version__
from .core.models import ALL, LEVELS

LEVEL_CHOICES = click.Choice([ALL] + list(LEVELS))


def _set_verbosity(verbose: int) -> None:
    if verbose == 1:
        os.environ['PROXYLOGS_LOG_LEVEL'] = 'INFO'
    elif verbose >= 2:
        os.environ['PROXYLOGS_LOG_LEVEL'] = 'DEBUG'


@click.group(invoke_without_command=True, help="ProxyLogs - A live console for proxy log records.")
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Path to configuration file')
@click.option('--store', '-s', type=click.Path(path_type=Path),
              help='Path to the JSON-lines log store')
@click.option('--version', '-v', is_flag=True, help='Show version and exit')
@click.option('--verbose', '-V', count=True, help='Increase verbosity (use -VV for debug)')
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], store: Optional[Path],
        version: bool, verbose: int) -> None:
    """
    ProxyLogs - A live console for proxy log records.

    ProxyLogs polls a log store while its console is open, and lets you
    search, filter, expand, copy, export and clear the records it holds.

    Usage Examples:
      proxylogs                                  # Launch interactive UI
      proxylogs --store logs.jsonl view          # View a specific store
      proxylogs show --level ERROR               # Print error records
      proxylogs export --dir exports/            # Export to a timestamped file
      proxylogs stats --format json              # Show statistics
      proxylogs config --list                    # List configuration
    """
    # Store shared options in context
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["store_path"] = store

    if version:
        click.echo(f"ProxyLogs v{__version__}")
        return

    _set_verbosity(verbose)

    if ctx.invoked_subcommand is None:
        # Default command - run the main application in interactive mode
        exit_code = run_app(config_path=config, store_path=store)
        sys.exit(exit_code)


@cli.command(help="Open the live log console in the ProxyLogs UI (default mode).")
@click.option('--theme', type=str, default=None, help='UI theme to use')
@click.option('--poll-interval', type=click.IntRange(min=1), default=None, metavar='MS',
              help='Poll interval in milliseconds (default: 2000)')
@click.option('--no-auto-scroll', is_flag=True, help='Do not follow new records')
@click.pass_context
def view(ctx, theme: Optional[str], poll_interval: Optional[int], no_auto_scroll: bool) -> None:
    """
    Open the live log console in the ProxyLogs UI (default mode).

    Examples:
      proxylogs view                          # Launch with configured defaults
      proxylogs view --poll-interval 500      # Poll twice a second
      proxylogs view --theme textual-light    # Use a built-in Textual theme
    """
    exit_code = run_app(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'),
                        theme=theme, poll_interval_ms=poll_interval,
                        auto_scroll=False if no_auto_scroll else None)
    sys.exit(exit_code)


@cli.command(help="Print the log records matching the filters.")
@click.option('--level', '-l', type=LEVEL_CHOICES, default=ALL, help='Only records of this level')
@click.option('--category', '-k', type=str, default=ALL, help='Only records of this category')
@click.option('--search', '-q', type=str, default="", help='Case-insensitive text search')
@click.pass_context
def show(ctx, level: str, category: str, search: str) -> None:
    """
    Print the log records matching the filters.

    Examples:
      proxylogs show                          # Print every record
      proxylogs show --level ERROR            # Print error records
      proxylogs show -k auth -q timeout       # Search within a category
    """
    exit_code = run_show(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'),
                         level=level, category=category, search=search)
    sys.exit(exit_code)


@cli.command(help="Export the log records matching the filters to a text file.")
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Exact output file')
@click.option('--dir', '-d', 'directory', type=click.Path(file_okay=False, path_type=Path),
              help='Directory for a timestamped proxy-logs-*.log file')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the export instead of writing a file')
@click.option('--level', '-l', type=LEVEL_CHOICES, default=ALL, help='Only records of this level')
@click.option('--category', '-k', type=str, default=ALL, help='Only records of this category')
@click.option('--search', '-q', type=str, default="", help='Case-insensitive text search')
@click.pass_context
def export(ctx, output: Optional[Path], directory: Optional[Path], to_stdout: bool,
           level: str, category: str, search: str) -> None:
    """
    Export the log records matching the filters to a text file.

    Examples:
      proxylogs export                        # Timestamped file in the export dir
      proxylogs export -o today.log           # Exact file name
      proxylogs export --stdout --level WARN  # Print warnings
    """
    if output and directory:
        raise click.UsageError("--output and --dir are mutually exclusive")

    exit_code = run_export(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'),
                           output_path=output, directory=directory, to_stdout=to_stdout,
                           level=level, category=category, search=search)
    sys.exit(exit_code)


@cli.command(help="Discard every record held by the log store.")
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def clear(ctx, yes: bool) -> None:
    """
    Discard every record held by the log store.

    Example:
      proxylogs clear --yes
    """
    if not yes:
        click.confirm("Clear all proxy log records?", abort=True)

    exit_code = run_clear(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'))
    sys.exit(exit_code)


@cli.command(help="Append one record to the JSON-lines log store.")
@click.argument('level')
@click.argument('category')
@click.argument('message')
@click.option('--data', type=str, default=None, metavar='JSON', help='Structured payload as JSON')
@click.pass_context
def emit(ctx, level: str, category: str, message: str, data: Optional[str]) -> None:
    """
    Append one record to the JSON-lines log store.

    Examples:
      proxylogs emit INFO routing "Proxy started"
      proxylogs emit ERROR auth failed --data '{"code": 401}'
    """
    exit_code = run_emit(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'),
                         level=level, category=category, message=message, data_json=data)
    sys.exit(exit_code)


@cli.command(help="Show record counts per level and category.")
@click.option('--format', type=click.Choice(['json', 'yaml', 'text']),
              default='text', help='Output format (default: text)')
@click.pass_context
def stats(ctx, format: str) -> None:
    """
    Show record counts per level and category.

    Examples:
      proxylogs stats                   # Human readable summary
      proxylogs stats --format json     # Output stats as JSON
    """
    exit_code = run_stats(config_path=ctx.obj.get('config_path'), store_path=ctx.obj.get('store_path'),
                          output_format=format)
    sys.exit(exit_code)


@cli.command('config', help="Manage configuration settings.")
@click.option('--config', '-c', type=click.Path(path_type=Path),
              help='Path to configuration file (default: proxylogs.yaml)')
@click.option('--set', 'set_options', multiple=True, nargs=2, metavar='KEY VALUE',
              help='Set configuration option (e.g., --set console.poll_interval_ms 500)')
@click.option('--get', 'get_option', type=str,
              help='Get specific configuration option')
@click.option('--list', 'list_config', is_flag=True,
              help='List all configuration options')
@click.option('--validate', 'validate_config', is_flag=True,
              help='Validate configuration file')
@click.option('--reset', 'reset_config', is_flag=True,
              help='Reset to default configuration')
@click.pass_context
def config_cmd(ctx, config: Optional[Path], set_options: List[tuple],
               get_option: str, list_config: bool, validate_config: bool,
               reset_config: bool) -> None:
    """
    Manage configuration settings.

    Configuration options follow the format 'section.option', such as:
    - store.path
    - console.poll_interval_ms
    - display.theme
    - logging.level

    Examples:
      proxylogs config --list                              # List all config options
      proxylogs config --get console.export_dir            # Get specific option
      proxylogs config --set console.auto_scroll false     # Set an option
      proxylogs config --validate                          # Validate config
      proxylogs config --reset                             # Reset to defaults
    """
    exit_code = run_config_commands(config_path=config or ctx.obj.get('config_path'),
                                    set_options=list(set_options),
                                    get_option=get_option, list_config=list_config,
                                    validate_config=validate_config,
                                    reset_config=reset_config)
    sys.exit(exit_code)


@cli.command(help="Initialize a new configuration file.")
@click.argument('path', required=False, type=click.Path(dir_okay=False, path_type=Path))
def init(path: Optional[Path]) -> None:
    """
    Initialize a new configuration file.

    Creates a default proxylogs.yaml file in the current directory
    with sensible defaults for getting started with ProxyLogs.

    Example:
      proxylogs init    # Create default configuration
    """
    sys.exit(run_init(path))


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
