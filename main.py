"""
Main application entry point for ProxyLogs.

This module provides the primary application interface and can be used
to launch the UI or run one-shot commands against the log store.
"""

import sys
import logging
import json
from collections import Counter
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import yaml
from datetime import datetime

from rich.console import Console
from rich.text import Text

from .config.config import Config
from .config.settings import Settings
from .core.console_controller import ConsoleController
from .core.exceptions import ProxyLogsError
from .core.fetcher import SnapshotFetcher
from .core.log_store import JsonLinesLogStore, LogStore, create_store
from .core.models import ALL, LEVELS, LogEntry
from .utils.file_utils import FileUtils
from .utils.formatting import FormattingUtils
from .utils.log_setup import setup_logging


def load_config(config_path: Optional[Path] = None, cli_options: Optional[Dict[str, Any]] = None,
                handler: Optional[logging.Handler] = None) -> Config:
    """
    Load configuration, apply CLI overrides and set up logging.

    Args:
        config_path: Path to configuration file
        cli_options: Options given on the command line
        handler: Log handler replacing the default stderr handler

    Returns:
        Config instance
    """
    config = Config.load(config_path)
    if cli_options:
        config.apply_cli_overrides(cli_options)

    setup_logging(config.logging.level, Path(config.logging.file) if config.logging.file else None, handler)
    return config


def build_store(config: Config) -> LogStore:
    """Create the store client described by the configuration."""
    return create_store(config.store.path, config.store.max_entries)


def run_app(config_path: Optional[Path] = None, store_path: Optional[Path] = None,
            theme: Optional[str] = None, poll_interval_ms: Optional[int] = None,
            auto_scroll: Optional[bool] = None) -> int:
    """
    Run the main application.

    Args:
        config_path: Path to configuration file
        store_path: Path to the JSON-lines log store
        theme: UI theme to use
        poll_interval_ms: Poll interval of the console in milliseconds
        auto_scroll: Whether the console follows new records

    Returns:
        Exit code
    """
    from textual.logging import TextualHandler

    from .ui.app import ProxyLogsApp

    try:
        config = load_config(config_path, {
            'store': store_path,
            'theme': theme,
            'poll_interval_ms': poll_interval_ms,
            'auto_scroll': auto_scroll,
        }, handler=TextualHandler())

        errors = config.validate()
        if errors:
            for error in errors:
                logging.error(f"Configuration error: {error}")
            return 1

        controller = ConsoleController(build_store(config), config)

        # Launch UI application
        app = ProxyLogsApp(config, controller)
        app.run()

        return 0

    except Exception as e:
        logging.error(f"Application error: {str(e)}")
        return 1


def _load_view(config: Config, level: str = ALL, category: str = ALL, search: str = "") -> ConsoleController:
    """Fetch the store once and apply filters, as the console would."""
    controller = ConsoleController(build_store(config), config)
    if not controller.fetcher.refresh():
        raise controller.last_error
    controller.set_filters(search, level, category)
    return controller


def run_show(config_path: Optional[Path] = None, store_path: Optional[Path] = None,
             level: str = ALL, category: str = ALL, search: str = "",
             console: Optional[Console] = None) -> int:
    """
    Print the filtered records, colored by level.

    Args:
        config_path: Path to configuration file
        store_path: Path to the JSON-lines log store
        level: Level filter ("all" or a level)
        category: Category filter ("all" or a category)
        search: Free-text search
        console: Rich console to print to

    Returns:
        Exit code
    """
    from .ui.themes.default import get_level_style

    try:
        config = load_config(config_path, {'store': store_path})
        controller = _load_view(config, level, category, search)

        console = console or Console()
        if controller.empty_message:
            console.print(controller.empty_message, style="dim")
            return 0

        for entry in controller.visible_entries:
            console.print(Text(FormattingUtils.format_line(entry), style=get_level_style(entry.level)),
                          soft_wrap=True)
        console.print(f"{controller.summary} records", style="dim")

        return 0

    except (ProxyLogsError, ValueError) as e:
        logging.error(f"Show error: {str(e)}")
        return 1


def run_export(config_path: Optional[Path] = None, store_path: Optional[Path] = None,
               output_path: Optional[Path] = None, directory: Optional[Path] = None,
               to_stdout: bool = False, level: str = ALL, category: str = ALL,
               search: str = "") -> int:
    """
    Export the filtered records as plain text.

    Args:
        config_path: Path to configuration file
        store_path: Path to the JSON-lines log store
        output_path: Exact file to write
        directory: Directory receiving a timestamped proxy-logs file
        to_stdout: Print the export instead of writing a file
        level: Level filter ("all" or a level)
        category: Category filter ("all" or a category)
        search: Free-text search

    Returns:
        Exit code
    """
    try:
        config = load_config(config_path, {'store': store_path})
        controller = _load_view(config, level, category, search)

        if to_stdout:
            text = controller.export_text()
            if text:
                print(text)
            return 0

        if not controller.can_export:
            print("Nothing to export: the log store is empty", file=sys.stderr)
            return 1

        if output_path:
            if not FileUtils.safe_write_file(output_path, controller.export_text()):
                return 1
            path = output_path
        else:
            path = controller.export(directory)
            if path is None:
                return 1

        print(f"Exported {controller.visible_count} records to {path}")
        return 0

    except (ProxyLogsError, ValueError) as e:
        logging.error(f"Export error: {str(e)}")
        return 1


def run_clear(config_path: Optional[Path] = None, store_path: Optional[Path] = None) -> int:
    """
    Discard every record held by the store.

    Returns:
        Exit code
    """
    try:
        config = load_config(config_path, {'store': store_path})
        store = build_store(config)
        SnapshotFetcher(store).clear_store()
        print(f"Cleared log store: {store.describe()}")
        return 0

    except ProxyLogsError as e:
        logging.error(f"Clear error: {str(e)}")
        return 1


def run_emit(config_path: Optional[Path] = None, store_path: Optional[Path] = None,
             level: str = "INFO", category: str = "", message: str = "",
             data_json: Optional[str] = None) -> int:
    """
    Append one record to the JSON-lines store.

    Args:
        config_path: Path to configuration file
        store_path: Path to the JSON-lines log store
        level: Record level
        category: Record category
        message: Record message
        data_json: Optional JSON payload

    Returns:
        Exit code
    """
    try:
        config = load_config(config_path, {'store': store_path})
        store = build_store(config)
        if not isinstance(store, JsonLinesLogStore):
            print("Emitting records needs a file store (--store PATH)", file=sys.stderr)
            return 1

        data = json.loads(data_json) if data_json is not None else None
        entry = store.append(LogEntry(
            timestamp=FormattingUtils.iso_timestamp(),
            level=level,
            category=category,
            message=message,
            data=data
        ))
        print(FormattingUtils.format_line(entry))
        return 0

    except json.JSONDecodeError as e:
        logging.error(f"Invalid --data JSON: {str(e)}")
        return 1
    except ProxyLogsError as e:
        logging.error(f"Emit error: {str(e)}")
        return 1


def collect_stats(entries: List[LogEntry]) -> Dict[str, Any]:
    """
    Count records per level and category.

    Known levels are always listed, unknown ones are added after them.
    """
    level_counts = Counter(entry.level for entry in entries)
    levels = {level: level_counts.pop(level, 0) for level in LEVELS}
    levels.update(sorted(level_counts.items()))

    return {
        'timestamp': datetime.now().isoformat(),
        'total': len(entries),
        'with_data': sum(1 for entry in entries if entry.has_data),
        'levels': levels,
        'categories': dict(sorted(Counter(entry.category for entry in entries).items())),
    }


def run_stats(config_path: Optional[Path] = None, store_path: Optional[Path] = None,
              output_format: str = 'text') -> int:
    """
    Show statistics for the records held by the store.

    Args:
        config_path: Path to configuration file
        store_path: Path to the JSON-lines log store
        output_format: Output format ('json', 'yaml', 'text')

    Returns:
        Exit code
    """
    try:
        config = load_config(config_path, {'store': store_path})
        store = build_store(config)
        stats = collect_stats(SnapshotFetcher(store).fetch())
        stats['store'] = store.describe()

        # Output results
        if output_format == 'json':
            print(json.dumps(stats, indent=2))
        elif output_format == 'yaml':
            print(yaml.dump(stats, default_flow_style=False, sort_keys=False))
        else:
            print(f"Log Statistics - {stats['timestamp']}")
            print(f"Store: {stats['store']}")
            print(f"Records: {stats['total']} ({stats['with_data']} with data)")
            print("Levels:")
            for level, count in stats['levels'].items():
                print(f"  {level}: {count}")
            print("Categories:")
            for category, count in stats['categories'].items():
                print(f"  {category or '-'}: {count}")

        return 0

    except ProxyLogsError as e:
        logging.error(f"Stats error: {str(e)}")
        return 1


def _convert_option(current_value: Any, value: str) -> Any:
    """Convert a string option value to the type of the current value."""
    if isinstance(current_value, bool):
        return value.lower() in ['true', '1', 'yes', 'on']
    if isinstance(current_value, int):
        return int(value)
    if isinstance(current_value, float):
        return float(value)
    if current_value is None and value.lower() in ['none', 'null', '']:
        return None
    return value


def _lookup_option(config: Config, key: str, report: Callable[[str], None]) -> Optional[tuple]:
    """Resolve a 'section.option' key to (section object, option name)."""
    parts = key.split('.')
    if len(parts) != 2:
        report(f"Invalid option format: {key}. Use 'section.option' format")
        return None

    section, option = parts
    if section not in config.to_dict():
        report(f"Unknown section: {section}")
        return None

    section_obj = getattr(config, section)
    if not hasattr(section_obj, option):
        report(f"Unknown option: {option} in section {section}")
        return None

    return section_obj, option


def run_config_commands(config_path: Optional[Path] = None, set_options: Optional[List[tuple]] = None,
                        get_option: Optional[str] = None, list_config: bool = False,
                        validate_config: bool = False, reset_config: bool = False) -> int:
    """
    Run configuration management commands.

    Args:
        config_path: Path to configuration file
        set_options: List of (key, value) tuples to set
        get_option: Option to get
        list_config: Whether to list all configuration options
        validate_config: Whether to validate the configuration
        reset_config: Whether to reset to default configuration

    Returns:
        Exit code
    """
    def report(message: str) -> None:
        print(message, file=sys.stderr)

    try:
        # Determine config path (use default if not provided)
        if not config_path:
            config_path = Path(Settings.DEFAULT_CONFIG_PATH)
            if not config_path.exists():
                config_path = Path(Settings.DEFAULT_USER_CONFIG_PATH).expanduser()

        if reset_config:
            Config().save(config_path)
            print(f"Configuration reset to defaults: {config_path}")
            return 0

        config = load_config(config_path)

        if validate_config:
            errors = config.validate()
            if errors:
                report("Configuration validation failed:")
                for error in errors:
                    report(f"  - {error}")
                return 1
            print("Configuration is valid")
            return 0

        if set_options:
            for key, value in set_options:
                target = _lookup_option(config, key, report)
                if target is None:
                    return 1
                section_obj, option = target
                setattr(section_obj, option, _convert_option(getattr(section_obj, option), value))

            # Save the updated configuration
            config.save(config_path)
            print(f"Configuration updated: {config_path}")

        if get_option:
            target = _lookup_option(config, get_option, report)
            if target is None:
                return 1
            section_obj, option = target
            print(f"{get_option} = {getattr(section_obj, option)}")

        if list_config:
            print("Configuration:")
            for section, options in config.to_dict().items():
                print(f"  [{section}]")
                for key, value in options.items():
                    print(f"    {key} = {value}")
                print()

        return 0

    except (OSError, ValueError, yaml.YAMLError) as e:
        logging.error(f"Config command error: {str(e)}")
        return 1


def run_init(config_path: Optional[Path] = None) -> int:
    """
    Write a default configuration file.

    Returns:
        Exit code
    """
    config_path = config_path or Path(Settings.DEFAULT_CONFIG_PATH)
    if config_path.exists():
        print(f"Configuration file already exists: {config_path}", file=sys.stderr)
        return 1

    try:
        Config().save(config_path)
    except OSError as e:
        logging.error(f"Init error: {str(e)}")
        return 1

    print(f"Created default configuration file: {config_path}")
    return 0


def main() -> None:
    """Main entry point for the application."""
    # This function is typically called from the CLI
    # For direct execution, use default configuration
    exit_code = run_app()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
