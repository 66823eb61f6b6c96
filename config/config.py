"""
Configuration management for ProxyLogs.

This module provides classes and methods for loading, validating,
and managing application configuration with CLI integration support.
"""

import yaml
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, asdict, field

from .settings import Settings


@dataclass
class StoreConfig:
    """Configuration for the log store client."""
    path: Optional[str] = Settings.DEFAULT_STORE_PATH
    max_entries: int = Settings.DEFAULT_MAX_ENTRIES


@dataclass
class ConsoleConfig:
    """Configuration for the live console."""
    poll_interval_ms: int = Settings.DEFAULT_POLL_INTERVAL_MS
    auto_scroll: bool = True
    export_dir: str = Settings.DEFAULT_EXPORT_DIR


@dataclass
class DisplayConfig:
    """Configuration for display settings."""
    theme: str = Settings.DEFAULT_THEME
    open_console: bool = True


@dataclass
class LoggingConfig:
    """Configuration for diagnostic logging."""
    level: str = Settings.DEFAULT_LOG_LEVEL
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class for ProxyLogs."""
    store: StoreConfig = field(default_factory=StoreConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        # Environment variable overrides
        if os.getenv('PROXYLOGS_STORE'):
            self.store.path = os.getenv('PROXYLOGS_STORE')
        if os.getenv('PROXYLOGS_POLL_INTERVAL_MS'):
            self.console.poll_interval_ms = int(os.getenv('PROXYLOGS_POLL_INTERVAL_MS'))
        if os.getenv('PROXYLOGS_EXPORT_DIR'):
            self.console.export_dir = os.getenv('PROXYLOGS_EXPORT_DIR')
        if os.getenv('PROXYLOGS_THEME'):
            self.display.theme = os.getenv('PROXYLOGS_THEME')
        if os.getenv('PROXYLOGS_LOG_LEVEL'):
            self.logging.level = os.getenv('PROXYLOGS_LOG_LEVEL')

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.console.poll_interval_ms / 1000.0

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from a YAML file or return default configuration.

        Args:
            config_path: Path to configuration file

        Returns:
            Config instance
        """
        # Check for config path in environment if not provided
        if not config_path:
            env_config_path = os.getenv('PROXYLOGS_CONFIG')
            if env_config_path:
                config_path = Path(env_config_path)

        if config_path and config_path.exists():
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
                if data is None:
                    data = {}
                return cls.from_dict(data)
        else:
            # Return default configuration
            return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Create Config instance from dictionary.

        Unknown sections are ignored.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        sections = {
            'store': StoreConfig,
            'console': ConsoleConfig,
            'display': DisplayConfig,
            'logging': LoggingConfig,
        }

        config_data = {}
        for name, section_cls in sections.items():
            section_data = data.get(name)
            config_data[name] = section_cls(**section_data) if isinstance(section_data, dict) else section_cls()

        return cls(**config_data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Config instance to dictionary.

        Returns:
            Configuration dictionary
        """
        return asdict(self)

    def save(self, config_path: Path) -> None:
        """
        Save configuration to a YAML file.

        Args:
            config_path: Path to save configuration file
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def validate(self) -> List[str]:
        """
        Validate the configuration and return a list of errors.

        Returns:
            List of validation errors, empty if valid
        """
        errors = []

        # Validate store settings
        if self.store.max_entries is not None and self.store.max_entries <= 0:
            errors.append("Store max entries must be positive")

        # Validate console settings
        if self.console.poll_interval_ms <= 0:
            errors.append("Console poll interval must be positive")
        if not self.console.export_dir:
            errors.append("Console export directory must not be empty")

        # Validate logging level
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid logging level: {self.logging.level}. Valid values: {', '.join(valid_log_levels)}")

        return errors

    def get_env_overrides(self) -> Dict[str, Any]:
        """
        Get configuration values that are overridden by environment variables.

        Returns:
            Dictionary of environment variable overrides
        """
        overrides = {}

        if os.getenv('PROXYLOGS_STORE'):
            overrides['store.path'] = os.getenv('PROXYLOGS_STORE')
        if os.getenv('PROXYLOGS_POLL_INTERVAL_MS'):
            overrides['console.poll_interval_ms'] = int(os.getenv('PROXYLOGS_POLL_INTERVAL_MS'))
        if os.getenv('PROXYLOGS_EXPORT_DIR'):
            overrides['console.export_dir'] = os.getenv('PROXYLOGS_EXPORT_DIR')
        if os.getenv('PROXYLOGS_THEME'):
            overrides['display.theme'] = os.getenv('PROXYLOGS_THEME')
        if os.getenv('PROXYLOGS_LOG_LEVEL'):
            overrides['logging.level'] = os.getenv('PROXYLOGS_LOG_LEVEL')

        return overrides

    def apply_cli_overrides(self, cli_options: Dict[str, Any]) -> None:
        """
        Apply command-line interface options as overrides to the configuration.

        Args:
            cli_options: Dictionary of CLI options to apply
        """
        if cli_options.get('store'):
            self.store.path = str(cli_options['store'])
        if cli_options.get('poll_interval_ms'):
            self.console.poll_interval_ms = cli_options['poll_interval_ms']
        if cli_options.get('auto_scroll') is not None:
            self.console.auto_scroll = cli_options['auto_scroll']
        if cli_options.get('export_dir'):
            self.console.export_dir = str(cli_options['export_dir'])
        if cli_options.get('theme'):
            self.display.theme = cli_options['theme']
        if cli_options.get('log_level'):
            self.logging.level = cli_options['log_level']
