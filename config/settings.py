"""
Settings management for ProxyLogs.

This module provides application-wide settings and constants.
"""

from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings and constants."""

    # Application settings
    APP_NAME: str = "ProxyLogs"
    APP_VERSION: str = "0.1.0"

    # Default paths
    DEFAULT_CONFIG_PATH: str = "./proxylogs.yaml"
    DEFAULT_USER_CONFIG_PATH: str = "~/.proxylogs/config.yaml"
    DEFAULT_STORE_PATH: str = "./proxy-logs.jsonl"
    DEFAULT_EXPORT_DIR: str = "."

    # Store settings
    DEFAULT_MAX_ENTRIES: int = 5000

    # Console settings
    DEFAULT_POLL_INTERVAL_MS: int = 2000

    # UI settings
    DEFAULT_THEME: str = "default"

    # Logging settings
    DEFAULT_LOG_LEVEL: str = "INFO"
