"""Configuration module for ProxyLogs."""

from .config import Config, ConsoleConfig, DisplayConfig, LoggingConfig, StoreConfig
from .settings import Settings

__all__ = ['Config', 'ConsoleConfig', 'DisplayConfig', 'LoggingConfig', 'StoreConfig', 'Settings']
