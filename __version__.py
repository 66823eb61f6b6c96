"""Version information for ProxyLogs."""

__version__ = "0.1.0"
