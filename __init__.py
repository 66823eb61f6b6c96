"""
ProxyLogs - A live console for structured reverse-proxy logs.

This package provides tools for polling, filtering, searching and exporting
the records held by a proxy log store, with a rich terminal UI and a
command-line interface.
"""

from .__version__ import __version__

# Import main modules for easy access
from . import config
from . import core
from . import ui
from . import utils

# Import CLI module for entry point
from . import cli

# Define what gets imported with "from proxylogs import *"
__all__ = [
    "config",
    "core",
    "ui",
    "utils",
    "cli",
    "__version__"
]

# Define the CLI entry point function
def main():
    """Main entry point for the CLI."""
    from .cli import main as cli_main
    return cli_main()
