"""
Main screen module for ProxyLogs Textual UI.

This module provides the background view shown behind the log console.
"""

import logging

from textual.app import ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Static

from ...config.config import Config
from ...core.console_controller import ConsoleController


class MainScreen(Container):
    """
    Main screen interface for ProxyLogs.
    """

    DEFAULT_CSS = """
    MainScreen {
        align: center middle;
    }
    MainScreen #main-panel {
        width: auto;
        height: auto;
        padding: 1 2;
        border: round $secondary;
    }
    MainScreen .screen-title {
        text-style: bold;
    }
    """

    def __init__(self, config: Config, controller: ConsoleController):
        """
        Initialize the main screen.

        Args:
            config: Application configuration
            controller: Console controller whose store is described here
        """
        super().__init__()

        self.config = config
        self.controller = controller
        self.logger = logging.getLogger(self.__class__.__name__)

        self.store_label = Static("", id="store-label")

    def compose(self) -> ComposeResult:
        """Create child widgets for the main screen."""
        yield Vertical(
            Static("ProxyLogs", classes="screen-title"),
            self.store_label,
            Static(f"Polling every {self.config.console.poll_interval_ms} ms while the console is open"),
            Static("Press L to open the log console, Q to quit"),
            id="main-panel"
        )

    def on_mount(self) -> None:
        self.refresh_store_info()

    def refresh_store_info(self) -> None:
        """Show which store the console reads from."""
        self.store_label.update(f"Store: {self.controller.store.describe()}")
