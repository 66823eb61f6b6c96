"""
Main Textual application UI for ProxyLogs.

This module provides the main UI application using Textual for terminal UI.
"""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from ..config.config import Config
from ..core.console_controller import ConsoleController
from .screens.log_console_screen import LogConsoleScreen
from .screens.main_screen import MainScreen
from .themes.default import DEFAULT_THEME_NAME, DefaultTheme


class ProxyLogsApp(App):
    """
    Main Textual application for ProxyLogs.
    """

    TITLE = "ProxyLogs"
    SUB_TITLE = "Live console for proxy log records"

    CSS = """
    #main-content {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("l", "toggle_console", "Log Console"),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+d", "quit", "Quit"),
    ]

    def __init__(self, config: Config, controller: ConsoleController):
        """
        Initialize the application.

        Args:
            config: Application configuration
            controller: Console controller shared by every console screen
        """
        self.config = config
        self.controller = controller
        self.logger = logging.getLogger(__name__)

        self.main_screen = MainScreen(config, controller)

        super().__init__()

        if self.controller.clipboard is None:
            self.controller.clipboard = self.copy_to_clipboard

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        yield Container(self.main_screen, id="main-content")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(DefaultTheme)
        self.theme = self._theme_name(self.config.display.theme)

        if self.config.display.open_console:
            self.open_console()

    def _theme_name(self, name: str) -> str:
        if name in ("", "default", DEFAULT_THEME_NAME):
            return DEFAULT_THEME_NAME
        if name not in self.available_themes:
            self.logger.warning(f"Unknown theme {name!r}, using the default theme")
            return DEFAULT_THEME_NAME
        return name

    @property
    def console_open(self) -> bool:
        return isinstance(self.screen, LogConsoleScreen)

    def open_console(self) -> None:
        """Show the log console on top of the main screen."""
        if not self.console_open:
            self.push_screen(LogConsoleScreen(self.config, self.controller))

    def close_console(self) -> None:
        if self.console_open:
            self.pop_screen()

    def action_toggle_console(self) -> None:
        """Open the log console, or close it if it is open."""
        if self.console_open:
            self.close_console()
        else:
            self.open_console()
        self.main_screen.refresh_store_info()
