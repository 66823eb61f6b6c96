"""
Log console screen module for ProxyLogs Textual UI.

This module provides the modal console showing live proxy logs. Mounting
the screen makes the console visible (polling starts), unmounting hides it
(polling stops).
"""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Static

from ...config.config import Config
from ...core import event_bus as events
from ...core.console_controller import ConsoleController, ConsoleState
from ..widgets.log_table import LogTable
from ..widgets.search_filter import SearchFilter


class LogConsoleScreen(ModalScreen):
    """
    Modal screen showing the live log console.
    """

    DEFAULT_CSS = """
    LogConsoleScreen {
        align: center middle;
    }
    LogConsoleScreen #console-dialog {
        width: 95%;
        height: 90%;
        border: round $primary;
        background: $surface;
    }
    LogConsoleScreen #console-title-bar {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    LogConsoleScreen #console-title {
        width: 1fr;
        text-style: bold;
    }
    LogConsoleScreen #console-count {
        width: auto;
    }
    LogConsoleScreen #console-toolbar {
        height: auto;
        padding: 0 1;
    }
    LogConsoleScreen #log-table {
        height: 1fr;
    }
    LogConsoleScreen #console-status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("r", "refresh", "Refresh"),
        Binding("e", "export", "Export"),
        Binding("x", "clear", "Clear"),
        Binding("a", "toggle_auto_scroll", "Auto-scroll"),
        Binding("c", "copy", "Copy"),
    ]

    def __init__(self, config: Config, controller: ConsoleController):
        """
        Initialize the log console screen.

        Args:
            config: Application configuration
            controller: Console controller driving this screen
        """
        super().__init__()

        self.config = config
        self.controller = controller
        self.logger = logging.getLogger(self.__class__.__name__)

        # Initialize widgets
        self.count_label = Static("0 / 0", id="console-count")
        self.search_filter = SearchFilter(id="search-filter")
        self.log_table = LogTable(id="log-table")
        self.status_label = Static("", id="console-status")
        self.refresh_button = Button("Refresh", id="refresh-btn", variant="primary")
        self.export_button = Button("Export", id="export-btn", variant="success")
        self.clear_button = Button("Clear", id="clear-btn", variant="error")
        self.auto_scroll_button = Button("", id="auto-scroll-btn")

        self._subscriptions = [
            (events.VIEW_CHANGED, self._on_view_changed),
            (events.SCROLL_TO_END, self._on_scroll_to_end),
            (events.STATE_CHANGED, self._on_state_changed),
            (events.EXPANSION_CHANGED, self._on_expansion_changed),
            (events.AUTO_SCROLL_CHANGED, self._on_auto_scroll_changed),
        ]

    def compose(self) -> ComposeResult:
        """Create child widgets for the console screen."""
        yield Vertical(
            Horizontal(
                Static("Proxy Logs", id="console-title"),
                self.count_label,
                id="console-title-bar"
            ),
            self.search_filter,
            Horizontal(
                self.refresh_button,
                self.export_button,
                self.clear_button,
                self.auto_scroll_button,
                id="console-toolbar"
            ),
            self.log_table,
            self.status_label,
            id="console-dialog"
        )

    def on_mount(self) -> None:
        """Called when the screen is mounted: the console becomes visible."""
        for event_type, handler in self._subscriptions:
            self.controller.event_bus.subscribe(event_type, handler)

        self._render_view()
        self.controller.show()
        self.log_table.focus()

    def on_unmount(self) -> None:
        """Called when the screen is removed: the console is hidden."""
        for event_type, handler in self._subscriptions:
            self.controller.event_bus.unsubscribe(event_type, handler)
        self.controller.hide()

    # Controller notifications

    def _on_view_changed(self, event: events.Event) -> None:
        # Same visible records: keep the table rows and its scroll position.
        if event.data is False:
            self._render_summary()
            return
        self._render_view()

    def _on_scroll_to_end(self, event: events.Event) -> None:
        self.log_table.scroll_to_newest()

    def _on_state_changed(self, event: events.Event) -> None:
        self._update_controls()

    def _on_expansion_changed(self, event: events.Event) -> None:
        self._render_table()

    def _on_auto_scroll_changed(self, event: events.Event) -> None:
        self._update_controls()

    def _render_view(self) -> None:
        """Redraw every part that depends on the snapshot or the filters."""
        self._render_table()
        self._render_summary()

    def _render_summary(self) -> None:
        self.search_filter.update_categories(self.controller.categories)
        self.count_label.update(self.controller.summary)
        self.status_label.update(self.controller.empty_message or self._status_text())
        self._update_controls()

    def _render_table(self) -> None:
        self.log_table.populate(self.controller.visible_entries, self.controller.is_expanded)

    def _status_text(self) -> str:
        if self.controller.last_export is not None:
            return f"Last export: {self.controller.last_export}"
        return ""

    def _update_controls(self) -> None:
        loading = self.controller.state is ConsoleState.LOADING
        self.refresh_button.disabled = loading
        self.refresh_button.label = "Loading..." if loading else "Refresh"
        self.export_button.disabled = not self.controller.can_export
        self.clear_button.disabled = not self.controller.can_clear
        self.auto_scroll_button.label = "Auto-scroll: ON" if self.controller.auto_scroll else "Auto-scroll: PAUSED"
        self.auto_scroll_button.variant = "primary" if self.controller.auto_scroll else "default"

    # Operator input

    def on_search_filter_filters_changed(self, message: SearchFilter.FiltersChanged) -> None:
        """Apply the filter bar's criteria."""
        self.controller.set_filters(message.search_term, message.level, message.category)

    def on_search_filter_filters_cleared(self, message: SearchFilter.FiltersCleared) -> None:
        self.controller.reset_filters()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Toggle the payload of the selected row."""
        self.controller.toggle_expanded(event.cursor_row)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        if event.button.id == "refresh-btn":
            self.action_refresh()
        elif event.button.id == "export-btn":
            self.action_export()
        elif event.button.id == "clear-btn":
            self.action_clear()
        elif event.button.id == "auto-scroll-btn":
            self.action_toggle_auto_scroll()

    def action_close(self) -> None:
        self.dismiss()

    def action_refresh(self) -> None:
        self.run_worker(self.controller.refresh(), exclusive=True, group="refresh")

    def action_clear(self) -> None:
        if self.controller.can_clear:
            self.run_worker(self.controller.clear(), group="clear")

    def action_export(self) -> None:
        """Export the visible records to a file."""
        if not self.controller.can_export:
            return
        path = self.controller.export()
        if path is None:
            self.notify("Export failed, see the diagnostic log", severity="error")
            return
        self.status_label.update(f"Last export: {path}")
        self.notify(f"Exported {self.controller.visible_count} records to {path}")

    def action_toggle_auto_scroll(self) -> None:
        self.controller.toggle_auto_scroll()

    def action_copy(self) -> None:
        """Copy the record under the cursor to the clipboard."""
        position = self.log_table.current_position
        if position is None:
            return
        if self.controller.copy_entry(position) is not None:
            self.notify("Copied log record")
