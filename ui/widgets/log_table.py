"""
Log table widget module for ProxyLogs Textual UI.

This module provides the table listing the visible log records.
"""

from typing import Callable, List, Optional, Tuple
import logging

from rich.text import Text
from textual.widgets import DataTable

from ...core.models import LogEntry
from ...utils.formatting import FormattingUtils
from ...utils.time_utils import TimeUtils
from ..themes.default import get_level_style, get_row_style


def build_row_cells(entry: LogEntry, expanded: bool = False) -> Tuple[Text, Text, Text, Text]:
    """
    Build the table cells for a record.

    Args:
        entry: Log record
        expanded: Whether to show the record's payload under its message

    Returns:
        Time, level, category and message cells
    """
    row_style = get_row_style(entry.level)

    time_cell = Text(TimeUtils.format_display_time(entry.timestamp), style=f"dim {row_style}".strip())
    level_cell = Text(entry.level or "-", style=f"{get_level_style(entry.level)} {row_style}".strip())
    category_cell = Text(f"[{entry.category}]", style=f"cyan {row_style}".strip())

    message_cell = Text(entry.message, style=row_style)
    if entry.has_data:
        if expanded:
            message_cell.append("\n")
            message_cell.append(FormattingUtils.to_pretty_json(entry.data), style="green")
        else:
            message_cell.append(" {…}", style="dim")

    return time_cell, level_cell, category_cell, message_cell


def row_height(entry: LogEntry, expanded: bool = False) -> int:
    """Number of lines a record occupies in the table."""
    if expanded and entry.has_data:
        return 2 + FormattingUtils.to_pretty_json(entry.data).count("\n")
    return 1


class LogTable(DataTable):
    """
    Table of log records with expandable payloads.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.logger = logging.getLogger(self.__class__.__name__)

    def on_mount(self) -> None:
        self._add_columns()

    def _add_columns(self) -> None:
        if self.columns:
            return
        self.add_column("Time", key="time", width=12)
        self.add_column("Level", key="level", width=7)
        self.add_column("Category", key="category")
        self.add_column("Message", key="message")

    def populate(self, entries: List[LogEntry], is_expanded: Callable[[int], bool]) -> None:
        """
        Replace the table rows.

        Args:
            entries: Visible records in display order
            is_expanded: Predicate telling whether the row at a position is expanded
        """
        self._add_columns()
        cursor_row = self.cursor_row
        self.clear()

        for position, entry in enumerate(entries):
            expanded = is_expanded(position)
            self.add_row(
                *build_row_cells(entry, expanded),
                height=row_height(entry, expanded),
                key=str(position)
            )

        if entries:
            self.move_cursor(row=min(max(cursor_row, 0), len(entries) - 1))

    @property
    def current_position(self) -> Optional[int]:
        """Position of the row under the cursor, None when the table is empty."""
        if self.row_count == 0:
            return None
        return self.cursor_row

    def scroll_to_newest(self) -> None:
        """Scroll the table to the last record."""
        if self.row_count:
            self.scroll_end(animate=False)
