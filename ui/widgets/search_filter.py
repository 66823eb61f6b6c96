"""
Search filter widget module for ProxyLogs Textual UI.

This module provides the filter bar of the console: free-text search,
level selection and category selection.
"""

from typing import List, Tuple
import logging

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Select

from ...core.models import ALL, LEVELS

ALL_LEVELS_LABEL = "All levels"
ALL_CATEGORIES_LABEL = "All categories"


def level_options() -> List[Tuple[str, str]]:
    """Options of the level select as (label, value) pairs."""
    return [(ALL_LEVELS_LABEL, ALL)] + [(level, level) for level in LEVELS]


def category_options(categories: List[str], current: str = ALL) -> List[Tuple[str, str]]:
    """
    Options of the category select as (label, value) pairs.

    The current selection is kept even when it no longer occurs in the
    snapshot, so the active filter stays visible to the operator.

    Args:
        categories: Distinct categories of the snapshot, sorted
        current: Currently selected category

    Returns:
        Option pairs, "all" first
    """
    values = list(categories)
    if current != ALL and current not in values:
        values = sorted(values + [current])
    return [(ALL_CATEGORIES_LABEL, ALL)] + [(category, category) for category in values]


class SearchFilter(Horizontal):
    """
    Widget for searching and filtering log records.
    """

    DEFAULT_CSS = """
    SearchFilter {
        height: auto;
        padding: 0 1;
    }
    SearchFilter #search-input {
        width: 1fr;
    }
    SearchFilter Select {
        width: 24;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.logger = logging.getLogger(self.__class__.__name__)

        self.search_term = ""
        self.level = ALL
        self.category = ALL
        self._categories: List[str] = []

        self.search_input = Input(placeholder="Search logs...", id="search-input")
        self.level_select = Select(level_options(), allow_blank=False, value=ALL, id="level-select")
        self.category_select = Select(category_options([]), allow_blank=False, value=ALL, id="category-select")
        self.clear_button = Button("Clear Filters", variant="warning", id="clear-filters-btn")

    def compose(self) -> ComposeResult:
        """Create child widgets for the search filter."""
        yield self.search_input
        yield self.level_select
        yield self.category_select
        yield self.clear_button

    def update_categories(self, categories: List[str]) -> None:
        """
        Refresh the category options from the current snapshot.

        Args:
            categories: Distinct categories, sorted
        """
        if categories == self._categories:
            return
        self._categories = list(categories)

        with self.category_select.prevent(Select.Changed):
            self.category_select.set_options(category_options(self._categories, self.category))
            self.category_select.value = self.category

    def reset(self) -> None:
        """Reset all inputs to their defaults without re-posting changes."""
        self.search_term = ""
        self.level = ALL
        self.category = ALL
        with self.search_input.prevent(Input.Changed):
            self.search_input.value = ""
        with self.level_select.prevent(Select.Changed):
            self.level_select.value = ALL
        with self.category_select.prevent(Select.Changed):
            self.category_select.set_options(category_options(self._categories))
            self.category_select.value = ALL

    def on_input_changed(self, event: Input.Changed) -> None:
        """Handle search text changes."""
        if event.input.id != "search-input":
            return
        event.stop()
        if event.value == self.search_term:
            return
        self.search_term = event.value
        self.post_message(self.FiltersChanged(self.search_term, self.level, self.category))

    def on_select_changed(self, event: Select.Changed) -> None:
        """Handle level and category selection."""
        event.stop()
        if event.select.id == "level-select" and event.value != self.level:
            self.level = event.value
        elif event.select.id == "category-select" and event.value != self.category:
            self.category = event.value
        else:
            return
        self.post_message(self.FiltersChanged(self.search_term, self.level, self.category))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle the clear filters button."""
        if event.button.id == "clear-filters-btn":
            event.stop()
            self.reset()
            self.post_message(self.FiltersCleared())

    class FiltersChanged(Message):
        """Message sent when any filter input changes."""

        def __init__(self, search_term: str, level: str, category: str) -> None:
            super().__init__()
            self.search_term = search_term
            self.level = level
            self.category = category

    class FiltersCleared(Message):
        """Message sent when the operator resets all filters."""
        pass
