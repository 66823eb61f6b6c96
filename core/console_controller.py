"""
Console controller for ProxyLogs.

This module owns the live console's lifecycle and wires operator actions
(search, filter changes, clear, refresh, export, copy, expand) to the
fetcher, filter engine, expansion state and formatter.

All reactions run on one asyncio event loop. Store calls are the only
suspension points; they run in a worker thread so the loop stays responsive,
and their results are applied back on the loop.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import asyncio
import logging

from ..config.config import Config
from ..utils.file_utils import FileUtils
from ..utils.formatting import FormattingUtils
from . import event_bus as events
from .event_bus import EventBus
from .exceptions import ClipboardWriteFailure, StoreUnavailable
from .expansion import ExpansionState
from .fetcher import SnapshotFetcher
from .filter_engine import FilterEngine
from .log_store import LogStore
from .models import ALL, LEVELS, FilterCriteria, LogEntry, find_entry


class ConsoleState(Enum):
    """Lifecycle states of the console."""
    HIDDEN = "hidden"
    LOADING = "loading"
    POLLING = "polling"


EMPTY_STORE_MESSAGE = "No log records yet"
NO_MATCH_MESSAGE = "No matching log records"


class ConsoleController:
    """
    Controller behind the live log console.
    """

    def __init__(self, store: LogStore, config: Optional[Config] = None,
                 event_bus: Optional[EventBus] = None,
                 clipboard: Optional[Callable[[str], None]] = None):
        """
        Initialize the console controller.

        Args:
            store: Log store client
            config: Application configuration
            event_bus: Bus used to notify views, a private one is created if omitted
            clipboard: Callable placing text on the system clipboard
        """
        self.config = config or Config()
        self.event_bus = event_bus or EventBus()
        self.clipboard = clipboard
        self.logger = logging.getLogger(self.__class__.__name__)

        self.fetcher = SnapshotFetcher(store)
        self.criteria = FilterCriteria()
        self.expansion = ExpansionState()

        self.auto_scroll = self.config.console.auto_scroll
        self.poll_interval = self.config.poll_interval
        self.scroll_requests = 0
        self.last_export: Optional[Path] = None

        self._state = ConsoleState.HIDDEN
        self._poll_task: Optional[asyncio.Task] = None
        self._epoch = 0
        self._in_flight: Optional[object] = None
        self._visible: List[LogEntry] = []
        self._visible_keys: Tuple[str, ...] = ()
        self._categories: List[str] = []

    # Read-only views

    @property
    def store(self) -> LogStore:
        return self.fetcher.store

    @property
    def state(self) -> ConsoleState:
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._state is not ConsoleState.HIDDEN

    @property
    def is_loading(self) -> bool:
        return self._state is ConsoleState.LOADING or self._in_flight is not None

    @property
    def snapshot(self) -> List[LogEntry]:
        return self.fetcher.snapshot

    @property
    def visible_entries(self) -> List[LogEntry]:
        return self._visible

    @property
    def categories(self) -> List[str]:
        return self._categories

    @property
    def total_count(self) -> int:
        return len(self.fetcher.snapshot)

    @property
    def visible_count(self) -> int:
        return len(self._visible)

    @property
    def summary(self) -> str:
        return f"{self.visible_count} / {self.total_count}"

    @property
    def can_export(self) -> bool:
        return self.total_count > 0

    @property
    def can_clear(self) -> bool:
        return self.total_count > 0

    @property
    def empty_message(self) -> Optional[str]:
        if self.total_count == 0:
            return EMPTY_STORE_MESSAGE
        if self.visible_count == 0:
            return NO_MATCH_MESSAGE
        return None

    @property
    def last_error(self) -> Optional[StoreUnavailable]:
        return self.fetcher.last_error

    # Lifecycle

    def show(self) -> None:
        """
        Make the console visible and start polling.

        Must be called from a running event loop. The first fetch starts
        immediately, later ones every poll interval.
        """
        if self.is_visible:
            return

        self._set_state(ConsoleState.LOADING)
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())
        self.logger.debug("Console shown, polling every %.3fs", self.poll_interval)

    def hide(self) -> None:
        """
        Hide the console and stop polling.

        The poll task is cancelled before this returns, and the result of a
        fetch still in flight is discarded when it completes.
        """
        if not self.is_visible:
            return

        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

        self._epoch += 1
        self._in_flight = None
        self._set_state(ConsoleState.HIDDEN)
        self.logger.debug("Console hidden, polling stopped")

    async def _poll_loop(self) -> None:
        await self._fetch()
        if self._state is ConsoleState.LOADING:
            self._set_state(ConsoleState.POLLING)

        while True:
            await asyncio.sleep(self.poll_interval)
            await self._fetch()

    async def _fetch(self) -> bool:
        """
        Fetch a snapshot and apply it if it is still wanted.

        Returns:
            True if a new snapshot was applied
        """
        if self._in_flight is not None:
            self.logger.debug("Fetch skipped, previous fetch still in flight")
            return False

        token = object()
        epoch = self._epoch
        self._in_flight = token
        try:
            snapshot = await asyncio.to_thread(self.fetcher.fetch)
        except StoreUnavailable as e:
            if epoch == self._epoch:
                self.fetcher.last_error = e
                self.logger.warning(f"Failed to load logs: {e}")
                self.event_bus.publish(events.STORE_ERROR, e, source="console")
            return False
        finally:
            if self._in_flight is token:
                self._in_flight = None

        if epoch != self._epoch or not self.is_visible:
            self.logger.debug("Discarding stale snapshot of %d records", len(snapshot))
            return False

        self.fetcher.replace(snapshot)
        self._update_view()
        return True

    # Operator actions

    async def refresh(self) -> bool:
        """
        Fetch immediately.

        Returns:
            True if a new snapshot was applied, False if the console is
            hidden, a fetch is already in flight, or the store failed
        """
        if not self.is_visible:
            self.logger.debug("Refresh ignored while hidden")
            return False
        return await self._fetch()

    async def clear(self) -> bool:
        """
        Clear the log store.

        On success the local snapshot is emptied right away, without waiting
        for the next poll, and any fetch in flight is discarded.

        Returns:
            True on success, False if the store was unavailable
        """
        try:
            await asyncio.to_thread(self.fetcher.clear_store)
        except StoreUnavailable as e:
            self.fetcher.last_error = e
            self.logger.warning(f"Failed to clear logs: {e}")
            self.event_bus.publish(events.STORE_ERROR, e, source="console")
            return False

        self._epoch += 1
        self.fetcher.reset()
        self.expansion.clear()
        self._update_view()
        self.logger.info("Log store cleared")
        return True

    def set_search_text(self, text: str) -> None:
        self.criteria.search_text = text or ""
        self._update_view()

    def set_level_filter(self, level: str) -> None:
        """
        Restrict the view to one level.

        Raises:
            ValueError: If the level is neither "all" nor a known level
        """
        if level != ALL and level not in LEVELS:
            raise ValueError(f"Unknown level filter: {level!r}")
        self.criteria.level_filter = level
        self._update_view()

    def set_category_filter(self, category: str) -> None:
        self.criteria.category_filter = category or ALL
        self._update_view()

    def set_filters(self, search_text: str, level: str, category: str) -> None:
        """Apply all three filter inputs at once, recomputing the view once."""
        if level != ALL and level not in LEVELS:
            raise ValueError(f"Unknown level filter: {level!r}")
        self.criteria.search_text = search_text or ""
        self.criteria.level_filter = level
        self.criteria.category_filter = category or ALL
        self._update_view()

    def reset_filters(self) -> None:
        self.criteria.reset()
        self._update_view()

    def toggle_expanded(self, position: int) -> bool:
        """
        Flip the expansion of the record at a position of the visible list.

        Args:
            position: Row index in the visible list

        Returns:
            True if the record is now expanded, False if it is collapsed or
            the position is out of range
        """
        entry = find_entry(self._visible, position)
        if entry is None:
            self.logger.debug(f"Ignoring expansion toggle for row {position}")
            return False

        expanded = self.expansion.toggle(entry.entry_id)
        self.event_bus.publish(events.EXPANSION_CHANGED, position, source="console")
        return expanded

    def is_expanded(self, position: int) -> bool:
        entry = find_entry(self._visible, position)
        return entry is not None and self.expansion.is_expanded(entry.entry_id)

    def set_auto_scroll(self, enabled: bool) -> None:
        self.auto_scroll = bool(enabled)
        self.event_bus.publish(events.AUTO_SCROLL_CHANGED, self.auto_scroll, source="console")

    def toggle_auto_scroll(self) -> bool:
        self.set_auto_scroll(not self.auto_scroll)
        return self.auto_scroll

    def export_text(self) -> str:
        """Render the currently visible records as export text."""
        return FormattingUtils.export_text(self._visible)

    def export(self, directory: Optional[Path] = None, moment: Optional[datetime] = None) -> Optional[Path]:
        """
        Write the visible records to a timestamped log file.

        Args:
            directory: Target directory (defaults to the configured export dir)
            moment: Export time used in the file name (defaults to now)

        Returns:
            Path of the written file, or None if writing failed
        """
        directory = Path(directory or self.config.console.export_dir).expanduser()
        path = directory / FormattingUtils.export_filename(moment)

        if not FileUtils.safe_write_file(path, self.export_text()):
            self.logger.error(f"Failed to export logs to {path}")
            return None

        self.last_export = path
        self.logger.info(f"Exported {self.visible_count} records to {path}")
        return path

    def copy_entry(self, position: int) -> Optional[str]:
        """
        Copy the record at a position of the visible list to the clipboard.

        Clipboard failures are logged and otherwise ignored.

        Args:
            position: Row index in the visible list

        Returns:
            The copied text, or None if the position is out of range
        """
        entry = find_entry(self._visible, position)
        if entry is None:
            return None

        text = FormattingUtils.format_block(entry)
        try:
            if self.clipboard is None:
                raise ClipboardWriteFailure("No clipboard available")
            self.clipboard(text)
        except Exception as e:
            self.logger.debug(f"Clipboard write failed: {e}")
        return text

    # View maintenance

    def _set_state(self, state: ConsoleState) -> None:
        old_state = self._state
        self._state = state
        if old_state is not state:
            self.event_bus.publish(events.STATE_CHANGED, state, source="console")

    def _update_view(self) -> None:
        """Recompute the visible list and notify views."""
        snapshot = self.fetcher.snapshot
        self._visible = FilterEngine.visible(snapshot, self.criteria)
        self._categories = FilterEngine.distinct_categories(snapshot)

        keys = tuple(entry.entry_id for entry in self._visible)
        changed = keys != self._visible_keys
        self._visible_keys = keys

        self.event_bus.publish(events.VIEW_CHANGED, changed, source="console")

        if changed and self.auto_scroll and self._visible:
            self.scroll_requests += 1
            self.event_bus.publish(events.SCROLL_TO_END, len(self._visible) - 1, source="console")
