"""
Log store clients for ProxyLogs.

The console only consumes the read/clear contract of a log store. This module
defines that contract and ships two clients: an in-memory store, used for
embedding and tests, and a JSON-lines file store that a proxy can append to.
"""

from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Any, Deque, List, Mapping, Optional, Union
import json
import logging
import threading

from .exceptions import StoreUnavailable
from .models import LogEntry
from ..utils.file_utils import FileUtils

Record = Union[LogEntry, Mapping[str, Any]]


class LogStore(ABC):
    """
    Read/clear contract of an external log store.
    """

    @abstractmethod
    def get_logs(self) -> List[LogEntry]:
        """
        Return the full current set of log records in store order.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """

    @abstractmethod
    def clear_logs(self) -> None:
        """
        Discard all stored records.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """

    def describe(self) -> str:
        """Short human-readable description of the store."""
        return self.__class__.__name__


class InMemoryLogStore(LogStore):
    """
    Log store holding records in process memory.

    When ``max_entries`` is set the oldest records are evicted first.
    """

    def __init__(self, records: Optional[List[Record]] = None, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._records: Deque[LogEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

        for record in records or []:
            self.append(record)

    def append(self, record: Record) -> LogEntry:
        """
        Add a record to the store.

        Args:
            record: LogEntry or mapping with LogEntry fields

        Returns:
            The stored entry
        """
        entry = record if isinstance(record, LogEntry) else LogEntry.from_dict(record)
        with self._lock:
            self._records.append(entry)
        return entry

    def get_logs(self) -> List[LogEntry]:
        with self._lock:
            return list(self._records)

    def clear_logs(self) -> None:
        with self._lock:
            self._records.clear()
        self.logger.debug("In-memory log store cleared")

    def describe(self) -> str:
        return f"memory ({len(self._records)} records)"


class JsonLinesLogStore(LogStore):
    """
    Log store backed by a file holding one JSON object per line.
    """

    def __init__(self, path: Union[str, Path], max_entries: Optional[int] = 5000):
        """
        Initialize the file store.

        Args:
            path: Path to the JSON-lines file; a missing file is an empty store
            max_entries: Number of most recent lines read per fetch (None reads all)
        """
        self.path = Path(path)
        self.max_entries = max_entries
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.Lock()

    def get_logs(self) -> List[LogEntry]:
        if not self.path.exists():
            return []

        try:
            with self._lock:
                lines = FileUtils.read_tail_lines(self.path, self.max_entries)
        except OSError as e:
            raise StoreUnavailable(f"Cannot read log store {self.path}: {e}", operation="fetch") from e

        entries = []
        skipped = 0
        for line in lines:
            entry = self._parse_line(line)
            if entry is None:
                if line.strip():
                    skipped += 1
                continue
            entries.append(entry)

        if skipped:
            self.logger.warning(f"Skipped {skipped} malformed line(s) in {self.path}")

        return entries

    def _parse_line(self, line: str) -> Optional[LogEntry]:
        """Parse one JSON line into a LogEntry, None if it is not a JSON object."""
        line = line.strip()
        if not line:
            return None
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            return None
        if not isinstance(record, dict):
            return None
        return LogEntry.from_dict(record)

    def clear_logs(self) -> None:
        try:
            with self._lock:
                FileUtils.truncate_file(self.path)
        except OSError as e:
            raise StoreUnavailable(f"Cannot clear log store {self.path}: {e}", operation="clear") from e
        self.logger.info(f"Cleared log store {self.path}")

    def append(self, record: Record) -> LogEntry:
        """
        Append a record to the file.

        Args:
            record: LogEntry or mapping with LogEntry fields

        Returns:
            The written entry

        Raises:
            StoreUnavailable: If the file cannot be written
        """
        entry = record if isinstance(record, LogEntry) else LogEntry.from_dict(record)
        line = json.dumps(entry.to_dict(), ensure_ascii=False, default=str)
        try:
            with self._lock:
                FileUtils.append_line(self.path, line)
        except OSError as e:
            raise StoreUnavailable(f"Cannot append to log store {self.path}: {e}", operation="append") from e
        return entry

    def describe(self) -> str:
        return str(self.path)


def create_store(path: Optional[Union[str, Path]] = None, max_entries: Optional[int] = 5000) -> LogStore:
    """
    Create the store client for a configured path.

    Args:
        path: JSON-lines file path, or None for an in-memory store
        max_entries: Retention/read bound passed to the store

    Returns:
        LogStore instance
    """
    if path:
        return JsonLinesLogStore(path, max_entries=max_entries)
    return InMemoryLogStore(max_entries=max_entries)
