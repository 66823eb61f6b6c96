"""
Log snapshot fetching for ProxyLogs.

The fetcher pulls the full record set from the log store and keeps the last
snapshot that was retrieved successfully.
"""

from typing import List, Optional
import logging

from .exceptions import StoreUnavailable
from .log_store import LogStore
from .models import LogEntry, assign_identities


class SnapshotFetcher:
    """
    Retrieves snapshots from a log store and holds the last good one.
    """

    def __init__(self, store: LogStore):
        """
        Initialize the fetcher.

        Args:
            store: Log store client to read from
        """
        self.store = store
        self.snapshot: List[LogEntry] = []
        self.last_error: Optional[StoreUnavailable] = None
        self.fetch_count = 0
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch(self) -> List[LogEntry]:
        """
        Retrieve the store's current records.

        This is read-only: the held snapshot is not touched. Every returned
        entry carries its stable identity.

        Returns:
            Snapshot in store order

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        try:
            return assign_identities(self.store.get_logs())
        except StoreUnavailable:
            raise
        except Exception as e:
            raise StoreUnavailable(f"Failed to load logs: {e}", operation="fetch") from e

    def replace(self, snapshot: List[LogEntry]) -> None:
        """Install a snapshot as the last known good one."""
        self.snapshot = list(snapshot)
        self.last_error = None
        self.fetch_count += 1

    def refresh(self) -> bool:
        """
        Fetch and install a new snapshot.

        Returns:
            True if the snapshot was replaced, False if the store was
            unavailable and the previous snapshot was kept
        """
        try:
            snapshot = self.fetch()
        except StoreUnavailable as e:
            self.last_error = e
            self.logger.warning(f"Failed to load logs, keeping {len(self.snapshot)} cached: {e}")
            return False

        self.replace(snapshot)
        return True

    def clear_store(self) -> None:
        """
        Ask the store to discard all records.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        try:
            self.store.clear_logs()
        except StoreUnavailable:
            raise
        except Exception as e:
            raise StoreUnavailable(f"Failed to clear logs: {e}", operation="clear") from e

    def reset(self) -> None:
        """Drop the local snapshot."""
        self.snapshot = []

    def clear(self) -> bool:
        """
        Clear the store and the local snapshot.

        The local snapshot is emptied as soon as the store accepts the
        request, without waiting for a confirming fetch.

        Returns:
            True on success, False if the store was unavailable (the local
            snapshot is then left unchanged)
        """
        try:
            self.clear_store()
        except StoreUnavailable as e:
            self.last_error = e
            self.logger.warning(f"Failed to clear logs: {e}")
            return False

        self.reset()
        return True
