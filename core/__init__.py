"""Core functionality module for ProxyLogs."""

from .models import LogEntry, FilterCriteria, LEVELS, ALL
from .exceptions import ProxyLogsError, StoreUnavailable, MalformedTimestamp, ClipboardWriteFailure
from .log_store import LogStore, InMemoryLogStore, JsonLinesLogStore, create_store
from .fetcher import SnapshotFetcher
from .filter_engine import FilterEngine
from .expansion import ExpansionState
from .event_bus import EventBus
from .console_controller import ConsoleController, ConsoleState

__all__ = [
    'LogEntry', 'FilterCriteria', 'LEVELS', 'ALL',
    'ProxyLogsError', 'StoreUnavailable', 'MalformedTimestamp', 'ClipboardWriteFailure',
    'LogStore', 'InMemoryLogStore', 'JsonLinesLogStore', 'create_store',
    'SnapshotFetcher', 'FilterEngine', 'ExpansionState', 'EventBus',
    'ConsoleController', 'ConsoleState',
]
