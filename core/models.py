"""
Core data models for ProxyLogs.
"""
import hashlib
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

ERROR = "ERROR"
WARN = "WARN"
INFO = "INFO"
DEBUG = "DEBUG"

LEVELS: Tuple[str, ...] = (ERROR, WARN, INFO, DEBUG)
ALL = "all"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class LogEntry:
    """
    A single structured log record as produced by the log store.
    """
    timestamp: str = ""
    level: str = INFO
    category: str = ""
    message: str = ""
    data: Any = None
    entry_id: str = field(default="", compare=False)

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def is_known_level(self) -> bool:
        return self.level in LEVELS

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> 'LogEntry':
        """
        Create a LogEntry from a store record.

        Missing text fields become empty strings and non-string values are
        stringified; the payload is kept untouched.

        Args:
            record: Mapping with timestamp, level, category, message and data keys

        Returns:
            LogEntry instance
        """
        return cls(
            timestamp=_as_text(record.get('timestamp')),
            level=_as_text(record.get('level')),
            category=_as_text(record.get('category')),
            message=_as_text(record.get('message')),
            data=record.get('data'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry back to a store record."""
        result = {
            'timestamp': self.timestamp,
            'level': self.level,
            'category': self.category,
            'message': self.message,
        }
        if self.has_data:
            result['data'] = self.data
        return result


@dataclass
class FilterCriteria:
    """
    Operator-controlled constraints narrowing the visible list.
    """
    search_text: str = ""
    level_filter: str = ALL
    category_filter: str = ALL

    @property
    def is_identity(self) -> bool:
        return not self.search_text and self.level_filter == ALL and self.category_filter == ALL

    def reset(self) -> None:
        self.search_text = ""
        self.level_filter = ALL
        self.category_filter = ALL


def entry_identity(entry: LogEntry, occurrence: int) -> str:
    """
    Compute the stable identity of an entry.

    Args:
        entry: Entry to identify
        occurrence: How many identical entries precede it in the snapshot

    Returns:
        Hex digest identifying the entry across fetches
    """
    key = "\x1f".join((entry.timestamp, entry.level, entry.category, entry.message, str(occurrence)))
    return hashlib.sha1(key.encode('utf-8')).hexdigest()[:16]


def assign_identities(records: Iterable[Union[LogEntry, Mapping[str, Any]]]) -> List[LogEntry]:
    """
    Tag every record of a snapshot with its stable identity.

    Records given as mappings are coerced to LogEntry first.

    Args:
        records: Records in store order

    Returns:
        List of identified entries in the same order
    """
    seen: Dict[Tuple[str, str, str, str], int] = {}
    entries = []

    for record in records:
        entry = record if isinstance(record, LogEntry) else LogEntry.from_dict(record)
        key = (entry.timestamp, entry.level, entry.category, entry.message)
        occurrence = seen.get(key, 0)
        seen[key] = occurrence + 1
        entries.append(replace(entry, entry_id=entry_identity(entry, occurrence)))

    return entries


def find_entry(entries: List[LogEntry], position: int) -> Optional[LogEntry]:
    """Return the entry at a position of a list, or None when out of range."""
    if 0 <= position < len(entries):
        return entries[position]
    return None
