"""
Filter engine for ProxyLogs.

This module derives the visible list from a snapshot and the operator's
filter criteria. Filtering always runs on the full snapshot held by the
client; the store is never asked to filter.
"""

from typing import Iterable, List

from .models import ALL, FilterCriteria, LogEntry
from ..utils.formatting import FormattingUtils


class FilterEngine:
    """
    Stateless filtering operations over log snapshots.
    """

    @staticmethod
    def matches_search(entry: LogEntry, query: str) -> bool:
        """
        Check a record against a free-text query.

        Args:
            entry: Log record
            query: Search text (case-insensitive)

        Returns:
            True if the query is empty or found in the message, the category
            or the JSON form of the payload
        """
        if not query:
            return True

        query_lower = query.lower()
        if query_lower in entry.message.lower() or query_lower in entry.category.lower():
            return True
        if entry.has_data:
            return query_lower in FormattingUtils.to_json(entry.data).lower()
        return False

    @staticmethod
    def matches(entry: LogEntry, criteria: FilterCriteria) -> bool:
        """
        Check whether a record passes all filter criteria.

        Args:
            entry: Log record
            criteria: Active filter criteria

        Returns:
            True if the record is visible under the criteria
        """
        if criteria.level_filter != ALL and entry.level != criteria.level_filter:
            return False
        if criteria.category_filter != ALL and entry.category != criteria.category_filter:
            return False
        return FilterEngine.matches_search(entry, criteria.search_text)

    @staticmethod
    def visible(snapshot: Iterable[LogEntry], criteria: FilterCriteria) -> List[LogEntry]:
        """
        Compute the visible subset of a snapshot.

        Args:
            snapshot: Records in store order
            criteria: Active filter criteria

        Returns:
            Matching records in their original order
        """
        if criteria.is_identity:
            return list(snapshot)
        return [entry for entry in snapshot if FilterEngine.matches(entry, criteria)]

    @staticmethod
    def distinct_categories(snapshot: Iterable[LogEntry]) -> List[str]:
        """
        List the categories present in a snapshot.

        Args:
            snapshot: Full snapshot (not the filtered view)

        Returns:
            Distinct categories sorted ascending
        """
        return sorted({entry.category for entry in snapshot})
