"""
Expansion state for ProxyLogs.

Tracks which records currently show their structured payload. Keys are the
stable entry identities assigned at fetch time, so an expanded record stays
expanded when a filter change moves it to another row.
"""

from typing import Hashable, Set


class ExpansionState:
    """
    Set of expanded record keys.
    """

    def __init__(self):
        self._expanded: Set[Hashable] = set()

    def toggle(self, key: Hashable) -> bool:
        """
        Flip the expansion of a record.

        Args:
            key: Record identity

        Returns:
            True if the record is now expanded
        """
        if key in self._expanded:
            self._expanded.discard(key)
            return False
        self._expanded.add(key)
        return True

    def is_expanded(self, key: Hashable) -> bool:
        return key in self._expanded

    def clear(self) -> None:
        self._expanded.clear()

    def __len__(self) -> int:
        return len(self._expanded)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._expanded
