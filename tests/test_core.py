"""
Core functionality tests for ProxyLogs.

This module contains tests for the core components of the application.
"""

import pytest
import json
from pathlib import Path
from unittest.mock import Mock

from proxylogs.config.config import Config
from proxylogs.core.event_bus import Event, EventBus
from proxylogs.core.exceptions import StoreUnavailable
from proxylogs.core.expansion import ExpansionState
from proxylogs.core.fetcher import SnapshotFetcher
from proxylogs.core.filter_engine import FilterEngine
from proxylogs.core.log_store import InMemoryLogStore, JsonLinesLogStore, create_store
from proxylogs.core.models import (
    ALL, FilterCriteria, LogEntry, assign_identities, entry_identity, find_entry
)
from proxylogs.main import build_store
from proxylogs.utils.file_utils import FileUtils


class FailingStore(InMemoryLogStore):
    """Store whose every operation fails."""

    def get_logs(self):
        raise ConnectionError("store offline")

    def clear_logs(self):
        raise ConnectionError("store offline")


class TestLogEntry:
    """Tests for the LogEntry model."""

    def test_from_dict_coerces_fields(self):
        """Test that missing and non-string fields are coerced."""
        entry = LogEntry.from_dict({'level': "INFO", 'message': 42, 'data': [1, 2]})

        assert entry.timestamp == ""
        assert entry.category == ""
        assert entry.message == "42"
        assert entry.data == [1, 2]

    def test_has_data_only_for_present_payload(self):
        """Test that falsy payloads still count as present."""
        assert not LogEntry(message="m").has_data
        assert LogEntry(message="m", data={}).has_data
        assert LogEntry(message="m", data=0).has_data

    def test_unknown_level_is_kept(self):
        """Test that an unrecognized level survives coercion."""
        entry = LogEntry.from_dict({'level': "TRACE", 'message': "m"})

        assert entry.level == "TRACE"
        assert not entry.is_known_level

    def test_to_dict_omits_absent_data(self):
        """Test converting an entry back to a store record."""
        entry = LogEntry("t", "INFO", "c", "m")

        assert entry.to_dict() == {'timestamp': "t", 'level': "INFO", 'category': "c", 'message': "m"}
        assert LogEntry("t", "INFO", "c", "m", {'a': 1}).to_dict()['data'] == {'a': 1}

    def test_identity_is_not_part_of_equality(self):
        """Test that entries differing only by identity compare equal."""
        assert LogEntry(message="m", entry_id="a") == LogEntry(message="m", entry_id="b")


class TestIdentities:
    """Tests for stable entry identities."""

    def test_identities_are_stable_across_fetches(self, sample_entries):
        """Test that the same record gets the same identity on every fetch."""
        first = assign_identities(sample_entries)
        second = assign_identities(sample_entries)

        assert [e.entry_id for e in first] == [e.entry_id for e in second]
        assert all(e.entry_id for e in first)

    def test_identity_survives_new_records(self, sample_entries):
        """Test that appending records does not change existing identities."""
        before = assign_identities(sample_entries)
        after = assign_identities(sample_entries + [LogEntry("t9", "INFO", "new", "appended")])

        assert [e.entry_id for e in after[:len(before)]] == [e.entry_id for e in before]

    def test_duplicates_get_distinct_identities(self):
        """Test that identical records are told apart by occurrence."""
        entry = LogEntry("t", "INFO", "c", "same")
        entries = assign_identities([entry, entry])

        assert entries[0].entry_id != entries[1].entry_id
        assert entries[0].entry_id == entry_identity(entry, 0)
        assert entries[1].entry_id == entry_identity(entry, 1)

    def test_mappings_are_coerced(self):
        """Test that raw store records are coerced to entries."""
        entries = assign_identities([{'level': "WARN", 'message': "m"}])

        assert isinstance(entries[0], LogEntry)
        assert entries[0].level == "WARN"

    def test_find_entry_out_of_range(self, sample_entries):
        """Test position lookups."""
        assert find_entry(sample_entries, 0) is sample_entries[0]
        assert find_entry(sample_entries, len(sample_entries)) is None
        assert find_entry(sample_entries, -1) is None


class TestFilterEngine:
    """Tests for the FilterEngine class."""

    def test_identity_criteria_returns_snapshot(self, sample_entries):
        """Test that default criteria keep every record in order."""
        assert FilterEngine.visible(sample_entries, FilterCriteria()) == sample_entries

    def test_level_filter(self, sample_entries):
        """Test filtering by exact level."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(level_filter="ERROR"))

        assert [e.message for e in visible] == ["failed", "Error connecting to backend"]

    def test_level_filter_is_case_sensitive(self, sample_entries):
        """Test that level matching is exact."""
        assert FilterEngine.visible(sample_entries, FilterCriteria(level_filter="error")) == []

    def test_category_filter(self, sample_entries):
        """Test filtering by exact category."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(category_filter="routing"))

        assert len(visible) == 2
        assert all(e.category == "routing" for e in visible)

    def test_search_is_case_insensitive(self, sample_entries):
        """Test that "ERR" matches "Error connecting"."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(search_text="ERR"))

        assert [e.message for e in visible] == ["Error connecting to backend"]

    def test_search_matches_category(self, sample_entries):
        """Test that search covers the category."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(search_text="UPSTREAM"))

        assert len(visible) == 2

    def test_search_matches_payload_json(self, sample_entries):
        """Test that search covers the compact JSON of the payload."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(search_text='"code":401'))

        assert [e.category for e in visible] == ["auth"]

    def test_search_ignores_absent_payload(self):
        """Test that a record without data does not match "null"."""
        entries = [LogEntry("t", "INFO", "c", "m")]

        assert FilterEngine.visible(entries, FilterCriteria(search_text="null")) == []

    def test_criteria_combine(self, sample_entries):
        """Test that all criteria must hold."""
        criteria = FilterCriteria(search_text="backend", level_filter="WARN", category_filter="upstream")
        visible = FilterEngine.visible(sample_entries, criteria)

        assert [e.message for e in visible] == ["Slow response from backend"]

    def test_visible_is_ordered_subsequence(self, sample_entries):
        """Test that filtering preserves store order."""
        visible = FilterEngine.visible(sample_entries, FilterCriteria(search_text="o"))
        positions = [sample_entries.index(e) for e in visible]

        assert positions == sorted(positions)

    def test_unknown_levels_are_never_dropped(self):
        """Test that unrecognized levels pass the "all" filter and get listed."""
        entries = [LogEntry("t", "TRACE", "misc", "m")]

        assert FilterEngine.visible(entries, FilterCriteria(search_text="m")) == entries
        assert FilterEngine.distinct_categories(entries) == ["misc"]

    def test_distinct_categories_sorted(self):
        """Test that categories are deduplicated and sorted."""
        entries = [LogEntry(category=c) for c in ["b", "a", "a", "c"]]

        assert FilterEngine.distinct_categories(entries) == ["a", "b", "c"]

    def test_criteria_reset(self):
        """Test restoring the default criteria."""
        criteria = FilterCriteria("x", "ERROR", "auth")
        criteria.reset()

        assert criteria == FilterCriteria()
        assert criteria.is_identity
        assert criteria.level_filter == ALL


class TestExpansionState:
    """Tests for the ExpansionState class."""

    def test_toggle(self):
        """Test flipping a key on and off."""
        state = ExpansionState()

        assert state.toggle("a") is True
        assert state.is_expanded("a")
        assert state.toggle("a") is False
        assert not state.is_expanded("a")

    def test_clear(self):
        """Test collapsing everything."""
        state = ExpansionState()
        state.toggle("a")
        state.toggle("b")

        assert len(state) == 2
        state.clear()
        assert len(state) == 0
        assert "a" not in state


class TestSnapshotFetcher:
    """Tests for the SnapshotFetcher class."""

    def test_fetch_does_not_touch_snapshot(self, memory_store):
        """Test that fetch is read-only."""
        fetcher = SnapshotFetcher(memory_store)
        snapshot = fetcher.fetch()

        assert len(snapshot) == 5
        assert fetcher.snapshot == []

    def test_refresh_replaces_snapshot(self, memory_store):
        """Test installing a fetched snapshot."""
        fetcher = SnapshotFetcher(memory_store)

        assert fetcher.refresh() is True
        assert len(fetcher.snapshot) == 5
        assert fetcher.fetch_count == 1
        assert fetcher.last_error is None

    def test_failure_keeps_previous_snapshot(self, sample_entries):
        """Test that a failed fetch keeps the last good snapshot."""
        fetcher = SnapshotFetcher(InMemoryLogStore(sample_entries))
        fetcher.refresh()
        fetcher.store = FailingStore()

        assert fetcher.refresh() is False
        assert len(fetcher.snapshot) == 5
        assert isinstance(fetcher.last_error, StoreUnavailable)

    def test_fetch_wraps_store_errors(self):
        """Test that any store exception becomes StoreUnavailable."""
        fetcher = SnapshotFetcher(FailingStore())

        with pytest.raises(StoreUnavailable) as exc_info:
            fetcher.fetch()
        assert exc_info.value.operation == "fetch"

    def test_clear_is_optimistic(self, memory_store):
        """Test that the local snapshot empties without a confirming fetch."""
        fetcher = SnapshotFetcher(memory_store)
        fetcher.refresh()
        fetch_count = fetcher.fetch_count

        assert fetcher.clear() is True
        assert fetcher.snapshot == []
        assert fetcher.fetch_count == fetch_count
        assert memory_store.get_logs() == []

    def test_clear_failure_leaves_snapshot(self, sample_entries):
        """Test that a failed clear changes nothing locally."""
        fetcher = SnapshotFetcher(InMemoryLogStore(sample_entries))
        fetcher.refresh()
        fetcher.store = FailingStore()

        assert fetcher.clear() is False
        assert len(fetcher.snapshot) == 5
        assert fetcher.last_error.operation == "clear"


class TestLogStores:
    """Tests for the shipped log store clients."""

    def test_memory_store_eviction(self):
        """Test that the oldest records are evicted first."""
        store = InMemoryLogStore(max_entries=2)
        for i in range(3):
            store.append(LogEntry(message=str(i)))

        assert [e.message for e in store.get_logs()] == ["1", "2"]

    def test_memory_store_unbounded_by_default(self):
        """Test that a store built without a bound keeps every record."""
        store = InMemoryLogStore()
        for i in range(10):
            store.append(LogEntry(message=str(i)))

        assert store.max_entries is None
        assert len(store.get_logs()) == 10

    def test_configured_stores_share_the_retention_bound(self, tmp_path):
        """Test that both configured store clients get store.max_entries."""
        config = Config()
        config.store.path = None
        config.store.max_entries = 3

        memory = build_store(config)
        for i in range(5):
            memory.append(LogEntry(message=str(i)))

        assert isinstance(memory, InMemoryLogStore)
        assert [e.message for e in memory.get_logs()] == ["2", "3", "4"]

        config.store.path = str(tmp_path / "logs.jsonl")
        assert build_store(config).max_entries == 3
        assert Config().store.max_entries == 5000

    def test_file_store_reads_records(self, file_store):
        """Test reading the JSON-lines file."""
        entries = file_store.get_logs()

        assert len(entries) == 5
        assert entries[1].data == {'code': 401}

    def test_file_store_missing_file_is_empty(self, tmp_path):
        """Test that a missing file is an empty store."""
        store = JsonLinesLogStore(tmp_path / "missing.jsonl")

        assert store.get_logs() == []

    def test_file_store_skips_malformed_lines(self, tmp_path):
        """Test that broken lines are skipped."""
        path = tmp_path / "logs.jsonl"
        path.write_text('{"level": "INFO", "message": "ok"}\nnot json\n[1, 2]\n\n')

        entries = JsonLinesLogStore(path).get_logs()

        assert [e.message for e in entries] == ["ok"]

    def test_file_store_reads_most_recent(self, temp_store_file):
        """Test that max_entries bounds the read to the newest lines."""
        entries = JsonLinesLogStore(temp_store_file, max_entries=2).get_logs()

        assert [e.level for e in entries] == ["DEBUG", "ERROR"]

    def test_file_store_append_and_clear(self, tmp_path):
        """Test appending to and truncating the file."""
        store = JsonLinesLogStore(tmp_path / "logs.jsonl")
        store.append({'level': "INFO", 'category': "c", 'message': "hello", 'data': {'k': "v"}})

        line = (tmp_path / "logs.jsonl").read_text().strip()
        assert json.loads(line)['data'] == {'k': "v"}
        assert store.get_logs()[0].message == "hello"

        store.clear_logs()
        assert store.get_logs() == []

    def test_file_store_unreadable(self, tmp_path):
        """Test that a read error becomes StoreUnavailable."""
        directory = tmp_path / "logs.jsonl"
        directory.mkdir()

        with pytest.raises(StoreUnavailable):
            JsonLinesLogStore(directory).get_logs()

    def test_create_store(self, tmp_path):
        """Test choosing the store client from a path."""
        assert isinstance(create_store(None), InMemoryLogStore)
        assert isinstance(create_store(tmp_path / "x.jsonl"), JsonLinesLogStore)


class TestFileUtils:
    """Tests for the FileUtils tail reader."""

    def test_read_tail_lines(self, tmp_path):
        """Test reading the last lines with and without a trailing newline."""
        path = tmp_path / "tail.txt"
        path.write_text("a\nb\nc\n")
        assert FileUtils.read_tail_lines(path, 2) == ["b", "c"]

        path.write_text("a\nb\nc")
        assert FileUtils.read_tail_lines(path, 2) == ["b", "c"]

    def test_read_tail_lines_more_than_available(self, tmp_path):
        """Test asking for more lines than the file holds."""
        path = tmp_path / "tail.txt"
        path.write_text("a\nb\n")

        assert FileUtils.read_tail_lines(path, 10) == ["a", "b"]
        assert FileUtils.read_tail_lines(path) == ["a", "b"]

    def test_read_tail_lines_empty_file(self, tmp_path):
        """Test reading an empty file."""
        path = tmp_path / "empty.txt"
        path.write_text("")

        assert FileUtils.read_tail_lines(path, 5) == []


class TestEventBus:
    """Tests for the EventBus class."""

    def test_publish_reaches_subscribers(self):
        """Test delivering an event."""
        bus = EventBus()
        handler = Mock()
        bus.subscribe("console.view_changed", handler)

        bus.publish("console.view_changed", True, source="test")

        event = handler.call_args[0][0]
        assert isinstance(event, Event)
        assert event.data is True
        assert event.source == "test"

    def test_unsubscribe(self):
        """Test removing a handler."""
        bus = EventBus()
        handler = Mock()
        bus.subscribe("x", handler)
        bus.unsubscribe("x", handler)
        bus.publish("x")

        handler.assert_not_called()
        assert bus.subscriber_count("x") == 0

    def test_failing_handler_does_not_stop_others(self):
        """Test that handler errors are contained."""
        bus = EventBus()
        good = Mock()
        bus.subscribe("x", Mock(side_effect=RuntimeError("boom")))
        bus.subscribe("x", good)

        bus.publish("x")

        good.assert_called_once()
