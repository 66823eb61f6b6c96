"""
Pytest configuration for ProxyLogs tests.

This file contains fixtures and configuration for the test suite.
"""

import pytest
import json
import logging
import tempfile
import os
from pathlib import Path
from unittest.mock import Mock

from proxylogs.config.config import Config
from proxylogs.core.log_store import InMemoryLogStore, JsonLinesLogStore
from proxylogs.core.models import LogEntry


SAMPLE_RECORDS = [
    {'timestamp': "2024-01-01T00:00:00.000Z", 'level': "INFO", 'category': "routing",
     'message': "Proxy started on port 8080"},
    {'timestamp': "2024-01-01T00:00:01.250Z", 'level': "ERROR", 'category': "auth",
     'message': "failed", 'data': {'code': 401}},
    {'timestamp': "2024-01-01T00:00:02.500Z", 'level': "WARN", 'category': "upstream",
     'message': "Slow response from backend", 'data': {'ms': 1530, 'host': "api.internal"}},
    {'timestamp': "2024-01-01T00:00:03.000Z", 'level': "DEBUG", 'category': "routing",
     'message': "Matched route /api/*"},
    {'timestamp': "2024-01-01T00:00:04.000Z", 'level': "ERROR", 'category': "upstream",
     'message': "Error connecting to backend", 'data': {'retry': True}},
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PROXYLOGS_* variables of the host out of the tests."""
    for name in list(os.environ):
        if name.startswith('PROXYLOGS_'):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    yield

    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample configuration for testing."""
    config = Config()
    config.store.path = None
    config.console.poll_interval_ms = 10  # Faster for tests
    config.console.export_dir = str(tmp_path / "exports")
    return config


@pytest.fixture
def sample_entries():
    """Sample log entries in store order."""
    return [LogEntry.from_dict(record) for record in SAMPLE_RECORDS]


@pytest.fixture
def memory_store(sample_entries):
    """Create an in-memory store holding the sample entries."""
    return InMemoryLogStore(sample_entries)


@pytest.fixture
def temp_store_file():
    """Create a temporary JSON-lines store file for testing."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.jsonl', delete=False) as f:
        for record in SAMPLE_RECORDS:
            f.write(json.dumps(record) + "\n")
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        os.unlink(temp_path)


@pytest.fixture
def file_store(temp_store_file):
    """Create a JSON-lines store over the temporary store file."""
    return JsonLinesLogStore(temp_store_file)


@pytest.fixture
def mock_event_bus():
    """Create a mock event bus for testing."""
    mock = Mock()
    mock.subscribe = Mock()
    mock.publish = Mock()
    mock.unsubscribe = Mock()
    return mock
