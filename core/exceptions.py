"""
Exception types for ProxyLogs.

None of these are fatal: the console recovers from each of them locally and
keeps operating on the last snapshot it fetched successfully.
"""


class ProxyLogsError(Exception):
    """Base class for all ProxyLogs errors."""
    pass


class StoreUnavailable(ProxyLogsError):
    """The log store could not be reached while fetching or clearing records."""

    def __init__(self, message: str = "Log store unavailable", operation: str = "fetch"):
        super().__init__(message)
        self.operation = operation


class MalformedTimestamp(ProxyLogsError, ValueError):
    """A record timestamp could not be parsed."""

    def __init__(self, timestamp: str):
        super().__init__(f"Could not parse timestamp: {timestamp!r}")
        self.timestamp = timestamp


class ClipboardWriteFailure(ProxyLogsError):
    """Writing a record to the clipboard failed."""
    pass
