"""
Event bus module for ProxyLogs.

This module provides the publish/subscribe channel the console controller
uses to notify views about state changes. A bus is created by whoever wires
the application together and injected into the controller.
"""

import threading
from typing import Any, Callable, Dict, List, Union
from dataclasses import dataclass
from datetime import datetime
import logging


# Event types published by the console controller
STATE_CHANGED = "console.state_changed"
VIEW_CHANGED = "console.view_changed"
SCROLL_TO_END = "console.scroll_to_end"
STORE_ERROR = "console.store_error"
EXPANSION_CHANGED = "console.expansion_changed"
AUTO_SCROLL_CHANGED = "console.auto_scroll_changed"


@dataclass
class Event:
    """
    Base event class for the event bus system.
    """
    type: str
    data: Any = None
    timestamp: datetime = None
    source: str = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


class EventBus:
    """
    Synchronous in-process event bus.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._handlers: Dict[str, List[Callable]] = {}
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

    def subscribe(self, event_type: str, handler: Callable):
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Function to call when event is published
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed to event type: {event_type}")

    def unsubscribe(self, event_type: str, handler: Callable):
        """
        Unsubscribe from an event type.

        Args:
            event_type: Type of event to unsubscribe from
            handler: Handler function to remove
        """
        with self._lock:
            if event_type in self._handlers:
                try:
                    self._handlers[event_type].remove(handler)
                    self.logger.debug(f"Unsubscribed from event type: {event_type}")
                except ValueError:
                    pass  # Handler was not subscribed

    def publish(self, event: Union[Event, str], data: Any = None, source: str = None):
        """
        Publish an event to all subscribed handlers.

        Args:
            event: Event object or event type string
            data: Data to include with the event (if event is a string)
            source: Source identifier for the event
        """
        if isinstance(event, str):
            event = Event(type=event, data=data, source=source)

        self.logger.debug(f"Publishing event: {event.type} from {event.source or 'unknown'}")

        with self._lock:
            handlers = list(self._handlers.get(event.type, []))

        # Execute handlers outside the lock so they may subscribe or unsubscribe
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event.type}: {str(e)}")

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, []))

    def clear_subscribers(self, event_type: str = None):
        """
        Clear subscribers for a specific event type or all types.

        Args:
            event_type: Event type to clear, or None to clear all
        """
        with self._lock:
            if event_type:
                self._handlers.pop(event_type, None)
                self.logger.debug(f"Cleared subscribers for event type: {event_type}")
            else:
                self._handlers.clear()
                self.logger.debug("Cleared all subscribers")
