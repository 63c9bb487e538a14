"""Event bus for internal application communication.

Provides a publish/subscribe mechanism for decoupled component communication.
The settings-update channel is an event on this bus: whatever collects a new
service URL (menu dialog, settings reload) publishes SETTINGS_CHANGED and the
controller applies it.

Usage:
    from app.events import EventBus, EventType

    bus = EventBus(async_mode=False)
    bus.subscribe(EventType.SETTINGS_CHANGED, lambda e: print(e.data))
    bus.publish(EventType.SETTINGS_CHANGED, {"nightscoutUrl": "https://ns.example.com"})
"""
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from config import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """Types of events that can be published/subscribed."""

    # Refresh pipeline events
    GLUCOSE_UPDATED = auto()
    READING_MISSING = auto()
    FETCH_FAILED = auto()
    CYCLE_SKIPPED = auto()

    # App lifecycle events
    APP_STARTING = auto()
    APP_STOPPING = auto()
    SETTINGS_CHANGED = auto()


@dataclass
class Event:
    """Represents an event with type and data.

    Attributes:
        event_type: The type of event.
        data: Optional dictionary with event-specific data.
        timestamp: When the event was created.
        source: Optional identifier of the event source.
    """
    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None

    def __str__(self) -> str:
        return f"Event({self.event_type.name}, data={self.data})"


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Thread-safe publish/subscribe event bus.

    Events are processed on a background thread by default; pass
    ``async_mode=False`` to deliver them synchronously in publish().

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe(EventType.GLUCOSE_UPDATED, lambda e: print(e.data))
        >>> bus.publish(EventType.GLUCOSE_UPDATED, {"title": " 120 +2 ↑"})
    """

    def __init__(self, async_mode: bool = True):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._lock = threading.Lock()
        self._async_mode = async_mode
        self._event_queue: queue.Queue = queue.Queue()
        self._running = False
        self._worker_thread: Optional[threading.Thread] = None

        if async_mode:
            self._start_worker()

    def _start_worker(self) -> None:
        """Start the background event processing thread."""
        self._running = True
        self._worker_thread = threading.Thread(
            target=self._process_events,
            daemon=True,
            name="EventBus-Worker"
        )
        self._worker_thread.start()
        logger.debug("EventBus worker thread started")

    def _process_events(self) -> None:
        """Process events from the queue in background thread."""
        while self._running:
            try:
                event = self._event_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self._dispatch_event(event)
            finally:
                self._event_queue.task_done()

    def _dispatch_event(self, event: Event) -> None:
        """Dispatch event to all subscribers."""
        with self._lock:
            handlers = self._subscribers.get(event.event_type, []).copy()

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event.event_type.name}: {e}",
                    exc_info=True
                )

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to an event type."""
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)

        logger.debug(f"Subscribed to {event_type.name}")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """Unsubscribe from an event type.

        Returns:
            True if handler was found and removed, False otherwise.
        """
        with self._lock:
            try:
                self._subscribers.get(event_type, []).remove(handler)
            except ValueError:
                return False
        logger.debug(f"Unsubscribed from {event_type.name}")
        return True

    def publish(self, event_type: EventType, data: Optional[Dict[str, Any]] = None,
                source: Optional[str] = None) -> None:
        """Publish an event.

        Args:
            event_type: The type of event to publish.
            data: Optional data to include with the event.
            source: Optional identifier of the event source.
        """
        event = Event(event_type=event_type, data=data or {}, source=source)

        if self._async_mode:
            self._event_queue.put(event)
        else:
            self._dispatch_event(event)

        logger.debug(f"Published {event_type.name}")

    def get_subscriber_count(self, event_type: EventType) -> int:
        """Get the number of subscribers for an event type."""
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def wait_until_idle(self) -> None:
        """Block until every queued event has been delivered."""
        if self._async_mode:
            self._event_queue.join()

    def shutdown(self) -> None:
        """Shutdown the event bus and stop the worker thread."""
        self._running = False
        if self._worker_thread:
            self._worker_thread.join(timeout=1.0)
        logger.debug("EventBus shut down")
