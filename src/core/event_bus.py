"""
Event Bus Module

Publish/subscribe channel between the playback session and the views.
The session never imports Qt widgets; widgets learn about state changes only
through the events published here.

Every publisher runs on the Qt main thread (button clicks, menu shortcuts and
QTimer ticks), so callbacks are invoked right away in the publishing thread.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
from enum import Enum
import threading
import uuid
import logging

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class EventType(Enum):
    """Events published by the playback session"""

    # Payload: tuple of Track
    PLAYLIST_CHANGED = "playlist_changed"

    # Payload: Track
    TRACK_LOADED = "track_loaded"
    TRACK_STARTED = "track_started"
    TRACK_PAUSED = "track_paused"

    # Payload: ProgressSnapshot
    POSITION_CHANGED = "position_changed"

    # Payload: dict with "source", "error" (message) and "exception"
    ERROR_OCCURRED = "error_occurred"


class EventBus:
    """
    Process-wide event bus (singleton)

    Example:
        bus = EventBus()
        token = bus.subscribe(EventType.TRACK_STARTED, lambda track: print(track.display_name))
        bus.publish_sync(EventType.TRACK_STARTED, track)
        bus.unsubscribe(token)
    """

    _instance: Optional['EventBus'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'EventBus':
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        # Per event type, (token, callback) pairs in subscription order
        self._handlers: Dict[EventType, List[Tuple[str, Callback]]] = {}
        self._handlers_lock = threading.Lock()
        self._initialized = True

    def subscribe(self, event_type: EventType, callback: Callback) -> str:
        """
        Register a callback for one event type

        Returns:
            str: Token to pass to unsubscribe()
        """
        token = uuid.uuid4().hex
        with self._handlers_lock:
            self._handlers.setdefault(event_type, []).append((token, callback))
        return token

    def unsubscribe(self, token: str) -> bool:
        """Remove a subscription; returns False if the token is unknown"""
        with self._handlers_lock:
            for handlers in self._handlers.values():
                for index, (existing, _) in enumerate(handlers):
                    if existing == token:
                        del handlers[index]
                        return True
        return False

    def publish_sync(self, event_type: EventType, data: Any = None) -> None:
        """
        Deliver an event to its subscribers, in subscription order

        A failing callback is logged and does not stop delivery to the others.
        """
        with self._handlers_lock:
            handlers = [callback for _, callback in self._handlers.get(event_type, ())]

        for callback in handlers:
            try:
                callback(data)
            except Exception:
                # Never re-published as ERROR_OCCURRED, that could loop
                logger.exception("Subscriber for %s failed", event_type.value)

    def subscriber_count(self, event_type: EventType) -> int:
        with self._handlers_lock:
            return len(self._handlers.get(event_type, ()))

    def clear(self) -> None:
        """Drop every subscription"""
        with self._handlers_lock:
            self._handlers.clear()

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton (tests only)"""
        with cls._lock:
            cls._instance = None
