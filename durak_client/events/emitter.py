"""
Event emitter for client-side notifications.

The client owns one `EventEmitter` and emits a `ClientEventType` after each
change worth telling the outside world about: a reducer committed new state, a
command went out, a notice appeared or cleared. Presentation code subscribes to
it; nothing here feeds back into the dispatcher.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Optional, Union
import threading
import logging
from enum import Enum

logger = logging.getLogger("durak_client.events")


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class ClientEventType(Enum):
    """Notifications the client emits to its subscribers."""

    # Connection lifecycle
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    # State changes, one per reducer
    LOBBY_CHANGED = "lobby_changed"
    ROOM_CHANGED = "room_changed"
    GAME_CHANGED = "game_changed"

    # Traffic
    COMMAND_SENT = "command_sent"
    FRAME_DROPPED = "frame_dropped"

    # Notices
    COMMAND_ERROR = "command_error"
    INFO_MESSAGE = "info_message"
    NOTICE_CLEARED = "notice_cleared"


class EventEmitter:
    """
    Event emitter with priority-ordered subscriptions.

    Features:
    - Supports event subscription with priorities
    - Supports subscribing to all events with event type filtering in handler
    - A failing handler is logged and does not stop the others
    """

    def __init__(self):
        self._listeners = defaultdict(list)
        self._global_listeners = []
        self._listener_lock = threading.RLock()

    @staticmethod
    def _key(event_type: Union[str, Enum]) -> str:
        return event_type.name if isinstance(event_type, Enum) else event_type

    @staticmethod
    def _insert(handlers: list, handler: Dict[str, Any]) -> None:
        # Higher priorities first, equal priorities in subscription order
        for i, existing in enumerate(handlers):
            if existing["priority"] < handler["priority"]:
                handlers.insert(i, handler)
                return
        handlers.append(handler)

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when event occurs, signature: fn(event_data)
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        key = self._key(event_type)
        handler = {"callback": callback, "priority": priority.value}

        with self._listener_lock:
            self._insert(self._listeners[key], handler)

        def unsubscribe():
            with self._listener_lock:
                handlers = self._listeners[key]
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def on_any(
        self, callback: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """
        Subscribe to all events.

        Args:
            callback: Function to call for any event, signature: fn((event_type, event_data))
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        handler = {"callback": callback, "priority": priority.value}

        with self._listener_lock:
            self._insert(self._global_listeners, handler)

        def unsubscribe():
            with self._listener_lock:
                if handler in self._global_listeners:
                    self._global_listeners.remove(handler)

        return unsubscribe

    def emit(
        self, event_type: Union[str, Enum], data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Emit an event to all registered listeners.

        Global listeners receive ``(event_type, data)`` with the enum member
        itself when one was emitted.

        Args:
            event_type: The type of event to emit
            data: The data to include with the event
        """
        data = {} if data is None else data
        key = self._key(event_type)

        with self._listener_lock:
            handlers_to_call = [
                (handler["callback"], data) for handler in self._listeners.get(key, [])
            ]
            handlers_to_call.extend(
                (handler["callback"], (event_type, data))
                for handler in self._global_listeners
            )

        # Call handlers outside of the lock to avoid deadlocks
        for callback, args in handlers_to_call:
            try:
                callback(args)
            except Exception as e:
                logger.error(f"Error in event handler for {key}: {e}", exc_info=True)
