"""
Routing of inbound envelopes to their handlers.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Union

from durak_client.errors import ProtocolError
from durak_client.protocol.messages import Envelope, EventName

logger = logging.getLogger("durak_client.dispatcher")

Handler = Callable[[Any], None]


class EventDispatcher:
    """
    Routes each inbound envelope to the handler registered for its name.

    The handler table is fixed at construction and must cover every
    `EventName`. Dispatch never raises: unknown names and malformed payloads
    are logged and dropped.
    """

    def __init__(self, handlers: Mapping[Union[EventName, str], Handler]):
        """
        Build the dispatcher.

        Args:
            handlers: Handler per event name, keyed by `EventName` or wire name

        Raises:
            ValueError: If an event name has no handler or a key is not an event name
        """
        table = {}
        for name, handler in handlers.items():
            event = name if isinstance(name, EventName) else EventName.lookup(name)
            if event is None:
                raise ValueError(f"Not an event name: {name!r}")
            if not callable(handler):
                raise ValueError(f"Handler for {event.value} is not callable")
            table[event] = handler

        missing = [event.value for event in EventName if event not in table]
        if missing:
            raise ValueError(f"No handler for events: {', '.join(missing)}")

        self._handlers = MappingProxyType(table)

    @property
    def handlers(self) -> Mapping[EventName, Handler]:
        return self._handlers

    def dispatch(self, envelope: Envelope) -> bool:
        """
        Run the handler for an envelope.

        Args:
            envelope: Decoded inbound frame

        Returns:
            True if a handler processed the event, False if it was dropped
        """
        event = EventName.lookup(envelope.name)
        if event is None:
            logger.warning(f"Dropping unknown event {envelope.name!r}")
            return False

        logger.debug(f"Dispatching {event.value}: {envelope.data!r}")
        try:
            self._handlers[event](envelope.data)
        except ProtocolError as e:
            logger.warning(f"Dropping malformed {event.value}: {e}")
            return False
        return True
