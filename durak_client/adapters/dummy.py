"""
Dummy adapter for tests and headless runs.

This module provides a non-interactive adapter that records everything it is
given so tests can inspect it afterwards.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from durak_client.adapters.base import PresentationAdapter
from durak_client.state.models import ClientState
from durak_client.state.permissions import Permissions


class DummyAdapter(PresentationAdapter):
    """
    Dummy adapter for testing.

    Rendered states and notifications are stored in arrival order. Input lines
    can be scripted; `read_command` returns them one by one and then None.
    """

    def __init__(self, commands: Optional[List[str]] = None, verbose: bool = False):
        """
        Initialize the dummy adapter.

        Args:
            commands: Optional scripted user input
            verbose: Whether to print events to stdout (useful for debugging)
        """
        self.commands = list(commands or [])
        self.verbose = verbose

        self.events: List[Tuple[str, Dict[str, Any]]] = []
        self.rendered_states: List[Tuple[ClientState, Permissions]] = []
        self.initialized = False
        self.shut_down = False

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.shut_down = True

    async def render_state(self, state: ClientState, permissions: Permissions) -> None:
        self.rendered_states.append((state, permissions))
        if self.verbose:
            print(f"State: {state}")

    async def notify_client_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Store the event for later inspection.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        self.events.append((event_type_str, data))

        if self.verbose:
            print(f"Event: {event_type_str}")
            for key, value in data.items():
                print(f"  {key}: {value}")

    async def read_command(self) -> Optional[str]:
        if not self.commands:
            return None
        return self.commands.pop(0)

    @property
    def last_state(self) -> Optional[ClientState]:
        if not self.rendered_states:
            return None
        return self.rendered_states[-1][0]

    def get_events_by_type(self, event_type: Union[str, Enum]) -> List[Dict[str, Any]]:
        """
        Get all events of a specific type.

        Args:
            event_type: The type of events to retrieve

        Returns:
            A list of event data dictionaries
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        return [data for typ, data in self.events if typ == event_type_str]

    def clear(self) -> None:
        """Clear all stored events and states."""
        self.events.clear()
        self.rendered_states.clear()
