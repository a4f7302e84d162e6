"""
Base adapter interface for presenting the client state.

This module defines the interface that presentation adapters must implement to
show what the client knows. Adapters only read: they receive the committed
state and the derived permissions and never change either.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Union

from durak_client.state.models import ClientState
from durak_client.state.permissions import Permissions


class PresentationAdapter(ABC):
    """
    Base interface for presentation adapters.

    Implementations of this interface bridge the platform-agnostic client and
    a concrete surface such as a terminal or a test recorder.
    """

    @abstractmethod
    async def render_state(self, state: ClientState, permissions: Permissions) -> None:
        """
        Render the current client state.

        Args:
            state: The committed lobby, room and game state
            permissions: Permissions derived from that state
        """
        pass

    @abstractmethod
    async def notify_client_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a client event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    async def read_command(self) -> Optional[str]:
        """
        Read one line of user input.

        Returns:
            The line, or None when this adapter takes no input
        """
        return None

    async def initialize(self) -> None:
        """
        Initialize the adapter.

        Called once before the client connects.
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the adapter.

        Called once after the client disconnected.
        """
        pass
