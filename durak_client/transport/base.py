"""
Transport interface between the client and the server.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator


class Transport(ABC):
    """
    An ordered, text-framed, bidirectional connection.

    Frames must be delivered in the order the server sent them, and sent
    frames must leave in the order `send` was called.
    """

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    def send(self, frame: str) -> None:
        """
        Queue a frame for sending without waiting for it to leave.

        Raises:
            NotConnectedError: If the transport is not connected
        """
        pass

    @abstractmethod
    def frames(self) -> AsyncIterator[str]:
        """Iterate over inbound frames until the connection closes."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        pass
