"""
In-process transport used for replays and tests.
"""

import asyncio
from typing import AsyncIterator, List, Optional

from durak_client.errors import NotConnectedError
from durak_client.transport.base import Transport

_CLOSE = object()


class MemoryTransport(Transport):
    """
    A transport with no network behind it.

    Sent frames are kept in `sent`. Inbound frames are pushed with `feed` and
    come out of `frames` in order until `close` is called.

    Args:
        connected: Start out connected, so frames can be sent at once
    """

    def __init__(self, connected: bool = True):
        self.sent: List[str] = []
        self._connected = connected
        self._inbound: Optional[asyncio.Queue] = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    def send(self, frame: str) -> None:
        if not self._connected:
            raise NotConnectedError("Memory transport is closed")
        self.sent.append(frame)

    def feed(self, frame: str) -> None:
        self._queue().put_nowait(frame)

    async def frames(self) -> AsyncIterator[str]:
        queue = self._queue()
        while True:
            frame = await queue.get()
            if frame is _CLOSE:
                return
            yield frame

    async def close(self) -> None:
        self._connected = False
        self._queue().put_nowait(_CLOSE)

    def _queue(self) -> asyncio.Queue:
        if self._inbound is None:
            self._inbound = asyncio.Queue()
        return self._inbound
