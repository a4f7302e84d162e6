"""
WebSocket transport built on the ``websockets`` library.

Outbound frames go through an `asyncio.Queue` drained by one writer task, so
`send` never blocks the caller and frames leave in the order they were queued.
Reconnecting is left to the caller.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

import websockets
from websockets.exceptions import ConnectionClosed

from durak_client.errors import NotConnectedError
from durak_client.transport.base import Transport

logger = logging.getLogger("durak_client.transport.websocket")

_CLOSE = object()


class WebSocketTransport(Transport):
    """
    A websocket connection to the Durak server.

    Args:
        url: Server endpoint, e.g. ``ws://127.0.0.1:8007/ws``
    """

    def __init__(self, url: str):
        self.url = url
        self._websocket = None
        self._queue: Optional[asyncio.Queue] = None
        self._writer_task: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self._websocket is not None

    async def connect(self) -> None:
        """Open the connection and start the writer task."""
        if self.is_connected:
            return
        logger.info(f"Connecting to {self.url}")
        self._websocket = await websockets.connect(self.url)
        self._queue = asyncio.Queue()
        self._writer_task = asyncio.create_task(self._write_loop())
        logger.info(f"Connected to {self.url}")

    def send(self, frame: str) -> None:
        if not self.is_connected:
            raise NotConnectedError(f"Not connected to {self.url}")
        self._queue.put_nowait(frame)

    async def frames(self) -> AsyncIterator[str]:
        if not self.is_connected:
            raise NotConnectedError(f"Not connected to {self.url}")
        try:
            async for message in self._websocket:
                if isinstance(message, bytes):
                    message = message.decode("utf-8")
                yield message
        except ConnectionClosed as e:
            logger.warning(f"Connection to {self.url} closed: {e}")

    async def close(self) -> None:
        """Flush queued frames, stop the writer and close the connection."""
        if not self.is_connected:
            return
        websocket = self._websocket

        if self._writer_task is not None and not self._writer_task.done():
            self._queue.put_nowait(_CLOSE)
            try:
                await self._writer_task
            except asyncio.CancelledError:
                pass

        self._websocket = None
        self._writer_task = None
        await websocket.close()
        logger.info(f"Closed connection to {self.url}")

    async def _write_loop(self) -> None:
        try:
            while True:
                frame = await self._queue.get()
                if frame is _CLOSE:
                    return
                logger.debug(f"Sending {frame}")
                await self._websocket.send(frame)
        except ConnectionClosed as e:
            logger.warning(f"Dropping outbound frames, connection closed: {e}")
        except asyncio.CancelledError:
            return
