"""
File-backed storage for the id of the room the client is in.

Sharing a room works by handing someone its id. The store keeps the current
room id in a small text file so that the next session can offer it as the
room to join.
"""

import logging
import os
from typing import Optional

import aiofiles
import aiofiles.os

logger = logging.getLogger("durak_client.room_link")


class RoomLinkStore:
    """
    Reads and writes one room id in a text file.

    Args:
        path: File to keep the room id in
    """

    def __init__(self, path: str):
        self.path = path

    async def load(self) -> Optional[int]:
        """
        Read the stored room id.

        Returns:
            The room id, or None when nothing usable is stored
        """
        if not os.path.exists(self.path):
            return None
        async with aiofiles.open(self.path, mode="r", encoding="utf-8") as link_file:
            text = (await link_file.read()).strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            logger.warning(f"Ignoring malformed room link {text!r} in {self.path}")
            return None

    async def save(self, room_id: int) -> None:
        async with aiofiles.open(self.path, mode="w", encoding="utf-8") as link_file:
            await link_file.write(f"{room_id}\n")
        logger.debug(f"Saved room link {room_id} to {self.path}")

    async def clear(self) -> None:
        """Forget the stored room id."""
        if os.path.exists(self.path):
            await aiofiles.os.remove(self.path)
            logger.debug(f"Cleared room link in {self.path}")
