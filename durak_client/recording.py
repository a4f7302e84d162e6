"""
Recording and replay of client sessions.

A recording is a JSON-lines file with one inbound frame per line, written as
the frames arrive. Replaying feeds the frames back through a client without a
network, which reproduces the exact state the client reached.
"""

import json
import logging
import time
from typing import TYPE_CHECKING, List, Optional

import aiofiles

if TYPE_CHECKING:
    from durak_client.api.client import DurakClient

logger = logging.getLogger("durak_client.recording")


class SessionRecorder:
    """
    Appends inbound frames to a JSON-lines file.

    Args:
        path: File to append to
    """

    def __init__(self, path: str):
        self.path = path
        self.frame_count = 0

    async def record(self, frame: str, received_at: Optional[float] = None) -> None:
        """
        Append one frame.

        Args:
            frame: The raw frame text, stored verbatim even when malformed
            received_at: Receive time, defaults to now
        """
        entry = {
            "received_at": time.time() if received_at is None else received_at,
            "frame": frame,
        }
        async with aiofiles.open(self.path, mode="a", encoding="utf-8") as log_file:
            await log_file.write(json.dumps(entry, ensure_ascii=False) + "\n")
        self.frame_count += 1


async def load_session(path: str) -> List[str]:
    """
    Read the frames of a recording in order.

    Lines that are not valid entries are skipped with a warning.
    """
    frames = []
    async with aiofiles.open(path, mode="r", encoding="utf-8") as log_file:
        line_number = 0
        async for line in log_file:
            line_number += 1
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
                frames.append(entry["frame"])
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Skipping line {line_number} of {path}: {e}")
    return frames


async def replay_session(path: str, client: "DurakClient") -> int:
    """
    Feed a recording through a client.

    Args:
        path: Recording to replay
        client: Client to feed; its outbound commands go to its own transport

    Returns:
        Number of frames the client processed
    """
    frames = await load_session(path)
    handled = 0
    for frame in frames:
        if await client.handle_frame(frame):
            handled += 1
    logger.info(f"Replayed {handled} of {len(frames)} frames from {path}")
    return handled
