#!/usr/bin/env python3
"""
Headless Client Example

This script connects to a Durak server without a terminal UI, logs every
state change the client emits and creates or joins a room the same way the
interactive client does. Press Ctrl+C to stop.
"""

import argparse
import asyncio
import logging

from durak_client.adapters.dummy import DummyAdapter
from durak_client.api.client import DurakClient
from durak_client.events import ClientEventType


def print_event(event):
    event_type, data = event
    if event_type in (ClientEventType.LOBBY_CHANGED, ClientEventType.ROOM_CHANGED):
        print(f"[{event_type.name}] {next(iter(data.values()))}")
    elif event_type is ClientEventType.COMMAND_SENT:
        print(f"[sent] {data['command']} {data['payload'] or ''}")
    elif event_type is ClientEventType.COMMAND_ERROR:
        print(f"[error] {data['message']}")


async def main(url: str, nickname: str) -> None:
    client = DurakClient(
        adapter=DummyAdapter(),
        config={"url": url, "nickname": nickname},
    )
    client.events.on_any(print_event)
    await client.run()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Headless Durak client")
    parser.add_argument("--url", type=str, default="ws://127.0.0.1:8007/ws")
    parser.add_argument("--nickname", type=str, default="observer")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(main(args.url, args.nickname))
    except KeyboardInterrupt:
        print("\nStopped")
