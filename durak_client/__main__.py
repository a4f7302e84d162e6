"""
Command-line entry point.

Run ``python -m durak_client --nickname alice`` to join the default server, or
``python -m durak_client --replay session.jsonl`` to rebuild the state from a
recording without a network.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from durak_client.adapters.cli import CLIAdapter, execute_command
from durak_client.api.client import DurakClient
from durak_client.config import DEFAULT_CONFIG, load_config
from durak_client.recording import replay_session
from durak_client.transport.memory import MemoryTransport

logger = logging.getLogger("durak_client")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Durak lobby client")
    parser.add_argument(
        "--url", type=str, help=f"WebSocket server URL (default {DEFAULT_CONFIG['url']})"
    )
    parser.add_argument("--nickname", type=str, help="Nickname to join the lobby with")
    parser.add_argument("--room-id", type=int, help="Room to join if no other room is auto-joined")
    parser.add_argument(
        "--room-link-file", type=str, help="File that remembers the current room id"
    )
    parser.add_argument(
        "--record-file", type=str, help="Append every received frame to this file"
    )
    parser.add_argument(
        "--replay", type=str, metavar="FILE", help="Replay a recording offline and exit"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return load_config(
        {
            "url": args.url,
            "nickname": args.nickname,
            "room_id": args.room_id,
            "room_link_file": args.room_link_file,
            "record_file": args.record_file,
            "log_level": args.log_level,
        }
    )


async def run_interactive(client: DurakClient) -> None:
    """Handle server frames and typed commands until either side stops."""
    adapter = client.adapter
    receiver = asyncio.create_task(client.run())
    try:
        while True:
            reader = asyncio.ensure_future(adapter.read_command())
            done, _ = await asyncio.wait(
                {reader, receiver}, return_when=asyncio.FIRST_COMPLETED
            )
            if reader not in done:
                reader.cancel()
                break
            line = reader.result()
            if line is None or line.strip().lower() == "quit":
                break
            feedback = await execute_command(client, line)
            if feedback:
                adapter.output(feedback)
    finally:
        if not receiver.done():
            await client.transport.close()
        await receiver


async def run_replay(path: str, config: Dict[str, Any]) -> None:
    adapter = CLIAdapter()
    offline = dict(config, room_link_file=None, record_file=None)
    client = DurakClient(transport=MemoryTransport(), adapter=adapter, config=offline)
    await adapter.initialize()
    await replay_session(path, client)
    await adapter.render_state(client.state, client.permissions)
    await adapter.shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config["log_level"]),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.replay:
            asyncio.run(run_replay(args.replay, config))
        else:
            asyncio.run(run_interactive(DurakClient(config=config)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except OSError as e:
        logger.error(f"Connection failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
