"""
Tests for session recording and replay.
"""

import json
import logging

import pytest

from durak_client.adapters.dummy import DummyAdapter
from durak_client.api.client import DurakClient
from durak_client.protocol.messages import EventName, encode_event
from durak_client.recording import SessionRecorder, load_session, replay_session
from durak_client.transport.memory import MemoryTransport

FRAMES = [
    encode_event(
        "ClientJoinedEvent",
        {"yourId": 1, "yourNickname": "ann", "clients": [], "rooms": []},
    ),
    encode_event(EventName.ROOM_CREATED, {"room": {"id": 3, "ownerId": 1, "membersNum": 1}}),
    "not json at all",
    encode_event("ClientBroadCastJoinedEvent", {"id": 2, "nickname": "bo"}),
]


@pytest.mark.asyncio
async def test_recorder_appends_json_lines(tmp_path):
    path = str(tmp_path / "session.jsonl")
    recorder = SessionRecorder(path)

    await recorder.record(FRAMES[0], received_at=1.5)
    await recorder.record(FRAMES[2], received_at=2.0)

    with open(path, encoding="utf-8") as f:
        lines = [json.loads(line) for line in f]
    assert lines == [
        {"received_at": 1.5, "frame": FRAMES[0]},
        {"received_at": 2.0, "frame": FRAMES[2]},
    ]
    assert recorder.frame_count == 2


@pytest.mark.asyncio
async def test_load_session_skips_bad_lines(tmp_path, caplog):
    path = tmp_path / "session.jsonl"
    path.write_text(
        json.dumps({"frame": "a"}) + "\n\n{broken\n" + json.dumps({"x": 1}) + "\n"
        + json.dumps({"frame": "b"}) + "\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="durak_client.recording"):
        frames = await load_session(str(path))

    assert frames == ["a", "b"]
    assert "line 3" in caplog.text
    assert "line 4" in caplog.text


@pytest.mark.asyncio
async def test_client_records_every_frame(tmp_path):
    path = str(tmp_path / "session.jsonl")
    client = DurakClient(
        transport=MemoryTransport(),
        adapter=DummyAdapter(),
        recorder=SessionRecorder(path),
    )

    for frame in FRAMES:
        await client.handle_frame(frame)

    assert await load_session(path) == FRAMES


@pytest.mark.asyncio
async def test_replay_reproduces_state(tmp_path):
    path = str(tmp_path / "session.jsonl")
    live = DurakClient(
        transport=MemoryTransport(),
        adapter=DummyAdapter(),
        recorder=SessionRecorder(path),
    )
    for frame in FRAMES:
        await live.handle_frame(frame)

    transport = MemoryTransport()
    replayed = DurakClient(transport=transport, adapter=DummyAdapter())
    handled = await replay_session(path, replayed)

    assert handled == 3
    assert replayed.state == live.state
    # the bootstrap command is sent again on replay
    assert [json.loads(f)["subType"] for f in transport.sent] == ["createRoom"]
