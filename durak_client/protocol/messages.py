"""
Wire envelopes exchanged with the Durak server.

Inbound frames are JSON objects ``{"name": <event name>, "data": <payload>}``.
Outbound frames are JSON objects ``{"type": <category>, "subType": <action>,
"data": <payload or null>}``.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from durak_client.errors import ProtocolError


class EventName(str, Enum):
    """Inbound event names, valued by the name the server puts on the wire."""

    SESSION_ESTABLISHED = "ClientJoinedEvent"
    CLIENT_BROADCAST_JOINED = "ClientBroadCastJoinedEvent"
    CLIENT_LEFT = "ClientLeftEvent"
    ROOM_LISTED = "RoomInListUpdatedEvent"
    ROOM_UPDATED = "RoomUpdatedEvent"
    ROOM_REMOVED = "RoomInListRemovedEvent"
    ROOM_JOINED = "RoomJoinedEvent"
    CLIENT_COMMAND_ERROR = "ClientCommandError"
    ROOM_CREATED = "ClientCreatedRoomEvent"
    MEMBER_STATUS_CHANGED = "RoomMemberChangedStatusEvent"
    MEMBER_PLAYER_STATUS_CHANGED = "RoomMemberChangedPlayerStatusEvent"
    GAME_PLAYERS_ASSIGNED = "GamePlayersEvent"
    GAME_DEAL = "GameDealEvent"
    GAME_FIRST_ATTACKER = "GameFirstAttackerEvent"
    GAME_STARTED = "GameStartedEvent"
    GAME_ATTACK = "GameAttackEvent"
    GAME_DEFEND = "GameDefendEvent"
    GAME_STATE = "GameStateEvent"
    NEW_ROUND = "NewRoundEvent"
    GAME_END = "GameEndEvent"
    GAME_PLAYER_LEFT = "GamePlayerLeftEvent"

    @classmethod
    def lookup(cls, name: str) -> Optional["EventName"]:
        """Return the member for a wire name, or None if the name is unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


class CommandType(str, Enum):
    """Namespaces of outbound commands."""

    LOBBY = "lobby"
    ROOM = "room"
    GAME = "game"


@dataclass(frozen=True)
class Envelope:
    """A decoded inbound frame."""

    name: str
    data: Any = None


def decode_event(frame: str) -> Envelope:
    """
    Decode one inbound text frame.

    Args:
        frame: Raw JSON text received from the transport

    Returns:
        The decoded envelope

    Raises:
        ProtocolError: If the frame is not JSON or has no string ``name``
    """
    try:
        message = json.loads(frame)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Undecodable frame: {e}") from e
    except RecursionError as e:
        raise ProtocolError("Undecodable frame: nested too deeply") from e

    if not isinstance(message, dict):
        raise ProtocolError(f"Frame is not an object: {message!r}")
    name = message.get("name")
    if not isinstance(name, str):
        raise ProtocolError(f"Frame has no event name: {message!r}")
    return Envelope(name=name, data=message.get("data"))


def encode_event(name: str, data: Any = None) -> str:
    """Encode an inbound-style frame. Used by recordings and tests."""
    if isinstance(name, EventName):
        name = name.value
    return json.dumps({"name": name, "data": data}, ensure_ascii=False)


def encode_command(category: str, action: str, data: Any = None) -> str:
    """Encode an outbound command frame."""
    message: Dict[str, Any] = {
        "type": category.value if isinstance(category, Enum) else category,
        "subType": action,
        "data": data,
    }
    return json.dumps(message, ensure_ascii=False)
