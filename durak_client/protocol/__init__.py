"""
Wire protocol of the Durak server: envelopes, event names, key aliases and
payload parsing.
"""

from durak_client.protocol.messages import (
    CommandType,
    Envelope,
    EventName,
    decode_event,
    encode_command,
    encode_event,
)
from durak_client.protocol.aliases import (
    AliasTable,
    EVENT_KEYS,
    GAME_STATE_KEYS,
    MEMBER_KEYS,
    PLAYER_KEYS,
    ROOM_KEYS,
)

__all__ = [
    "CommandType",
    "Envelope",
    "EventName",
    "decode_event",
    "encode_command",
    "encode_event",
    "AliasTable",
    "EVENT_KEYS",
    "GAME_STATE_KEYS",
    "MEMBER_KEYS",
    "PLAYER_KEYS",
    "ROOM_KEYS",
]
