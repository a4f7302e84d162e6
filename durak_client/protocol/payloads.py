"""
Conversion of wire payloads into typed state records.

Every parser accepts any of the key spellings listed in
`durak_client.protocol.aliases` and raises `ProtocolError` when a required
field is missing or a value has the wrong shape. Parsers never touch client
state, so a payload that fails to parse leaves the state exactly as it was.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from durak_client.common.card import Card, Suit
from durak_client.errors import ProtocolError
from durak_client.protocol.aliases import (
    EVENT_KEYS,
    GAME_STATE_KEYS,
    MEMBER_KEYS,
    PLAYER_KEYS,
    ROOM_KEYS,
    AliasTable,
)
from durak_client.state.models import (
    ClientSession,
    GameStateUpdate,
    Player,
    RoomInfo,
    RoomMember,
    RoomSummary,
)

_MISSING = object()


def require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ProtocolError(f"{what} must be an object, got {type(data).__name__}")
    return data


def field_value(
    data: Mapping[str, Any],
    canonical: str,
    table: AliasTable = EVENT_KEYS,
    default: Any = _MISSING,
) -> Any:
    """
    Read a field under any of its wire names.

    Raises:
        ProtocolError: If the field is absent and no default was given
    """
    if table.has(data, canonical):
        return table.get(data, canonical)
    if default is _MISSING:
        raise ProtocolError(f"Missing field {canonical!r} in {table.name} payload")
    return default


def parse_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise ProtocolError(f"{what} must be an integer, got a boolean")
    # json.loads yields floats for 1.5, Infinity and NaN
    if isinstance(value, float) and not value.is_integer():
        raise ProtocolError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ProtocolError(f"{what} must be an integer, got {value!r}") from e


def parse_card(value: Any, what: str = "card") -> Card:
    data = require_mapping(value, what)
    try:
        return Card.from_dict(data)
    except (KeyError, ValueError, TypeError) as e:
        raise ProtocolError(f"Invalid {what}: {value!r}") from e


def parse_optional_card(value: Any, what: str = "card") -> Optional[Card]:
    if value is None:
        return None
    return parse_card(value, what)


def parse_cards(value: Any, what: str = "cards") -> Tuple[Card, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ProtocolError(f"{what} must be a list, got {type(value).__name__}")
    return tuple(parse_card(item, what) for item in value)


def _parse_ints(value: Any, what: str) -> Tuple[int, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ProtocolError(f"{what} must be a list, got {type(value).__name__}")
    return tuple(parse_int(item, what) for item in value)


def _parse_index_map(
    value: Any, what: str, convert: Callable[[Any], Any]
) -> Dict[int, Any]:
    # JSON object keys arrive as strings
    if value is None:
        return {}
    data = require_mapping(value, what)
    result = {}
    for key, item in data.items():
        if item is None:
            continue
        result[parse_int(key, f"{what} key")] = convert(item)
    return result


def _parse_suit(value: Any) -> Optional[Suit]:
    if value in (None, ""):
        return None
    try:
        return Suit(value)
    except ValueError as e:
        raise ProtocolError(f"Invalid trump suit: {value!r}") from e


def _parse_bool(value: Any) -> bool:
    return bool(value)


_GAME_STATE_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "your_hand": lambda v: parse_cards(v, "your hand"),
    "hands_sizes": lambda v: _parse_ints(v, "hands sizes"),
    "deck_size": lambda v: parse_int(v, "deck size"),
    "discard_pile_size": lambda v: parse_int(v, "discard pile size"),
    "trump_card": lambda v: parse_optional_card(v, "trump card"),
    "trump_suit": _parse_suit,
    "trump_card_is_in_deck": _parse_bool,
    "trump_card_is_owned_by_player_index": lambda v: parse_int(
        v, "trump card owner index"
    ),
    "attacker_index": lambda v: parse_int(v, "attacker index"),
    "defender_index": lambda v: parse_int(v, "defender index"),
    "can_you_pick_up": _parse_bool,
    "can_you_attack": _parse_bool,
    "can_you_complete": _parse_bool,
    "attack_cards": lambda v: parse_cards(v, "battleground"),
    "defending_cards": lambda v: _parse_index_map(
        v, "defending cards", lambda c: parse_card(c, "defending card")
    ),
    "completed_players": lambda v: _parse_index_map(
        v, "completed players", _parse_bool
    ),
    "defender_pick_up": _parse_bool,
}

if set(_GAME_STATE_CONVERTERS) != set(GAME_STATE_KEYS.canonical_keys):
    raise RuntimeError("game state converters do not cover the game state keys")


def parse_game_state_update(payload: Any) -> GameStateUpdate:
    """
    Convert a nested game-state-info payload into a typed partial update.

    Unknown keys are kept verbatim in ``extras``.
    """
    data = require_mapping(payload, "game state info")
    known, unknown = GAME_STATE_KEYS.normalize(data)
    values = {key: _GAME_STATE_CONVERTERS[key](value) for key, value in known.items()}
    return GameStateUpdate(**values, extras=dict(unknown))


def parse_top_level_game_state(event_data: Any) -> GameStateUpdate:
    """
    Collect the game-state keys an event carries directly on its top level.

    Only recognized keys are taken: the rest of the top level is event data
    (the attacking card, the reason card, ...), not game state.
    """
    data = require_mapping(event_data, "event")
    known, _ = GAME_STATE_KEYS.normalize(data)
    values = {key: _GAME_STATE_CONVERTERS[key](value) for key, value in known.items()}
    return GameStateUpdate(**values)


def parse_client(data: Any) -> ClientSession:
    data = require_mapping(data, "client")
    return ClientSession(
        id=parse_int(field_value(data, "id"), "client id"),
        nickname=str(field_value(data, "nickname", default="") or ""),
    )


def parse_room_summary(data: Any) -> RoomSummary:
    data = require_mapping(data, "room")
    owner_id = field_value(data, "owner_id", ROOM_KEYS, None)
    return RoomSummary(
        id=parse_int(field_value(data, "id", ROOM_KEYS), "room id"),
        owner_id=None if owner_id is None else parse_int(owner_id, "owner id"),
        member_count=parse_int(
            field_value(data, "member_count", ROOM_KEYS, 0), "member count"
        ),
        name=str(field_value(data, "name", ROOM_KEYS, "") or ""),
        game_status=str(field_value(data, "game_status", ROOM_KEYS, "") or ""),
    )


def parse_member(data: Any) -> RoomMember:
    data = require_mapping(data, "member")
    return RoomMember(
        id=parse_int(field_value(data, "id", MEMBER_KEYS), "member id"),
        nickname=str(field_value(data, "nickname", MEMBER_KEYS, "") or ""),
        is_player=bool(field_value(data, "is_player", MEMBER_KEYS, False)),
        want_to_play=bool(field_value(data, "want_to_play", MEMBER_KEYS, False)),
        status=str(field_value(data, "status", MEMBER_KEYS, "") or ""),
    )


def parse_room_info(data: Any) -> RoomInfo:
    data = require_mapping(data, "room")
    owner_id = field_value(data, "owner_id", ROOM_KEYS, None)
    raw_members = field_value(data, "members", ROOM_KEYS, None) or []
    if not isinstance(raw_members, (list, tuple)):
        raise ProtocolError("room members must be a list")

    members: Dict[int, RoomMember] = {}
    for item in raw_members:
        member = parse_member(item)
        members[member.id] = member

    return RoomInfo(
        id=parse_int(field_value(data, "id", ROOM_KEYS), "room id"),
        owner_id=None if owner_id is None else parse_int(owner_id, "owner id"),
        name=str(field_value(data, "name", ROOM_KEYS, "") or ""),
        game_status=str(field_value(data, "game_status", ROOM_KEYS, "") or ""),
        members=members,
    )


def parse_player(data: Any, index: int) -> Player:
    data = require_mapping(data, "player")
    return Player(
        name=str(field_value(data, "name", PLAYER_KEYS, "") or ""),
        index=index,
        is_active=bool(field_value(data, "is_active", PLAYER_KEYS, True)),
    )


def parse_players(value: Any) -> Tuple[Player, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ProtocolError("players must be a list")
    return tuple(parse_player(item, index) for index, item in enumerate(value))
