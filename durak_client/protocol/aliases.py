"""
Fixed key-alias tables for the Durak wire protocol.

The server has shipped more than one naming convention for the same field
(camelCase in the current protocol, snake_case in the legacy one, plus a few
legacy synonyms such as ``pile_size`` for the deck size). Every table here maps
one canonical key to the tuple of wire names it is known by; the first wire
name is the preferred spelling used when a canonical key is written back out.

Each table is checked at import time so that a wire name can never map to two
canonical keys.
"""

from typing import Any, Dict, Mapping, Optional, Tuple


class AliasTable:
    """
    A bidirectional mapping between canonical keys and their wire names.

    Attributes:
        name: Table name, used in diagnostics
        to_canonical: Wire name to canonical key
        to_wire: Canonical key to preferred wire name
    """

    def __init__(self, name: str, aliases: Mapping[str, Tuple[str, ...]]):
        self.name = name
        self.to_canonical: Dict[str, str] = {}
        self.to_wire: Dict[str, str] = {}

        for canonical, wire_names in aliases.items():
            if not wire_names:
                raise ValueError(f"{name}: no wire names for {canonical!r}")
            self.to_wire[canonical] = wire_names[0]
            for wire_name in wire_names:
                existing = self.to_canonical.get(wire_name)
                if existing is not None and existing != canonical:
                    raise ValueError(
                        f"{name}: wire key {wire_name!r} maps to both "
                        f"{existing!r} and {canonical!r}"
                    )
                self.to_canonical[wire_name] = canonical

    @property
    def canonical_keys(self) -> Tuple[str, ...]:
        return tuple(self.to_wire)

    def canonical(self, key: str) -> Optional[str]:
        """Return the canonical key for a wire key, or None if it is unknown."""
        return self.to_canonical.get(key)

    def normalize(
        self, payload: Mapping[str, Any]
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Split a wire payload into canonical and unknown keys.

        Keys are visited in payload order, so when two spellings of one field
        appear in the same payload the later one wins.

        Args:
            payload: A wire object

        Returns:
            Tuple of (canonical key -> value, unknown wire key -> value)
        """
        known: Dict[str, Any] = {}
        unknown: Dict[str, Any] = {}
        for key, value in payload.items():
            canonical = self.to_canonical.get(key)
            if canonical is None:
                unknown[key] = value
            else:
                known[canonical] = value
        return known, unknown

    def get(self, payload: Mapping[str, Any], canonical: str, default: Any = None):
        """Read a canonical field from a wire payload under any of its names."""
        found = default
        for key, value in payload.items():
            if self.to_canonical.get(key) == canonical:
                found = value
        return found

    def has(self, payload: Mapping[str, Any], canonical: str) -> bool:
        return any(self.to_canonical.get(key) == canonical for key in payload)

    def __repr__(self) -> str:
        return f"AliasTable({self.name!r}, {len(self.to_wire)} keys)"


GAME_STATE_KEYS = AliasTable(
    "game_state",
    {
        "your_hand": ("yourHand", "your_hand"),
        "hands_sizes": ("handsSizes", "hands_sizes"),
        "deck_size": ("deckSize", "deck_size", "pileSize", "pile_size"),
        "discard_pile_size": ("discardPileSize", "discard_pile_size"),
        "trump_card": ("trumpCard", "trump_card"),
        "trump_suit": ("trumpSuit", "trump_suit"),
        "trump_card_is_in_deck": (
            "trumpCardIsInDeck",
            "trump_card_is_in_deck",
            "trumpCardIsInPile",
            "trump_card_is_in_pile",
        ),
        "trump_card_is_owned_by_player_index": (
            "trumpCardIsOwnedByPlayerIndex",
            "trump_card_is_owned_by_player_index",
        ),
        "attacker_index": ("attackerIndex", "attacker_index"),
        "defender_index": ("defenderIndex", "defender_index"),
        "can_you_pick_up": ("canYouPickUp", "can_you_pick_up"),
        "can_you_attack": ("canYouAttack", "can_you_attack"),
        "can_you_complete": ("canYouComplete", "can_you_complete"),
        "attack_cards": ("battleground",),
        "defending_cards": ("defendingCards", "defending_cards"),
        "completed_players": ("completedPlayers", "completed_players"),
        "defender_pick_up": ("defenderPickUp", "defender_pick_up"),
    },
)

ROOM_KEYS = AliasTable(
    "room",
    {
        "id": ("id",),
        "owner_id": ("ownerId", "owner_id"),
        "name": ("name",),
        "game_status": ("gameStatus", "game_status"),
        "members": ("members", "clients"),
        "member_count": (
            "membersNum",
            "members_num",
            "memberCount",
            "clientsNum",
            "clients_num",
        ),
    },
)

MEMBER_KEYS = AliasTable(
    "member",
    {
        "id": ("id",),
        "nickname": ("nickname", "name"),
        "is_player": ("isPlayer", "is_player"),
        "want_to_play": ("wantToPlay", "want_to_play"),
        "status": ("status",),
    },
)

PLAYER_KEYS = AliasTable(
    "player",
    {
        "name": ("name", "nickname"),
        "is_active": ("isActive", "is_active"),
    },
)

EVENT_KEYS = AliasTable(
    "event",
    {
        "your_id": ("yourId", "your_id"),
        "your_nickname": ("yourNickname", "your_nickname"),
        "your_player_index": ("yourPlayerIndex", "your_player_index"),
        "clients": ("clients",),
        "rooms": ("rooms",),
        "room": ("room",),
        "room_id": ("roomId", "room_id"),
        "member": ("member",),
        "players": ("players",),
        "id": ("id",),
        "nickname": ("nickname",),
        "message": ("message",),
        "game_state_info": ("gameStateInfo", "game_state_info"),
        "reason_card": ("reasonCard", "reason_card"),
        "card": ("card",),
        "attacking_card": ("attackingCard", "attacking_card"),
        "defending_card": ("defendingCard", "defending_card"),
        "has_loser": ("hasLoser", "has_loser"),
        "loser_index": ("loserIndex", "loser_index"),
        "player_index": ("playerIndex", "player_index"),
        "is_afk": ("isAfk", "is_afk"),
        "was_attack_successful": ("wasAttackSuccessful", "was_attack_successful"),
    },
)
