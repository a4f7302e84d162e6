"""
Immutable state models for the Durak client.

This module provides dataclasses for the client's canonical view of the lobby,
the current room, and the game in progress. They are designed to be used with
the pure transition functions in the sibling modules, which create new state
instances rather than modifying existing ones.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple, Union

from durak_client.common.card import Card, Suit


class _Unset:
    """Marker for a field that a partial update does not carry."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True)
class ClientSession:
    """A participant connected to the lobby."""

    id: int
    nickname: str = ""


@dataclass(frozen=True)
class RoomSummary:
    """
    A room as listed in the lobby.

    Attributes:
        id: Room identifier
        owner_id: Session id of the room owner
        member_count: Number of clients in the room
        name: Display name (the owner's nickname)
        game_status: Status of the room's game, empty when there is none
    """

    id: int
    owner_id: Optional[int] = None
    member_count: int = 0
    name: str = ""
    game_status: str = ""


@dataclass(frozen=True)
class LobbyState:
    """
    Immutable representation of the lobby.

    Attributes:
        your_id: Session id of the local client, None before bootstrap
        your_nickname: Nickname of the local client
        clients: Connected sessions keyed by id, in arrival order
        rooms: Listed rooms keyed by id, in listing order
        my_room_id: Id of the room the local client created, if any
    """

    your_id: Optional[int] = None
    your_nickname: str = ""
    clients: Dict[int, ClientSession] = field(default_factory=dict)
    rooms: Dict[int, RoomSummary] = field(default_factory=dict)
    my_room_id: Optional[int] = None


@dataclass(frozen=True)
class RoomMember:
    """A client inside the current room."""

    id: int
    nickname: str = ""
    is_player: bool = False
    want_to_play: bool = False
    status: str = ""


@dataclass(frozen=True)
class RoomInfo:
    """
    The room the local client is in.

    Attributes:
        id: Room identifier
        owner_id: Session id of the room owner
        name: Display name
        game_status: Status of the room's game
        members: Members keyed by id, in the server's order
    """

    id: int
    owner_id: Optional[int] = None
    name: str = ""
    game_status: str = ""
    members: Dict[int, RoomMember] = field(default_factory=dict)


@dataclass(frozen=True)
class RoomState:
    """
    Immutable representation of the room reducer's state.

    Attributes:
        room: The current room, None while in the lobby
        player_count: Cached count of members marked as players
        want_to_play: Local mirror of the client's own want-to-play flag
    """

    room: Optional[RoomInfo] = None
    player_count: int = 0
    want_to_play: bool = True


@dataclass(frozen=True)
class Player:
    """A seat in the game, addressed by its index in every game event."""

    name: str
    index: int
    is_active: bool = True


@dataclass(frozen=True)
class BattlegroundSlot:
    """An attacking card and the card that beat it, if any."""

    attack: Card
    defend: Optional[Card] = None

    @property
    def is_defended(self) -> bool:
        return self.defend is not None


@dataclass(frozen=True)
class GameStateInfo:
    """
    Canonical, continuously merged snapshot of the game.

    Every field here is a canonical key of the game-state alias table; the
    server only sends the keys that changed and the rest keep their last value.

    Attributes:
        your_hand: Cards in the local player's hand
        hands_sizes: Hand size of every player, by player index
        deck_size: Cards left in the deck
        discard_pile_size: Cards in the discard pile
        trump_card: The revealed trump card
        trump_suit: The trump suit
        trump_card_is_in_deck: Whether the trump card is still in the deck
        trump_card_is_owned_by_player_index: Player holding the trump card, -1 if none
        attacker_index: Current attacker, -1 if none
        defender_index: Current defender, -1 if none
        can_you_pick_up: Server says the local player may pick up
        can_you_attack: Server says the local player may attack
        can_you_complete: Server says the local player may complete
        attack_cards: Attacking cards in attack order
        defending_cards: Defending card by battleground slot index
        completed_players: Player index to "has signalled done"
        defender_pick_up: The defender has conceded the round
        extras: Keys the client does not know, passed through verbatim
    """

    your_hand: Tuple[Card, ...] = ()
    hands_sizes: Tuple[int, ...] = ()
    deck_size: int = 0
    discard_pile_size: int = 0
    trump_card: Optional[Card] = None
    trump_suit: Optional[Suit] = None
    trump_card_is_in_deck: bool = False
    trump_card_is_owned_by_player_index: int = -1
    attacker_index: int = -1
    defender_index: int = -1
    can_you_pick_up: bool = False
    can_you_attack: bool = False
    can_you_complete: bool = False
    attack_cards: Tuple[Card, ...] = ()
    defending_cards: Dict[int, Card] = field(default_factory=dict)
    completed_players: Dict[int, bool] = field(default_factory=dict)
    defender_pick_up: bool = False
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def battleground(self) -> Tuple[BattlegroundSlot, ...]:
        """
        The attack slots in attack order.

        A defending card is only attached to a slot that has an attacking card,
        so a defence addressed to a slot that does not exist is never visible.
        """
        return tuple(
            BattlegroundSlot(attack=card, defend=self.defending_cards.get(index))
            for index, card in enumerate(self.attack_cards)
        )

    def slot_index(self, attacking_card: Card) -> Optional[int]:
        """Index of the slot attacked with the given card, or None."""
        for index, card in enumerate(self.attack_cards):
            if card == attacking_card:
                return index
        return None


@dataclass(frozen=True)
class GameStateUpdate:
    """
    A typed partial update of GameStateInfo.

    Every field defaults to UNSET; only the fields a payload carried are set.
    An explicit None (for example a null trump card) is a real value.
    """

    your_hand: Union[Tuple[Card, ...], _Unset] = UNSET
    hands_sizes: Union[Tuple[int, ...], _Unset] = UNSET
    deck_size: Union[int, _Unset] = UNSET
    discard_pile_size: Union[int, _Unset] = UNSET
    trump_card: Union[Optional[Card], _Unset] = UNSET
    trump_suit: Union[Optional[Suit], _Unset] = UNSET
    trump_card_is_in_deck: Union[bool, _Unset] = UNSET
    trump_card_is_owned_by_player_index: Union[int, _Unset] = UNSET
    attacker_index: Union[int, _Unset] = UNSET
    defender_index: Union[int, _Unset] = UNSET
    can_you_pick_up: Union[bool, _Unset] = UNSET
    can_you_attack: Union[bool, _Unset] = UNSET
    can_you_complete: Union[bool, _Unset] = UNSET
    attack_cards: Union[Tuple[Card, ...], _Unset] = UNSET
    defending_cards: Union[Dict[int, Card], _Unset] = UNSET
    completed_players: Union[Dict[int, bool], _Unset] = UNSET
    defender_pick_up: Union[bool, _Unset] = UNSET
    extras: Dict[str, Any] = field(default_factory=dict)

    def present(self) -> Dict[str, Any]:
        """Return the canonical fields this update carries."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extras" and getattr(self, f.name) is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.present() and not self.extras


@dataclass(frozen=True)
class TransientGameState:
    """
    Ephemeral game state that is replaced by narrow events, never merged.

    Attributes:
        picked_card: Card selected locally but not yet played
        first_attacker_reason_card: Card that decided the first attacker
        game_end: The game is over
        has_loser: The game ended with a loser rather than a draw
        loser_index: Index of the losing player, -1 if none
    """

    picked_card: Optional[Card] = None
    first_attacker_reason_card: Optional[Card] = None
    game_end: bool = False
    has_loser: bool = False
    loser_index: int = -1


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of the game reducer's state.

    Attributes:
        players: Seats in index order
        your_player_index: Seat of the local client, None when spectating
        info: Canonical merged snapshot
        transient: Ephemeral per-deal state
    """

    players: Tuple[Player, ...] = ()
    your_player_index: Optional[int] = None
    info: GameStateInfo = field(default_factory=GameStateInfo)
    transient: TransientGameState = field(default_factory=TransientGameState)

    def player(self, index: Optional[int]) -> Optional[Player]:
        """Get the player at an index if it resolves."""
        if index is not None and 0 <= index < len(self.players):
            return self.players[index]
        return None


@dataclass(frozen=True)
class ClientState:
    """The whole client view: one state per reducer."""

    lobby: LobbyState = field(default_factory=LobbyState)
    room: RoomState = field(default_factory=RoomState)
    game: GameState = field(default_factory=GameState)
