"""
Command-line interface adapter for the Durak client.

This module prints the lobby, the room and the game as plain text and turns
typed lines into client intents.
"""

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from durak_client.adapters.base import PresentationAdapter
from durak_client.common.card import Card, Rank, Suit
from durak_client.events.emitter import ClientEventType
from durak_client.state.models import ClientState, GameState, LobbyState, RoomState
from durak_client.state.permissions import Permissions, attacker_nickname

if TYPE_CHECKING:
    from durak_client.api.client import DurakClient

_SUIT_LETTERS = {"h": Suit.HEARTS, "d": Suit.DIAMONDS, "c": Suit.CLUBS, "s": Suit.SPADES}

HELP_TEXT = """Commands:
  create              create a room
  join <room id>      join a room
  play | spectate     ask to play or to watch
  status <id> <s>     set a member's status (room owner)
  start | delete      start or delete the game (room owner)
  bot | nobots        add a bot or remove all bots (room owner)
  pick <card>         pick a card from your hand, e.g. pick 10s or pick Q♥
  attack              attack with the picked card
  defend <card>       beat the given attacking card with the picked card
  take | done         pick up the battleground, or complete the turn
  help | quit"""


def parse_card_text(text: str) -> Card:
    """
    Parse a typed card such as ``10♠``, ``10s`` or ``qh``.

    Raises:
        ValueError: If the text does not name a card
    """
    text = text.strip()
    if len(text) < 2:
        raise ValueError(f"Not a card: {text!r}")
    rank_text, suit_text = text[:-1].upper(), text[-1]
    suit = _SUIT_LETTERS.get(suit_text.lower())
    if suit is None:
        suit = Suit(suit_text)
    return Card(suit, Rank(rank_text))


def _player_label(game: GameState, index: int) -> str:
    player = game.player(index)
    name = player.name if player else f"#{index}"
    if index == game.your_player_index:
        name += " (you)"
    return name


class CLIAdapter(PresentationAdapter):
    """
    Command-line interface adapter.

    Output goes through ``output`` (``print`` by default) and input is read in
    a worker thread so the event loop keeps processing server events.
    """

    def __init__(
        self,
        output: Optional[Callable[[str], None]] = None,
        input_func: Optional[Callable[[str], str]] = None,
        prompt: str = "> ",
    ):
        """
        Initialize the CLI adapter.

        Args:
            output: Function that writes one line
            input_func: Function that reads one line given a prompt
            prompt: Prompt shown when reading a command
        """
        self.output = output or print
        self.input_func = input_func or input
        self.prompt = prompt

    async def render_state(self, state: ClientState, permissions: Permissions) -> None:
        for line in self.format_state(state, permissions):
            self.output(line)

    async def notify_client_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        if isinstance(event_type, Enum):
            event_type = event_type.name

        message = self._format_event_message(event_type, data)
        if message:
            self.output(message)

    async def read_command(self) -> Optional[str]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self.input_func, self.prompt)
        except EOFError:
            return None

    def format_state(self, state: ClientState, permissions: Permissions) -> List[str]:
        """Render the whole client state as lines of text."""
        if state.room.room is None:
            return self._format_lobby(state.lobby)
        lines = self._format_room(state.room, state.lobby)
        if state.game.players:
            lines.extend(self._format_game(state.game, permissions))
        return lines

    def _format_lobby(self, lobby: LobbyState) -> List[str]:
        lines = [f"=== Lobby ({lobby.your_nickname or 'not joined'}) ==="]
        lines.append(
            "Online: " + ", ".join(c.nickname or f"#{c.id}" for c in lobby.clients.values())
        )
        if not lobby.rooms:
            lines.append("No rooms")
        for room in lobby.rooms.values():
            mine = " *" if room.id == lobby.my_room_id else ""
            status = f" [{room.game_status}]" if room.game_status else ""
            lines.append(
                f"Room {room.id}{mine}: {room.name or 'unnamed'}, "
                f"{room.member_count} member(s){status}"
            )
        return lines

    def _format_room(self, room_state: RoomState, lobby: LobbyState) -> List[str]:
        room = room_state.room
        lines = [f"=== Room {room.id} ({room_state.player_count} player(s)) ==="]
        for member in room.members.values():
            flags = []
            if member.id == room.owner_id:
                flags.append("owner")
            if member.id == lobby.your_id:
                flags.append("you")
            flags.append("player" if member.is_player else "spectator")
            if member.want_to_play and not member.is_player:
                flags.append("wants to play")
            if member.status:
                flags.append(member.status)
            lines.append(f"  {member.nickname or member.id} ({', '.join(flags)})")
        return lines

    def _format_game(self, game: GameState, permissions: Permissions) -> List[str]:
        info = game.info
        lines = ["--- Game ---"]
        trump = str(info.trump_card) if info.trump_card else (str(info.trump_suit or "?"))
        lines.append(
            f"Trump: {trump}  Deck: {info.deck_size}  Discarded: {info.discard_pile_size}"
        )
        for index in range(len(game.players)):
            size = info.hands_sizes[index] if index < len(info.hands_sizes) else "?"
            role = ""
            if index == info.attacker_index:
                role = " attacking"
            elif index == info.defender_index:
                role = " defending"
            if info.completed_players.get(index):
                role += " done"
            lines.append(f"  {_player_label(game, index)}: {size} card(s){role}")

        slots = info.battleground
        if slots:
            lines.append(
                "Table: "
                + "  ".join(
                    f"{slot.attack}/{slot.defend}" if slot.defend else f"{slot.attack}/-"
                    for slot in slots
                )
            )
        if game.your_player_index is not None:
            picked = game.transient.picked_card
            hand = " ".join(
                f"[{card}]" if card == picked else str(card) for card in info.your_hand
            )
            lines.append(f"Hand: {hand}")

        if game.transient.first_attacker_reason_card:
            lines.append(
                f"{attacker_nickname(game)} attacks first "
                f"({game.transient.first_attacker_reason_card})"
            )
        if game.transient.game_end:
            lines.append("Game over")
        elif permissions.are_beaten:
            lines.append("Beaten: take or done")
        elif permissions.is_waiting_for_others:
            lines.append("Waiting for other players")
        elif permissions.are_you_attacker:
            lines.append("Your attack")
        elif permissions.are_you_defender:
            lines.append("Your defence")
        return lines

    def _format_event_message(
        self, event_type: str, data: Dict[str, Any]
    ) -> Optional[str]:
        if event_type == ClientEventType.COMMAND_ERROR.name:
            return f"Error: {data.get('message', '')}"
        elif event_type == ClientEventType.INFO_MESSAGE.name:
            params = data.get("params", {})
            if data.get("message_id") == "player_left_afk":
                return f"{params.get('playerName', '')} left the game (idle)"
            if data.get("message_id") == "player_left":
                return f"{params.get('playerName', '')} left the game"
            return f"{data.get('message_id')}: {params}"
        elif event_type == ClientEventType.CONNECTED.name:
            return f"Connected to {data.get('url', 'server')}"
        elif event_type == ClientEventType.DISCONNECTED.name:
            return "Disconnected"
        return None


async def execute_command(client: "DurakClient", line: str) -> Optional[str]:
    """
    Run one typed command against a client.

    Args:
        client: The client to drive
        line: The typed line

    Returns:
        Feedback to show, or None when there is nothing to say
    """
    words = line.split()
    if not words:
        return None
    verb, args = words[0].lower(), words[1:]

    try:
        if verb == "help":
            return HELP_TEXT
        if verb == "create":
            client.create_room()
        elif verb == "join" and len(args) == 1:
            client.join_room(int(args[0]))
        elif verb == "play":
            client.want_to_play()
        elif verb == "spectate":
            client.want_to_spectate()
        elif verb == "status" and len(args) == 2:
            client.set_player_status(int(args[0]), args[1])
        elif verb == "start":
            client.start_game()
        elif verb == "delete":
            client.delete_game()
        elif verb == "bot":
            client.add_bot()
        elif verb == "nobots":
            client.remove_bots()
        elif verb == "pick" and len(args) == 1:
            client.use_card(parse_card_text(args[0]))
            picked = client.state.game.transient.picked_card
            return f"Picked {picked}" if picked else "Nothing picked"
        elif verb == "attack":
            if not client.attack():
                return "You can't attack now"
        elif verb == "defend" and len(args) == 1:
            if not client.defend(parse_card_text(args[0])):
                return "You can't defend now"
        elif verb == "take":
            if not client.pick_up():
                return "You can't pick up now"
        elif verb == "done":
            if not client.complete():
                return "You can't complete now"
        else:
            return f"Unknown command {line.strip()!r}, type help"
    except ValueError as e:
        return f"Bad argument: {e}"
    return None
