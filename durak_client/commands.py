"""
Outbound command envelopes.

`CommandEncoder` builds one `Command` per user intent. It does no validation of
its own: permission gating happens in the client before a command is built,
and the server is the sole authority on legality. It answers either with an
event that advances the state or with a ``ClientCommandError``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from durak_client.common.card import Card
from durak_client.protocol.messages import CommandType, encode_command


class LobbyAction(str, Enum):
    JOIN = "join"
    CREATE_ROOM = "createRoom"
    JOIN_ROOM = "joinRoom"


class RoomAction(str, Enum):
    WANT_TO_PLAY = "wantToPlay"
    WANT_TO_SPECTATE = "wantToSpectate"
    SET_PLAYER_STATUS = "setPlayerStatus"
    START_GAME = "startGame"
    DELETE_GAME = "deleteGame"
    ADD_BOT = "addBot"
    REMOVE_BOTS = "removeBots"


class GameAction(str, Enum):
    ATTACK = "attack"
    DEFEND = "defend"
    PICK_UP = "pickUp"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Command:
    """
    An outbound intent.

    Attributes:
        category: Command namespace (lobby, room or game)
        action: Action within the namespace
        payload: JSON-serializable data, None when the action takes none
    """

    category: CommandType
    action: str
    payload: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.category.value,
            "subType": self.action,
            "data": self.payload,
        }

    def to_json(self) -> str:
        return encode_command(self.category, self.action, self.payload)

    def __str__(self) -> str:
        return f"{self.category.value}.{self.action}"


class CommandEncoder:
    """
    Builders for every command the server accepts.

    All methods are static and return a new `Command`.
    """

    @staticmethod
    def join_lobby(nickname: str) -> Command:
        """Register the session's nickname; the server answers with a ClientJoinedEvent."""
        return Command(CommandType.LOBBY, LobbyAction.JOIN.value, nickname)

    @staticmethod
    def create_room() -> Command:
        return Command(CommandType.LOBBY, LobbyAction.CREATE_ROOM.value)

    @staticmethod
    def join_room(room_id: Union[int, str]) -> Command:
        """
        Join a room by id.

        Room ids read back from a stored link arrive as strings and are sent
        as integers.

        Raises:
            ValueError: If the id is not an integer
        """
        return Command(CommandType.LOBBY, LobbyAction.JOIN_ROOM.value, int(room_id))

    @staticmethod
    def want_to_play() -> Command:
        return Command(CommandType.ROOM, RoomAction.WANT_TO_PLAY.value)

    @staticmethod
    def want_to_spectate() -> Command:
        return Command(CommandType.ROOM, RoomAction.WANT_TO_SPECTATE.value)

    @staticmethod
    def set_player_status(member_id: int, status: str) -> Command:
        """Set a member's status; only the room owner may do this."""
        return Command(
            CommandType.ROOM,
            RoomAction.SET_PLAYER_STATUS.value,
            {"memberId": member_id, "status": status},
        )

    @staticmethod
    def start_game() -> Command:
        return Command(CommandType.ROOM, RoomAction.START_GAME.value)

    @staticmethod
    def delete_game() -> Command:
        return Command(CommandType.ROOM, RoomAction.DELETE_GAME.value)

    @staticmethod
    def add_bot() -> Command:
        return Command(CommandType.ROOM, RoomAction.ADD_BOT.value)

    @staticmethod
    def remove_bots() -> Command:
        return Command(CommandType.ROOM, RoomAction.REMOVE_BOTS.value)

    @staticmethod
    def attack(card: Card) -> Command:
        return Command(
            CommandType.GAME, GameAction.ATTACK.value, {"card": card.to_dict()}
        )

    @staticmethod
    def defend(attacking_card: Card, defending_card: Card) -> Command:
        return Command(
            CommandType.GAME,
            GameAction.DEFEND.value,
            {
                "attackingCard": attacking_card.to_dict(),
                "defendingCard": defending_card.to_dict(),
            },
        )

    @staticmethod
    def pick_up() -> Command:
        return Command(CommandType.GAME, GameAction.PICK_UP.value)

    @staticmethod
    def complete() -> Command:
        return Command(CommandType.GAME, GameAction.COMPLETE.value)


def describe(command: Optional[Command]) -> str:
    """Short form used in log lines."""
    if command is None:
        return "none"
    if command.payload is None:
        return str(command)
    return f"{command}({command.payload})"
