"""
Tests for outbound command encoding.
"""

import json

import pytest

from durak_client.adapters.cli import parse_card_text as card
from durak_client.commands import Command, CommandEncoder, describe
from durak_client.protocol.messages import CommandType


def _wire(command: Command):
    return json.loads(command.to_json())


@pytest.mark.parametrize(
    "command, expected",
    [
        (CommandEncoder.join_lobby("ann"), ("lobby", "join", "ann")),
        (CommandEncoder.create_room(), ("lobby", "createRoom", None)),
        (CommandEncoder.join_room("12"), ("lobby", "joinRoom", 12)),
        (CommandEncoder.want_to_play(), ("room", "wantToPlay", None)),
        (CommandEncoder.want_to_spectate(), ("room", "wantToSpectate", None)),
        (
            CommandEncoder.set_player_status(3, "ready"),
            ("room", "setPlayerStatus", {"memberId": 3, "status": "ready"}),
        ),
        (CommandEncoder.start_game(), ("room", "startGame", None)),
        (CommandEncoder.delete_game(), ("room", "deleteGame", None)),
        (CommandEncoder.add_bot(), ("room", "addBot", None)),
        (CommandEncoder.remove_bots(), ("room", "removeBots", None)),
        (CommandEncoder.pick_up(), ("game", "pickUp", None)),
        (CommandEncoder.complete(), ("game", "complete", None)),
    ],
)
def test_wire_form(command, expected):
    category, action, data = expected
    assert _wire(command) == {"type": category, "subType": action, "data": data}


def test_attack():
    assert _wire(CommandEncoder.attack(card("10♠")))["data"] == {
        "card": {"value": "10", "suit": "♠"}
    }


def test_defend():
    assert _wire(CommandEncoder.defend(card("10♠"), card("J♠")))["data"] == {
        "attackingCard": {"value": "10", "suit": "♠"},
        "defendingCard": {"value": "J", "suit": "♠"},
    }


def test_join_room_rejects_non_integer():
    with pytest.raises(ValueError):
        CommandEncoder.join_room("abc")


def test_to_dict_and_str():
    command = CommandEncoder.join_room(4)
    assert command.category is CommandType.LOBBY
    assert command.to_dict() == {"type": "lobby", "subType": "joinRoom", "data": 4}
    assert str(command) == "lobby.joinRoom"


def test_describe():
    assert describe(None) == "none"
    assert describe(CommandEncoder.create_room()) == "lobby.createRoom"
    assert describe(CommandEncoder.join_room(4)) == "lobby.joinRoom(4)"
