"""
Tests for the presentation adapters.
"""

import pytest

from durak_client.adapters.cli import CLIAdapter, HELP_TEXT, execute_command, parse_card_text
from durak_client.adapters.dummy import DummyAdapter
from durak_client.common.card import Card, Rank, Suit
from durak_client.events import ClientEventType
from durak_client.protocol.messages import EventName, encode_event
from durak_client.state.models import ClientState, LobbyState, RoomSummary
from durak_client.state.permissions import Permissions


class TestParseCardText:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10♠", Card(Suit.SPADES, Rank.TEN)),
            ("10s", Card(Suit.SPADES, Rank.TEN)),
            ("qh", Card(Suit.HEARTS, Rank.QUEEN)),
            (" A♦ ", Card(Suit.DIAMONDS, Rank.ACE)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_card_text(text) == expected

    @pytest.mark.parametrize("text", ["", "x", "1s", "10x", "Z♠"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_card_text(text)


class TestDummyAdapter:
    @pytest.mark.asyncio
    async def test_records_events_and_states(self):
        adapter = DummyAdapter(commands=["create"])
        await adapter.initialize()
        await adapter.notify_client_event(ClientEventType.COMMAND_ERROR, {"message": "no"})
        await adapter.notify_client_event("custom", {"a": 1})
        await adapter.render_state(ClientState(), Permissions())

        assert adapter.initialized
        assert adapter.events == [("COMMAND_ERROR", {"message": "no"}), ("custom", {"a": 1})]
        assert adapter.get_events_by_type("COMMAND_ERROR") == [{"message": "no"}]
        assert adapter.last_state == ClientState()
        assert await adapter.read_command() == "create"
        assert await adapter.read_command() is None

        adapter.clear()
        assert adapter.events == []
        assert adapter.last_state is None


class TestCLIAdapter:
    def _adapter(self):
        lines = []
        return CLIAdapter(output=lines.append), lines

    @pytest.mark.asyncio
    async def test_lobby_rendering(self):
        adapter, lines = self._adapter()
        lobby = LobbyState(
            your_id=1,
            your_nickname="ann",
            rooms={4: RoomSummary(id=4, owner_id=1, member_count=2, name="table")},
            my_room_id=4,
        )
        await adapter.render_state(ClientState(lobby=lobby), Permissions())

        assert lines[0] == "=== Lobby (ann) ==="
        assert "Room 4 *: table, 2 member(s)" in lines

    @pytest.mark.asyncio
    async def test_event_messages(self):
        adapter, lines = self._adapter()
        await adapter.notify_client_event(ClientEventType.COMMAND_ERROR, {"message": "Room is full"})
        await adapter.notify_client_event(
            ClientEventType.INFO_MESSAGE,
            {"message_id": "player_left_afk", "params": {"playerName": "bo"}},
        )
        await adapter.notify_client_event(ClientEventType.GAME_CHANGED, {"game": None})

        assert lines == ["Error: Room is full", "bo left the game (idle)"]

    @pytest.mark.asyncio
    async def test_read_command_returns_none_on_eof(self):
        def raise_eof(prompt):
            raise EOFError

        adapter = CLIAdapter(output=lambda line: None, input_func=raise_eof)
        assert await adapter.read_command() is None

    @pytest.mark.asyncio
    async def test_read_command(self):
        adapter = CLIAdapter(output=lambda line: None, input_func=lambda prompt: "join 3")
        assert await adapter.read_command() == "join 3"

    @pytest.mark.asyncio
    async def test_game_rendering(self, client):
        for name, data in [
            (
                EventName.SESSION_ESTABLISHED,
                {"yourId": 1, "yourNickname": "ann", "clients": [], "rooms": [{"id": 5, "membersNum": 2}]},
            ),
            (
                EventName.ROOM_JOINED,
                {"room": {"id": 5, "ownerId": 1, "members": [{"id": 1, "nickname": "ann", "isPlayer": True}]}},
            ),
            (EventName.GAME_PLAYERS_ASSIGNED, {"yourPlayerIndex": 0, "players": [{"name": "ann"}, {"name": "bo"}]}),
            (
                EventName.GAME_DEAL,
                {
                    "gameStateInfo": {
                        "yourHand": [{"value": "6", "suit": "♥"}],
                        "handsSizes": [1, 6],
                        "deckSize": 20,
                        "trumpCard": {"value": "A", "suit": "♣"},
                        "attackerIndex": 0,
                        "defenderIndex": 1,
                    }
                },
            ),
        ]:
            await client.handle_frame(encode_event(name.value, data))

        adapter, lines = self._adapter()
        await adapter.render_state(client.state, client.permissions)

        assert lines[0] == "=== Room 5 (1 player(s)) ==="
        assert "  ann (owner, you, player)" in lines
        assert "Trump: A♣  Deck: 20  Discarded: 0" in lines
        assert "  ann (you): 1 card(s) attacking" in lines
        assert "  bo: 6 card(s) defending" in lines
        assert "Hand: 6♥" in lines
        assert lines[-1] == "Your attack"


class TestExecuteCommand:
    @pytest.mark.asyncio
    async def test_help_and_unknown(self, client):
        assert await execute_command(client, "help") == HELP_TEXT
        assert await execute_command(client, "   ") is None
        assert "Unknown command" in await execute_command(client, "dance")

    @pytest.mark.asyncio
    async def test_lobby_commands(self, client, sent):
        assert await execute_command(client, "create") is None
        assert await execute_command(client, "join 12") is None
        assert [(c["subType"], c["data"]) for c in sent()] == [
            ("createRoom", None),
            ("joinRoom", 12),
        ]

    @pytest.mark.asyncio
    async def test_bad_argument(self, client, sent):
        assert (await execute_command(client, "join twelve")).startswith("Bad argument")
        assert (await execute_command(client, "pick 1x")).startswith("Bad argument")
        assert sent() == []

    @pytest.mark.asyncio
    async def test_game_commands_are_gated(self, client, sent):
        assert await execute_command(client, "pick 10s") == "Picked 10♠"
        assert await execute_command(client, "attack") == "You can't attack now"
        assert await execute_command(client, "take") == "You can't pick up now"
        assert await execute_command(client, "pick 10s") == "Nothing picked"
        assert sent() == []
