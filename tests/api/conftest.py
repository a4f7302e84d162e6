"""
Fixtures for client API tests.
"""

import pytest

from durak_client.protocol.messages import EventName, encode_event

CARD_10S = {"value": "10", "suit": "♠"}
CARD_JS = {"value": "J", "suit": "♠"}


@pytest.fixture
def feed(client):
    """Handle one event on the client, by enum member or wire name."""

    async def handle(name, data=None):
        if isinstance(name, EventName):
            name = name.value
        return await client.handle_frame(encode_event(name, data))

    return handle


@pytest.fixture
def in_game(client, feed):
    """A client seated at index 0 of a two player game, after the deal."""

    async def setup(**info):
        await feed(
            EventName.SESSION_ESTABLISHED,
            {
                "yourId": 1,
                "yourNickname": "ann",
                "clients": [{"id": 1, "nickname": "ann"}, {"id": 2, "nickname": "bo"}],
                "rooms": [{"id": 5, "ownerId": 2, "membersNum": 2}],
            },
        )
        await feed(
            EventName.ROOM_JOINED,
            {
                "room": {
                    "id": 5,
                    "ownerId": 2,
                    "members": [
                        {"id": 1, "nickname": "ann", "isPlayer": True},
                        {"id": 2, "nickname": "bo", "isPlayer": True},
                    ],
                }
            },
        )
        await feed(
            EventName.GAME_PLAYERS_ASSIGNED,
            {"yourPlayerIndex": 0, "players": [{"name": "ann"}, {"name": "bo"}]},
        )
        await feed(EventName.GAME_DEAL, {"gameStateInfo": dict(info)})
        return client

    return setup
