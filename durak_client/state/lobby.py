"""
State transition functions for the lobby.

This module provides pure functions for transitioning the lobby state, without
modifying the original state objects.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional, Union

from durak_client.commands import Command, CommandEncoder
from durak_client.state.models import ClientSession, LobbyState, RoomSummary

logger = logging.getLogger("durak_client.state.lobby")


class LobbyTransitions:
    """
    Pure functions for lobby state transitions.

    Each method takes a state and returns a new state, without modifying the
    original. Clients and rooms are kept in id-keyed dicts, so inserting a
    record whose id is already present replaces it in place.
    """

    @staticmethod
    def session_established(
        state: LobbyState,
        your_id: int,
        your_nickname: str,
        clients: Iterable[ClientSession],
        rooms: Iterable[RoomSummary],
    ) -> LobbyState:
        """
        Replace the whole lobby with the session bootstrap snapshot.

        This is the only full replace and happens once per connection.

        Args:
            state: Current lobby state
            your_id: Session id the server assigned to this client
            your_nickname: Nickname the server registered
            clients: Every connected session
            rooms: Every listed room

        Returns:
            New lobby state
        """
        return replace(
            state,
            your_id=your_id,
            your_nickname=your_nickname,
            clients={client.id: client for client in clients},
            rooms={room.id: room for room in rooms},
            my_room_id=None,
        )

    @staticmethod
    def bootstrap_action(
        state: LobbyState, linked_room_id: Optional[Union[int, str]] = None
    ) -> Optional[Command]:
        """
        Decide the single automatic command to send after bootstrap.

        Rules are evaluated in order and at most one fires:

        1. No rooms: create one.
        2. Exactly one room with exactly one member: join it.
        3. A room id came from a shared link: join that room.

        Args:
            state: Lobby state right after session_established
            linked_room_id: Room id supplied out of band, if any

        Returns:
            The command to send, or None
        """
        if not state.rooms:
            return CommandEncoder.create_room()

        if len(state.rooms) == 1:
            (room,) = state.rooms.values()
            if room.member_count == 1:
                return CommandEncoder.join_room(room.id)

        if linked_room_id not in (None, ""):
            try:
                return CommandEncoder.join_room(linked_room_id)
            except ValueError:
                logger.warning(f"Ignoring malformed linked room id {linked_room_id!r}")

        return None

    @staticmethod
    def client_joined(state: LobbyState, client: ClientSession) -> LobbyState:
        """Add a session; a duplicate id replaces the existing record."""
        if client.id in state.clients:
            logger.debug(f"Client {client.id} joined twice, replacing record")
        clients = dict(state.clients)
        clients[client.id] = client
        return replace(state, clients=clients)

    @staticmethod
    def client_left(state: LobbyState, client_id: int) -> LobbyState:
        """Remove a session by id."""
        if client_id not in state.clients:
            logger.warning(f"Client {client_id} left but was not in the lobby")
            return state
        clients = {cid: c for cid, c in state.clients.items() if cid != client_id}
        return replace(state, clients=clients)

    @staticmethod
    def room_listed(state: LobbyState, room: RoomSummary) -> LobbyState:
        """
        Update a listed room in place.

        Only ClientCreatedRoomEvent adds rooms, so an update for an unknown id
        is ignored.
        """
        if room.id not in state.rooms:
            logger.debug(f"Ignoring update for unlisted room {room.id}")
            return state
        rooms = dict(state.rooms)
        rooms[room.id] = room
        return replace(state, rooms=rooms)

    @staticmethod
    def room_created(state: LobbyState, room: RoomSummary) -> LobbyState:
        """
        Append a new room, recording it as ours if we own it.

        A duplicate id replaces the listed room in place.
        """
        rooms = dict(state.rooms)
        rooms[room.id] = room
        my_room_id = state.my_room_id
        if state.your_id is not None and room.owner_id == state.your_id:
            my_room_id = room.id
        return replace(state, rooms=rooms, my_room_id=my_room_id)

    @staticmethod
    def room_removed(state: LobbyState, room_id: int) -> LobbyState:
        """Remove a listed room by id."""
        if room_id not in state.rooms:
            logger.warning(f"Can't remove room {room_id}: not in the lobby list")
            return state
        rooms = {rid: r for rid, r in state.rooms.items() if rid != room_id}
        my_room_id = None if state.my_room_id == room_id else state.my_room_id
        return replace(state, rooms=rooms, my_room_id=my_room_id)
