"""
Client facade for the Durak server.

`DurakClient` owns the canonical state, routes every inbound frame through a
fixed handler table into the pure reducers, and turns user intents into
outbound commands. Presentation happens through a `PresentationAdapter`, which
is given the committed state and its notifications after each frame.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from durak_client.adapters.base import PresentationAdapter
from durak_client.adapters.cli import CLIAdapter
from durak_client.commands import Command, CommandEncoder, describe
from durak_client.common.card import Card
from durak_client.config import load_config
from durak_client.dispatcher import EventDispatcher
from durak_client.errors import ProtocolError
from durak_client.events.emitter import ClientEventType, EventEmitter, EventPriority
from durak_client.notices import Notice, NoticeBoard, NoticeKind
from durak_client.protocol.messages import EventName, decode_event
from durak_client.protocol.payloads import (
    field_value,
    parse_client,
    parse_int,
    parse_member,
    parse_optional_card,
    parse_game_state_update,
    parse_players,
    parse_room_info,
    parse_room_summary,
    parse_top_level_game_state,
    require_mapping,
)
from durak_client.recording import SessionRecorder
from durak_client.room_link import RoomLinkStore
from durak_client.state.game import GameTransitions
from durak_client.state.lobby import LobbyTransitions
from durak_client.state.models import (
    ClientState,
    GameState,
    GameStateUpdate,
    LobbyState,
    RoomState,
)
from durak_client.state.permissions import (
    Permissions,
    are_you_attacker,
    are_you_defender,
    can_you_complete,
    can_you_pick_up,
    derive_permissions,
)
from durak_client.state.room import RoomTransitions
from durak_client.transport.base import Transport
from durak_client.transport.websocket import WebSocketTransport

logger = logging.getLogger("durak_client.api.client")


def _record_list(data: Dict[str, Any], canonical: str) -> List[Any]:
    value = field_value(data, canonical, default=None)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProtocolError(f"{canonical} must be a list")
    return value


def _game_updates(data: Any) -> Tuple[GameStateUpdate, ...]:
    """The nested game-state object first, then top-level game-state keys."""
    data = require_mapping(data, "game event")
    updates = []
    nested = field_value(data, "game_state_info", default=None)
    if nested is not None:
        updates.append(parse_game_state_update(nested))
    updates.append(parse_top_level_game_state(data))
    return tuple(updates)


class DurakClient:
    """
    A Durak client session.

    Every inbound frame is decoded and handled to completion before the next
    one; handlers never await. Outbound commands are queued on the transport
    without waiting.

    Attributes:
        config: Configuration dict, see `durak_client.config`
        transport: Connection to the server
        adapter: Presentation adapter
        events: Emitter for client notifications
        notices: Timed error and info notices
        state: The committed client state
        linked_room_id: Room id offered to the bootstrap auto-join
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        adapter: Optional[PresentationAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
        room_link: Optional[RoomLinkStore] = None,
        recorder: Optional[SessionRecorder] = None,
    ):
        """
        Initialize the client.

        Args:
            transport: Transport to use. If None, a websocket transport for the
                      configured url is created.
            adapter: Presentation adapter. If None, a CLI adapter is used.
            config: Configuration overrides
            room_link: Room link store. If None, one is created when
                      ``room_link_file`` is configured.
            recorder: Session recorder. If None, one is created when
                     ``record_file`` is configured.
        """
        self.config = load_config(config)
        self.transport = transport or WebSocketTransport(self.config["url"])
        self.adapter = adapter or CLIAdapter()

        if room_link is None and self.config["room_link_file"]:
            room_link = RoomLinkStore(self.config["room_link_file"])
        self.room_link = room_link
        if recorder is None and self.config["record_file"]:
            recorder = SessionRecorder(self.config["record_file"])
        self.recorder = recorder

        self.events = EventEmitter()
        self.notices = NoticeBoard(
            error_timeout=self.config["command_error_timeout"],
            info_timeout=self.config["info_message_timeout"],
            on_change=self._on_notice_changed,
        )
        self.state = ClientState()
        self.linked_room_id: Optional[int] = self.config["room_id"]

        self._pending: List[Tuple[ClientEventType, Dict[str, Any]]] = []
        self._dirty = False
        self._room_to_link: Optional[int] = None
        self._unlink_room = False
        self._in_frame = False
        self._flush_task: Optional[asyncio.Task] = None
        # Queued first so handlers that send commands cannot reorder notifications
        self.events.on_any(self._pending.append, EventPriority.CRITICAL)

        self.dispatcher = EventDispatcher(
            {
                EventName.SESSION_ESTABLISHED: self._on_session_established,
                EventName.CLIENT_BROADCAST_JOINED: self._on_client_joined,
                EventName.CLIENT_LEFT: self._on_client_left,
                EventName.ROOM_LISTED: self._on_room_listed,
                EventName.ROOM_UPDATED: self._on_room_updated,
                EventName.ROOM_REMOVED: self._on_room_removed,
                EventName.ROOM_JOINED: self._on_room_joined,
                EventName.CLIENT_COMMAND_ERROR: self._on_command_error,
                EventName.ROOM_CREATED: self._on_room_created,
                EventName.MEMBER_STATUS_CHANGED: self._on_member_status_changed,
                EventName.MEMBER_PLAYER_STATUS_CHANGED: self._on_member_player_status_changed,
                EventName.GAME_PLAYERS_ASSIGNED: self._on_players_assigned,
                EventName.GAME_DEAL: self._on_deal,
                EventName.GAME_FIRST_ATTACKER: self._on_first_attacker,
                EventName.GAME_STARTED: self._on_game_started,
                EventName.GAME_ATTACK: self._on_attack,
                EventName.GAME_DEFEND: self._on_defend,
                EventName.GAME_STATE: self._on_state_only,
                EventName.NEW_ROUND: self._on_state_only,
                EventName.GAME_END: self._on_game_end,
                EventName.GAME_PLAYER_LEFT: self._on_player_left,
            }
        )

    # Views

    @property
    def permissions(self) -> Permissions:
        """Permissions derived from the current game snapshot."""
        return derive_permissions(self.state.game)

    @property
    def is_in_room(self) -> bool:
        return self.state.room.room is not None

    # Connection

    async def connect(self) -> None:
        """
        Connect and register the nickname.

        The room id from the config wins over the stored room link.
        """
        await self.adapter.initialize()
        if self.linked_room_id is None and self.room_link is not None:
            self.linked_room_id = await self.room_link.load()

        await self.transport.connect()
        self.events.emit(ClientEventType.CONNECTED, {"url": self.config["url"]})
        self._send(CommandEncoder.join_lobby(self.config["nickname"]))
        await self.flush()

    async def receive_forever(self) -> None:
        """Handle inbound frames until the connection closes."""
        async for frame in self.transport.frames():
            await self.handle_frame(frame)

    async def run(self) -> None:
        """Connect, handle frames until disconnected, then shut down."""
        try:
            await self.connect()
            await self.receive_forever()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        self.notices.close()
        if self.transport.is_connected:
            await self.transport.close()
        self.events.emit(ClientEventType.DISCONNECTED, {})
        await self.flush()
        await self.adapter.shutdown()

    async def handle_frame(self, frame: str) -> bool:
        """
        Process one inbound frame to completion.

        Args:
            frame: Raw frame text

        Returns:
            True if a handler processed the frame, False if it was dropped
        """
        if self.recorder is not None:
            await self.recorder.record(frame)

        self._in_frame = True
        try:
            try:
                envelope = decode_event(frame)
            except ProtocolError as e:
                logger.warning(f"Dropping undecodable frame: {e}")
                self.events.emit(ClientEventType.FRAME_DROPPED, {"reason": str(e)})
                handled = False
            else:
                handled = self.dispatcher.dispatch(envelope)
                if not handled:
                    self.events.emit(
                        ClientEventType.FRAME_DROPPED, {"name": envelope.name}
                    )
        finally:
            self._in_frame = False

        await self.flush()
        return handled

    async def flush(self) -> None:
        """Hand queued notifications and the latest state to the adapter."""
        if self._unlink_room:
            self._unlink_room = False
            if self.room_link is not None:
                await self.room_link.clear()

        if self._room_to_link is not None:
            room_id, self._room_to_link = self._room_to_link, None
            if self.room_link is not None:
                await self.room_link.save(room_id)

        while self._pending:
            event_type, data = self._pending.pop(0)
            await self.adapter.notify_client_event(event_type, data)

        if self._dirty:
            self._dirty = False
            await self.adapter.render_state(self.state, self.permissions)

    # Intents

    def use_card(self, card: Card) -> Optional[Card]:
        """
        Pick a card, or unpick it when it is already picked.

        Returns:
            The picked card afterwards
        """
        self._set_game(GameTransitions.use_card(self.state.game, card))
        self._request_flush()
        return self.state.game.transient.picked_card

    def attack(self) -> bool:
        """Attack with the picked card if the local player may attack."""
        game = self.state.game
        picked = game.transient.picked_card
        if picked is None:
            return False
        if not (are_you_attacker(game) or game.info.can_you_attack):
            return False
        self._send(CommandEncoder.attack(picked))
        self._set_game(GameTransitions.clear_picked(game))
        self._request_flush()
        return True

    def defend(self, attacking_card: Card) -> bool:
        """Beat ``attacking_card`` with the picked card if the local player defends."""
        game = self.state.game
        picked = game.transient.picked_card
        if picked is None or not are_you_defender(game):
            return False
        self._send(CommandEncoder.defend(attacking_card, picked))
        self._set_game(GameTransitions.clear_picked(game))
        self._request_flush()
        return True

    def pick_up(self) -> bool:
        if not can_you_pick_up(self.state.game):
            return False
        self._send(CommandEncoder.pick_up())
        self._request_flush()
        return True

    def complete(self) -> bool:
        if not can_you_complete(self.state.game):
            return False
        self._send(CommandEncoder.complete())
        self._request_flush()
        return True

    def create_room(self) -> None:
        self._intent(CommandEncoder.create_room())

    def join_room(self, room_id: int) -> None:
        self._intent(CommandEncoder.join_room(room_id))

    def want_to_play(self) -> None:
        self._set_room(RoomTransitions.want_to_play(self.state.room, True))
        self._intent(CommandEncoder.want_to_play())

    def want_to_spectate(self) -> None:
        self._set_room(RoomTransitions.want_to_play(self.state.room, False))
        self._intent(CommandEncoder.want_to_spectate())

    def set_player_status(self, member_id: int, status: str) -> None:
        self._intent(CommandEncoder.set_player_status(member_id, status))

    def start_game(self) -> None:
        self._intent(CommandEncoder.start_game())

    def delete_game(self) -> None:
        self._intent(CommandEncoder.delete_game())

    def add_bot(self) -> None:
        self._intent(CommandEncoder.add_bot())

    def remove_bots(self) -> None:
        self._intent(CommandEncoder.remove_bots())

    # Lobby handlers

    def _on_session_established(self, data: Any) -> None:
        data = require_mapping(data, EventName.SESSION_ESTABLISHED.value)
        your_id = parse_int(field_value(data, "your_id"), "your id")
        your_nickname = str(field_value(data, "your_nickname", default="") or "")
        clients = [parse_client(c) for c in _record_list(data, "clients")]
        rooms = [parse_room_summary(r) for r in _record_list(data, "rooms")]

        lobby = LobbyTransitions.session_established(
            self.state.lobby, your_id, your_nickname, clients, rooms
        )
        self._set_lobby(lobby)
        logger.info(
            f"Joined lobby as {your_nickname!r} (id {your_id}) with "
            f"{len(lobby.clients)} client(s) and {len(lobby.rooms)} room(s)"
        )

        command = LobbyTransitions.bootstrap_action(lobby, self.linked_room_id)
        if command is not None:
            logger.info(f"Bootstrap action: {describe(command)}")
            self._send(command)

    def _on_client_joined(self, data: Any) -> None:
        client = parse_client(data)
        self._set_lobby(LobbyTransitions.client_joined(self.state.lobby, client))

    def _on_client_left(self, data: Any) -> None:
        data = require_mapping(data, EventName.CLIENT_LEFT.value)
        client_id = parse_int(field_value(data, "id"), "client id")
        self._set_lobby(LobbyTransitions.client_left(self.state.lobby, client_id))

    def _on_room_listed(self, data: Any) -> None:
        room = parse_room_summary(field_value(require_mapping(data, "event"), "room"))
        self._set_lobby(LobbyTransitions.room_listed(self.state.lobby, room))

    def _on_room_created(self, data: Any) -> None:
        room = parse_room_summary(field_value(require_mapping(data, "event"), "room"))
        self._set_lobby(LobbyTransitions.room_created(self.state.lobby, room))

    def _on_room_removed(self, data: Any) -> None:
        data = require_mapping(data, EventName.ROOM_REMOVED.value)
        room_id = parse_int(field_value(data, "room_id"), "room id")
        self._set_lobby(LobbyTransitions.room_removed(self.state.lobby, room_id))
        current = self.state.room.room
        if current is not None and current.id == room_id:
            logger.info(f"Room {room_id} was removed, back in the lobby")
            self._room_to_link = None
            self._unlink_room = True
            self.linked_room_id = None
            self._set_room(RoomTransitions.left_room(self.state.room))
            self._set_game(GameTransitions.reset())

    def _on_command_error(self, data: Any) -> None:
        data = require_mapping(data, EventName.CLIENT_COMMAND_ERROR.value)
        message = str(field_value(data, "message", default="") or "")
        logger.error(f"Command rejected: {message}")
        self.notices.show_error(message)

    # Room handlers

    def _on_room_joined(self, data: Any) -> None:
        room = parse_room_info(field_value(require_mapping(data, "event"), "room"))
        self._set_room(RoomTransitions.room_joined(self.state.room, room))
        self._set_game(GameTransitions.reset())
        self._room_to_link = room.id
        logger.info(f"Joined room {room.id}")

    def _on_room_updated(self, data: Any) -> None:
        room = parse_room_info(field_value(require_mapping(data, "event"), "room"))
        self._set_room(RoomTransitions.room_updated(self.state.room, room))

    def _on_member_status_changed(self, data: Any) -> None:
        member = parse_member(field_value(require_mapping(data, "event"), "member"))
        self._set_room(
            RoomTransitions.member_status_changed(
                self.state.room, member, self.state.lobby.your_id
            )
        )

    def _on_member_player_status_changed(self, data: Any) -> None:
        member = parse_member(field_value(require_mapping(data, "event"), "member"))
        self._set_room(
            RoomTransitions.member_player_status_changed(
                self.state.room, member, self.state.lobby.your_id
            )
        )

    # Game handlers

    def _on_players_assigned(self, data: Any) -> None:
        data = require_mapping(data, EventName.GAME_PLAYERS_ASSIGNED.value)
        players = parse_players(field_value(data, "players"))
        index = field_value(data, "your_player_index", default=None)
        your_player_index = None if index is None else parse_int(index, "player index")
        if your_player_index is not None and your_player_index < 0:
            your_player_index = None
        self._set_game(
            GameTransitions.players_assigned(self.state.game, players, your_player_index)
        )

    def _on_deal(self, data: Any) -> None:
        self._set_game(GameTransitions.deal(self.state.game, *_game_updates(data)))

    def _on_first_attacker(self, data: Any) -> None:
        updates = _game_updates(data)
        reason_card = parse_optional_card(
            field_value(data, "reason_card", default=None), "reason card"
        )
        self._set_game(
            GameTransitions.first_attacker(self.state.game, reason_card, *updates)
        )

    def _on_game_started(self, data: Any) -> None:
        self._set_game(GameTransitions.started(self.state.game, *_game_updates(data)))

    def _on_attack(self, data: Any) -> None:
        updates = _game_updates(data)
        card = parse_optional_card(field_value(data, "card", default=None))
        self._set_game(GameTransitions.attack(self.state.game, card, *updates))

    def _on_defend(self, data: Any) -> None:
        updates = _game_updates(data)
        attacking = parse_optional_card(
            field_value(data, "attacking_card", default=None), "attacking card"
        )
        defending = parse_optional_card(
            field_value(data, "defending_card", default=None), "defending card"
        )
        self._set_game(
            GameTransitions.defend(self.state.game, attacking, defending, *updates)
        )

    def _on_state_only(self, data: Any) -> None:
        self._set_game(GameTransitions.state_only(self.state.game, *_game_updates(data)))

    def _on_game_end(self, data: Any) -> None:
        data = require_mapping(data, EventName.GAME_END.value)
        loser_index = parse_int(
            field_value(data, "loser_index", default=-1), "loser index"
        )
        has_loser = bool(field_value(data, "has_loser", default=loser_index >= 0))
        self._set_game(
            GameTransitions.end(self.state.game, has_loser, loser_index)
        )
        logger.info(f"Game over, loser index {loser_index if has_loser else 'none'}")

    def _on_player_left(self, data: Any) -> None:
        data = require_mapping(data, EventName.GAME_PLAYER_LEFT.value)
        index = parse_int(field_value(data, "player_index"), "player index")
        is_afk = bool(field_value(data, "is_afk", default=False))

        player = self.state.game.player(index)
        player_name = player.name if player else ""
        self._set_game(GameTransitions.player_left(self.state.game, index))
        self.notices.show_info(
            "player_left_afk" if is_afk else "player_left", {"playerName": player_name}
        )

    # Internals

    def _set_lobby(self, lobby: LobbyState) -> None:
        if lobby is self.state.lobby:
            return
        self.state = replace(self.state, lobby=lobby)
        self._dirty = True
        self.events.emit(ClientEventType.LOBBY_CHANGED, {"lobby": lobby})

    def _set_room(self, room: RoomState) -> None:
        if room is self.state.room:
            return
        self.state = replace(self.state, room=room)
        self._dirty = True
        self.events.emit(ClientEventType.ROOM_CHANGED, {"room": room})

    def _set_game(self, game: GameState) -> None:
        if game is self.state.game:
            return
        self.state = replace(self.state, game=game)
        self._dirty = True
        self.events.emit(ClientEventType.GAME_CHANGED, {"game": game})

    def _send(self, command: Command) -> None:
        logger.debug(f"Sending {describe(command)}")
        self.transport.send(command.to_json())
        self.events.emit(
            ClientEventType.COMMAND_SENT,
            {"command": str(command), "payload": command.payload},
        )

    def _intent(self, command: Command) -> None:
        self._send(command)
        self._request_flush()

    def _on_notice_changed(self, kind: NoticeKind, notice: Optional[Notice]) -> None:
        if notice is None:
            self.events.emit(ClientEventType.NOTICE_CLEARED, {"kind": kind.value})
            self._request_flush()
        elif kind is NoticeKind.ERROR:
            self.events.emit(ClientEventType.COMMAND_ERROR, {"message": notice.message})
        else:
            self.events.emit(
                ClientEventType.INFO_MESSAGE,
                {"message_id": notice.message, "params": dict(notice.params)},
            )

    def _request_flush(self) -> None:
        # Frame handling flushes on its own once the frame is done
        if self._in_frame or self._flush_task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._flush_task = loop.create_task(self._scheduled_flush())

    def _has_unflushed(self) -> bool:
        return (
            bool(self._pending)
            or self._dirty
            or self._unlink_room
            or self._room_to_link is not None
        )

    async def _scheduled_flush(self) -> None:
        # Intents may land while the adapter is rendering, so flush until idle
        try:
            while True:
                await self.flush()
                if not self._has_unflushed():
                    break
        finally:
            self._flush_task = None
