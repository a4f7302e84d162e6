"""
Immutable client state and the pure transitions that advance it.
"""

from durak_client.state.models import (
    UNSET,
    BattlegroundSlot,
    ClientSession,
    ClientState,
    GameState,
    GameStateInfo,
    GameStateUpdate,
    LobbyState,
    Player,
    RoomInfo,
    RoomMember,
    RoomState,
    RoomSummary,
    TransientGameState,
)
from durak_client.state.lobby import LobbyTransitions
from durak_client.state.room import RoomTransitions
from durak_client.state.game import GameTransitions, merge_info
from durak_client.state.permissions import Permissions, derive_permissions

__all__ = [
    "UNSET",
    "BattlegroundSlot",
    "ClientSession",
    "ClientState",
    "GameState",
    "GameStateInfo",
    "GameStateUpdate",
    "LobbyState",
    "Player",
    "RoomInfo",
    "RoomMember",
    "RoomState",
    "RoomSummary",
    "TransientGameState",
    "LobbyTransitions",
    "RoomTransitions",
    "GameTransitions",
    "merge_info",
    "Permissions",
    "derive_permissions",
]
