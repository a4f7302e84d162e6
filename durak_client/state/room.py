"""
State transition functions for the room the client is in.
"""

import logging
from dataclasses import replace
from typing import Optional

from durak_client.state.models import RoomInfo, RoomMember, RoomState

logger = logging.getLogger("durak_client.state.room")


def count_players(room: Optional[RoomInfo]) -> int:
    """Number of members marked as players."""
    if room is None:
        return 0
    return sum(1 for member in room.members.values() if member.is_player)


class RoomTransitions:
    """
    Pure functions for room state transitions.

    Wholesale events replace the room; per-member events patch one member by
    id. A member event for an id the room does not know means the snapshot is
    stale: it is logged and ignored until the next wholesale update.
    """

    @staticmethod
    def room_joined(state: RoomState, room: RoomInfo) -> RoomState:
        """Replace the room after joining it."""
        return replace(state, room=room, player_count=count_players(room))

    @staticmethod
    def room_updated(state: RoomState, room: RoomInfo) -> RoomState:
        """Replace the room after the server changed it."""
        return replace(state, room=room, player_count=count_players(room))

    @staticmethod
    def left_room(state: RoomState) -> RoomState:
        return replace(state, room=None, player_count=0)

    @staticmethod
    def member_status_changed(
        state: RoomState, member: RoomMember, your_id: Optional[int]
    ) -> RoomState:
        """
        Replace one member after its status changed.

        Args:
            state: Current room state
            member: The member as the server now sees it
            your_id: Local session id, used to mirror our own want-to-play flag

        Returns:
            New room state, or the same state if the member is unknown
        """
        return RoomTransitions._patch_member(state, member, your_id, recount=False)

    @staticmethod
    def member_player_status_changed(
        state: RoomState, member: RoomMember, your_id: Optional[int]
    ) -> RoomState:
        """Replace one member after it became a player or a spectator."""
        return RoomTransitions._patch_member(state, member, your_id, recount=True)

    @staticmethod
    def want_to_play(state: RoomState, want_to_play: bool) -> RoomState:
        """Set the local want-to-play mirror ahead of the server's echo."""
        return replace(state, want_to_play=want_to_play)

    @staticmethod
    def _patch_member(
        state: RoomState, member: RoomMember, your_id: Optional[int], recount: bool
    ) -> RoomState:
        room = state.room
        if room is None:
            logger.warning(f"No room for member event (member {member.id})")
            return state
        if member.id not in room.members:
            logger.warning(f"Member {member.id} not found in room {room.id}")
            return state

        members = dict(room.members)
        members[member.id] = member
        new_room = replace(room, members=members)

        want_to_play = state.want_to_play
        if your_id is not None and member.id == your_id:
            want_to_play = member.want_to_play

        player_count = count_players(new_room) if recount else state.player_count
        return replace(
            state,
            room=new_room,
            player_count=player_count,
            want_to_play=want_to_play,
        )
