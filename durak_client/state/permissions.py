"""
Permissions derived from the game snapshot.

Nothing here is stored: every function reads the current `GameState` and
returns a fresh answer, so the result after a merge never depends on what was
computed before it. Legality of picking up and completing is decided by the
server and only read back from its flags.
"""

from dataclasses import dataclass
from typing import Optional

from durak_client.state.models import GameState


def are_you_attacker(game: GameState) -> bool:
    return (
        game.your_player_index is not None
        and game.your_player_index == game.info.attacker_index
    )


def are_you_defender(game: GameState) -> bool:
    return (
        game.your_player_index is not None
        and game.your_player_index == game.info.defender_index
    )


def can_you_pick_up(game: GameState) -> bool:
    return game.info.can_you_pick_up


def can_you_complete(game: GameState) -> bool:
    return game.info.can_you_complete


def are_beaten(game: GameState) -> bool:
    """The defender may either pick up or let the round complete."""
    return can_you_pick_up(game) and can_you_complete(game)


def is_waiting_for_others(game: GameState) -> bool:
    """The round is live but the next move belongs to someone else."""
    return (
        bool(game.info.attack_cards)
        and not can_you_pick_up(game)
        and not can_you_complete(game)
    )


def attacker_nickname(game: GameState) -> str:
    player = game.player(game.info.attacker_index)
    return player.name if player else ""


def defender_nickname(game: GameState) -> str:
    player = game.player(game.info.defender_index)
    return player.name if player else ""


def loser_nickname(game: GameState) -> Optional[str]:
    """Name of the loser, or None when the game is not over or ended in a draw."""
    if not game.transient.game_end or not game.transient.has_loser:
        return None
    player = game.player(game.transient.loser_index)
    return player.name if player else ""


@dataclass(frozen=True)
class Permissions:
    """Snapshot of every derived permission, for presentation."""

    are_you_attacker: bool = False
    are_you_defender: bool = False
    can_you_pick_up: bool = False
    can_you_complete: bool = False
    are_beaten: bool = False
    is_waiting_for_others: bool = False


def derive_permissions(game: GameState) -> Permissions:
    return Permissions(
        are_you_attacker=are_you_attacker(game),
        are_you_defender=are_you_defender(game),
        can_you_pick_up=can_you_pick_up(game),
        can_you_complete=can_you_complete(game),
        are_beaten=are_beaten(game),
        is_waiting_for_others=is_waiting_for_others(game),
    )
