"""
State transition functions for the game in progress.

This module provides pure functions for transitioning the game state, without
modifying the original state objects. The server pushes sparse partial updates,
so the core operation is a merge: every field an update carries overwrites the
previous value and every other field keeps its last value.
"""

import logging
from dataclasses import replace
from typing import Optional, Tuple

from durak_client.common.card import Card
from durak_client.state.models import (
    GameState,
    GameStateInfo,
    GameStateUpdate,
    Player,
    TransientGameState,
)

logger = logging.getLogger("durak_client.state.game")


def merge_info(info: GameStateInfo, update: GameStateUpdate) -> GameStateInfo:
    """
    Merge one partial update into a snapshot.

    Args:
        info: Current snapshot
        update: Partial update; only the fields it carries are assigned

    Returns:
        New snapshot
    """
    changes = update.present()
    if update.extras:
        extras = dict(info.extras)
        extras.update(update.extras)
        changes["extras"] = extras
    if not changes:
        return info
    return replace(info, **changes)


class GameTransitions:
    """
    Pure functions for game state transitions.

    Event transitions take the partial updates an event carries in the order
    they are merged: the nested game-state object first, then the game-state
    keys found on the event's top level.
    """

    @staticmethod
    def reset() -> GameState:
        """Return an empty game, as after joining a new room."""
        return GameState()

    @staticmethod
    def merge(state: GameState, *updates: GameStateUpdate) -> GameState:
        """
        Merge partial updates into the snapshot, in order.

        Completion flags addressed to a seat that does not exist are dropped
        once the roster is known.
        """
        info = state.info
        for update in updates:
            info = merge_info(info, update)

        if state.players and info.completed_players:
            valid = {
                index: done
                for index, done in info.completed_players.items()
                if 0 <= index < len(state.players)
            }
            if len(valid) != len(info.completed_players):
                logger.warning(
                    f"Dropping completion flags for unknown players: "
                    f"{sorted(set(info.completed_players) - set(valid))}"
                )
                info = replace(info, completed_players=valid)

        if info is state.info:
            return state
        return replace(state, info=info)

    @staticmethod
    def players_assigned(
        state: GameState, players: Tuple[Player, ...], your_player_index: Optional[int]
    ) -> GameState:
        """
        Set the roster for the game about to start.

        Args:
            state: Current game state
            players: Seats in index order
            your_player_index: Seat of the local client, None when spectating

        Returns:
            New game state
        """
        if your_player_index is not None and not 0 <= your_player_index < len(players):
            logger.warning(
                f"Player index {your_player_index} is outside a roster of {len(players)}"
            )
        return replace(state, players=tuple(players), your_player_index=your_player_index)

    @staticmethod
    def player_left(state: GameState, index: int) -> GameState:
        """Mark a seat as inactive; an unknown index changes nothing."""
        player = state.player(index)
        if player is None:
            logger.warning(f"Player {index} left but is not in the roster")
            return state
        players = list(state.players)
        players[index] = replace(player, is_active=False)
        return replace(state, players=tuple(players))

    @staticmethod
    def deal(state: GameState, *updates: GameStateUpdate) -> GameState:
        """
        Start a deal: reset transient state and the snapshot, then merge.

        The roster survives; it is only replaced by a new players event.
        """
        fresh = replace(state, info=GameStateInfo(), transient=TransientGameState())
        return GameTransitions.merge(fresh, *updates)

    @staticmethod
    def first_attacker(
        state: GameState, reason_card: Optional[Card], *updates: GameStateUpdate
    ) -> GameState:
        """Record who attacks first and the card that decided it."""
        merged = GameTransitions.merge(state, *updates)
        transient = replace(merged.transient, first_attacker_reason_card=reason_card)
        return replace(merged, transient=transient)

    @staticmethod
    def started(state: GameState, *updates: GameStateUpdate) -> GameState:
        """Merge the state sent when play begins, keeping the reason card."""
        return GameTransitions.merge(state, *updates)

    @staticmethod
    def state_only(state: GameState, *updates: GameStateUpdate) -> GameState:
        """
        Merge a bare state update (a resolved turn or a new round).

        The first-attacker reason card is only shown until the first turn
        resolves, so it is cleared here.
        """
        merged = GameTransitions.merge(state, *updates)
        if merged.transient.first_attacker_reason_card is None:
            return merged
        transient = replace(merged.transient, first_attacker_reason_card=None)
        return replace(merged, transient=transient)

    @staticmethod
    def attack(
        state: GameState, card: Optional[Card], *updates: GameStateUpdate
    ) -> GameState:
        """
        Merge an attack and open a slot for the attacking card.

        The card is appended as an undefended slot unless a slot already holds
        it, so replaying the same attack changes nothing. A defending card
        left over at the new slot's index from an earlier round is removed.

        Args:
            state: Current game state
            card: The attacking card named on the event, if any
            *updates: Partial updates carried by the event

        Returns:
            New game state
        """
        merged = GameTransitions.merge(state, *updates)
        if card is None:
            return merged

        info = merged.info
        if info.slot_index(card) is not None:
            return merged
        index = len(info.attack_cards)
        defending_cards = info.defending_cards
        if index in defending_cards:
            defending_cards = dict(defending_cards)
            del defending_cards[index]
        info = replace(
            info,
            attack_cards=info.attack_cards + (card,),
            defending_cards=defending_cards,
        )
        return replace(merged, info=info)

    @staticmethod
    def defend(
        state: GameState,
        attacking_card: Optional[Card],
        defending_card: Optional[Card],
        *updates: GameStateUpdate,
    ) -> GameState:
        """
        Merge a defence and place the defending card on its slot.

        The slot is the one whose attacking card equals ``attacking_card``.
        When no such slot exists the merge still applies but the card is not
        placed.
        """
        merged = GameTransitions.merge(state, *updates)
        if attacking_card is None or defending_card is None:
            return merged

        info = merged.info
        index = info.slot_index(attacking_card)
        if index is None:
            logger.warning(f"No battleground slot is attacked with {attacking_card}")
            return merged
        if info.defending_cards.get(index) == defending_card:
            return merged

        defending_cards = dict(info.defending_cards)
        defending_cards[index] = defending_card
        return replace(merged, info=replace(info, defending_cards=defending_cards))

    @staticmethod
    def end(
        state: GameState,
        has_loser: bool,
        loser_index: int,
        *updates: GameStateUpdate,
    ) -> GameState:
        """Mark the game as over."""
        merged = GameTransitions.merge(state, *updates)
        transient = replace(
            merged.transient,
            game_end=True,
            has_loser=has_loser,
            loser_index=loser_index if has_loser else -1,
        )
        return replace(merged, transient=transient)

    @staticmethod
    def use_card(state: GameState, card: Card) -> GameState:
        """Pick a card to play, or unpick it if it is already picked."""
        picked = None if state.transient.picked_card == card else card
        return replace(state, transient=replace(state.transient, picked_card=picked))

    @staticmethod
    def clear_picked(state: GameState) -> GameState:
        if state.transient.picked_card is None:
            return state
        return replace(state, transient=replace(state.transient, picked_card=None))
