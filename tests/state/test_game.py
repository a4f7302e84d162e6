"""
Tests for the game transitions and the merge algorithm.
"""

import logging

from durak_client.adapters.cli import parse_card_text as card
from durak_client.protocol.payloads import parse_game_state_update
from durak_client.state.game import GameTransitions, merge_info
from durak_client.state.models import GameState, GameStateInfo, GameStateUpdate, Player


def _update(**payload):
    return parse_game_state_update(payload)


def _roster(n=2, you=0):
    players = tuple(Player(name=f"p{i}", index=i) for i in range(n))
    return GameTransitions.players_assigned(GameState(), players, you)


class TestMerge:
    """Sparse merges overwrite present keys and keep the rest."""

    def test_absent_keys_are_untouched(self):
        info = merge_info(GameStateInfo(), _update(deckSize=24, attackerIndex=0))
        info = merge_info(info, _update(defenderIndex=1))
        assert info.deck_size == 24
        assert info.attacker_index == 0
        assert info.defender_index == 1

    def test_sequence_equals_union_with_last_writer(self):
        payloads = [
            {"deckSize": 24, "attackerIndex": 0, "yourHand": [{"value": "6", "suit": "♥"}]},
            {
                "deckSize": 20,
                "defenderIndex": 1,
                "battleground": [{"value": "10", "suit": "♠"}],
                "defendingCards": {"0": {"value": "J", "suit": "♠"}},
            },
            {"attacker_index": 1, "canYouPickUp": True},
            {"battleground": [{"value": "7", "suit": "♦"}]},
        ]
        sequential = GameStateInfo()
        union = {}
        for payload in payloads:
            sequential = merge_info(sequential, parse_game_state_update(payload))
            union.update(payload)
        assert sequential == merge_info(GameStateInfo(), parse_game_state_update(union))
        assert sequential.deck_size == 20
        assert sequential.attacker_index == 1
        assert sequential.defending_cards == {0: card("J♠")}

    def test_battleground_without_defences_keeps_defending_cards(self):
        info = merge_info(
            GameStateInfo(),
            _update(
                battleground=[{"value": "10", "suit": "♠"}],
                defendingCards={"0": {"value": "J", "suit": "♠"}},
            ),
        )
        info = merge_info(info, _update(battleground=[{"value": "7", "suit": "♦"}]))
        assert info.attack_cards == (card("7♦"),)
        assert info.defending_cards == {0: card("J♠")}

    def test_merge_is_idempotent(self):
        update = _update(deckSize=10, battleground=[{"value": "10", "suit": "♠"}])
        once = merge_info(GameStateInfo(), update)
        assert merge_info(once, update) == once

    def test_extras_accumulate(self):
        info = merge_info(GameStateInfo(), _update(a=1))
        info = merge_info(info, _update(b=2, a=3))
        assert info.extras == {"a": 3, "b": 2}

    def test_empty_update_returns_same_state(self):
        state = _roster()
        assert GameTransitions.merge(state, GameStateUpdate()) is state

    def test_completion_flags_for_unknown_seats_are_dropped(self, caplog):
        state = _roster(n=2)
        with caplog.at_level(logging.WARNING, logger="durak_client.state.game"):
            state = GameTransitions.merge(
                state, _update(completedPlayers={"0": True, "5": True})
            )
        assert state.info.completed_players == {0: True}
        assert "unknown players" in caplog.text


class TestBattleground:
    def test_attack_then_defend_pairs_cards(self):
        state = _roster()
        state = GameTransitions.attack(state, card("10♠"))
        state = GameTransitions.defend(state, card("10♠"), card("J♠"))
        slots = state.info.battleground
        assert len(slots) == 1
        assert slots[0].attack == card("10♠")
        assert slots[0].defend == card("J♠")
        assert slots[0].is_defended

    def test_attack_and_defend_are_idempotent(self):
        state = _roster()
        state = GameTransitions.attack(state, card("10♠"))
        state = GameTransitions.attack(state, card("10♠"))
        state = GameTransitions.defend(state, card("10♠"), card("J♠"))
        again = GameTransitions.defend(state, card("10♠"), card("J♠"))
        assert again == state
        assert len(state.info.battleground) == 1

    def test_attack_already_in_merged_battleground_is_not_duplicated(self):
        state = GameTransitions.attack(
            _roster(), card("10♠"), _update(battleground=[{"value": "10", "suit": "♠"}])
        )
        assert state.info.attack_cards == (card("10♠"),)

    def test_defend_without_matching_slot_is_a_no_op(self, caplog):
        state = GameTransitions.attack(_roster(), card("10♠"))
        with caplog.at_level(logging.WARNING, logger="durak_client.state.game"):
            after = GameTransitions.defend(state, card("Q♥"), card("K♥"))
        assert after.info.defending_cards == {}
        assert "No battleground slot" in caplog.text

    def test_defending_card_never_outlives_its_slot(self):
        state = GameTransitions.attack(_roster(), card("10♠"))
        state = GameTransitions.defend(state, card("10♠"), card("J♠"))
        # the round resolves and the server clears the battleground only
        state = GameTransitions.state_only(state, _update(battleground=[]))
        assert state.info.battleground == ()
        assert state.info.defending_cards == {0: card("J♠")}

        state = GameTransitions.attack(state, card("7♦"))
        assert [(s.attack, s.defend) for s in state.info.battleground] == [
            (card("7♦"), None)
        ]
        assert state.info.defending_cards == {}

    def test_battleground_growth_keeps_existing_defences(self):
        state = GameTransitions.attack(_roster(), card("10♠"))
        state = GameTransitions.defend(state, card("10♠"), card("J♠"))
        state = GameTransitions.state_only(
            state,
            _update(
                battleground=[
                    {"value": "10", "suit": "♠"},
                    {"value": "J", "suit": "♦"},
                ]
            ),
        )
        assert [slot.defend for slot in state.info.battleground] == [card("J♠"), None]


class TestRoundLifecycle:
    def test_deal_resets_info_and_transient(self):
        state = _roster()
        state = GameTransitions.attack(state, card("10♠"))
        state = GameTransitions.end(state, True, 1)
        state = GameTransitions.deal(state, _update(deckSize=24, trumpCard={"value": "A", "suit": "♣"}))
        assert state.transient.game_end is False
        assert state.info.battleground == ()
        assert state.info.deck_size == 24
        assert state.info.trump_card == card("A♣")
        assert len(state.players) == 2

    def test_game_end_then_deal(self):
        state = GameTransitions.attack(_roster(), card("10♠"))
        state = GameTransitions.end(state, True, 1)
        assert state.transient.game_end is True
        assert state.transient.loser_index == 1

        state = GameTransitions.deal(state, _update(deckSize=24))
        assert state.transient.game_end is False
        assert state.info.battleground == ()

    def test_draw_has_no_loser(self):
        state = GameTransitions.end(_roster(), False, 0)
        assert state.transient.game_end
        assert not state.transient.has_loser
        assert state.transient.loser_index == -1

    def test_first_attacker_keeps_battleground(self):
        state = GameTransitions.attack(_roster(), card("10♠"))
        state = GameTransitions.first_attacker(
            state, card("6♣"), _update(attackerIndex=1, defenderIndex=0)
        )
        assert state.transient.first_attacker_reason_card == card("6♣")
        assert state.info.attacker_index == 1
        assert state.info.attack_cards == (card("10♠"),)

    def test_started_keeps_reason_card_and_state_only_clears_it(self):
        state = GameTransitions.first_attacker(_roster(), card("6♣"))
        state = GameTransitions.started(state, _update(deckSize=12))
        assert state.transient.first_attacker_reason_card == card("6♣")
        state = GameTransitions.state_only(state, _update(deckSize=11))
        assert state.transient.first_attacker_reason_card is None
        assert state.info.deck_size == 11

    def test_player_left(self):
        state = GameTransitions.player_left(_roster(), 1)
        assert state.players[1].is_active is False
        assert GameTransitions.player_left(state, 7) is state


class TestPickedCard:
    def test_use_card_toggles(self):
        state = GameTransitions.use_card(_roster(), card("9♦"))
        assert state.transient.picked_card == card("9♦")
        state = GameTransitions.use_card(state, card("9♦"))
        assert state.transient.picked_card is None

    def test_use_card_switches(self):
        state = GameTransitions.use_card(_roster(), card("9♦"))
        state = GameTransitions.use_card(state, card("K♠"))
        assert state.transient.picked_card == card("K♠")

    def test_clear_picked(self):
        state = GameTransitions.use_card(_roster(), card("9♦"))
        assert GameTransitions.clear_picked(state).transient.picked_card is None
