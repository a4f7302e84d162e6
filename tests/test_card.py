import copy

import pytest

from durak_client.common.card import Card, Rank, Suit


def test_card_initialization():
    card = Card(Suit.SPADES, Rank.TEN)
    assert card.suit == Suit.SPADES
    assert card.rank == Rank.TEN


def test_card_repr():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    assert repr(card) == "Card(Suit.HEARTS, Rank.EIGHT)"


def test_card_str():
    assert str(Card(Suit.SPADES, Rank.TEN)) == "10♠"
    assert str(Card(Suit.HEARTS, Rank.QUEEN)) == "Q♥"


def test_invalid_suit():
    with pytest.raises(TypeError):
        Card("♠", Rank.TEN)


def test_invalid_rank():
    with pytest.raises(TypeError):
        Card(Suit.SPADES, "10")


def test_card_is_immutable():
    card = Card(Suit.CLUBS, Rank.SIX)
    with pytest.raises(AttributeError):
        card.rank = Rank.ACE


def test_card_equality_and_hash():
    a = Card(Suit.DIAMONDS, Rank.KING)
    b = Card(Suit.DIAMONDS, Rank.KING)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert a != Card(Suit.HEARTS, Rank.KING)


def test_card_copy_returns_same_card():
    card = Card(Suit.CLUBS, Rank.JACK)
    assert copy.copy(card) is card
    assert copy.deepcopy(card) is card


def test_from_dict():
    card = Card.from_dict({"value": "10", "suit": "♠"})
    assert card == Card(Suit.SPADES, Rank.TEN)


def test_from_dict_rejects_unknown_values():
    with pytest.raises(ValueError):
        Card.from_dict({"value": "2", "suit": "♠"})
    with pytest.raises(ValueError):
        Card.from_dict({"value": "10", "suit": "X"})
    with pytest.raises(KeyError):
        Card.from_dict({"value": "10"})


def test_to_dict():
    assert Card(Suit.HEARTS, Rank.ACE).to_dict() == {"value": "A", "suit": "♥"}
