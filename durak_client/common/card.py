"""
This module defines the `Suit`, `Rank`, and `Card` classes used to represent
the cards of the 36-card Durak deck.

- `Suit`: An enum representing the four suits: Hearts, Diamonds, Clubs, and
Spades. The enum values are the symbols the server puts on the wire.

- `Rank`: An enum representing the nine Durak ranks, Six through Ace. The enum
values are the rank strings the server puts on the wire.

- `Card`: An immutable playing card. Equality is structural (rank and suit), so
a card decoded from one event compares equal to the same card decoded from
another.
"""

from enum import Enum, unique
from typing import Any, Dict


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for the ranks of the Durak deck, lowest first.
    """

    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return self.value


class Card:
    """
    Class representing a playing card.

    >>> card = Card(Suit.SPADES, Rank.TEN)
    >>> print(card)
    10♠
    >>> Card.from_dict({"value": "10", "suit": "♠"}) == card
    True
    """

    __slots__ = ("suit", "rank")

    def __init__(self, suit: Suit, rank: Rank):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        object.__setattr__(self, "suit", suit)
        object.__setattr__(self, "rank", rank)

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __reduce__(self):
        return (Card, (self.suit, self.rank))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        """
        Build a card from its wire form ``{"value": "10", "suit": "♠"}``.

        :raises ValueError: If the value or suit is not a known rank or suit.
        :raises KeyError: If either key is missing.
        """
        return cls(Suit(data["suit"]), Rank(str(data["value"])))

    def to_dict(self) -> Dict[str, str]:
        """Return the wire form of the card."""
        return {"value": self.rank.value, "suit": self.suit.value}

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return NotImplemented

    def __hash__(self):
        return hash((self.suit, self.rank))

    def __repr__(self) -> str:
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"
