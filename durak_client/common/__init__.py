"""
Common value types shared by the protocol and state layers.
"""

from durak_client.common.card import Card, Rank, Suit

__all__ = ["Card", "Rank", "Suit"]
