"""
Durak lobby client.

A client for a shared Durak server: it keeps a consistent view of the lobby,
the current room and the game in progress from the server's partial events,
and sends the user's intents back as commands.
"""

__version__ = "0.1.0"

from durak_client.api.client import DurakClient
from durak_client.common.card import Card, Rank, Suit
from durak_client.errors import DurakClientError, NotConnectedError, ProtocolError

__all__ = [
    "__version__",
    "DurakClient",
    "Card",
    "Rank",
    "Suit",
    "DurakClientError",
    "NotConnectedError",
    "ProtocolError",
]
