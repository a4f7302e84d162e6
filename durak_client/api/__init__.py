"""
Public API of the Durak client.
"""

from durak_client.api.client import DurakClient

__all__ = ["DurakClient"]
