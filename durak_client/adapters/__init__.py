"""
Presentation adapters for the Durak client.
"""

from durak_client.adapters.base import PresentationAdapter
from durak_client.adapters.cli import CLIAdapter
from durak_client.adapters.dummy import DummyAdapter

__all__ = ["PresentationAdapter", "CLIAdapter", "DummyAdapter"]
