"""
Pytest configuration shared by all tests.

This module contains fixtures for building a client wired to an in-memory
transport and a recording adapter.
"""

import json

import pytest

from durak_client.adapters.dummy import DummyAdapter
from durak_client.api.client import DurakClient
from durak_client.transport.memory import MemoryTransport


@pytest.fixture
def transport():
    """A connected in-memory transport."""
    return MemoryTransport()


@pytest.fixture
def adapter():
    return DummyAdapter()


@pytest.fixture
def client(transport, adapter):
    """A client that talks to the in-memory transport."""
    return DurakClient(
        transport=transport,
        adapter=adapter,
        config={"nickname": "ann", "command_error_timeout": 0.05, "info_message_timeout": 0.05},
    )


@pytest.fixture
def sent(transport):
    """Decoded outbound commands, most recent last."""

    def decode():
        return [json.loads(frame) for frame in transport.sent]

    return decode
