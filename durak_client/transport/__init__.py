"""
Transports that carry frames between the client and the server.
"""

from durak_client.transport.base import Transport
from durak_client.transport.memory import MemoryTransport
from durak_client.transport.websocket import WebSocketTransport

__all__ = ["Transport", "MemoryTransport", "WebSocketTransport"]
