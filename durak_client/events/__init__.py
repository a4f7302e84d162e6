"""
Client notification events.
"""

from durak_client.events.emitter import ClientEventType, EventEmitter, EventPriority

__all__ = ["ClientEventType", "EventEmitter", "EventPriority"]
