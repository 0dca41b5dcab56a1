"""Persistence for events and votes.

Two interchangeable stores share the ``PollStore`` interface: an in-process
``MemoryPollStore`` and a ``RedisPollStore`` for deployments with Redis.
"""

from heatpoll.db.base import PollStore, generate_token
from heatpoll.db.memory import MemoryPollStore
from heatpoll.db.redis_store import RedisPollStore

__all__ = [
    "MemoryPollStore",
    "PollStore",
    "RedisPollStore",
    "generate_token",
]
