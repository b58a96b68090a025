"""Infrastructure layer: concrete implementations of application ports."""

from portfolio.infrastructure.memory_store import InMemoryKeyValueStore
from portfolio.infrastructure.persistence.kv_repository import KeyValueSubscriberRepository
from portfolio.infrastructure.phone import to_e164
from portfolio.infrastructure.redis_store import RedisKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueSubscriberRepository",
    "RedisKeyValueStore",
    "to_e164",
]
