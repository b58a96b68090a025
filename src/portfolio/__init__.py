"""
Portfolio backend core: clean-architecture layout.

- domain: entities (Subscriber, ShortLink) and errors. No outer dependencies.
- application: validators, identity resolution, use cases (SubscriberService,
  ShortLinkService), ports (KeyValueStore, SubscriberRepository), DTOs.
- infrastructure: adapters (RedisKeyValueStore, InMemoryKeyValueStore,
  KeyValueSubscriberRepository).
"""

from portfolio.application import (
    KeyValueStore,
    Recipients,
    ShortLinkService,
    SubscriberRepository,
    SubscriberService,
    SubscriptionResult,
    validate_email,
    validate_phone_number,
)
from portfolio.domain import ShortLink, Subscriber
from portfolio.infrastructure import (
    InMemoryKeyValueStore,
    KeyValueSubscriberRepository,
    RedisKeyValueStore,
)

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "KeyValueSubscriberRepository",
    "Recipients",
    "RedisKeyValueStore",
    "ShortLink",
    "ShortLinkService",
    "Subscriber",
    "SubscriberRepository",
    "SubscriberService",
    "SubscriptionResult",
    "validate_email",
    "validate_phone_number",
]
