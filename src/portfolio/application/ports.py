"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from portfolio.application.dto import Resolution
from portfolio.domain import Subscriber


class KeyValueStore(Protocol):
    """String key-value store with list values and TTLs (Redis semantics)."""

    storage_type: str

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, *keys: str) -> None:
        ...

    def incr(self, key: str) -> int:
        ...

    def expire(self, key: str, seconds: int) -> None:
        """Expire key after seconds. No-op if the key does not exist."""
        ...

    def ttl(self, key: str) -> int | None:
        """Seconds until key expires, or None when it is missing or has no expiry."""
        ...

    def list_append(self, key: str, value: str) -> None:
        ...

    def list_items(self, key: str) -> list[str]:
        ...

    def list_remove(self, key: str, value: str) -> None:
        """Remove every occurrence of value from the list."""
        ...

    def scan_keys(self, pattern: str) -> list[str]:
        """Return keys matching a glob-style pattern (e.g. "url:*")."""
        ...

    def ping(self) -> bool:
        ...


class SubscriberRepository(Protocol):
    """Persists subscribers with phone and email secondary indexes."""

    storage_type: str

    def get(self, subscriber_id: str) -> Subscriber | None:
        ...

    def find_by_phone(self, phone: str) -> Subscriber | None:
        ...

    def find_by_email(self, email: str) -> Subscriber | None:
        ...

    def upsert(self, resolution: Resolution) -> None:
        """Write the resolved record, its indexes, and drop a merged-away record."""
        ...

    def list_all(self) -> list[Subscriber]:
        """Return all subscribers in join order."""
        ...

    def delete(self, subscriber_id: str) -> None:
        ...
