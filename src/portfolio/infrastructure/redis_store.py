"""Redis implementation of KeyValueStore."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import redis

from portfolio.domain import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as e:
        raise StorageError(f"Redis {operation} failed: {e}") from e


class RedisKeyValueStore:
    """Thin wrapper over a redis.Redis client created with decode_responses=True."""

    storage_type = "redis"

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        return cls(redis.Redis.from_url(url, encoding="utf-8", decode_responses=True))

    def get(self, key: str) -> str | None:
        with _storage_errors("GET"):
            return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        with _storage_errors("SET"):
            self._client.set(key, value)

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        with _storage_errors("DEL"):
            self._client.delete(*keys)

    def incr(self, key: str) -> int:
        with _storage_errors("INCR"):
            return int(self._client.incr(key))

    def expire(self, key: str, seconds: int) -> None:
        with _storage_errors("EXPIRE"):
            self._client.expire(key, seconds)

    def ttl(self, key: str) -> int | None:
        with _storage_errors("TTL"):
            seconds = int(self._client.ttl(key))
        return seconds if seconds > 0 else None

    def list_append(self, key: str, value: str) -> None:
        with _storage_errors("RPUSH"):
            self._client.rpush(key, value)

    def list_items(self, key: str) -> list[str]:
        with _storage_errors("LRANGE"):
            return list(self._client.lrange(key, 0, -1))

    def list_remove(self, key: str, value: str) -> None:
        with _storage_errors("LREM"):
            self._client.lrem(key, 0, value)

    def scan_keys(self, pattern: str) -> list[str]:
        with _storage_errors("SCAN"):
            return list(self._client.scan_iter(match=pattern))

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis connection check failed: %s", e)
            return False

    def close(self) -> None:
        self._client.close()
