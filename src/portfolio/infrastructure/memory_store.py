"""In-memory implementation of KeyValueStore (no Redis). Honors TTLs."""

import fnmatch
import math
import time
from collections.abc import Callable


class InMemoryKeyValueStore:
    """Dict-backed store with Redis-like semantics for the operations the app uses."""

    storage_type = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._values: dict[str, str] = {}
        self._lists: dict[str, list[str]] = {}
        self._deadlines: dict[str, float] = {}
        self._clock = clock

    def _purge(self, key: str) -> None:
        deadline = self._deadlines.get(key)
        if deadline is not None and self._clock() >= deadline:
            self._values.pop(key, None)
            self._lists.pop(key, None)
            self._deadlines.pop(key, None)

    def _exists(self, key: str) -> bool:
        self._purge(key)
        return key in self._values or key in self._lists

    def get(self, key: str) -> str | None:
        self._purge(key)
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._lists.pop(key, None)
        self._deadlines.pop(key, None)
        self._values[key] = str(value)

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._values.pop(key, None)
            self._lists.pop(key, None)
            self._deadlines.pop(key, None)

    def incr(self, key: str) -> int:
        value = int(self.get(key) or 0) + 1
        self._values[key] = str(value)
        return value

    def expire(self, key: str, seconds: int) -> None:
        if self._exists(key):
            self._deadlines[key] = self._clock() + seconds

    def ttl(self, key: str) -> int | None:
        if not self._exists(key) or key not in self._deadlines:
            return None
        return max(1, math.ceil(self._deadlines[key] - self._clock()))

    def list_append(self, key: str, value: str) -> None:
        self._purge(key)
        self._lists.setdefault(key, []).append(value)

    def list_items(self, key: str) -> list[str]:
        self._purge(key)
        return list(self._lists.get(key, []))

    def list_remove(self, key: str, value: str) -> None:
        self._purge(key)
        if key in self._lists:
            self._lists[key] = [v for v in self._lists[key] if v != value]
            if not self._lists[key]:
                del self._lists[key]

    def scan_keys(self, pattern: str) -> list[str]:
        keys = [*self._values, *self._lists]
        return [k for k in keys if fnmatch.fnmatchcase(k, pattern) and self._exists(k)]

    def ping(self) -> bool:
        return True
