"""URL shortener: create, look up, revoke, delete and follow short links.

Each link is spread over several keys so clicks can be incremented atomically:
url:{code}, clicks:{code}, created:{code}, expires:{code}, revoked:{code}, plus the
reverse index original:{normalized url} -> code.
"""

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from portfolio.application.ports import KeyValueStore
from portfolio.application.urls import normalize_url
from portfolio.domain import (
    LinkNotFound,
    LinkUnavailable,
    ShortLink,
    ValidationError,
    isoformat,
)

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
_CODE_ALPHABET = string.ascii_lowercase + string.digits
_PER_CODE_PREFIXES = ("url", "clicks", "created", "expires", "revoked")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_code() -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(CODE_LENGTH))


def _iso_to_datetime(s: str) -> datetime:
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _keys(code: str) -> list[str]:
    return [f"{prefix}:{code}" for prefix in _PER_CODE_PREFIXES]


@dataclass(frozen=True)
class ShortenResult:
    link: ShortLink
    exists: bool


class ShortLinkService:
    """Short links stored directly in a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = _utc_now,
        code_factory: Callable[[], str] = _random_code,
    ) -> None:
        self._store = store
        self._clock = clock
        self._code_factory = code_factory

    def shorten(self, url: str | None, expires_at: str | None = None) -> ShortenResult:
        """Return the existing link for url, or create one. expires_at is ISO-8601."""
        if not url or not url.strip():
            raise ValidationError("URL is required")
        expiry = None
        if expires_at:
            try:
                expiry = _iso_to_datetime(expires_at)
            except ValueError as e:
                raise ValidationError("expiresAt must be an ISO-8601 timestamp") from e

        normalized = normalize_url(url)
        existing_code = self._store.get(f"original:{normalized}")
        if existing_code:
            link = self._load(existing_code)
            if link is not None:
                logger.info("Found existing short code %s for %s", existing_code, normalized)
                return ShortenResult(link=link, exists=True)

        code = self._unused_code()
        now = self._clock()
        self._store.set(f"url:{code}", normalized)
        self._store.set(f"clicks:{code}", "0")
        self._store.set(f"created:{code}", isoformat(now))
        self._store.set(f"original:{normalized}", code)
        if expiry is not None:
            self._store.set(f"expires:{code}", expires_at)
            ttl_seconds = int((expiry - now).total_seconds())
            if ttl_seconds > 0:
                for key in [*_keys(code), f"original:{normalized}"]:
                    self._store.expire(key, ttl_seconds)
        logger.info("Created short code %s for %s", code, normalized)
        return ShortenResult(link=self.get(code), exists=False)

    def get(self, code: str) -> ShortLink:
        link = self._load(code)
        if link is None:
            raise LinkNotFound(code)
        return link

    def list_all(self) -> list[ShortLink]:
        """All links, oldest first. Codes whose url key vanished are skipped."""
        links = []
        for key in self._store.scan_keys("url:*"):
            link = self._load(key[len("url:"):])
            if link is not None:
                links.append(link)
        return sorted(links, key=lambda link: link.created_at)

    def toggle_revoke(self, code: str) -> bool:
        """Revoke an active link or reactivate a revoked one. Returns the new revoked state."""
        link = self.get(code)
        if link.revoked:
            self._store.delete(f"revoked:{code}")
            logger.info("Reactivated short code %s", code)
            return False
        self._store.set(f"revoked:{code}", "true")
        # The flag must not outlive an expiring link.
        remaining = self._store.ttl(f"url:{code}")
        if remaining is not None:
            self._store.expire(f"revoked:{code}", remaining)
        logger.info("Revoked short code %s", code)
        return True

    def delete(self, code: str) -> None:
        link = self.get(code)
        self._store.delete(f"original:{link.original_url}", *_keys(code))
        logger.info("Deleted short code %s", code)

    def follow(self, code: str) -> str:
        """Return the destination for code and count the click."""
        url = self._store.get(f"url:{code}")
        if not url:
            raise LinkUnavailable(code, "not_found")
        if self._store.get(f"revoked:{code}") == "true":
            raise LinkUnavailable(code, "revoked")
        expires_at = self._store.get(f"expires:{code}")
        # Backup to the key TTL.
        if expires_at:
            try:
                expired = _iso_to_datetime(expires_at) < self._clock()
            except ValueError:
                expired = False
            if expired:
                raise LinkUnavailable(code, "expired")
        self._store.incr(f"clicks:{code}")
        return url

    def _load(self, code: str) -> ShortLink | None:
        url = self._store.get(f"url:{code}")
        if not url:
            return None
        clicks = self._store.get(f"clicks:{code}") or "0"
        return ShortLink(
            code=code,
            original_url=url,
            created_at=self._store.get(f"created:{code}") or isoformat(self._clock()),
            click_count=int(clicks) if clicks.isdigit() else 0,
            expires_at=self._store.get(f"expires:{code}") or None,
            revoked=self._store.get(f"revoked:{code}") == "true",
        )

    def _unused_code(self) -> str:
        while True:
            code = self._code_factory()
            if self._store.get(f"url:{code}") is None:
                return code
