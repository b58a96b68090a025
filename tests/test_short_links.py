"""Unit tests for URL normalization and ShortLinkService. In-memory store only."""

from datetime import datetime, timezone

import pytest

from portfolio.application import ShortLinkService, normalize_url
from portfolio.domain import LinkNotFound, LinkUnavailable, ValidationError
from portfolio.infrastructure import InMemoryKeyValueStore

FIXED_NOW = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("www.Example.com/Path/", "https://example.com/path"),
        ("http://www.example.com:80/a//", "http://example.com/a"),
        ("https://example.com:443", "https://example.com/"),
        ("https://example.com:8443/x", "https://example.com:8443/x"),
        ("  HTTPS://Example.com/A?B=1#Frag ", "https://example.com/a?b=1#frag"),
        ("example.com", "https://example.com/"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def _service(codes=("abc123", "def456", "ghi789")):
    now = [0.0]
    store = InMemoryKeyValueStore(clock=lambda: now[0])
    it = iter(codes)
    service = ShortLinkService(store, clock=lambda: FIXED_NOW, code_factory=lambda: next(it))
    return service, store, now


def test_shorten_creates_then_reuses_code():
    service, store, _ = _service()
    first = service.shorten("www.example.com/docs/")
    assert first.exists is False
    assert first.link.code == "abc123"
    assert first.link.original_url == "https://example.com/docs"
    assert first.link.click_count == 0
    assert first.link.created_at == "2024-01-01T00:00:00.000Z"
    assert store.get("original:https://example.com/docs") == "abc123"

    again = service.shorten("https://example.com/docs")
    assert again.exists is True
    assert again.link.code == "abc123"


def test_shorten_skips_codes_in_use():
    service, store, _ = _service(codes=("abc123", "abc123", "zzz999"))
    service.shorten("example.com/one")
    second = service.shorten("example.com/two")
    assert second.link.code == "zzz999"


def test_shorten_rejects_bad_input():
    service, _, _ = _service()
    with pytest.raises(ValidationError):
        service.shorten("  ")
    with pytest.raises(ValidationError):
        service.shorten("example.com", expires_at="next tuesday")


def test_future_expiry_sets_ttl():
    service, _, now = _service()
    result = service.shorten("example.com/soon", expires_at="2024-01-01T01:00:00Z")
    assert result.link.expires_at == "2024-01-01T01:00:00Z"
    now[0] = 3599.0
    assert service.get("abc123").original_url == "https://example.com/soon"
    now[0] = 3600.0
    with pytest.raises(LinkNotFound):
        service.get("abc123")
    assert service.shorten("example.com/soon").exists is False


def test_past_expiry_is_caught_when_following():
    service, _, _ = _service()
    service.shorten("example.com/old", expires_at="2023-12-31T00:00:00Z")
    with pytest.raises(LinkUnavailable) as exc:
        service.follow("abc123")
    assert exc.value.reason == "expired"


def test_follow_counts_clicks():
    service, _, _ = _service()
    service.shorten("example.com")
    assert service.follow("abc123") == "https://example.com/"
    assert service.follow("abc123") == "https://example.com/"
    assert service.get("abc123").click_count == 2


def test_follow_unknown_code():
    service, _, _ = _service()
    with pytest.raises(LinkUnavailable) as exc:
        service.follow("nope")
    assert exc.value.reason == "not_found"


def test_toggle_revoke():
    service, _, _ = _service()
    service.shorten("example.com")
    assert service.toggle_revoke("abc123") is True
    assert service.get("abc123").revoked is True
    with pytest.raises(LinkUnavailable) as exc:
        service.follow("abc123")
    assert exc.value.reason == "revoked"
    assert service.toggle_revoke("abc123") is False
    assert service.follow("abc123") == "https://example.com/"
    with pytest.raises(LinkNotFound):
        service.toggle_revoke("nope")


def test_delete_removes_link_and_reverse_index():
    service, store, _ = _service()
    service.shorten("example.com/a")
    service.toggle_revoke("abc123")
    service.delete("abc123")
    assert store.scan_keys("*") == []
    with pytest.raises(LinkNotFound):
        service.delete("abc123")


def test_list_all():
    service, store, _ = _service()
    service.shorten("example.com/a")
    service.shorten("example.com/b")
    store.delete("url:def456")
    assert [link.code for link in service.list_all()] == ["abc123"]


def test_revoke_flag_expires_with_link():
    service, store, now = _service()
    service.shorten("example.com/soon", expires_at="2024-01-01T01:00:00Z")
    now[0] = 100.0
    service.toggle_revoke("abc123")
    assert store.ttl("revoked:abc123") == 3500
    now[0] = 3600.0
    assert store.scan_keys("*") == []


def test_revoke_flag_without_expiry_has_no_ttl():
    service, store, _ = _service()
    service.shorten("example.com")
    service.toggle_revoke("abc123")
    assert store.ttl("revoked:abc123") is None
