"""Integration tests for RedisKeyValueStore. Require Docker (testcontainers)."""

import pytest

from portfolio.application import SubscriberService
from portfolio.domain import StorageError
from portfolio.infrastructure import KeyValueSubscriberRepository, RedisKeyValueStore


@pytest.fixture(scope="session")
def redis_client():
    redis_module = pytest.importorskip("testcontainers.redis")
    try:
        container = redis_module.RedisContainer()
        container.start()
    except Exception as e:  # noqa: BLE001
        pytest.skip(f"Docker not available: {e}")
    client = container.get_client(decode_responses=True)
    try:
        yield client
    finally:
        client.close()
        container.stop()


@pytest.fixture
def store(redis_client):
    """Flush Redis before each test so tests are independent."""
    redis_client.flushdb()
    return RedisKeyValueStore(redis_client)


def test_basic_operations(store):
    assert store.ping() is True
    assert store.get("missing") is None
    store.set("k", "v")
    assert store.get("k") == "v"
    assert store.incr("n") == 1
    store.list_append("l", "a")
    store.list_append("l", "b")
    store.list_remove("l", "a")
    assert store.list_items("l") == ["b"]
    assert sorted(store.scan_keys("*")) == ["k", "l", "n"]
    assert store.ttl("k") is None
    store.expire("k", 100)
    assert 0 < store.ttl("k") <= 100
    store.delete("k", "n")
    assert store.ttl("k") is None
    store.delete()
    assert store.get("k") is None


def test_subscriber_flow_on_redis(store):
    service = SubscriberService(KeyValueSubscriberRepository(store))
    a = service.subscribe("Asha", "9812345670").subscriber
    service.subscribe("Asha mail", email="asha@example.com")
    service.subscribe("Asha Rao", "9812345670", "asha@example.com")
    [survivor] = service.list_subscribers()
    assert survivor.id == a.id
    assert survivor.email == "asha@example.com"
    assert service.storage_type == "redis"
    service.unsubscribe(email="asha@example.com")
    assert store.scan_keys("subscribers:*") == []


def test_errors_are_wrapped():
    store = RedisKeyValueStore.from_url("redis://127.0.0.1:1/0")
    with pytest.raises(StorageError):
        store.get("k")
    assert store.ping() is False
