"""Tests for KeyValueSubscriberRepository and InMemoryKeyValueStore."""

import json

from portfolio.application import Resolution
from portfolio.domain import Subscriber
from portfolio.infrastructure import InMemoryKeyValueStore, KeyValueSubscriberRepository

JOINED = "2024-01-01T00:00:00.000Z"


def _sub(id, phone=None, email=None, name="Asha") -> Subscriber:
    return Subscriber(id=id, full_name=name, phone_number=phone, email=email, date_joined=JOINED)


def test_upsert_new_writes_record_indexes_and_list():
    store = InMemoryKeyValueStore()
    repo = KeyValueSubscriberRepository(store)
    s = _sub("a", phone="9812345670", email="asha@example.com")
    repo.upsert(Resolution(record=s, is_new=True))

    assert json.loads(store.get("subscribers:record:a")) == {
        "id": "a",
        "fullName": "Asha",
        "phoneNumber": "9812345670",
        "email": "asha@example.com",
        "dateJoined": JOINED,
    }
    assert store.get("subscribers:phone:9812345670") == "a"
    assert store.get("subscribers:email:asha@example.com") == "a"
    assert store.list_items("subscribers:list") == ["a"]
    assert repo.find_by_phone("9812345670") == s
    assert repo.find_by_email("asha@example.com") == s


def test_update_does_not_append_to_list():
    repo = KeyValueSubscriberRepository(InMemoryKeyValueStore())
    s = _sub("a", phone="9812345670")
    repo.upsert(Resolution(record=s, is_new=True))
    repo.upsert(Resolution(record=s, is_new=False, previous=s))
    assert [x.id for x in repo.list_all()] == ["a"]


def test_list_all_skips_ids_without_record():
    store = InMemoryKeyValueStore()
    repo = KeyValueSubscriberRepository(store)
    repo.upsert(Resolution(record=_sub("a", phone="9812345670"), is_new=True))
    store.list_append("subscribers:list", "ghost")
    assert [x.id for x in repo.list_all()] == ["a"]


def test_find_returns_none_when_index_is_missing():
    repo = KeyValueSubscriberRepository(InMemoryKeyValueStore())
    assert repo.find_by_phone("9812345670") is None
    assert repo.find_by_email("asha@example.com") is None
    assert repo.get("missing") is None


def test_delete_removes_everything():
    store = InMemoryKeyValueStore()
    repo = KeyValueSubscriberRepository(store)
    repo.upsert(Resolution(record=_sub("a", phone="9812345670", email="a@example.com"), is_new=True))
    repo.delete("a")
    assert store.scan_keys("subscribers:*") == []
    assert repo.list_all() == []


def test_delete_keeps_index_owned_by_another_record():
    store = InMemoryKeyValueStore()
    repo = KeyValueSubscriberRepository(store)
    repo.upsert(Resolution(record=_sub("a", phone="9812345670"), is_new=True))
    store.set("subscribers:phone:9812345670", "b")
    repo.delete("a")
    assert store.get("subscribers:phone:9812345670") == "b"


def test_rebuild_indexes_restores_missing_entries():
    store = InMemoryKeyValueStore()
    repo = KeyValueSubscriberRepository(store)
    repo.upsert(Resolution(record=_sub("a", phone="9812345670", email="a@example.com"), is_new=True))
    store.delete("subscribers:phone:9812345670")
    assert repo.rebuild_indexes() == 1
    assert repo.find_by_phone("9812345670").id == "a"


def test_memory_store_ttl_and_lists():
    now = [0.0]
    store = InMemoryKeyValueStore(clock=lambda: now[0])
    store.set("k", "v")
    assert store.ttl("k") is None
    store.expire("k", 10)
    store.expire("absent", 10)
    assert store.ttl("k") == 10
    assert store.ttl("absent") is None
    assert store.get("k") == "v"
    now[0] = 10.0
    assert store.get("k") is None
    assert store.scan_keys("*") == []

    store.list_append("l", "x")
    store.list_append("l", "y")
    store.list_append("l", "x")
    store.list_remove("l", "x")
    assert store.list_items("l") == ["y"]
    assert store.incr("n") == 1
    assert store.incr("n") == 2
    assert sorted(store.scan_keys("*")) == ["l", "n"]
