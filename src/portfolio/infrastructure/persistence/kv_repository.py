"""KeyValueStore-backed implementation of SubscriberRepository.

Layout:
  subscribers:record:{id}     -> JSON record
  subscribers:phone:{phone}   -> id
  subscribers:email:{email}   -> id
  subscribers:list            -> list of ids in join order

Writes are independent KV operations; a failure part-way leaves earlier writes in place.
"""

import json
import logging

from portfolio.application.dto import Resolution
from portfolio.application.ports import KeyValueStore
from portfolio.domain import Subscriber

logger = logging.getLogger(__name__)

LIST_KEY = "subscribers:list"


def _record_key(subscriber_id: str) -> str:
    return f"subscribers:record:{subscriber_id}"


def _phone_key(phone: str) -> str:
    return f"subscribers:phone:{phone}"


def _email_key(email: str) -> str:
    return f"subscribers:email:{email}"


class KeyValueSubscriberRepository:
    """Stores subscribers in a KeyValueStore with phone and email indexes."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def storage_type(self) -> str:
        return self._store.storage_type

    def get(self, subscriber_id: str) -> Subscriber | None:
        raw = self._store.get(_record_key(subscriber_id))
        if raw is None:
            return None
        return Subscriber.from_dict(json.loads(raw))

    def find_by_phone(self, phone: str) -> Subscriber | None:
        subscriber_id = self._store.get(_phone_key(phone))
        return self.get(subscriber_id) if subscriber_id else None

    def find_by_email(self, email: str) -> Subscriber | None:
        subscriber_id = self._store.get(_email_key(email))
        return self.get(subscriber_id) if subscriber_id else None

    def upsert(self, resolution: Resolution) -> None:
        record = resolution.record
        self._store.set(_record_key(record.id), json.dumps(record.to_dict()))
        self._write_indexes(record)

        previous = resolution.previous
        if previous is not None:
            if previous.phone_number and previous.phone_number != record.phone_number:
                self._drop_index(_phone_key(previous.phone_number), record.id)
            if previous.email and previous.email != record.email:
                self._drop_index(_email_key(previous.email), record.id)

        if resolution.is_new:
            self._store.list_append(LIST_KEY, record.id)

        if resolution.merged_away_id:
            self._remove(resolution.merged_away_id)

    def list_all(self) -> list[Subscriber]:
        out = []
        for subscriber_id in self._store.list_items(LIST_KEY):
            subscriber = self.get(subscriber_id)
            if subscriber is None:
                logger.warning("Subscriber %s is listed but has no record", subscriber_id)
                continue
            out.append(subscriber)
        return out

    def delete(self, subscriber_id: str) -> None:
        self._remove(subscriber_id)

    def rebuild_indexes(self) -> int:
        """Rewrite both indexes from the primary records. Returns the number of records indexed."""
        subscribers = self.list_all()
        for subscriber in subscribers:
            self._write_indexes(subscriber)
        return len(subscribers)

    def _write_indexes(self, record: Subscriber) -> None:
        if record.phone_number:
            self._store.set(_phone_key(record.phone_number), record.id)
        if record.email:
            self._store.set(_email_key(record.email), record.id)

    def _remove(self, subscriber_id: str) -> None:
        """Delete the record, the index entries still pointing at it, and its list entry."""
        record = self.get(subscriber_id)
        self._store.delete(_record_key(subscriber_id))
        if record is not None:
            if record.phone_number:
                self._drop_index(_phone_key(record.phone_number), subscriber_id)
            if record.email:
                self._drop_index(_email_key(record.email), subscriber_id)
        self._store.list_remove(LIST_KEY, subscriber_id)

    def _drop_index(self, key: str, owner_id: str) -> None:
        if self._store.get(key) == owner_id:
            self._store.delete(key)
