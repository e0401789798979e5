from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

import pytest

from src.ward_board.ward_board.core.exceptions import NotFoundError, StoreError
from src.ward_board.ward_board.identity.model import Identity
from src.ward_board.ward_board.messages.model import Author
from src.ward_board.ward_board.store.feed import FeedHub
from src.ward_board.ward_board.store.repository import SERVER_TIMESTAMP, Document


class InMemoryDocumentStore:
    """Dict-backed store with the real FeedHub; server time ticks one minute per write."""

    def __init__(self, *, start: datetime = datetime(2026, 1, 5, 9, 0)):
        self._collections: dict[str, dict[str, dict]] = {}
        self._ids = itertools.count(1)
        self._now = start
        self.feed = FeedHub(self.load_snapshot)
        self.appends: list[tuple[str, dict]] = []
        self.patches: list[tuple[str, str, dict]] = []
        self.fail_writes = False

    def _tick(self) -> datetime:
        self._now += timedelta(minutes=1)
        return self._now

    def _resolve(self, record: Mapping[str, Any]) -> dict:
        now = None
        out = {}
        for key, value in record.items():
            if value is SERVER_TIMESTAMP:
                now = now or self._tick()
                value = now
            out[key] = value
        return out

    def load_snapshot(self, collection: str, order_key: str) -> list[Document]:
        docs = [Document(doc_id, dict(data)) for doc_id, data in self._collections.get(collection, {}).items()]
        docs.sort(key=lambda d: (d.get(order_key) is not None, d.get(order_key) or datetime.min), reverse=True)
        return docs

    def subscribe(self, collection, order_key, callback):
        return self.feed.subscribe(collection, order_key, callback)

    def append(self, collection: str, record: Mapping[str, Any]) -> str:
        if self.fail_writes:
            raise StoreError("backend unavailable")
        doc_id = f"doc{next(self._ids)}"
        self._collections.setdefault(collection, {})[doc_id] = self._resolve(record)
        self.appends.append((collection, dict(record)))
        self.feed.publish(collection)
        return doc_id

    def put(self, collection: str, doc_id: str, record: Mapping[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = self._resolve(record)
        self.feed.publish(collection)

    def patch(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        if self.fail_writes:
            raise StoreError("backend unavailable")
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise NotFoundError(f"{collection}/{doc_id}")
        docs[doc_id].update(self._resolve(fields))
        self.patches.append((collection, doc_id, dict(fields)))
        self.feed.publish(collection)

    def get_one(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(doc_id)
        return Document(doc_id, dict(data)) if data is not None else None


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def alice() -> Identity:
    return Identity(account_id="uid-alice", email="alice@example.org", display_name="Alice", photo_ref="https://img/alice.png")


@pytest.fixture
def bob() -> Identity:
    return Identity(account_id="uid-bob", email="bob@example.org", display_name="Bob")


@pytest.fixture
def alice_author(alice) -> Author:
    return Author(account_id=alice.account_id, name=alice.display_name, photo_ref=alice.photo_ref)
