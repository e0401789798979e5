from __future__ import annotations

from typing import Iterable, Protocol

from ..core.constants import ALLOWED_USERS_COLLECTION
from ..store.repository import DocumentStore


class AllowList(Protocol):
    def is_allowed(self, email: str) -> bool:
        raise NotImplementedError


class DocumentAllowList(AllowList):
    """Allow-list kept as documents keyed by email (``allowedUsers/<email>``)."""

    def __init__(self, store: DocumentStore, collection: str = ALLOWED_USERS_COLLECTION):
        self._store = store
        self._collection = collection

    def is_allowed(self, email: str) -> bool:
        if not email:
            return False
        return self._store.get_one(self._collection, email) is not None


class StaticAllowList(AllowList):
    def __init__(self, emails: Iterable[str]):
        self._emails = frozenset(e.strip().lower() for e in emails if e and e.strip())

    def __bool__(self) -> bool:
        return bool(self._emails)

    def is_allowed(self, email: str) -> bool:
        return bool(email) and email.strip().lower() in self._emails
