from __future__ import annotations

from typing import Optional, Protocol

from ..core.constants import CLOCKINGS_COLLECTION, STAFF_COLLECTION
from ..core.enums import ClockDirection
from ..store.repository import SERVER_TIMESTAMP, DocumentStore
from .model import StaffRecord


class StaffDirectory(Protocol):
    def get_by_identifier(self, identifier: str) -> Optional[StaffRecord]:
        raise NotImplementedError


class DocumentStaffDirectory(StaffDirectory):
    """Staff directory stored as ``staff/<identifier>`` documents."""

    def __init__(self, store: DocumentStore, collection: str = STAFF_COLLECTION):
        self._store = store
        self._collection = collection

    def get_by_identifier(self, identifier: str) -> Optional[StaffRecord]:
        doc = self._store.get_one(self._collection, identifier)
        if doc is None:
            return None
        return StaffRecord(
            identifier=doc.doc_id,
            display_name=str(doc.get("displayName") or doc.doc_id),
            ward=doc.get("ward") or None,
        )


class ClockingLog:
    """Append-only attendance events (``clockings`` collection)."""

    def __init__(self, store: DocumentStore, collection: str = CLOCKINGS_COLLECTION):
        self._store = store
        self._collection = collection

    def append(self, *, identifier: str, direction: ClockDirection, verifier: str, source: str) -> str:
        return self._store.append(
            self._collection,
            {
                "userId": identifier,
                "method": direction.value,
                "timestamp": SERVER_TIMESTAMP,
                "verifiedBy": verifier,
                "type": source,
            },
        )
