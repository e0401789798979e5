from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence


class _ServerTimestamp:
    """Sentinel: the store replaces this value with its own clock at write time."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Document:
    """One stored record: store-assigned id plus its field mapping."""

    doc_id: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


Snapshot = Sequence[Document]
SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class DocumentStore(Protocol):
    """Document store interface: live feed plus append/patch writes.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def subscribe(self, collection: str, order_key: str, callback: SnapshotCallback) -> Unsubscribe:
        """Deliver the full collection, ordered by ``order_key`` descending, now and after every change."""

        raise NotImplementedError

    def append(self, collection: str, record: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def put(self, collection: str, doc_id: str, record: Mapping[str, Any]) -> None:
        """Create or replace a document under a caller-chosen id (directory seeding)."""

        raise NotImplementedError

    def patch(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def get_one(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError
