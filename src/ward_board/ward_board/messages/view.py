from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union

from ..common.datetime_utils import format_timestamp
from ..core.constants import DEFAULT_WARD, MESSAGES_COLLECTION, MESSAGES_ORDER_KEY
from ..core.enums import Ward
from ..identity.model import Identity
from ..store.repository import Document, DocumentStore, Unsubscribe
from .model import Message, RootMessage
from .projection import EMPTY_PROJECTION, ProjectionResult, recompute
from .service import can_delete

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageRow:
    message_id: str
    title: str
    text: str
    author_name: str
    author_photo: Optional[str]
    posted_at: str
    like_count: int
    can_delete: bool

    def to_dict(self) -> dict:
        return {
            "id": self.message_id,
            "title": self.title,
            "text": self.text,
            "authorName": self.author_name,
            "authorPhotoRef": self.author_photo,
            "postedAt": self.posted_at,
            "likeCount": self.like_count,
            "canDelete": self.can_delete,
        }


@dataclass(frozen=True)
class Thread:
    root: MessageRow
    replies: List[MessageRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.root.to_dict()
        data["replies"] = [r.to_dict() for r in self.replies]
        return data


class BoardView:
    """Live board for one viewer.

    Use as a context manager: entering subscribes to the ``messages`` feed,
    every delivery swaps in a freshly recomputed projection, leaving
    unsubscribes. ``on_change`` is called after each swap.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        viewer: Optional[Identity] = None,
        ward: Union[Ward, str] = DEFAULT_WARD,
        on_change: Optional[Callable[["BoardView"], None]] = None,
    ):
        self._store = store
        self._viewer = viewer
        self._on_change = on_change
        self._projection: ProjectionResult = EMPTY_PROJECTION
        self._unsubscribe: Optional[Unsubscribe] = None
        self._version = 0
        self._changed = threading.Condition()
        self.selected_ward = getattr(ward, "value", ward)

    def __enter__(self) -> "BoardView":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    @property
    def projection(self) -> ProjectionResult:
        return self._projection

    @property
    def version(self) -> int:
        return self._version

    def open(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(MESSAGES_COLLECTION, MESSAGES_ORDER_KEY, self._on_snapshot)

    def close(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            with self._changed:
                self._changed.notify_all()

    def select_ward(self, ward: Union[Ward, str]) -> None:
        self.selected_ward = getattr(ward, "value", ward)

    def wait_for_change(self, since_version: int, timeout: Optional[float] = None) -> bool:
        """Block until a delivery newer than ``since_version`` arrives (or timeout / close)."""
        with self._changed:
            return self._changed.wait_for(
                lambda: self._version > since_version or not self.is_open,
                timeout=timeout,
            ) and self._version > since_version

    def threads(self, ward: Union[Ward, str, None] = None) -> List[Thread]:
        projection = self._projection
        wanted = self.selected_ward if ward is None else ward
        return [
            Thread(
                root=self._row(root),
                replies=[self._row(reply) for reply in projection.visible_replies(root.message_id)],
            )
            for root in projection.visible_top_level(wanted)
        ]

    def _on_snapshot(self, snapshot: Sequence[Document]) -> None:
        projection = recompute(snapshot)
        with self._changed:
            self._projection = projection
            self._version += 1
            self._changed.notify_all()
        logger.debug("board recomputed version=%s records=%s", self._version, len(projection))
        if self._on_change is not None:
            self._on_change(self)

    def _row(self, message: Message) -> MessageRow:
        return MessageRow(
            message_id=message.message_id,
            title=message.title if isinstance(message, RootMessage) else "",
            text=message.text,
            author_name=message.author.name,
            author_photo=message.author.photo_ref,
            posted_at=format_timestamp(message.created_at),
            like_count=message.like_count,
            can_delete=can_delete(message, self._viewer),
        )
