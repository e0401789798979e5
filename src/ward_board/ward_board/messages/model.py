from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Union

from ..store.repository import Document


@dataclass(frozen=True)
class Author:
    """Snapshot of the poster's identity, captured at post time and never re-synced."""

    account_id: str
    name: str
    photo_ref: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """Domain entity: one board message.

    Exactly two variants: RootMessage (thread root) and ReplyMessage (one level deep).
    """

    message_id: str
    text: str
    author: Author
    created_at: Optional[datetime]
    like_count: int
    is_deleted: bool


@dataclass(frozen=True)
class RootMessage(Message):
    title: str
    ward: str

    parent_id: ClassVar[None] = None
    is_reply: ClassVar[bool] = False


@dataclass(frozen=True)
class ReplyMessage(Message):
    parent_id: str

    is_reply: ClassVar[bool] = True


AnyMessage = Union[RootMessage, ReplyMessage]


def message_from_document(doc: Document) -> AnyMessage:
    """Map a stored ``messages`` document onto its tagged variant.

    An empty or missing ``parentId`` marks a thread root.
    """
    data = doc.data
    author = Author(
        account_id=str(data.get("authorId") or ""),
        name=str(data.get("authorName") or ""),
        photo_ref=data.get("authorPhotoRef") or None,
    )
    common: Dict[str, Any] = dict(
        message_id=doc.doc_id,
        text=str(data.get("text") or ""),
        author=author,
        created_at=data.get("createdAt"),
        like_count=int(data.get("likeCount") or 0),
        is_deleted=bool(data.get("isDeleted", False)),
    )

    parent_id = data.get("parentId")
    if parent_id:
        return ReplyMessage(parent_id=str(parent_id), **common)
    return RootMessage(title=str(data.get("title") or ""), ward=str(data.get("ward") or ""), **common)
