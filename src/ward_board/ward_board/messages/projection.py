"""Thread projection.

Turns a flat ``messages`` snapshot (an unordered bag, re-delivered in full on
every change) into the two shapes the board renders:

- ``top_level``: thread roots, newest first;
- ``replies_by_parent``: replies grouped under their parent id, newest first.

Grouping keeps soft-deleted messages; hiding them happens at render time via
``visible`` so that parent lookups by id still succeed for deleted roots and
the result is identical whatever order the feed delivered records in.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from ..core.enums import Ward
from ..store.repository import Document
from .model import AnyMessage, Message, ReplyMessage, RootMessage, message_from_document

M = TypeVar("M", bound=Message)


def _newest_first_key(message: Message):
    # Pending server timestamps count as newest; id breaks ties deterministically.
    return (message.created_at is None, message.created_at or datetime.min, message.message_id)


def sort_newest_first(messages: Iterable[M]) -> List[M]:
    return sorted(messages, key=_newest_first_key, reverse=True)


def visible(messages: Iterable[M]) -> List[M]:
    """Render filter: drop soft-deleted messages, keep order."""
    return [m for m in messages if not m.is_deleted]


def apply_ward_filter(top_level: Iterable[RootMessage], ward: Union[Ward, str, None]) -> List[RootMessage]:
    """Keep roots whose ward equals ``ward``; unknown ward values match nothing."""
    wanted = getattr(ward, "value", ward)
    return [m for m in top_level if m.ward == wanted]


@dataclass(frozen=True)
class ProjectionResult:
    top_level: Tuple[RootMessage, ...] = ()
    replies_by_parent: Mapping[str, Tuple[ReplyMessage, ...]] = field(default_factory=lambda: MappingProxyType({}))
    by_id: Mapping[str, AnyMessage] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, message_id: str) -> Optional[AnyMessage]:
        """Lookup by id, including soft-deleted messages."""
        return self.by_id.get(message_id)

    def replies_for(self, parent_id: str) -> Tuple[ReplyMessage, ...]:
        return self.replies_by_parent.get(parent_id, ())

    def visible_top_level(self, ward: Union[Ward, str, None] = None) -> List[RootMessage]:
        roots: Sequence[RootMessage] = self.top_level
        if ward is not None:
            roots = apply_ward_filter(roots, ward)
        return visible(roots)

    def visible_replies(self, parent_id: str) -> List[ReplyMessage]:
        return visible(self.replies_for(parent_id))

    def __len__(self) -> int:
        return len(self.top_level) + sum(len(group) for group in self.replies_by_parent.values())


EMPTY_PROJECTION = ProjectionResult()


def recompute(snapshot: Iterable[Union[Document, AnyMessage]]) -> ProjectionResult:
    """Pure projection of one full snapshot; never raises on an empty or shrunken bag."""
    roots: List[RootMessage] = []
    groups: Dict[str, List[ReplyMessage]] = {}
    by_id: Dict[str, AnyMessage] = {}

    for item in snapshot:
        message = message_from_document(item) if isinstance(item, Document) else item
        by_id[message.message_id] = message
        if isinstance(message, ReplyMessage):
            groups.setdefault(message.parent_id, []).append(message)
        else:
            roots.append(message)

    replies = {parent_id: tuple(sort_newest_first(group)) for parent_id, group in groups.items()}
    return ProjectionResult(
        top_level=tuple(sort_newest_first(roots)),
        replies_by_parent=MappingProxyType(replies),
        by_id=MappingProxyType(by_id),
    )
