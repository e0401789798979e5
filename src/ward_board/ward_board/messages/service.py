from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ..common.validators import is_blank, require_choice, require_non_empty
from ..core.constants import DELETE_CONFIRM_PROMPT, MESSAGES_COLLECTION
from ..core.enums import Ward
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..identity.model import Identity
from ..store.repository import SERVER_TIMESTAMP, DocumentStore
from .model import Author, Message, message_from_document

logger = logging.getLogger(__name__)

ConfirmGate = Callable[[str], bool]


def author_of(identity: Identity) -> Author:
    return Author(account_id=identity.account_id, name=identity.display_name, photo_ref=identity.photo_ref)


def can_delete(message: Message, identity: Optional[Identity]) -> bool:
    """Delete is offered only to the account that wrote the message.

    Compared by the immutable account id captured at post time, not by display name.
    """
    if identity is None or not message.author.account_id:
        return False
    return message.author.account_id == identity.account_id


class BoardService:
    """Use case: post / reply / like / delete on the board.

    Writes go straight to the store; the board only reflects them once the live
    feed re-delivers. Nothing is cached locally as authoritative.
    """

    def __init__(self, store: DocumentStore, *, collection: str = MESSAGES_COLLECTION):
        self._store = store
        self._collection = collection

    def create_post(self, *, text: str, title: str, ward: Union[Ward, str], author: Author) -> str:
        if is_blank(text):
            logger.info("post rejected: empty text author=%s", author.account_id)
            raise ValidationError("メッセージを入力してください")
        ward_value = require_choice(getattr(ward, "value", ward), "病棟", Ward)

        message_id = self._store.append(
            self._collection,
            {
                "text": text,
                "title": title or "",
                "ward": ward_value,
                "authorId": author.account_id,
                "authorName": author.name,
                "authorPhotoRef": author.photo_ref,
                "createdAt": SERVER_TIMESTAMP,
                "likeCount": 0,
                "isDeleted": False,
                "parentId": None,
            },
        )
        logger.info("post created id=%s ward=%s author=%s", message_id, ward_value, author.account_id)
        return message_id

    def create_reply(self, *, parent_id: str, text: str, author: Author, allow_blank: bool = False) -> str:
        """Append a reply under ``parent_id``.

        Blank text is rejected unless ``allow_blank`` is passed explicitly.
        Replies nest one level only: a parent that is itself a reply is rejected.
        An unknown parent id is accepted and simply never rendered.
        """
        parent_id = require_non_empty(parent_id, "返信先")
        if is_blank(text) and not allow_blank:
            logger.info("reply rejected: empty text parent=%s author=%s", parent_id, author.account_id)
            raise ValidationError("返信を入力してください")

        parent = self._store.get_one(self._collection, parent_id)
        if parent is not None and parent.data.get("parentId"):
            logger.info("reply rejected: parent is a reply parent=%s author=%s", parent_id, author.account_id)
            raise ValidationError("返信に返信することはできません")

        message_id = self._store.append(
            self._collection,
            {
                "text": text or "",
                "title": "",
                "ward": "",
                "authorId": author.account_id,
                "authorName": author.name,
                "authorPhotoRef": author.photo_ref,
                "createdAt": SERVER_TIMESTAMP,
                "likeCount": 0,
                "isDeleted": False,
                "parentId": parent_id,
            },
        )
        logger.info("reply created id=%s parent=%s author=%s", message_id, parent_id, author.account_id)
        return message_id

    def like_message(self, message_id: str, current_like_count: int) -> int:
        """Write ``current_like_count + 1`` as observed by the caller.

        Last write wins: two likes made from the same stale count store the same
        value and one increment is lost.
        """
        new_count = max(int(current_like_count), 0) + 1
        self._store.patch(self._collection, message_id, {"likeCount": new_count})
        logger.info("like id=%s likeCount=%s", message_id, new_count)
        return new_count

    def delete_message(self, message_id: str, *, actor: Identity, confirm: ConfirmGate) -> bool:
        """Soft-delete after the confirmation gate; returns False when the user declines."""
        doc = self._store.get_one(self._collection, message_id)
        if doc is None:
            raise NotFoundError("投稿が見つかりません")
        if not can_delete(message_from_document(doc), actor):
            logger.warning("delete refused id=%s actor=%s", message_id, actor.account_id)
            raise AuthorizationError("この投稿を削除する権限がありません")

        if not confirm(DELETE_CONFIRM_PROMPT):
            logger.info("delete cancelled id=%s actor=%s", message_id, actor.account_id)
            return False

        self._store.patch(self._collection, message_id, {"isDeleted": True})
        logger.info("delete id=%s actor=%s", message_id, actor.account_id)
        return True
