from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .feed import FeedHub
from .repository import SERVER_TIMESTAMP, Document, DocumentStore, SnapshotCallback, Unsubscribe

logger = logging.getLogger(__name__)

_TS_TAG = "$ts"


def _encode_value(value: Any, server_now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        value = server_now
    if isinstance(value, datetime):
        return {_TS_TAG: value.isoformat()}
    if isinstance(value, Mapping):
        return {k: _encode_value(v, server_now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v, server_now) for v in value]
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_TS_TAG}:
            return datetime.fromisoformat(value[_TS_TAG])
        return {k: _decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode_value(v) for v in value]
    return value


def _load_body(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = json.loads(raw)
    return _decode_value(raw or {})


def _order_value(doc: Document, order_key: str):
    value = doc.get(order_key)
    # Documents missing the key sort after every keyed one (descending order).
    return (value is not None, value if value is not None else 0)


class MySQLDocumentStore(DocumentStore):
    """Document collections in one MySQL table with an in-process live feed."""

    def __init__(self, conn_factory: DatabaseConnection, *, feed: Optional[FeedHub] = None):
        self._conn_factory = conn_factory
        self._feed = feed or FeedHub(self.load_snapshot)

    def load_snapshot(self, collection: str, order_key: str) -> List[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT doc_id, body
                FROM documents
                WHERE collection=%s
                ORDER BY seq DESC
                """,
                (collection,),
            )
            rows = fetchall(cur)

        docs = [Document(doc_id=str(r["doc_id"]), data=_load_body(r["body"])) for r in rows]
        docs.sort(key=lambda d: _order_value(d, order_key), reverse=True)
        return docs

    def subscribe(self, collection: str, order_key: str, callback: SnapshotCallback) -> Unsubscribe:
        return self._feed.subscribe(collection, order_key, callback)

    def append(self, collection: str, record: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._write(collection, doc_id, record, replace=False)
        logger.debug("append collection=%s doc_id=%s", collection, doc_id)
        return doc_id

    def put(self, collection: str, doc_id: str, record: Mapping[str, Any]) -> None:
        self._write(collection, doc_id, record, replace=True)
        logger.debug("put collection=%s doc_id=%s", collection, doc_id)

    def patch(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            server_now = self._server_now(cur)
            cur.execute(
                """
                SELECT body
                FROM documents
                WHERE collection=%s AND doc_id=%s
                FOR UPDATE
                """,
                (collection, doc_id),
            )
            row = fetchone(cur)
            if not row:
                raise NotFoundError(f"{collection}/{doc_id} が見つかりません")

            body = _encode_value(_load_body(row["body"]), server_now)
            body.update(_encode_value(dict(fields), server_now))
            cur.execute(
                "UPDATE documents SET body=%s WHERE collection=%s AND doc_id=%s",
                (json.dumps(body, ensure_ascii=False), collection, doc_id),
            )

        logger.debug("patch collection=%s doc_id=%s fields=%s", collection, doc_id, sorted(fields))
        self._feed.publish(collection)

    def get_one(self, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT doc_id, body FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
        if not row:
            return None
        return Document(doc_id=str(row["doc_id"]), data=_load_body(row["body"]))

    def _write(self, collection: str, doc_id: str, record: Mapping[str, Any], *, replace: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            server_now = self._server_now(cur)
            body = json.dumps(_encode_value(dict(record), server_now), ensure_ascii=False)
            if replace:
                cur.execute(
                    """
                    INSERT INTO documents(collection, doc_id, body)
                    VALUES(%s,%s,%s)
                    ON DUPLICATE KEY UPDATE body=VALUES(body)
                    """,
                    (collection, doc_id, body),
                )
            else:
                cur.execute(
                    "INSERT INTO documents(collection, doc_id, body) VALUES(%s,%s,%s)",
                    (collection, doc_id, body),
                )
        self._feed.publish(collection)

    @staticmethod
    def _server_now(cur) -> datetime:
        cur.execute("SELECT CURRENT_TIMESTAMP(6) AS now")
        return fetchone(cur)["now"]
