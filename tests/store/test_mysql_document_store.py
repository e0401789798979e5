from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from src.ward_board.ward_board.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use, _strip_line_comments
from src.ward_board.ward_board.store.mysql_document_store import _decode_value, _encode_value, _load_body, _order_value
from src.ward_board.ward_board.store.repository import SERVER_TIMESTAMP, Document

NOW = datetime(2026, 3, 1, 7, 30, 15, 123456)


def test_server_timestamp_sentinel_takes_database_clock():
    encoded = _encode_value({"text": "hi", "createdAt": SERVER_TIMESTAMP}, NOW)

    assert encoded == {"text": "hi", "createdAt": {"$ts": NOW.isoformat()}}
    assert _decode_value(encoded)["createdAt"] == NOW


def test_body_loads_from_driver_json_string_or_bytes():
    raw = json.dumps({"likeCount": 2, "createdAt": {"$ts": NOW.isoformat()}, "tags": [{"$ts": NOW.isoformat()}]})

    for value in (raw, raw.encode("utf-8")):
        body = _load_body(value)
        assert body["likeCount"] == 2
        assert body["createdAt"] == NOW
        assert body["tags"] == [NOW]


def test_documents_missing_order_key_sort_last():
    docs = [Document("none", {}), Document("old", {"createdAt": datetime(2026, 1, 1)}), Document("new", {"createdAt": NOW})]

    docs.sort(key=lambda d: _order_value(d, "createdAt"), reverse=True)

    assert [d.doc_id for d in docs] == ["new", "old", "none"]


def test_schema_file_splits_into_create_table_only():
    schema = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
    sql = _strip_line_comments(_strip_create_db_and_use(schema.read_text(encoding="utf-8")))

    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 1
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS documents")


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");"

    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
    ]
