from __future__ import annotations

import json

import pytest

from src.ward_board.ward_board.container import build_services
from src.ward_board.ward_board.main import create_app
from src.ward_board.ward_board.messages.service import BoardService


def proxy_headers(identity):
    return {
        "X-Forwarded-User": identity.account_id,
        "X-Forwarded-Email": identity.email,
        "X-Forwarded-Preferred-Username": identity.display_name,
    }


@pytest.fixture
def app(store, alice):
    store.put("allowedUsers", alice.email, {"email": alice.email})
    store.put("staff", "u1", {"displayName": "山田 花子"})
    return create_app(container=build_services(store), settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client, alice):
    resp = client.get("/login", headers=proxy_headers(alice))
    assert resp.status_code == 200
    return client


def test_login_without_proxy_headers_is_unauthorized(client):
    assert client.get("/login").status_code == 401


def test_login_off_allow_list_is_rejected_and_signed_out(client, bob):
    resp = client.get("/login", headers=proxy_headers(bob))

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "このアカウントでは掲示板を利用できません"
    assert client.get("/api/me").status_code == 401


def test_me_and_logout(signed_in):
    assert signed_in.get("/api/me").get_json()["user"]["account_id"] == "uid-alice"

    signed_in.post("/logout")

    assert signed_in.get("/api/me").status_code == 401


def test_posting_requires_login(client):
    resp = client.post("/api/messages", json={"text": "hi", "ward": "1st"})
    assert resp.status_code == 401


def test_post_reply_like_delete_round_trip(signed_in, store):
    resp = signed_in.post("/api/messages", json={"text": "点滴の件", "title": "連絡", "ward": "2nd"})
    assert resp.status_code == 201
    root_id = resp.get_json()["id"]

    assert signed_in.post(f"/api/messages/{root_id}/replies", json={"text": "了解"}).status_code == 201
    assert signed_in.post(f"/api/messages/{root_id}/like", json={"likeCount": 0}).get_json()["likeCount"] == 1

    # the board follows the ward just posted to
    board = signed_in.get("/api/board").get_json()
    assert board["ward"] == "2nd"
    (thread,) = board["threads"]
    assert thread["title"] == "連絡"
    assert thread["likeCount"] == 1
    assert thread["canDelete"] is True
    assert [r["text"] for r in thread["replies"]] == ["了解"]

    declined = signed_in.post(f"/api/messages/{root_id}/delete", json={})
    assert declined.get_json()["deleted"] is False
    assert declined.get_json()["prompt"] == "この投稿を削除しますか？"

    assert signed_in.post(f"/api/messages/{root_id}/delete", json={"confirm": True}).get_json()["deleted"] is True
    assert signed_in.get("/api/board?ward=2nd").get_json()["threads"] == []
    assert store.get_one("messages", root_id).get("isDeleted") is True


def test_reply_to_a_reply_is_a_validation_failure(signed_in, store):
    root_id = signed_in.post("/api/messages", json={"text": "申し送り", "ward": "1st"}).get_json()["id"]
    reply_id = signed_in.post(f"/api/messages/{root_id}/replies", json={"text": "了解"}).get_json()["id"]
    appended = len(store.appends)

    resp = signed_in.post(f"/api/messages/{reply_id}/replies", json={"text": "さらに返信"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert len(store.appends) == appended


def test_blank_post_is_a_validation_failure(signed_in, store):
    resp = signed_in.post("/api/messages", json={"text": "  ", "ward": "1st"})

    assert resp.status_code == 400
    assert store.appends == []


def test_board_is_readable_without_login(client, store, alice_author):
    BoardService(store).create_post(text="public", title="", ward="1st", author=alice_author)

    data = client.get("/api/board?ward=1st").get_json()
    assert [t["text"] for t in data["threads"]] == ["public"]
    assert data["threads"][0]["canDelete"] is False
    assert [w["value"] for w in data["wards"]] == ["1st", "2nd", "other"]


def test_store_failure_surfaces_generic_notice(signed_in, store):
    store.fail_writes = True

    resp = signed_in.post("/api/messages", json={"text": "hi", "ward": "1st"})

    assert resp.status_code == 503
    assert resp.get_json()["success"] is False


def test_clock_records_event(signed_in, store):
    resp = signed_in.post("/api/clock", json={"identifier": "u1", "direction": "out"})

    assert resp.status_code == 201
    assert resp.get_json()["message"] == "打刻完了：山田 花子（退勤）"
    assert store.appends[-1][1]["method"] == "out"


def test_clock_unknown_staff_is_not_found(signed_in, store):
    resp = signed_in.post("/api/clock", json={"identifier": "ghost"})

    assert resp.status_code == 404
    assert store.appends == []


def test_clock_badge_png(signed_in):
    resp = signed_in.get("/api/clock/badge/u1.png")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"
    assert signed_in.get("/api/clock/badge/ghost.png").status_code == 404


def test_guide_lists_usage_and_contact(client):
    data = client.get("/api/guide").get_json()

    assert data["contact"] == "board-admin@example.org"
    assert len(data["lines"]) == 4


def test_board_stream_emits_snapshot_and_releases_subscription(client, store):
    resp = client.get("/api/board/stream?ward=1st", buffered=False)
    first = next(iter(resp.response))
    if isinstance(first, bytes):
        first = first.decode("utf-8")

    assert first.startswith("event: board\n")
    payload = json.loads(first.split("data: ", 1)[1])
    assert payload["ward"] == "1st"
    assert store.feed.listener_count("messages") == 1

    resp.close()
    assert store.feed.listener_count("messages") == 0
