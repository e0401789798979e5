from __future__ import annotations

import json
import logging

from flask import Flask, Response, current_app, g, jsonify, request, session, stream_with_context

from ..common.web import as_bool, current_identity, error_response, login_required, request_data
from ..container import Container
from ..core.constants import GUIDE_LINES
from ..core.enums import Ward
from ..core.exceptions import DomainError, ValidationError
from .service import author_of
from .view import BoardView

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _selected_ward() -> str:
        return request.args.get("ward") or session.get("selected_ward") or current_app.config["DEFAULT_WARD"]

    def _board_payload(view: BoardView) -> dict:
        return {
            "ward": view.selected_ward,
            "wards": [{"value": w.value, "label": w.label} for w in Ward],
            "threads": [t.to_dict() for t in view.threads()],
        }

    @app.route("/api/board", endpoint="board")
    def board():
        ward = _selected_ward()
        session["selected_ward"] = ward
        try:
            with BoardView(container.store, viewer=current_identity(), ward=ward) as view:
                return jsonify({"success": True, **_board_payload(view)})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/board/stream", endpoint="board_stream")
    def board_stream():
        """Server-sent events: one ``board`` event per live feed delivery."""
        ward = _selected_ward()
        viewer = current_identity()
        keepalive = float(current_app.config.get("FEED_KEEPALIVE_SECONDS", 15))

        def events():
            with BoardView(container.store, viewer=viewer, ward=ward) as view:
                seen = 0
                while view.is_open:
                    if view.version > seen:
                        seen = view.version
                        payload = json.dumps(_board_payload(view), ensure_ascii=False)
                        yield f"event: board\ndata: {payload}\n\n"
                    elif not view.wait_for_change(seen, timeout=keepalive):
                        yield ": keepalive\n\n"

        return Response(stream_with_context(events()), mimetype="text/event-stream")

    @app.route("/api/messages", methods=["POST"], endpoint="create_post")
    @login_required
    def create_post():
        data = request_data()
        ward = data.get("ward") or current_app.config["DEFAULT_WARD"]
        try:
            message_id = container.board_service.create_post(
                text=data.get("text", ""),
                title=data.get("title", ""),
                ward=ward,
                author=author_of(g.identity),
            )
        except DomainError as e:
            return error_response(e)

        # The board follows the ward that was just posted to.
        session["selected_ward"] = ward
        return jsonify({"success": True, "id": message_id, "ward": ward}), 201

    @app.route("/api/messages/<message_id>/replies", methods=["POST"], endpoint="create_reply")
    @login_required
    def create_reply(message_id: str):
        data = request_data()
        try:
            reply_id = container.board_service.create_reply(
                parent_id=message_id,
                text=data.get("text", ""),
                author=author_of(g.identity),
                allow_blank=as_bool(data.get("allowBlank")),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "id": reply_id, "parentId": message_id}), 201

    @app.route("/api/messages/<message_id>/like", methods=["POST"], endpoint="like_message")
    @login_required
    def like_message(message_id: str):
        data = request_data()
        try:
            try:
                current = int(data.get("likeCount") or 0)
            except (TypeError, ValueError):
                raise ValidationError("likeCount が不正です")
            like_count = container.board_service.like_message(message_id, current)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "id": message_id, "likeCount": like_count})

    @app.route("/api/messages/<message_id>/delete", methods=["POST"], endpoint="delete_message")
    @login_required
    def delete_message(message_id: str):
        data = request_data()
        confirmed = as_bool(data.get("confirm"))
        prompts: list[str] = []

        def confirm(prompt: str) -> bool:
            prompts.append(prompt)
            return confirmed

        try:
            deleted = container.board_service.delete_message(message_id, actor=g.identity, confirm=confirm)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "id": message_id, "deleted": deleted, "prompt": prompts[0] if prompts else None})

    @app.route("/api/guide", endpoint="guide")
    def guide():
        return jsonify({"lines": list(GUIDE_LINES), "contact": current_app.config.get("CONTACT_EMAIL") or None})
