from __future__ import annotations

import io
import logging

import qrcode
from flask import Flask, g, jsonify, send_file

from ..common.web import error_response, login_required, request_data
from ..container import Container
from ..core.exceptions import DomainError, NotFoundError, StoreError
from ..core.constants import CLOCK_FAILURE_MESSAGE

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clock", methods=["POST"], endpoint="clock")
    @login_required
    def clock():
        data = request_data()
        try:
            receipt = container.clock_service.record_clock(
                data.get("identifier"),
                data.get("direction") or "in",
                g.identity,
            )
        except StoreError:
            logger.exception("clock append failed")
            return jsonify({"success": False, "message": CLOCK_FAILURE_MESSAGE}), 503
        except DomainError as e:
            return error_response(e)

        return jsonify({
            "success": True,
            "message": receipt.message,
            "eventId": receipt.event.event_id,
            "direction": receipt.event.direction.value,
            "staff": {"identifier": receipt.staff.identifier, "displayName": receipt.staff.display_name},
        }), 201

    @app.route("/api/clock/badge/<identifier>.png", endpoint="clock_badge")
    @login_required
    def clock_badge(identifier: str):
        """QR badge for a staff identifier; the scanner types it into the clock screen."""
        try:
            if container.staff_directory.get_by_identifier(identifier) is None:
                raise NotFoundError(f"職員が見つかりません：{identifier}")
        except DomainError as e:
            return error_response(e)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(identifier)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
