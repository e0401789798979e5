from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request, session

from ..core.constants import STORE_FAILURE_MESSAGE
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, StoreError, ValidationError
from ..identity.model import Identity
from ..identity.provider import SESSION_KEY

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StoreError, 503),
)


def current_identity() -> Optional[Identity]:
    return Identity.from_session(session.get(SESSION_KEY))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            return jsonify({"success": False, "message": "ログインしてください"}), 401
        g.identity = identity
        return view(*args, **kwargs)

    return wrapper


def request_data() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def error_response(e: DomainError):
    """Translate a domain error into the JSON notice shown to the user."""
    status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(e, kind)), 400)
    if isinstance(e, StoreError):
        logger.exception("store failure on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": STORE_FAILURE_MESSAGE}), status
    return jsonify({"success": False, "message": str(e)}), status
