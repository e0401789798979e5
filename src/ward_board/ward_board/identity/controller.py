from __future__ import annotations

from flask import Flask, current_app, jsonify, request, session

from ..common.web import current_identity, error_response, login_required
from ..container import Container
from ..core.exceptions import DomainError
from .gate import AccessGate
from .provider import SessionIdentityProvider, identity_from_headers


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        identity = identity_from_headers(
            request.headers,
            id_header=current_app.config["IDENTITY_HEADER_ID"],
            email_header=current_app.config["IDENTITY_HEADER_EMAIL"],
            name_header=current_app.config["IDENTITY_HEADER_NAME"],
            photo_header=current_app.config["IDENTITY_HEADER_PHOTO"],
        )
        if identity is None:
            return jsonify({"success": False, "message": "認証情報がありません。Googleでログインしてください"}), 401

        provider = SessionIdentityProvider(session)
        gate = AccessGate(container.allow_list)
        detach = gate.attach(provider)
        try:
            provider.sign_in(identity)
        except DomainError as e:
            # Allow-list could not be checked: do not leave the session signed in.
            provider.sign_out()
            return error_response(e)
        finally:
            detach()

        if gate.rejection:
            return jsonify({"success": False, "message": gate.rejection}), 403
        return jsonify({"success": True, "user": identity.to_session()})

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        SessionIdentityProvider(session).sign_out()
        session.pop("selected_ward", None)
        return jsonify({"success": True})

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": current_identity().to_session()})
