from __future__ import annotations

import logging
from typing import Callable, List, MutableMapping, Optional, Protocol

from ..core.exceptions import ValidationError
from .model import Identity

logger = logging.getLogger(__name__)

IdentityCallback = Callable[[Optional[Identity]], None]

SESSION_KEY = "identity"


class IdentityProvider(Protocol):
    def sign_in(self, identity: Identity) -> Identity:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError

    def current(self) -> Optional[Identity]:
        raise NotImplementedError

    def on_identity_change(self, callback: IdentityCallback) -> Callable[[], None]:
        raise NotImplementedError


class SessionIdentityProvider(IdentityProvider):
    """Identity kept in a session mapping (Flask ``session`` in the app).

    The account itself is authenticated upstream (reverse proxy in front of the
    app); this class only records the result and notifies listeners whenever the
    signed-in identity changes.
    """

    def __init__(self, session: MutableMapping):
        self._session = session
        self._listeners: List[IdentityCallback] = []

    def current(self) -> Optional[Identity]:
        return Identity.from_session(self._session.get(SESSION_KEY))

    def sign_in(self, identity: Identity) -> Identity:
        if not identity.account_id or not identity.email:
            raise ValidationError("ログイン情報が不足しています")
        self._session[SESSION_KEY] = identity.to_session()
        logger.info("signed in account=%s", identity.account_id)
        self._notify(identity)
        return identity

    def sign_out(self) -> None:
        previous = self._session.pop(SESSION_KEY, None)
        if previous is not None:
            logger.info("signed out account=%s", previous.get("account_id"))
            self._notify(None)

    def on_identity_change(self, callback: IdentityCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, identity: Optional[Identity]) -> None:
        for callback in list(self._listeners):
            callback(identity)


def identity_from_headers(headers, *, id_header: str, email_header: str, name_header: str, photo_header: str) -> Optional[Identity]:
    """Build an Identity from the authenticating proxy's forwarded headers."""
    account_id = (headers.get(id_header) or "").strip()
    email = (headers.get(email_header) or "").strip()
    if not account_id or not email:
        return None
    return Identity(
        account_id=account_id,
        email=email,
        display_name=(headers.get(name_header) or email).strip(),
        photo_ref=(headers.get(photo_header) or "").strip() or None,
    )
