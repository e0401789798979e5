from __future__ import annotations

import logging
from typing import Callable, Optional

from ..core.constants import ACCESS_DENIED_MESSAGE
from .allow_list import AllowList
from .model import Identity
from .provider import IdentityProvider

logger = logging.getLogger(__name__)


class AccessGate:
    """Signs out any identity that is not on the allow-list.

    Attach it to a provider; every sign-in is checked and a rejected account is
    signed out immediately, leaving ``rejection`` set for the caller to show.
    """

    def __init__(self, allow_list: AllowList):
        self._allow_list = allow_list
        self._provider: Optional[IdentityProvider] = None
        self.rejection: Optional[str] = None

    def attach(self, provider: IdentityProvider) -> Callable[[], None]:
        self._provider = provider
        return provider.on_identity_change(self._on_identity_change)

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        if identity is None:
            return
        if self._allow_list.is_allowed(identity.email):
            self.rejection = None
            return

        logger.warning("access denied for %s", identity.email)
        self.rejection = ACCESS_DENIED_MESSAGE
        if self._provider is not None:
            self._provider.sign_out()
