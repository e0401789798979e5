from __future__ import annotations

import pytest

from src.ward_board.ward_board.core.exceptions import ValidationError
from src.ward_board.ward_board.identity.allow_list import DocumentAllowList, StaticAllowList
from src.ward_board.ward_board.identity.gate import AccessGate
from src.ward_board.ward_board.identity.model import Identity
from src.ward_board.ward_board.identity.provider import SessionIdentityProvider, identity_from_headers

HEADERS = dict(
    id_header="X-Forwarded-User",
    email_header="X-Forwarded-Email",
    name_header="X-Forwarded-Preferred-Username",
    photo_header="X-Forwarded-Photo",
)


def test_allowed_identity_stays_signed_in(store, alice):
    store.put("allowedUsers", alice.email, {"email": alice.email})
    provider = SessionIdentityProvider({})
    gate = AccessGate(DocumentAllowList(store))
    gate.attach(provider)

    provider.sign_in(alice)

    assert provider.current() == alice
    assert gate.rejection is None


def test_identity_off_the_allow_list_is_signed_out(store, bob):
    session = {}
    provider = SessionIdentityProvider(session)
    gate = AccessGate(DocumentAllowList(store))
    gate.attach(provider)

    provider.sign_in(bob)

    assert provider.current() is None
    assert session == {}
    assert gate.rejection == "このアカウントでは掲示板を利用できません"


def test_listeners_see_sign_in_and_sign_out_and_can_detach(alice):
    provider = SessionIdentityProvider({})
    seen = []
    unsubscribe = provider.on_identity_change(seen.append)

    provider.sign_in(alice)
    provider.sign_out()
    unsubscribe()
    provider.sign_in(alice)

    assert seen == [alice, None]


def test_sign_in_requires_account_id_and_email():
    with pytest.raises(ValidationError):
        SessionIdentityProvider({}).sign_in(Identity(account_id="", email="x@example.org", display_name="X"))


def test_static_allow_list_is_case_insensitive():
    allow = StaticAllowList(["Nurse@Example.org", " "])

    assert allow.is_allowed("nurse@example.org")
    assert not allow.is_allowed("")
    assert not StaticAllowList([])


def test_identity_from_proxy_headers():
    identity = identity_from_headers(
        {"X-Forwarded-User": "1234", "X-Forwarded-Email": "a@example.org", "X-Forwarded-Photo": "https://p"},
        **HEADERS,
    )

    assert identity == Identity(account_id="1234", email="a@example.org", display_name="a@example.org", photo_ref="https://p")
    assert identity_from_headers({"X-Forwarded-Email": "a@example.org"}, **HEADERS) is None
