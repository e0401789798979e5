from __future__ import annotations

import pytest

from src.ward_board.ward_board.clock.repository import ClockingLog, DocumentStaffDirectory
from src.ward_board.ward_board.clock.service import ClockService
from src.ward_board.ward_board.core.enums import ClockDirection
from src.ward_board.ward_board.core.exceptions import (
    EmptyIdentifierError,
    UnauthorizedVerifierError,
    UnknownStaffError,
    ValidationError,
)
from src.ward_board.ward_board.identity.allow_list import StaticAllowList


@pytest.fixture
def service(store, alice):
    store.put("staff", "u1", {"displayName": "山田 花子", "ward": "1st"})
    return ClockService(DocumentStaffDirectory(store), ClockingLog(store), StaticAllowList([alice.email]))


def test_unknown_staff_rejected_without_append(store, alice):
    svc = ClockService(DocumentStaffDirectory(store), ClockingLog(store), StaticAllowList([alice.email]))

    with pytest.raises(UnknownStaffError):
        svc.record_clock("u1", "in", alice)

    assert store.appends == []


@pytest.mark.parametrize("identifier", ["", "   ", None])
def test_blank_identifier_rejected(service, store, alice, identifier):
    with pytest.raises(EmptyIdentifierError):
        service.record_clock(identifier, "in", alice)
    assert store.appends == []


def test_verifier_must_be_on_allow_list(service, store, bob):
    with pytest.raises(UnauthorizedVerifierError):
        service.record_clock("u1", "in", bob)
    with pytest.raises(UnauthorizedVerifierError):
        service.record_clock("u1", "in", None)
    assert store.appends == []


def test_clock_in_appends_one_event_and_confirms(service, store, alice):
    receipt = service.record_clock("  u1 ", "in", alice)

    assert receipt.message == "打刻完了：山田 花子（出勤）"
    assert receipt.event.direction is ClockDirection.IN
    assert receipt.event.verifier == "alice@example.org"
    assert receipt.event.source == "scanned-input"
    assert store.appends == [
        (
            "clockings",
            {
                "userId": "u1",
                "method": "in",
                "timestamp": store.appends[0][1]["timestamp"],
                "verifiedBy": "alice@example.org",
                "type": "scanned-input",
            },
        )
    ]
    stored = store.get_one("clockings", receipt.event.event_id)
    assert stored.get("timestamp") is not None


def test_repeated_scans_are_not_deduplicated(service, store, alice):
    service.record_clock("u1", ClockDirection.OUT, alice)
    service.record_clock("u1", "out", alice)

    assert [record["method"] for _, record in store.appends] == ["out", "out"]


def test_invalid_direction_rejected(service, store, alice):
    with pytest.raises(ValidationError):
        service.record_clock("u1", "sideways", alice)
    assert store.appends == []
