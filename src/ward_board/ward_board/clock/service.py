from __future__ import annotations

import logging
from typing import Optional, Union

from ..core.constants import CLOCK_SOURCE
from ..core.enums import ClockDirection
from ..core.exceptions import EmptyIdentifierError, UnauthorizedVerifierError, UnknownStaffError, ValidationError
from ..identity.allow_list import AllowList
from ..identity.model import Identity
from .model import ClockEvent, ClockReceipt
from .repository import ClockingLog, StaffDirectory

logger = logging.getLogger(__name__)


def parse_direction(value: Union[ClockDirection, str, None]) -> ClockDirection:
    if isinstance(value, ClockDirection):
        return value
    try:
        return ClockDirection((value or ClockDirection.IN.value).strip().lower())
    except ValueError:
        raise ValidationError(f"打刻区分が不正です: {value!r}")


class ClockService:
    """Use case: record one clock-in/out after one directory lookup.

    No alternation or duplicate-scan checks: every accepted scan is one event.
    """

    def __init__(self, directory: StaffDirectory, log: ClockingLog, verifiers: AllowList):
        self._directory = directory
        self._log = log
        self._verifiers = verifiers

    def record_clock(
        self,
        identifier: Optional[str],
        direction: Union[ClockDirection, str],
        verifier: Optional[Identity],
    ) -> ClockReceipt:
        identifier = (identifier or "").strip()
        if not identifier:
            raise EmptyIdentifierError("IDを入力またはスキャンしてください")

        direction = parse_direction(direction)

        if verifier is None or not self._verifiers.is_allowed(verifier.email):
            logger.warning("clock refused: verifier=%s not allowed", verifier.email if verifier else None)
            raise UnauthorizedVerifierError("打刻を確認する権限がありません")

        staff = self._directory.get_by_identifier(identifier)
        if staff is None:
            logger.info("clock refused: unknown identifier=%s verifier=%s", identifier, verifier.email)
            raise UnknownStaffError(f"職員が見つかりません：{identifier}")

        event_id = self._log.append(
            identifier=identifier,
            direction=direction,
            verifier=verifier.email,
            source=CLOCK_SOURCE,
        )
        logger.info("clock %s identifier=%s verifier=%s event=%s", direction.value, identifier, verifier.email, event_id)

        event = ClockEvent(
            event_id=event_id,
            identifier=identifier,
            direction=direction,
            verifier=verifier.email,
            source=CLOCK_SOURCE,
        )
        return ClockReceipt(
            event=event,
            staff=staff,
            message=f"打刻完了：{staff.display_name}（{direction.label}）",
        )
