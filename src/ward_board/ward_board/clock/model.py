from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ClockDirection


@dataclass(frozen=True)
class StaffRecord:
    """Domain entity: one staff directory entry, looked up by scanned identifier."""

    identifier: str
    display_name: str
    ward: Optional[str] = None


@dataclass(frozen=True)
class ClockEvent:
    event_id: str
    identifier: str
    direction: ClockDirection
    verifier: str
    source: str
    # Assigned by the store at append time; not read back after recording.
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ClockReceipt:
    event: ClockEvent
    staff: StaffRecord
    message: str
