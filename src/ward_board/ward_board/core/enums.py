from __future__ import annotations

from enum import Enum


class Ward(str, Enum):
    """Phân vùng (病棟) mà một thread gốc thuộc về."""

    FIRST = "1st"
    SECOND = "2nd"
    OTHER = "other"

    @property
    def label(self) -> str:
        return {
            Ward.FIRST: "第一病棟",
            Ward.SECOND: "第二病棟",
            Ward.OTHER: "その他",
        }[self]


class ClockDirection(str, Enum):
    """Hướng chấm công: vào ca / tan ca."""

    IN = "in"
    OUT = "out"

    @property
    def label(self) -> str:
        return "出勤" if self is ClockDirection.IN else "退勤"
