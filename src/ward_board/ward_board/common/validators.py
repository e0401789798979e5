from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if is_blank(value):
        raise ValidationError(f"{field_name}を入力してください")
    return value.strip()


def require_choice(value: str, field_name: str, choices) -> str:
    allowed = {getattr(c, "value", c) for c in choices}
    if value not in allowed:
        raise ValidationError(f"{field_name}が不正です: {value!r}")
    return value
