from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Identity:
    """Authenticated account as reported by the identity provider."""

    account_id: str
    email: str
    display_name: str
    photo_ref: Optional[str] = None

    def to_session(self) -> dict:
        return asdict(self)

    @classmethod
    def from_session(cls, data: Optional[Mapping[str, Any]]) -> Optional["Identity"]:
        if not data or not data.get("account_id"):
            return None
        return cls(
            account_id=str(data["account_id"]),
            email=str(data.get("email") or ""),
            display_name=str(data.get("display_name") or ""),
            photo_ref=data.get("photo_ref") or None,
        )
