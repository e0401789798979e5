from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import DISPLAY_DATETIME_FORMAT


def format_timestamp(value: Optional[datetime]) -> str:
    """Render a stored timestamp for display.

    Pending server timestamps (not yet assigned) render as an empty string.
    """
    if value is None:
        return ""
    return value.strftime(DISPLAY_DATETIME_FORMAT)

