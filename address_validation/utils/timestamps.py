"""UTC timestamps for error payloads and wall-clock-free durations."""

import time
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert to aware UTC; naive values are taken to already be UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime, include_milliseconds: bool = True) -> str:
    """ISO 8601 in UTC with a 'Z' suffix, e.g. '2025-11-04T12:00:00.000Z'.

    This is the format used for the error envelope's timestamp field.
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    stamp = dt_utc.strftime("%Y-%m-%dT%H:%M:%S")
    if include_milliseconds:
        stamp += f".{dt_utc.microsecond // 1000:03d}"
    return stamp + "Z"


def elapsed_ms(started_at: float) -> int:
    """Whole milliseconds since a time.monotonic() reading, never negative."""
    return max(0, int((time.monotonic() - started_at) * 1000))
