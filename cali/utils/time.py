from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo


def get_local_offset(tz_name: Optional[str] = None) -> Tuple[int, int]:
    """Offset from UTC as (hours, minutes), for display only.

    Uses `tz_name` when given, otherwise the system's local zone. Minutes
    carry the sign of the offset, e.g. UTC-03:30 is (-3, -30).
    """
    if tz_name:
        now = datetime.now(ZoneInfo(tz_name))
    else:
        now = datetime.now().astimezone()

    total_minutes = int(now.utcoffset().total_seconds()) // 60
    sign = -1 if total_minutes < 0 else 1
    hours, minutes = divmod(abs(total_minutes), 60)
    return sign * hours, sign * minutes


def format_offset(offset: Tuple[int, int]) -> str:
    hours, minutes = offset
    sign = '-' if hours < 0 or minutes < 0 else '+'
    return f"UTC{sign}{abs(hours):02d}:{abs(minutes):02d}"
