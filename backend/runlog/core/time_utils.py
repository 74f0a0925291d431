import math
from datetime import date, datetime, timedelta, timezone


def hhmmss_to_seconds(hhmmss: str) -> int:
    """
    Convert 'HH:MM:SS' -> total seconds (int).
    Example: '00:45:32' -> 2732
    """
    parts = hhmmss.split(":")
    if len(parts) != 3:
        raise ValueError("Duration must be in HH:MM:SS format")

    hours, minutes, seconds = map(int, parts)
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def compute_pace(duration_seconds: int, distance_mi: float) -> str:
    """
    Compute pace per mile as 'M:SS/mi' or 'MM:SS/mi'.
    Example: duration=2732 sec, distance=7.35 -> '6:11/mi'
    """
    if distance_mi <= 0:
        return "0:00/mi"

    pace_sec = int(duration_seconds / distance_mi)

    minutes = pace_sec // 60
    seconds = pace_sec % 60
    return f"{minutes}:{seconds:02d}/mi"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the DB stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(dt: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def days_until(end: datetime, now: datetime | None = None) -> int:
    """Whole days left until `end`, rounded up and never negative.

    Example: 36 hours before the end -> 2
    """
    now = now or utcnow()
    remaining = to_utc_naive(end) - to_utc_naive(now)
    return max(math.ceil(remaining / timedelta(days=1)), 0)


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()


def run_window(start: datetime, end: datetime) -> tuple[date, date]:
    """Calendar days covered by a goal window, used to select runs."""
    return to_utc_naive(start).date(), to_utc_naive(end).date()
