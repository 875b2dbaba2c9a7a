from datetime import date, datetime, time, timezone
from typing import Optional


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Stored form of a datetime: ISO 8601 in UTC with a `Z` suffix.

    Always carries microseconds so stored values sort as strings.
    """
    if value is None:
        return None
    stamp = as_utc(value).isoformat(timespec="microseconds")
    return stamp.replace("+00:00", "Z")


def same_time_on_day(start: datetime, day: date) -> datetime:
    """Same time of day as `start`, on `day`."""
    start = as_utc(start)
    return datetime.combine(day, time(start.hour, start.minute), tzinfo=timezone.utc)
