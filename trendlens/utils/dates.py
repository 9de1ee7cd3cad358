"""UTC date helpers for epoch-millisecond timestamps."""

from datetime import date, datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_timestamp(value: date | datetime) -> int:
    """Convert a date or datetime to epoch milliseconds at UTC midnight."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        value = value.date()
    midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return int((midnight - EPOCH).total_seconds()) * 1000


def from_timestamp(timestamp: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
