"""
Domain time utilities (pure).

Sale timestamps are stored as integer milliseconds since the Unix epoch (UTC).
These helpers convert between that wire form and timezone-aware datetimes.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Range of epoch milliseconds that map onto a datetime
MIN_MILLIS: int = (datetime.min.replace(tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
MAX_MILLIS: int = (datetime.max.replace(tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that a datetime is UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def millis_from_utc(value: datetime) -> int:
    """Convert a UTC datetime into epoch milliseconds."""

    require_utc_timestamp("value", value)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def millis_to_utc(millis: int) -> datetime:
    """
    Convert epoch milliseconds into a timezone-aware UTC datetime.

    Raises ValueError outside MIN_MILLIS..MAX_MILLIS.
    """

    if not MIN_MILLIS <= millis <= MAX_MILLIS:
        raise ValueError(f"timestamp {millis} is outside the representable range")

    return _EPOCH + timedelta(milliseconds=millis)


def now_millis() -> int:
    return millis_from_utc(datetime.now(timezone.utc))


def format_sale_date(millis: int) -> str:
    """Short display date for history listings, e.g. 'Jan 5, 2025'."""

    dt = millis_to_utc(millis)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"
