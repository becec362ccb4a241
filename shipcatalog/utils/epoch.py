"""Epoch-millisecond conversions for prodDate.

Ship production dates travel over the wire, and in the after/before filters,
as milliseconds since 1970-01-01T00:00:00Z. The database keeps naive UTC
datetimes.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1)


def from_epoch_ms(ms: int) -> datetime:
    """Convert epoch milliseconds to a naive UTC datetime.

    Raises ValueError when the value falls outside the datetime range.
    """
    try:
        return _EPOCH + timedelta(milliseconds=int(ms))
    except OverflowError as exc:
        raise ValueError(f"Timestamp out of range: {ms}") from exc


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are treated as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    delta = dt - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000
