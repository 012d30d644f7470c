"""Datetime helpers for the Mongo storage boundary."""
from datetime import date, datetime, timezone, tzinfo
from typing import Optional


def to_naive_utc(value: datetime, assume: Optional[tzinfo] = None) -> datetime:
    """
    Normalize a datetime to naive UTC, the form Mongo returns.

    A naive value is read as wall-clock time in ``assume`` when given,
    otherwise it is taken to be UTC already.
    """
    if value.tzinfo is None:
        if assume is None:
            return value
        value = value.replace(tzinfo=assume)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive stored datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def date_to_datetime(value: date) -> datetime:
    """Store a calendar date as midnight (BSON has no date-only type)."""
    return datetime.combine(value, datetime.min.time())


def datetime_to_date(value) -> date:
    """Read back a stored calendar date."""
    return value.date() if isinstance(value, datetime) else value
