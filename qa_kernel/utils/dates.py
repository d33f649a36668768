"""Lenient date parsing for values that may come from free-text columns."""

from datetime import date, datetime


def parse_date_value(value: date | datetime | str | None) -> date | None:
    """Return a ``date`` for ``value``, or None when absent or unparseable.

    Accepts ``date``, ``datetime`` (its calendar date), and ISO-8601 strings
    with or without a time part.  Never raises.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).days
