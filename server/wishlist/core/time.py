"""UTC helpers for timestamp columns.

Feature and vote timestamps are stored as **naive** UTC datetimes so the same
``DateTime`` columns work on SQLite and PostgreSQL without ``timezone=True``.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time without tzinfo."""
    return datetime.now(UTC).replace(tzinfo=None)
