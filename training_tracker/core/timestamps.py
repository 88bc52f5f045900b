"""UTC timestamp helpers.

SQLite stores DateTime(timezone=True) without the offset, so every timestamp
is converted to UTC before it is persisted and read back as UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
