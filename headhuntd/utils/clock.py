# clock.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
