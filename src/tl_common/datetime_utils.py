"""UTC helpers. Every timestamp the API emits is timezone-aware UTC."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Calendar date in UTC; birthdates are compared against this."""
    return utc_now().date()


def isoformat_or_empty(value: datetime | None) -> str:
    """ISO8601 for a DB-assigned timestamp, "" when the row has none yet."""
    return value.isoformat() if value is not None else ""
