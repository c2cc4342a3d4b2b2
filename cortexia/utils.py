"""
utils.py: small date and JSON helpers shared by the services.
All timestamps are stored as naive UTC datetimes.
"""

import json
from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_week(d: date, first_day: str = "monday") -> date:
    if first_day == "sunday":
        return d - timedelta(days=(d.weekday() + 1) % 7)
    return d - timedelta(days=d.weekday())


def dump_list(value) -> str:
    return json.dumps(list(value or []))


def load_list(value: str | None) -> list:
    return json.loads(value) if value else []


def parse_datetime(value) -> datetime | None:
    """Accept a datetime or an ISO string (trailing Z allowed); returns naive UTC or None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    try:
        return to_naive_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return None
