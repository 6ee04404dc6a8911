"""Time constants and millisecond timestamp helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone

ONE_SECOND_MS = 1000
ONE_MINUTE_MS = 60 * ONE_SECOND_MS
ONE_HOUR_MS = 60 * ONE_MINUTE_MS
ONE_DAY_MS = 24 * ONE_HOUR_MS

# Interest is checked once per fixed day, never per calendar day.
INTEREST_PERIOD_MS = ONE_DAY_MS


def now_ms() -> int:
    """Return the current wall clock as integer milliseconds since the epoch."""

    return int(datetime.now(timezone.utc).timestamp() * ONE_SECOND_MS)


def hours_to_ms(hours: float) -> int:
    return int(round(hours * ONE_HOUR_MS))


def to_datetime(timestamp: int) -> datetime:
    """Convert an epoch millisecond timestamp to an aware UTC datetime."""

    return datetime.fromtimestamp(timestamp / ONE_SECOND_MS, tz=timezone.utc)


def from_datetime(moment: datetime) -> int:
    """Convert ``moment`` to epoch milliseconds; naive values are read as UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * ONE_SECOND_MS)


def day_of(timestamp: int) -> date:
    return to_datetime(timestamp).date()


__all__ = [
    "ONE_SECOND_MS",
    "ONE_MINUTE_MS",
    "ONE_HOUR_MS",
    "ONE_DAY_MS",
    "INTEREST_PERIOD_MS",
    "now_ms",
    "hours_to_ms",
    "to_datetime",
    "from_datetime",
    "day_of",
]
