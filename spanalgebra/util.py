"""Utility constants and helpers for spanalgebra.

Time unit constants represent durations in seconds, matching the way
durations in minutes and days are converted throughout the package.
"""

from datetime import date, datetime, timedelta, timezone

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400

# Smallest step a datetime can take
TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    """Read the wall clock once, as an aware UTC instant."""
    return datetime.now(timezone.utc)


def localnow() -> datetime:
    """Read the wall clock once, as an aware instant at the local fixed offset."""
    return utcnow().astimezone()


def midnight(instant: datetime) -> datetime:
    """Return the midnight that begins the instant's own (wall-clock) date."""
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def coerce_instant(value: object, name: str) -> datetime:
    """Validate that an interval endpoint is a timezone-aware datetime.

    Raises:
        TypeError: If value is a date, a naive datetime, or anything else
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise TypeError(
                f"TimeInterval {name} must be a timezone-aware datetime.\n"
                f"Got naive datetime: {value!r}\n"
                f"Hint: Add timezone info:\n"
                f"  dt = datetime(..., tzinfo=timezone.utc)\n"
                f"  # Or attach a fixed offset:\n"
                f"  dt = datetime(..., tzinfo=timezone(timedelta(hours=1)))"
            )
        return value
    if isinstance(value, date):
        raise TypeError(
            f"TimeInterval {name} must be a datetime, got date {value!r}.\n"
            f"Hint: Use a factory to cover whole days:\n"
            f"  TimeInterval.from_day(day)\n"
            f"  TimeInterval.from_dates_covered(first_day, last_day)"
        )
    raise TypeError(
        f"TimeInterval {name} must be a timezone-aware datetime.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )
