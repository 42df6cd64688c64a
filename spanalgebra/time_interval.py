"""Calendar and clock intervals built on the generic interval algebra.

A TimeInterval is an ``Interval[datetime]`` whose endpoints are timezone-aware
instants. Every factory and transformation returns a new instance.
"""

import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from dateutil.parser import parse as parse_timestamp
from dateutil.relativedelta import relativedelta
from typing_extensions import Self

from spanalgebra.interval import Interval
from spanalgebra.util import (
    DAY,
    SECOND,
    TICK,
    coerce_instant,
    localnow,
    midnight,
    utcnow,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, kw_only=True, eq=False)
class TimeInterval(Interval[datetime]):
    """An interval between two timezone-aware instants.

    The endpoints may carry different UTC offsets; comparisons are made on the
    absolute instant, as ``datetime`` does for aware values.
    """

    def __post_init__(self) -> None:
        coerce_instant(self.start, "start")
        coerce_instant(self.stop, "stop")

    # Derived values

    @property
    def duration(self) -> timedelta:
        """Signed length of the interval; negative when decreasing."""
        return self.stop - self.start

    @property
    def duration_minutes(self) -> int:
        """Duration rounded to the nearest whole minute."""
        return round(self.duration / timedelta(minutes=1))

    @property
    def spans_midnight(self) -> bool:
        """True if the midnight that begins the stop's date lies inside."""
        return self.envelops(midnight(self.stop))

    @property
    def midpoint(self) -> datetime:
        micros = self.duration // TICK
        # Halve towards zero so decreasing intervals mirror increasing ones
        half = -(-micros // 2) if micros < 0 else micros // 2
        return self.start + half * TICK

    # Transformations

    def with_extension(self, by: timedelta) -> Self:
        """Keep the start and lengthen the duration by ``by`` (may be negative)."""
        return replace(self, stop=self.start + self.duration + by)

    def with_padding(self, start_minutes: float, stop_minutes: float) -> Self:
        """Move the start earlier and the stop later by the given minutes."""
        return replace(
            self,
            start=self.start - timedelta(minutes=start_minutes),
            stop=self.stop + timedelta(minutes=stop_minutes),
        )

    def shifted(self, amount: timedelta) -> Self:
        """Move both endpoints by the same amount."""
        return replace(self, start=self.start + amount, stop=self.stop + amount)

    def made_later(self, amount: timedelta) -> Self:
        return self.shifted(amount)

    def made_sooner(self, amount: timedelta) -> Self:
        return self.shifted(-amount)

    def as_today(self) -> "TimeInterval":
        """Same time of day and whole-minute duration, starting today."""
        return TimeInterval.starting_today(self.start.time(), self.duration_minutes)

    def overlaps_time_of_day(self, time_of_day: time) -> bool:
        """Compare against the wall-clock times of the endpoints, ignoring dates."""
        return self.start.time() <= time_of_day <= self.stop.time()

    def random_point(self, rng: random.Random) -> datetime:
        """Pick a uniformly random instant between start and stop.

        Decreasing intervals yield instants counted backwards from start.
        """
        if rng is None:
            raise TypeError(
                "random_point() requires a random source, got None.\n"
                "Example: ivl.random_point(random.Random(42))"
            )
        return self.start + self.duration * rng.random()

    def get_subdivisions(
        self, step: timedelta, exclude_ends: bool = False
    ) -> "Subdivisions":
        """Return the instants spaced by ``step`` from start to stop.

        The result is lazy and can be iterated any number of times. See
        :class:`Subdivisions` for how the final segment is handled.
        """
        return Subdivisions(self, step, exclude_ends=exclude_ends)

    # Factories

    @classmethod
    def from_duration(cls, start: datetime, duration: timedelta) -> Self:
        return cls(start=start, stop=start + duration)

    @classmethod
    def from_minutes(cls, start: datetime, minutes: float) -> Self:
        return cls.from_duration(start, timedelta(minutes=minutes))

    @classmethod
    def on_date(
        cls,
        day: date,
        time_of_day: time | timedelta,
        minutes: float,
        tz: tzinfo = timezone.utc,
    ) -> Self:
        """Start at ``time_of_day`` on ``day`` and last ``minutes``.

        Any time of day carried by ``day`` itself is discarded. An aware
        datetime keeps its own zone; everything else is placed in ``tz``.
        """
        start = _day_start(day, tz) + _as_offset(time_of_day)
        return cls.from_minutes(start, minutes)

    @classmethod
    def from_day(cls, day: date, tz: tzinfo = timezone.utc) -> Self:
        """Cover one calendar day, from midnight to one second before the next.

        Example:
            >>> str(TimeInterval.from_day(date(2017, 12, 25)))
            '2017-12-25 00:00:00+00:00 - 2017-12-25 23:59:59+00:00'
        """
        start = _day_start(day, tz)
        stop = start + timedelta(hours=23, minutes=59, seconds=59)
        return cls(start=start, stop=stop)

    @classmethod
    def from_days_covered(
        cls,
        start: datetime,
        days: float,
        round_back: timedelta | None = None,
    ) -> Self:
        """Cover ``days`` calendar days counted from the midnight of ``start``.

        The stop always lands one second before the midnight that would begin
        the next day. With ``round_back`` the start is first moved back to the
        nearest whole multiple of that grain (18:20 with a 15 minute grain
        becomes 18:15), counted in wall-clock time from ``datetime.min``.
        """
        start = coerce_instant(start, "start")
        if round_back is not None:
            start = _round_back(start, round_back)
        stop = midnight(start) + timedelta(seconds=DAY * days - SECOND)
        return cls(start=start, stop=stop)

    @classmethod
    def from_dates_covered(
        cls,
        start: date,
        stop: date,
        offset: timedelta = timedelta(0),
        exclusive_stop: bool = False,
    ) -> Self:
        """Cover every calendar day from ``start`` through ``stop``.

        Times of day are discarded. ``exclusive_stop`` drops the stop date
        itself. A stop date before the start date gives a decreasing interval.
        """
        first = _as_date(start)
        last = _as_date(stop)
        if exclusive_stop:
            last -= timedelta(days=1)

        span = last - first
        anchor = datetime.combine(first, time.min, tzinfo=timezone(offset))
        return cls.from_days_covered(anchor, span.days + 1)

    @classmethod
    def from_months_covered(
        cls, year: int, month: int, count: int, offset: timedelta = timedelta(0)
    ) -> Self:
        """Cover ``count`` whole months starting with the given one.

        The stop is the last representable instant before the following
        month begins.
        """
        if count < 1:
            raise ValueError(f"count must be at least 1 month, got {count}")
        start = datetime(year, month, 1, tzinfo=timezone(offset))
        stop = start + relativedelta(months=count) - TICK
        return cls(start=start, stop=stop)

    @classmethod
    def last(cls, duration: timedelta) -> Self:
        """The ``duration`` leading up to now."""
        now = utcnow()
        return cls(start=now - duration, stop=now)

    @classmethod
    def next(cls, duration: timedelta) -> Self:
        """The ``duration`` starting now."""
        return cls.from_duration(localnow(), duration)

    @classmethod
    def starting_today(cls, time_of_day: time | timedelta, minutes: float) -> Self:
        start = midnight(localnow()) + _as_offset(time_of_day)
        return cls.from_minutes(start, minutes)

    @classmethod
    def from_now_and_next_hours(cls, hours: float) -> Self:
        """Start at the top of the current UTC hour, or at half past once
        more than thirty minutes of it have gone, and last ``hours``."""
        now = utcnow()
        start = now.replace(minute=0, second=0, microsecond=0)
        if now.minute > 30:
            start += timedelta(minutes=30)
        return cls.from_duration(start, timedelta(hours=hours))

    @classmethod
    def max_range(cls) -> Self:
        return cls(
            start=datetime.min.replace(tzinfo=timezone.utc),
            stop=datetime.max.replace(tzinfo=timezone.utc),
        )

    @staticmethod
    def total_duration(intervals: Iterable["TimeInterval"]) -> timedelta:
        """Sum the (signed) durations of the given intervals."""
        total = TimeInterval(start=_EPOCH, stop=_EPOCH)
        for interval in intervals:
            total = total.with_extension(interval.duration)
        return total.duration

    @classmethod
    def try_parse(
        cls, start: str, stop: str, tz: tzinfo = timezone.utc
    ) -> Self | None:
        """Parse two timestamps leniently, returning None if either is malformed.

        Bare dates (both values at midnight) are read as an inclusive range of
        calendar days, so the whole of the stop date is covered. Anything else
        is taken verbatim. Values without an offset are placed in ``tz``. A range
        of whole days takes the start value's offset for both ends; an offset
        on the stop value is ignored in that case.

        Example:
            >>> TimeInterval.try_parse("2017-08-01T09:30:00Z", "lewjhfhwfeO") is None
            True
        """
        try:
            first = _parse_instant(start, tz)
            last = _parse_instant(stop, tz)
        except (ValueError, OverflowError) as exc:
            logger.debug("Cannot parse interval from %r and %r: %s", start, stop, exc)
            return None

        if first.time() == time.min and last.time() == time.min:
            logger.debug("Reading %r and %r as a range of whole days", start, stop)
            offset = first.utcoffset() or timedelta(0)
            return cls.from_dates_covered(first.date(), last.date(), offset)

        return cls(start=first, stop=last)


class Subdivisions(Iterable[datetime]):
    """Instants spaced by a fixed step across a TimeInterval.

    Yields ``start``, then ``start + step``, ``start + 2 * step`` and so on
    while strictly before ``stop``; the first step that reaches or passes
    ``stop`` is replaced by ``stop`` itself, so the last gap may be shorter
    than ``step``. With ``exclude_ends`` neither ``start`` nor ``stop`` is
    yielded. A spot interval yields its point twice, or nothing when ends are
    excluded.

    Each iteration starts afresh, so the same object can be consumed many times.
    """

    def __init__(
        self, interval: TimeInterval, step: timedelta, exclude_ends: bool = False
    ):
        if step is None:
            raise TypeError(
                "Subdivisions require a step, got None.\n"
                "Example: ivl.get_subdivisions(timedelta(minutes=5))"
            )
        if not isinstance(step, timedelta):
            raise TypeError(
                f"Subdivision step must be a timedelta, got {type(step).__name__!r}"
            )
        if step <= timedelta(0):
            raise ValueError(
                f"Subdivision step must be a positive duration, got {step!r}.\n"
                f"A zero or negative step never reaches the stop."
            )

        self.interval: TimeInterval = interval
        self.step: timedelta = step
        self.exclude_ends: bool = exclude_ends

    def __iter__(self) -> Iterator[datetime]:
        interval = self.interval

        if interval.is_spot:
            if not self.exclude_ends:
                yield interval.start
                yield interval.stop
            return

        if not self.exclude_ends:
            yield interval.start

        current = _advance(interval.start, self.step)
        while current is not None and current < interval.stop:
            yield current
            current = _advance(current, self.step)

        if not self.exclude_ends:
            yield interval.stop

    def __repr__(self) -> str:
        return (
            f"Subdivisions({self.interval}, step={self.step}, "
            f"exclude_ends={self.exclude_ends})"
        )


def is_within(instant: datetime, interval: TimeInterval) -> bool:
    """True if the instant falls inside the interval, ends included."""
    return interval.envelops(instant)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_offset(time_of_day: time | timedelta) -> timedelta:
    if isinstance(time_of_day, timedelta):
        return time_of_day
    return timedelta(
        hours=time_of_day.hour,
        minutes=time_of_day.minute,
        seconds=time_of_day.second,
        microseconds=time_of_day.microsecond,
    )


def _day_start(day: date, tz: tzinfo) -> datetime:
    if isinstance(day, datetime) and day.tzinfo is not None:
        return midnight(day)
    return datetime.combine(_as_date(day), time.min, tzinfo=tz)


def _advance(instant: datetime, step: timedelta) -> datetime | None:
    """Step forward, or None once past the last representable datetime."""
    try:
        return instant + step
    except OverflowError:
        return None


def _round_back(start: datetime, grain: timedelta) -> datetime:
    if grain <= timedelta(0):
        raise ValueError(
            f"round_back must be a positive duration, got {grain!r}.\n"
            f"Example: TimeInterval.from_days_covered(start, 7, timedelta(hours=1))"
        )
    elapsed = start.replace(tzinfo=None) - datetime.min
    # Floor division on a non-negative span always rounds towards the earlier edge
    whole = elapsed // grain
    return (datetime.min + whole * grain).replace(tzinfo=start.tzinfo)


def _parse_instant(text: str, tz: tzinfo) -> datetime:
    value = parse_timestamp(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    # dateutil accepts offsets of a day or more, which datetime refuses on use
    value.utcoffset()
    return value
