from dataclasses import dataclass, replace
from typing import Any, Generic, Protocol, TypeVar, overload

from typing_extensions import Self


class Ordered(Protocol):
    """Anything with a total order over itself (ints, floats, datetimes, ...)."""

    def __lt__(self, other: Any, /) -> bool: ...

    def __le__(self, other: Any, /) -> bool: ...


T = TypeVar("T", bound=Ordered)

_MISSING: Any = object()


def is_spot_range(start: Ordered, stop: Ordered) -> bool:
    return start == stop


def is_increasing_range(start: Ordered, stop: Ordered) -> bool:
    return start < stop


def envelops_point(start: T, stop: T, point: T) -> bool:
    """Inclusive containment test that ignores the direction of the range.

    A spot range only contains its own point. Otherwise both ends count as
    inside, whichever of them is the larger.
    """
    if is_spot_range(start, stop):
        return point == start
    if is_increasing_range(start, stop):
        return start <= point <= stop
    return stop <= point <= start


@dataclass(frozen=True, kw_only=True, eq=False)
class Interval(Generic[T]):
    """A span between two ordered values.

    Direction matters: ``start`` may be greater than ``stop`` (a decreasing
    interval), and two intervals covering the same points in opposite
    directions are not equal.
    """

    start: T
    stop: T

    @property
    def is_spot(self) -> bool:
        """True for a zero-width interval (start equals stop)."""
        return is_spot_range(self.start, self.stop)

    @property
    def is_increasing(self) -> bool:
        """True when start is strictly before stop (False for spots)."""
        return is_increasing_range(self.start, self.stop)

    @property
    def is_decreasing(self) -> bool:
        return is_increasing_range(self.stop, self.start)

    def reversed(self) -> Self:
        """Return the same span traversed in the opposite direction."""
        return replace(self, start=self.stop, stop=self.start)

    @overload
    def envelops(self, item: "Interval[T]") -> bool: ...

    @overload
    def envelops(self, item: T) -> bool: ...

    @overload
    def envelops(self, item: T, stop: T) -> bool: ...

    def envelops(self, item: Any, stop: Any = _MISSING) -> bool:
        """Check whether a point, a (start, stop) pair or an interval lies inside.

        A range is enveloped only when both of its endpoints are, whatever
        its own direction.

        Example:
            >>> ivl = Interval(start=0, stop=1000)
            >>> ivl.envelops(500), ivl.envelops(1000, 0), ivl.envelops(0, 2000)
            (True, True, False)
        """
        if isinstance(item, Interval):
            _reject_stop(stop, "envelops")
            return self.envelops(item.start, item.stop)
        if stop is _MISSING:
            return envelops_point(self.start, self.stop, item)
        return self.envelops(item) and self.envelops(stop)

    def is_enveloped_by(self, start: T, stop: T) -> bool:
        if self.is_spot:
            return envelops_point(start, stop, self.start)
        return Interval(start=start, stop=stop).envelops(self)

    @overload
    def overlaps(self, item: "Interval[T]") -> bool: ...

    @overload
    def overlaps(self, item: T) -> bool: ...

    @overload
    def overlaps(self, item: T, stop: T) -> bool: ...

    def overlaps(self, item: Any, stop: Any = _MISSING) -> bool:
        """Check whether a point, a (start, stop) pair or an interval overlaps.

        For a non-spot interval this only asks whether one of the other
        range's endpoints lands inside ``self``; it does not look at where
        ``self``'s endpoints land. Test from both sides for a symmetric check.

        Example:
            >>> Interval(start=500, stop=600).overlaps(1000, 550)
            True
            >>> Interval(start=3, stop=3).overlaps(1, 4)
            True
        """
        if isinstance(item, Interval):
            _reject_stop(stop, "overlaps")
            return self.overlaps(item.start, item.stop)
        if stop is _MISSING:
            return self.envelops(item)

        if self.is_spot:
            if is_spot_range(item, stop):
                return self.start == item
            return self.is_enveloped_by(item, stop)

        return self.envelops(item) or self.envelops(stop)

    def __eq__(self, other: object) -> bool:
        """Equal when both endpoints are, whatever the interval subclass."""
        if not isinstance(other, Interval):
            return NotImplemented
        return self.start == other.start and self.stop == other.stop

    def __hash__(self) -> int:
        return hash((self.start, self.stop))

    def __str__(self) -> str:
        return f"{self.start} - {self.stop}"


def _reject_stop(stop: Any, method: str) -> None:
    if stop is not _MISSING:
        raise TypeError(
            f"{method}() takes either an interval or a (start, stop) pair, not both.\n"
            f"Examples:\n"
            f"  ivl.{method}(other)\n"
            f"  ivl.{method}(other.start, other.stop)"
        )
