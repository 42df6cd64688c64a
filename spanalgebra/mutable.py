"""Change notification for intervals bound to an editable surface.

Intervals themselves are immutable values. A MutableInterval holds the current
value, swaps in a new one on every edit, and tells its subscribers which
properties changed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from spanalgebra.interval import Interval
from spanalgebra.time_interval import TimeInterval

logger = logging.getLogger(__name__)

IvlT = TypeVar("IvlT", bound=Interval[Any])


@dataclass(frozen=True)
class PropertyChanged:
    """A single property change.

    Attributes:
        name: "start", "stop" or "duration"
        old: Value before the edit
        new: Value after the edit
    """

    name: str
    old: Any
    new: Any


Subscriber = Callable[[PropertyChanged], None]


class MutableInterval(Generic[IvlT]):
    """Editable holder around an immutable interval value.

    Example:
        >>> holder = MutableInterval(Interval(start=0, stop=10))
        >>> unsubscribe = holder.subscribe(print)
        >>> holder.stop = 20
        PropertyChanged(name='stop', old=10, new=20)
    """

    def __init__(self, interval: IvlT) -> None:
        self._value: IvlT = interval
        self._subscribers: list[Subscriber] = []

    @property
    def value(self) -> IvlT:
        return self._value

    @value.setter
    def value(self, interval: IvlT) -> None:
        events: list[PropertyChanged] = []
        current: Any = self._value
        for name in ("start", "stop"):
            before, after = getattr(current, name), getattr(interval, name)
            if before == after:
                continue
            updated = replace(current, **{name: after})
            events.append(PropertyChanged(name, before, after))
            if isinstance(current, TimeInterval):
                events.append(
                    PropertyChanged("duration", current.duration, updated.duration)
                )
            current = updated

        self._value = interval
        self._publish(events)

    @property
    def start(self) -> Any:
        return self._value.start

    @start.setter
    def start(self, start: Any) -> None:
        self.value = replace(self._value, start=start)

    @property
    def stop(self) -> Any:
        return self._value.stop

    @stop.setter
    def stop(self, stop: Any) -> None:
        self.value = replace(self._value, stop=stop)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        if callback is None:
            raise TypeError("subscribe() requires a callback, got None")
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, events: list[PropertyChanged]) -> None:
        for event in events:
            logger.debug("Interval %s changed: %r -> %r", event.name, event.old, event.new)
            for callback in list(self._subscribers):
                callback(event)
