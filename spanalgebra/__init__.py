from .interval import Interval, Ordered
from .mutable import MutableInterval, PropertyChanged
from .time_interval import Subdivisions, TimeInterval, is_within
from .util import DAY, HOUR, MINUTE, SECOND, TICK

__all__ = [
    "Interval",
    "Ordered",
    "TimeInterval",
    "Subdivisions",
    "is_within",
    "MutableInterval",
    "PropertyChanged",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "TICK",
]
