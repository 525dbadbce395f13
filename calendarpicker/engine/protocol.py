"""Date engine protocol that every picker component goes through for date handling."""

from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


class DateField(Enum):
    """Fields readable and writable through ``DateEngine.get``/``DateEngine.set``."""

    YEAR = "year"
    MONTH = "month"
    DATE = "date"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


class DateUnit(Enum):
    """Units used for arithmetic, truncation and granularity comparison."""

    DECADE = "decade"
    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


@runtime_checkable
class DateEngine(Protocol):
    """Capability set over an opaque, immutable date value.

    Date values are produced and consumed only through these operations and are
    never compared by identity. Every operation returns a new value and is total,
    except ``parse`` which returns ``None`` for input it cannot read.

    Conventions:
        - months are 1-based (1..12)
        - weekdays are 0=Monday .. 6=Sunday
        - ``locale`` arguments are tags such as ``"en_US"``; ``None`` means the
          engine's own default locale
    """

    def now(self) -> Any:
        """Return the current moment."""
        ...

    def get(self, date: Any, field: DateField) -> int:
        """Read one field of ``date``."""
        ...

    def set(self, date: Any, field: DateField, value: int) -> Any:
        """Return a copy of ``date`` with ``field`` replaced, clamped into range."""
        ...

    def add(self, date: Any, unit: DateUnit, amount: int) -> Any:
        """Return ``date`` shifted by ``amount`` units (may be negative)."""
        ...

    def compare(self, a: Any, b: Any) -> int:
        """Total order: -1 when ``a < b``, 0 when equal, 1 when ``a > b``."""
        ...

    def is_same(self, a: Any, b: Any, unit: DateUnit, locale: Optional[str] = None) -> bool:
        """Return True when ``a`` and ``b`` fall into the same ``unit``."""
        ...

    def start_of(self, date: Any, unit: DateUnit, locale: Optional[str] = None) -> Any:
        """Truncate ``date`` to the first instant of its ``unit``."""
        ...

    def end_of(self, date: Any, unit: DateUnit, locale: Optional[str] = None) -> Any:
        """Return the last representable instant of the ``unit`` holding ``date``."""
        ...

    def first_day_of_week(self, locale: Optional[str] = None) -> int:
        """Weekday (0=Monday) on which weeks start for ``locale``."""
        ...

    def weekday(self, date: Any, locale: Optional[str] = None) -> int:
        """Position 0..6 of ``date`` within its locale-dependent week."""
        ...

    def format(self, date: Any, pattern: str) -> str:
        """Render ``date`` with ``pattern``."""
        ...

    def parse(self, text: str, pattern: str) -> Optional[Any]:
        """Read ``text`` with ``pattern``; ``None`` when it does not match."""
        ...


def is_equal(engine: DateEngine, a: Optional[Any], b: Optional[Any]) -> bool:
    """Null-aware equality down to the second.

    Two absent values are equal, a single absent value is not.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return engine.is_same(a, b, DateUnit.SECOND)
