"""Date engine contract and the default ``datetime`` based implementation."""

from .datetime_engine import DatetimeEngine
from .protocol import DateEngine, DateField, DateUnit, is_equal

__all__ = ["DateEngine", "DateField", "DateUnit", "DatetimeEngine", "is_equal"]
