"""Default date engine backed by ``datetime``, ``zoneinfo`` and ``dateutil``.

Patterns are ``strftime`` patterns with one extension: ``%q`` renders and reads
the quarter number (1..4). A pattern carrying an ISO week (``%G``/``%V``) but no
weekday directive parses to the first day of that ISO week.
"""

import calendar
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

from .protocol import DateField, DateUnit

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"%.?|[^%]+")
_WEEKDAY_DIRECTIVES = ("%u", "%w", "%a", "%A")

_FIELD_RANGES = {
    DateField.YEAR: (1, 9999),
    DateField.MONTH: (1, 12),
    DateField.HOUR: (0, 23),
    DateField.MINUTE: (0, 59),
    DateField.SECOND: (0, 59),
    DateField.MILLISECOND: (0, 999),
}

_FIXED_STEPS = {
    DateUnit.WEEK: timedelta(weeks=1),
    DateUnit.DAY: timedelta(days=1),
    DateUnit.HOUR: timedelta(hours=1),
    DateUnit.MINUTE: timedelta(minutes=1),
    DateUnit.SECOND: timedelta(seconds=1),
    DateUnit.MILLISECOND: timedelta(milliseconds=1),
}

_MONTHS_PER_UNIT = {
    DateUnit.DECADE: 120,
    DateUnit.YEAR: 12,
    DateUnit.QUARTER: 3,
    DateUnit.MONTH: 1,
}


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _normalize_locale(tag: str) -> str:
    return tag.replace("-", "_")


class DatetimeEngine:
    """``DateEngine`` implementation over :class:`datetime.datetime` values."""

    def __init__(
        self,
        locale: str = "en_US",
        week_starts: Optional[Mapping[str, int]] = None,
        default_week_start: int = 0,
        timezone: Optional[str] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            locale: Default locale tag used when an operation gets none
            week_starts: Locale tag or language -> first weekday (0=Monday)
            default_week_start: Week start for locales missing from ``week_starts``
            timezone: Optional IANA zone name; values become timezone-aware

        Raises:
            ValueError: If ``timezone`` is not a known zone name
        """
        self.locale = _normalize_locale(locale)
        self._week_starts = {
            _normalize_locale(tag): start % 7 for tag, start in (week_starts or {}).items()
        }
        self._default_week_start = default_week_start % 7
        self._tz: Optional[tzinfo] = None

        if timezone:
            try:
                self._tz = ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone: {timezone}") from e

        logger.debug(f"DatetimeEngine initialized (locale={self.locale}, timezone={timezone})")

    @classmethod
    def from_settings(cls, settings: Any) -> "DatetimeEngine":
        """Build an engine from ``PickerSettings``."""
        week_starts = {}
        if settings.week_start is not None:
            week_starts[settings.locale] = settings.week_start
        return cls(locale=settings.locale, week_starts=week_starts, timezone=settings.timezone)

    @property
    def timezone(self) -> Optional[tzinfo]:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def get(self, date: datetime, field: DateField) -> int:
        if field is DateField.DATE:
            return date.day
        if field is DateField.MILLISECOND:
            return date.microsecond // 1000
        return int(getattr(date, field.value))

    def set(self, date: datetime, field: DateField, value: int) -> datetime:
        if field is DateField.DATE:
            last_day = calendar.monthrange(date.year, date.month)[1]
            return date.replace(day=_clamp(value, 1, last_day))

        low, high = _FIELD_RANGES[field]
        value = _clamp(value, low, high)

        if field is DateField.MILLISECOND:
            return date.replace(microsecond=value * 1000)

        if field in (DateField.YEAR, DateField.MONTH):
            year = value if field is DateField.YEAR else date.year
            month = value if field is DateField.MONTH else date.month
            day = min(date.day, calendar.monthrange(year, month)[1])
            return date.replace(year=year, month=month, day=day)

        return date.replace(**{field.value: value})

    def add(self, date: datetime, unit: DateUnit, amount: int) -> datetime:
        try:
            if unit in _FIXED_STEPS:
                return date + _FIXED_STEPS[unit] * amount
            return date + relativedelta(months=_MONTHS_PER_UNIT[unit] * amount)
        except (OverflowError, ValueError):
            bound = datetime.max if amount > 0 else datetime.min
            logger.debug(f"Date arithmetic out of range, clamping {date} to {bound}")
            return bound.replace(tzinfo=date.tzinfo)

    def compare(self, a: datetime, b: datetime) -> int:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0

    def is_same(
        self, a: datetime, b: datetime, unit: DateUnit, locale: Optional[str] = None
    ) -> bool:
        return self.start_of(a, unit, locale) == self.start_of(b, unit, locale)

    def start_of(self, date: datetime, unit: DateUnit, locale: Optional[str] = None) -> datetime:
        if unit is DateUnit.MILLISECOND:
            return date.replace(microsecond=date.microsecond // 1000 * 1000)
        if unit is DateUnit.SECOND:
            return date.replace(microsecond=0)
        if unit is DateUnit.MINUTE:
            return date.replace(second=0, microsecond=0)
        if unit is DateUnit.HOUR:
            return date.replace(minute=0, second=0, microsecond=0)

        day_start = date.replace(hour=0, minute=0, second=0, microsecond=0)
        if unit is DateUnit.DAY:
            return day_start
        if unit is DateUnit.WEEK:
            return day_start - timedelta(days=self.weekday(date, locale))
        if unit is DateUnit.MONTH:
            return day_start.replace(day=1)
        if unit is DateUnit.QUARTER:
            return day_start.replace(month=(date.month - 1) // 3 * 3 + 1, day=1)
        if unit is DateUnit.YEAR:
            return day_start.replace(month=1, day=1)
        # DECADE
        return day_start.replace(year=max(1, date.year - date.year % 10), month=1, day=1)

    def end_of(self, date: datetime, unit: DateUnit, locale: Optional[str] = None) -> datetime:
        next_start = self.add(self.start_of(date, unit, locale), unit, 1)
        return next_start - timedelta(microseconds=1)

    def first_day_of_week(self, locale: Optional[str] = None) -> int:
        tag = _normalize_locale(locale or self.locale)
        if tag in self._week_starts:
            return self._week_starts[tag]
        language = tag.split("_")[0]
        return self._week_starts.get(language, self._default_week_start)

    def weekday(self, date: datetime, locale: Optional[str] = None) -> int:
        return (date.weekday() - self.first_day_of_week(locale)) % 7

    def format(self, date: datetime, pattern: str) -> str:
        # strftime leaves years below 1000 unpadded on some platforms
        literals = {
            "%q": str((date.month - 1) // 3 + 1),
            "%Y": f"{date.year:04d}",
            "%G": f"{date.isocalendar()[0]:04d}",
        }
        expanded = "".join(literals.get(token, token) for token in _TOKEN_RE.findall(pattern))
        return date.strftime(expanded)

    def parse(self, text: str, pattern: str) -> Optional[datetime]:
        if not isinstance(text, str) or not text.strip():
            return None

        text = text.strip()
        if "%q" in _TOKEN_RE.findall(pattern):
            expanded = self._expand_quarter(text, pattern)
            if expanded is None:
                logger.debug(f"Could not read quarter from {text!r} with {pattern!r}")
                return None
            text, pattern = expanded

        if "%V" in pattern and not any(d in pattern for d in _WEEKDAY_DIRECTIVES):
            text, pattern = f"{text} 1", f"{pattern} %u"

        try:
            parsed = datetime.strptime(text, pattern)
        except ValueError as e:
            logger.debug(f"Could not parse {text!r} with {pattern!r}: {e}")
            return None

        if self._tz is not None and parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self._tz)
        return parsed

    @staticmethod
    def _expand_quarter(text: str, pattern: str) -> Optional[tuple[str, str]]:
        """Rewrite a ``%q`` pattern into a ``%m`` one strptime can read."""
        tokens = _TOKEN_RE.findall(pattern)

        regex_parts = []
        for token in tokens:
            if token == "%q":
                regex_parts.append("([1-4])")
            elif token.startswith("%") and token != "%%":
                regex_parts.append("(.+?)")
            else:
                regex_parts.append(re.escape("%" if token == "%%" else token))

        match = re.fullmatch("".join(regex_parts), text)
        if match is None:
            return None

        groups = iter(match.groups())
        new_text = []
        new_pattern = []
        for token in tokens:
            if token == "%q":
                new_text.append(f"{(int(next(groups)) - 1) * 3 + 1:02d}")
                new_pattern.append("%m")
            elif token.startswith("%") and token != "%%":
                new_text.append(next(groups))
                new_pattern.append(token)
            else:
                new_text.append("%" if token == "%%" else token)
                new_pattern.append(token)
        return "".join(new_text), "".join(new_pattern)
