"""Calendar grid panels: decade, year, quarter, month, week and date."""

from ...engine import DateUnit
from ..navigation import PanelMode
from .base import GridPanel, Step

# Cells per grid row for each granularity
DECADE_COLUMNS = 3
YEAR_COLUMNS = 3
MONTH_COLUMNS = 3
DAYS_PER_WEEK = 7


class DecadePanel(GridPanel):
    """Decades of a century; selecting one opens its years."""

    mode = PanelMode.DECADE
    horizontal = Step(DateUnit.DECADE, 1)
    ctrl_horizontal = Step(DateUnit.DECADE, 10)
    vertical = Step(DateUnit.DECADE, DECADE_COLUMNS)
    page = Step(DateUnit.DECADE, 10)


class YearPanel(GridPanel):
    """Years of a decade."""

    mode = PanelMode.YEAR
    horizontal = Step(DateUnit.YEAR, 1)
    ctrl_horizontal = Step(DateUnit.DECADE, 1)
    vertical = Step(DateUnit.YEAR, YEAR_COLUMNS)
    page = Step(DateUnit.DECADE, 1)


class QuarterPanel(GridPanel):
    """The four quarters of a year, laid out on one row."""

    mode = PanelMode.QUARTER
    horizontal = Step(DateUnit.QUARTER, 1)
    ctrl_horizontal = Step(DateUnit.YEAR, 1)
    vertical = Step(DateUnit.YEAR, 1)
    page = Step(DateUnit.YEAR, 1)


class MonthPanel(GridPanel):
    """Months of a year."""

    mode = PanelMode.MONTH
    horizontal = Step(DateUnit.MONTH, 1)
    ctrl_horizontal = Step(DateUnit.YEAR, 1)
    vertical = Step(DateUnit.MONTH, MONTH_COLUMNS)
    page = Step(DateUnit.YEAR, 1)


class DatePanel(GridPanel):
    """Days of a month."""

    mode = PanelMode.DATE
    horizontal = Step(DateUnit.DAY, 1)
    ctrl_horizontal = Step(DateUnit.YEAR, 1)
    vertical = Step(DateUnit.DAY, DAYS_PER_WEEK)
    page = Step(DateUnit.MONTH, 1)


class WeekPanel(DatePanel):
    """Days of a month grouped by week; a selection stands for its whole week."""

    mode = PanelMode.WEEK
