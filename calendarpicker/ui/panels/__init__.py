"""Panel delegates for every granularity and the registry that dispatches on mode."""

from .base import BasePanel, GridPanel, PanelContext, PanelDelegate, Step
from .calendar import DatePanel, DecadePanel, MonthPanel, QuarterPanel, WeekPanel, YearPanel
from .registry import PanelHost, PanelRegistry
from .time import DatetimePanel, TimePanel

__all__ = [
    "BasePanel",
    "DatePanel",
    "DatetimePanel",
    "DecadePanel",
    "GridPanel",
    "MonthPanel",
    "PanelContext",
    "PanelDelegate",
    "PanelHost",
    "PanelRegistry",
    "QuarterPanel",
    "Step",
    "TimePanel",
    "WeekPanel",
    "YearPanel",
]
