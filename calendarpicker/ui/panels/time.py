"""Time-of-day panel and the composed date + time panel."""

import dataclasses
import logging
from typing import Any, Optional

from ...config.settings import ShowTimeSettings, time_settings_from
from ...engine import DateField
from ..keyboard import KeyCode, KeyEvent
from ..navigation import PanelMode
from .base import BasePanel, PanelContext
from .calendar import DatePanel

logger = logging.getLogger(__name__)

_COLUMN_FIELDS = {
    "hour": (DateField.HOUR, 24),
    "minute": (DateField.MINUTE, 60),
    "second": (DateField.SECOND, 60),
}

_DATE_FIELDS = (DateField.YEAR, DateField.MONTH, DateField.DATE)
_TIME_FIELDS = (DateField.HOUR, DateField.MINUTE, DateField.SECOND, DateField.MILLISECOND)


def copy_fields(context: PanelContext, source: Any, target: Any, fields: tuple) -> Any:
    """Return ``target`` with ``fields`` taken from ``source``."""
    engine = context.engine
    for field in fields:
        target = engine.set(target, field, engine.get(source, field))
    return target


class TimePanel(BasePanel):
    """Hour/minute/second columns, plus AM/PM on a 12-hour clock; arrows step the active column."""

    mode = PanelMode.TIME

    def __init__(self, context: PanelContext, settings: Optional[ShowTimeSettings] = None) -> None:
        super().__init__(context)
        self.settings = settings or time_settings_from(context.show_time)
        self.columns = self.settings.visible_columns()
        self.active_index: Optional[int] = None

    @property
    def active_column(self) -> Optional[str]:
        if self.active_index is None:
            return None
        return self.columns[self.active_index]

    def handle_key_down(self, event: KeyEvent) -> bool:
        key = event.key

        if key in (KeyCode.LEFT_ARROW, KeyCode.RIGHT_ARROW):
            offset = -1 if key is KeyCode.LEFT_ARROW else 1
            if self.active_index is None:
                self.active_index = 0
            else:
                self.active_index = (self.active_index + offset) % len(self.columns)
            logger.debug(f"Active time column: {self.active_column}")
            return True

        if key in (KeyCode.UP_ARROW, KeyCode.DOWN_ARROW):
            if self.active_index is None:
                self.active_index = 0
                return True
            self._step(-1 if key is KeyCode.UP_ARROW else 1)
            return True

        if key is KeyCode.ENTER:
            self.select(self.context.view_date)
            return True

        return False

    def _step(self, direction: int) -> None:
        column = self.active_column
        engine = self.context.engine
        view_date = self.context.view_date
        hour = engine.get(view_date, DateField.HOUR)

        if column == "meridiem":
            self.context.set_view_date(engine.set(view_date, DateField.HOUR, (hour + 12) % 24))
            return

        field, limit = _COLUMN_FIELDS[column]
        base = 0
        if column == "hour" and self.settings.use_12_hours:
            # A 12-hour column stays within the current half of the day
            limit, base = 12, hour - hour % 12
        options = list(range(0, limit, self.settings.step_for(column)))

        current = engine.get(view_date, field) - base
        index = max(i for i, option in enumerate(options) if option <= current)
        if options[index] != current and direction < 0:
            # Off-grid values move to the nearest cell in the step direction
            index += 1
        value = options[(index + direction) % len(options)] + base

        self.context.set_view_date(engine.set(view_date, field, value))

    def select(self, date: Any) -> None:
        context = self.context
        if context.picker is not PanelMode.TIME and context.mode is PanelMode.TIME:
            context.request_mode_change(PanelMode.DATE, date)
        context.commit(date)

    def handle_close(self) -> None:
        self.active_index = None
        super().handle_close()


class DatetimePanel(BasePanel):
    """A date panel and a time panel side by side; TAB moves between them."""

    mode = PanelMode.DATETIME

    SUB_PANELS = ("date", "time")

    def __init__(self, context: PanelContext) -> None:
        super().__init__(context)
        self.active_panel: Optional[str] = None
        self.date_panel = DatePanel(dataclasses.replace(context, select=self._select_date))
        self.time_panel = TimePanel(
            dataclasses.replace(context, commit=self._commit_time),
            time_settings_from(context.show_time),
        )

    def _select_date(self, date: Any, mode: Optional[PanelMode] = None) -> None:
        merged = copy_fields(self.context, self.context.view_date, date, _TIME_FIELDS)
        self.context.select(merged, self.mode)

    def _commit_time(self, date: Any) -> None:
        merged = copy_fields(self.context, self.context.view_date, date, _DATE_FIELDS)
        self.context.commit(merged)

    def _next_active(self, offset: int) -> Optional[str]:
        index = (
            self.SUB_PANELS.index(self.active_panel) if self.active_panel is not None else -1
        ) + offset
        if 0 <= index < len(self.SUB_PANELS):
            return self.SUB_PANELS[index]
        return None

    def handle_key_down(self, event: KeyEvent) -> bool:
        if event.key is KeyCode.TAB:
            self.active_panel = self._next_active(-1 if event.shift else 1)
            logger.debug(f"Active datetime sub-panel: {self.active_panel}")
            if self.active_panel is None:
                return False
            event.prevent_default()
            return True

        if self.active_panel == "time":
            return self.time_panel.handle_key_down(event)
        return self.date_panel.handle_key_down(event)

    def select(self, date: Any) -> None:
        self._select_date(date)

    def handle_close(self) -> None:
        self.active_panel = None
        self.time_panel.handle_close()
        self.date_panel.handle_close()
        super().handle_close()
