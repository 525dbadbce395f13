"""calendarpicker - date picking state machines over a pluggable date engine."""

__version__ = "1.0.0"

from .config import PickerSettings, ShowTimeSettings, get_settings
from .engine import DateEngine, DateField, DateUnit, DatetimeEngine, is_equal
from .picker import Picker, PickerCallbacks, PickerHandle
from .ui import InteractionController, ModeController, PanelMode, resolve_effective_mode

__all__ = [
    "DateEngine",
    "DateField",
    "DateUnit",
    "DatetimeEngine",
    "InteractionController",
    "ModeController",
    "PanelMode",
    "Picker",
    "PickerCallbacks",
    "PickerHandle",
    "PickerSettings",
    "ShowTimeSettings",
    "get_settings",
    "is_equal",
    "resolve_effective_mode",
]
