"""Interactive picker components: mode state machine, panels and input handling."""

from .interactive import InteractionController, InteractionState
from .keyboard import KeyboardHandler, KeyCode, KeyEvent
from .navigation import ModeController, PanelMode, ViewState, resolve_effective_mode
from .panels import PanelHost, PanelRegistry
from .pointer import GlobalPointerRegistry
from .scheduler import AsyncioScheduler, DeferredQueue, Scheduler

__all__ = [
    "AsyncioScheduler",
    "DeferredQueue",
    "GlobalPointerRegistry",
    "InteractionController",
    "InteractionState",
    "KeyCode",
    "KeyEvent",
    "KeyboardHandler",
    "ModeController",
    "PanelHost",
    "PanelMode",
    "PanelRegistry",
    "Scheduler",
    "ViewState",
    "resolve_effective_mode",
]
