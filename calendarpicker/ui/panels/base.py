"""Panel delegate contract and the shared grid navigation behaviour."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional, Protocol, runtime_checkable

from ...engine import DateEngine, DateUnit
from ..keyboard import KeyCode, KeyEvent
from ..navigation import PanelMode, parent_mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanelContext:
    """What a panel may see and do; built by ``ModeController.panel_context``."""

    engine: DateEngine
    picker: PanelMode
    show_time: Any
    locale: Optional[str]
    get_view_date: Callable[[], Any]
    get_mode: Callable[[], PanelMode]
    set_view_date: Callable[[Any], None]
    request_mode_change: Callable[[PanelMode, Any], Any]
    select: Callable[..., None]
    commit: Callable[[Any], None]

    @property
    def view_date(self) -> Any:
        return self.get_view_date()

    @property
    def mode(self) -> PanelMode:
        return self.get_mode()


@runtime_checkable
class PanelDelegate(Protocol):
    """Behaviour every panel variant provides to the picker."""

    mode: ClassVar[PanelMode]

    def handle_key_down(self, event: KeyEvent) -> bool:
        """Handle a forwarded key; return True when consumed."""
        ...

    def handle_close(self) -> None:
        """Reset transient panel state when the popup closes or the panel is replaced."""
        ...

    def select(self, date: Any) -> None:
        """Select a cell: commit at a leaf, drill down otherwise."""
        ...

    def drill_up(self) -> None:
        """Show the next coarser granularity around the view date."""
        ...


class BasePanel:
    """Defaults shared by all panel variants."""

    mode: ClassVar[PanelMode]

    def __init__(self, context: PanelContext) -> None:
        self.context = context

    def handle_key_down(self, event: KeyEvent) -> bool:
        return False

    def handle_close(self) -> None:
        logger.debug(f"{type(self).__name__} closed")

    def select(self, date: Any) -> None:
        self.context.select(date, self.mode)

    def drill_up(self) -> None:
        target = parent_mode(self.mode)
        if target is None:
            return
        self.context.request_mode_change(target, self.context.view_date)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(view_date={self.context.view_date!r})"


@dataclass(frozen=True)
class Step:
    """A signed move of ``amount`` units."""

    unit: DateUnit
    amount: int


class GridPanel(BasePanel):
    """Cell grid driven by arrows, Ctrl+arrows, page keys and Enter."""

    horizontal: ClassVar[Step]
    ctrl_horizontal: ClassVar[Step]
    vertical: ClassVar[Step]
    page: ClassVar[Step]

    def handle_key_down(self, event: KeyEvent) -> bool:
        key = event.key

        if key in (KeyCode.LEFT_ARROW, KeyCode.RIGHT_ARROW):
            step = self.ctrl_horizontal if event.ctrl else self.horizontal
            self._move(step, -1 if key is KeyCode.LEFT_ARROW else 1)
            return True

        if key in (KeyCode.UP_ARROW, KeyCode.DOWN_ARROW):
            self._move(self.vertical, -1 if key is KeyCode.UP_ARROW else 1)
            return True

        if key in (KeyCode.PAGE_UP, KeyCode.PAGE_DOWN):
            self._move(self.page, -1 if key is KeyCode.PAGE_UP else 1)
            return True

        if key is KeyCode.ENTER:
            self.select(self.context.view_date)
            return True

        return False

    def _move(self, step: Step, direction: int) -> None:
        engine = self.context.engine
        target = engine.add(self.context.view_date, step.unit, step.amount * direction)
        self.context.set_view_date(target)
