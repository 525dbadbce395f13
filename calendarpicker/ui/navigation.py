"""Panel mode state machine: which granularity is shown and which date is browsed."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Union

from ..engine import DateEngine, is_equal

if TYPE_CHECKING:
    from .panels.base import PanelContext

logger = logging.getLogger(__name__)


class PanelMode(Enum):
    """Granularity displayed by the picker."""

    DECADE = "decade"
    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    QUARTER = "quarter"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class NavigationDirection(Enum):
    """Direction of a drill transition."""

    DOWN = "down"
    UP = "up"


# Granularities a picker can be configured to end on
PICKER_MODES = frozenset(
    {
        PanelMode.DATE,
        PanelMode.WEEK,
        PanelMode.MONTH,
        PanelMode.QUARTER,
        PanelMode.YEAR,
        PanelMode.TIME,
    }
)

_ALWAYS_LEAF = frozenset({PanelMode.WEEK, PanelMode.DATE, PanelMode.TIME, PanelMode.DATETIME})

_PARENT_MODES = {
    PanelMode.DATE: PanelMode.MONTH,
    PanelMode.WEEK: PanelMode.MONTH,
    PanelMode.DATETIME: PanelMode.MONTH,
    PanelMode.MONTH: PanelMode.YEAR,
    PanelMode.QUARTER: PanelMode.YEAR,
    PanelMode.YEAR: PanelMode.DECADE,
}

ModeLike = Union[PanelMode, str]


@dataclass(frozen=True)
class ViewState:
    """Snapshot of the mode controller state."""

    mode: PanelMode
    view_date: Any
    committed_value: Optional[Any]


def coerce_mode(mode: ModeLike, fallback: PanelMode = PanelMode.DATE) -> PanelMode:
    """Turn a mode or mode name into a ``PanelMode``, falling back on unknown names."""
    if isinstance(mode, PanelMode):
        return mode
    try:
        return PanelMode(str(mode).lower())
    except ValueError:
        logger.warning(f"Unknown panel mode {mode!r}, using {fallback.value}")
        return fallback


def resolve_effective_mode(
    requested: ModeLike, show_time: Any = None, fallback: PanelMode = PanelMode.DATE
) -> PanelMode:
    """Promote ``date`` to ``datetime`` when a time sub-configuration is enabled.

    Args:
        requested: Requested mode; unknown names are normalized to ``fallback``
        show_time: ``False``/``None`` or any truthy time configuration
        fallback: Mode used for unknown names

    Returns:
        The mode the picker should actually display
    """
    mode = coerce_mode(requested, fallback)
    if mode is PanelMode.DATE and show_time:
        return PanelMode.DATETIME
    return mode


def next_mode(mode: PanelMode, picker: PanelMode) -> Optional[PanelMode]:
    """Mode reached when selecting a cell in ``mode``; ``None`` for a leaf."""
    if mode is picker or mode in _ALWAYS_LEAF:
        return None
    if mode is PanelMode.DECADE:
        return PanelMode.YEAR
    if mode is PanelMode.YEAR:
        return PanelMode.QUARTER if picker is PanelMode.QUARTER else PanelMode.MONTH
    if mode is PanelMode.MONTH:
        return PanelMode.WEEK if picker is PanelMode.WEEK else PanelMode.DATE
    # QUARTER outside a quarter picker
    return PanelMode.MONTH


def parent_mode(mode: PanelMode) -> Optional[PanelMode]:
    """Mode reached when drilling up from ``mode``; ``None`` at the top."""
    return _PARENT_MODES.get(mode)


class ModeController:
    """Owns the panel mode, the browsed view date and the committed value."""

    def __init__(
        self,
        engine: DateEngine,
        *,
        value: Optional[Any] = None,
        default_picker_value: Optional[Any] = None,
        mode: Optional[ModeLike] = None,
        picker: ModeLike = PanelMode.DATE,
        show_time: Any = None,
        locale: Optional[str] = None,
        on_select: Optional[Callable[[Any], None]] = None,
        on_change: Optional[Callable[[Any], None]] = None,
        on_panel_change: Optional[Callable[[Any, PanelMode], None]] = None,
    ) -> None:
        """Initialize the mode controller.

        Args:
            engine: Date engine used for every date operation
            value: Committed value, if any
            default_picker_value: Initial view date override
            mode: Externally pinned mode, or None to let the controller drive it
            picker: Terminal granularity of this picker
            show_time: Time sub-configuration; truthy values promote date to datetime
            locale: Locale passed to locale-dependent engine operations
            on_select: Called with every committed date
            on_change: Called when a commit actually changes the value
            on_panel_change: Called with (view_date, mode) on every mode request
        """
        self.engine = engine
        self.show_time = show_time
        self.locale = locale
        self.picker = coerce_mode(picker)
        if self.picker not in PICKER_MODES:
            logger.warning(f"{self.picker.value!r} cannot terminate a picker, using date")
            self.picker = PanelMode.DATE

        self.on_select = on_select
        self.on_change = on_change
        self.on_panel_change = on_panel_change

        self._value = value
        if default_picker_value is not None:
            self._view_date = default_picker_value
        elif value is not None:
            self._view_date = value
        else:
            self._view_date = engine.now()
        self._inner_mode = self.resolve(self.picker)
        self._pinned_mode: Optional[PanelMode] = None
        if mode is not None:
            self._pinned_mode = self.resolve(mode)
        self._mode_listeners: List[Callable[[PanelMode, PanelMode], None]] = []

        logger.debug(f"Mode controller initialized: mode={self.mode.value}, view={self._view_date}")

    def resolve(self, mode: ModeLike) -> PanelMode:
        """``resolve_effective_mode`` bound to this controller's configuration."""
        return resolve_effective_mode(mode, self.show_time, fallback=self.picker)

    @property
    def mode(self) -> PanelMode:
        """Effective mode: the pinned one when controlled, the inner one otherwise."""
        return self._pinned_mode or self._inner_mode

    @property
    def view_date(self) -> Any:
        return self._view_date

    @property
    def value(self) -> Optional[Any]:
        return self._value

    @property
    def is_mode_controlled(self) -> bool:
        return self._pinned_mode is not None

    @property
    def state(self) -> ViewState:
        return ViewState(mode=self.mode, view_date=self._view_date, committed_value=self._value)

    def set_view_date(self, date: Any) -> None:
        """Move the browsing cursor without committing anything."""
        self._view_date = date
        logger.debug(f"View date set to {date}")

    def set_value(self, value: Optional[Any]) -> None:
        """Apply a host-controlled value; a present value also moves the view date."""
        self._value = value
        if value is not None:
            self._view_date = value
        logger.debug(f"Controlled value set to {value}")

    def set_mode(self, mode: Optional[ModeLike]) -> None:
        """Pin the mode externally, or release it with ``None``."""
        old_mode = self.mode
        self._pinned_mode = self.resolve(mode) if mode is not None else None
        self._notify_mode_change(old_mode)

    def change_mode(self, target: ModeLike, date: Any) -> PanelMode:
        """Handle a drill or explicit mode-change request.

        The view date always follows ``date``; the inner mode only matters for
        display when the mode is not pinned, but the panel change notification
        fires either way.

        Returns:
            The resolved target mode
        """
        old_mode = self.mode
        self._view_date = date
        resolved = self.resolve(target)
        self._inner_mode = resolved

        logger.debug(f"Panel change: {old_mode.value} -> {resolved.value} at {date}")

        if self.on_panel_change:
            self.on_panel_change(self._view_date, resolved)

        self._notify_mode_change(old_mode)
        return resolved

    def drill_down(self, target: ModeLike, date: Any) -> PanelMode:
        return self._drill(NavigationDirection.DOWN, target, date)

    def drill_up(self, target: ModeLike, date: Any) -> PanelMode:
        return self._drill(NavigationDirection.UP, target, date)

    def _drill(self, direction: NavigationDirection, target: ModeLike, date: Any) -> PanelMode:
        logger.debug(f"Drill {direction.value} to {target} from {self.mode.value}")
        return self.change_mode(target, date)

    def is_leaf(self, mode: PanelMode) -> bool:
        """Whether selecting in ``mode`` commits instead of drilling down.

        A pinned mode commits, except the decade panel, which always drills
        into years.
        """
        if mode is PanelMode.DECADE:
            return False
        return self.is_mode_controlled or next_mode(mode, self.picker) is None

    def select(self, date: Any, mode: Optional[PanelMode] = None) -> None:
        """Cell selection: commit at a leaf, drill one level down otherwise."""
        mode = mode or self.mode
        if self.is_leaf(mode):
            self.commit(date)
        else:
            self.drill_down(next_mode(mode, self.picker), date)

    def commit(self, date: Any) -> None:
        """Finalize ``date`` as the selected value.

        ``on_select`` fires on every call; ``on_change`` only when ``date`` differs
        from the committed value.
        """
        self._view_date = date
        changed = not is_equal(self.engine, date, self._value)
        self._value = date

        logger.debug(f"Commit {date} (changed={changed})")

        if self.on_select:
            self.on_select(date)

        if changed and self.on_change:
            self.on_change(date)

    def add_mode_listener(self, callback: Callable[[PanelMode, PanelMode], None]) -> None:
        """Register a callback receiving (old_mode, new_mode) on effective mode changes."""
        self._mode_listeners.append(callback)

    def remove_mode_listener(self, callback: Callable[[PanelMode, PanelMode], None]) -> None:
        if callback in self._mode_listeners:
            self._mode_listeners.remove(callback)

    def _notify_mode_change(self, old_mode: PanelMode) -> None:
        new_mode = self.mode
        if new_mode is old_mode:
            return
        for callback in list(self._mode_listeners):
            try:
                callback(old_mode, new_mode)
            except Exception:
                logger.exception("Error in mode change listener")

    def panel_context(self) -> "PanelContext":
        """Build the contract handed to panel delegates."""
        from .panels.base import PanelContext  # noqa: PLC0415

        return PanelContext(
            engine=self.engine,
            picker=self.picker,
            show_time=self.show_time,
            locale=self.locale,
            get_view_date=lambda: self._view_date,
            get_mode=lambda: self.mode,
            set_view_date=self.set_view_date,
            request_mode_change=self.change_mode,
            select=self.select,
            commit=self.commit,
        )

    def __repr__(self) -> str:
        return (
            f"ModeController(mode={self.mode.value!r}, view_date={self._view_date!r}, "
            f"value={self._value!r}, picker={self.picker.value!r})"
        )
