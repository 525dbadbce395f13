"""Mode-keyed panel registry and the binding of the active panel to a mode controller."""

from typing import Callable, Optional

from ...utils.logging import get_logger
from ..keyboard import PANEL_NAVIGATION_KEYS, KeyEvent
from ..navigation import ModeController, PanelMode
from .base import PanelContext, PanelDelegate
from .calendar import DatePanel, DecadePanel, MonthPanel, QuarterPanel, WeekPanel, YearPanel
from .time import DatetimePanel, TimePanel

logger = get_logger("ui.panels.registry")

PanelFactory = Callable[[PanelContext], PanelDelegate]


class PanelRegistry:
    """Maps each mode to the factory building its panel delegate."""

    def __init__(self) -> None:
        self._factories: dict[PanelMode, PanelFactory] = {}

    @classmethod
    def default(cls) -> "PanelRegistry":
        """Registry holding the built-in variant for every mode."""
        registry = cls()
        for panel_class in (
            DecadePanel,
            YearPanel,
            QuarterPanel,
            MonthPanel,
            WeekPanel,
            DatePanel,
            TimePanel,
            DatetimePanel,
        ):
            registry.register(panel_class.mode, panel_class)
        return registry

    def register(self, mode: PanelMode, factory: PanelFactory) -> None:
        if mode in self._factories:
            logger.debug(f"Replacing panel factory for {mode.value}")
        self._factories[mode] = factory

    def unregister(self, mode: PanelMode) -> None:
        self._factories.pop(mode, None)

    def get(self, mode: PanelMode) -> Optional[PanelFactory]:
        return self._factories.get(mode)

    def create(self, mode: PanelMode, context: PanelContext) -> Optional[PanelDelegate]:
        """Instantiate the panel for ``mode``; None when no variant is registered."""
        factory = self._factories.get(mode)
        if factory is None:
            logger.warning(f"No panel registered for mode {mode.value}")
            return None
        return factory(context)

    @property
    def modes(self) -> list[PanelMode]:
        return list(self._factories)

    def __contains__(self, mode: object) -> bool:
        return mode in self._factories


class PanelHost:
    """Keeps exactly one panel delegate bound to the controller's current mode.

    A new delegate is created whenever the effective mode changes; the
    superseded one receives ``handle_close`` first.
    """

    def __init__(self, controller: ModeController, registry: Optional[PanelRegistry] = None):
        self.controller = controller
        self.registry = registry or PanelRegistry.default()
        self._panel: Optional[PanelDelegate] = None

        self.controller.add_mode_listener(self._on_mode_change)
        self._bind(controller.mode)

    @property
    def panel(self) -> Optional[PanelDelegate]:
        return self._panel

    def _bind(self, mode: PanelMode) -> None:
        self._panel = self.registry.create(mode, self.controller.panel_context())
        name = type(self._panel).__name__
        logger.verbose(f"Bound panel {name} for {mode.value}")  # type: ignore[attr-defined]

    def _on_mode_change(self, old_mode: PanelMode, new_mode: PanelMode) -> None:
        if self._panel is not None:
            self._panel.handle_close()
        self._bind(new_mode)

    def forward_key_down(self, event: KeyEvent) -> bool:
        """Hand a key to the active panel; False when none is bound."""
        if self._panel is None:
            logger.debug(f"No panel bound, ignoring {event.key.value}")
            return False

        if event.key in PANEL_NAVIGATION_KEYS:
            event.prevent_default()
        return self._panel.handle_key_down(event)

    def close(self) -> None:
        if self._panel is not None:
            self._panel.handle_close()

    def detach(self) -> None:
        """Stop following the controller and close the bound panel."""
        self.controller.remove_mode_listener(self._on_mode_change)
        self.close()
        self._panel = None
