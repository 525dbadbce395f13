"""Picker composition root: wires the date engine, mode controller, panels and input machine."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config.settings import PickerSettings, get_settings
from .engine import DateEngine, DatetimeEngine
from .ui.interactive import InteractionController
from .ui.keyboard import KeyEvent
from .ui.navigation import ModeController, ModeLike, PanelMode
from .ui.panels import PanelHost, PanelRegistry
from .ui.pointer import GlobalPointerRegistry, default_pointer_registry
from .ui.scheduler import DeferredQueue, Scheduler

logger = logging.getLogger(__name__)


@dataclass
class PickerCallbacks:
    """Optional host notifications; any of them may be left out."""

    on_select: Optional[Callable[[Any], None]] = None
    on_change: Optional[Callable[[Any], None]] = None
    on_panel_change: Optional[Callable[[Any, PanelMode], None]] = None
    on_open_change: Optional[Callable[[bool], None]] = None
    on_focus: Optional[Callable[[], None]] = None
    on_blur: Optional[Callable[[], None]] = None
    on_submit: Optional[Callable[[], Any]] = None
    on_cancel: Optional[Callable[[], None]] = None


@dataclass(frozen=True)
class PickerHandle:
    """Imperative handle given to the host, e.g. a parent popup trigger."""

    focus: Callable[[], None]
    close: Callable[[], None]
    tab_index: int = 0


@dataclass(frozen=True, eq=False)
class Element:
    """Opaque token standing for one UI element of a picker."""

    name: str


class Picker:
    """A single picker instance as seen by the host application."""

    def __init__(
        self,
        engine: Optional[DateEngine] = None,
        settings: Optional[PickerSettings] = None,
        *,
        value: Optional[Any] = None,
        default_picker_value: Optional[Any] = None,
        mode: Optional[ModeLike] = None,
        open: Optional[bool] = None,
        callbacks: Optional[PickerCallbacks] = None,
        scheduler: Optional[Scheduler] = None,
        pointer_registry: Optional[GlobalPointerRegistry] = None,
        panel_registry: Optional[PanelRegistry] = None,
        tab_index: Optional[int] = None,
        is_click_outside: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        """Initialize the picker.

        Args:
            engine: Date engine; built from ``settings`` when omitted
            settings: Picker settings; the global settings when omitted
            value: Committed value, if any
            default_picker_value: Initial view date override
            mode: Externally pinned mode (falls back to ``settings.mode``)
            open: Host-controlled open state, or None to let the picker own it
            callbacks: Host notifications
            scheduler: Next-tick scheduler; a ``DeferredQueue`` when omitted
            pointer_registry: Pointer-down dispatcher used while mounted; the process-wide
                default one when omitted
            panel_registry: Panel variants by mode; the built-in ones when omitted
            tab_index: Tab order of the input surface (falls back to ``settings.tab_index``)
            is_click_outside: Inside/outside predicate replacing the default one
        """
        self.settings = settings or get_settings()
        self.engine = engine or DatetimeEngine.from_settings(self.settings)
        self.callbacks = callbacks or PickerCallbacks()
        self.scheduler = scheduler or DeferredQueue()
        self.pointer_registry = (
            pointer_registry if pointer_registry is not None else default_pointer_registry()
        )
        self.tab_index = tab_index if tab_index is not None else self.settings.tab_index
        self.format = self.settings.effective_format()

        self.input_element = Element("input")
        self.panel_element = Element("panel")
        self._inside_elements: list[Any] = [self.input_element, self.panel_element]
        self.active_element: Any = None

        self.controller = ModeController(
            self.engine,
            value=value,
            default_picker_value=default_picker_value,
            mode=mode if mode is not None else self.settings.mode,
            picker=self.settings.picker,
            show_time=self.settings.time_settings,
            locale=self.settings.locale,
            on_select=self._on_select,
            on_change=self.callbacks.on_change,
            on_panel_change=self.callbacks.on_panel_change,
        )
        self.panels = PanelHost(self.controller, panel_registry)
        self.interaction = InteractionController(
            scheduler=self.scheduler,
            forward_key_down=self.panels.forward_key_down,
            is_click_outside=is_click_outside or self._is_click_outside,
            get_active_element=lambda: self.active_element,
            pointer_registry=self.pointer_registry,
            open=open,
            blur_to_cancel=self.settings.blur_to_cancel,
            on_open_change=self.callbacks.on_open_change,
            close_panel=self.panels.close,
            on_submit=self._submit,
            on_cancel=self._cancel,
            on_focus=self.callbacks.on_focus,
            on_blur=self.callbacks.on_blur,
        )

        self.text = self._format_value(value)
        logger.debug(f"Picker created: picker={self.settings.picker}, format={self.format!r}")

    # State

    @property
    def value(self) -> Optional[Any]:
        return self.controller.value

    @property
    def view_date(self) -> Any:
        return self.controller.view_date

    @property
    def mode(self) -> PanelMode:
        return self.controller.mode

    @property
    def open(self) -> bool:
        return self.interaction.open

    @property
    def typing(self) -> bool:
        return self.interaction.typing

    @property
    def handle(self) -> PickerHandle:
        return PickerHandle(focus=self.focus, close=self.close, tab_index=self.tab_index)

    def set_value(self, value: Optional[Any]) -> None:
        """Apply a host-controlled value and refresh the input text."""
        self.controller.set_value(value)
        self.text = self._format_value(value)

    def set_mode(self, mode: Optional[ModeLike]) -> None:
        self.controller.set_mode(mode)

    def set_open(self, value: bool) -> None:
        self.interaction.set_open(value)

    def trigger_open(self, new_open: bool) -> None:
        self.interaction.trigger_open(new_open)

    # Text

    def _format_value(self, value: Optional[Any]) -> str:
        if value is None:
            return ""
        return self.engine.format(value, self.format)

    def handle_text_input(self, text: str) -> Optional[Any]:
        """Replace the input text; a readable date also moves the view date.

        Returns:
            The parsed date, or None when the text cannot be read
        """
        self.text = text
        parsed = self.engine.parse(text, self.format)
        if parsed is None:
            logger.debug(f"Input text {text!r} is not a date yet")
            return None
        self.controller.set_view_date(parsed)
        return parsed

    # Inside/outside

    def register_element(self, element: Any) -> None:
        """Treat ``element`` as part of this picker for focus and pointer checks."""
        if element not in self._inside_elements:
            self._inside_elements.append(element)

    def unregister_element(self, element: Any) -> None:
        if element in self._inside_elements and element not in (
            self.input_element,
            self.panel_element,
        ):
            self._inside_elements.remove(element)

    def _is_click_outside(self, target: Any) -> bool:
        return target not in self._inside_elements

    # Controller callbacks

    def _on_select(self, date: Any) -> None:
        self.text = self._format_value(date)
        if self.callbacks.on_select is not None:
            self.callbacks.on_select(date)

    def _submit(self) -> Any:
        if self.callbacks.on_submit is not None:
            return self.callbacks.on_submit()

        if self.interaction.typing:
            date = self.engine.parse(self.text, self.format)
            if date is None:
                logger.debug(f"Rejecting submit of unreadable text {self.text!r}")
                return False
        else:
            date = self.controller.view_date
            if not self.controller.is_leaf(self.controller.mode):
                # Drilling down is not a submission; keep navigating
                self.controller.select(date)
                return False

        self.controller.commit(date)
        self.interaction.trigger_open(False)
        return True

    def _cancel(self) -> None:
        value = self.controller.value
        self.text = self._format_value(value)
        if value is not None:
            self.controller.set_view_date(value)
        self.interaction.trigger_open(False)
        if self.callbacks.on_cancel is not None:
            self.callbacks.on_cancel()

    # Input events

    def key_down(self, event: KeyEvent) -> None:
        self.interaction.handle_key_down(event)

    def pointer_down(self, target: Any) -> None:
        """Pointer-down on ``target``; the input element opens the picker."""
        if target is self.input_element:
            self.interaction.handle_mouse_down()
        if self.interaction.is_mounted:
            self.pointer_registry.dispatch(target)
        else:
            self.interaction.handle_global_mouse_down(target)

    def focus(self) -> None:
        """Move input focus into the picker."""
        self.active_element = self.input_element
        if not self.interaction.focused:
            self.interaction.handle_focus()

    def blur(self, new_active_element: Any = None) -> None:
        """Focus left the input for ``new_active_element``."""
        self.active_element = new_active_element
        self.interaction.handle_blur()

    def close(self) -> None:
        self.interaction.trigger_open(False)

    def run_pending(self) -> int:
        """Drain deferred callbacks when the picker owns a ``DeferredQueue``."""
        if isinstance(self.scheduler, DeferredQueue):
            return self.scheduler.run_pending()
        return 0

    # Lifecycle

    def mount(self) -> None:
        self.interaction.mount()
        logger.debug("Picker mounted")

    def unmount(self) -> None:
        self.interaction.unmount()
        self.panels.close()
        logger.debug("Picker unmounted")

    def __enter__(self) -> "Picker":
        self.mount()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.unmount()

    def __repr__(self) -> str:
        return (
            f"Picker(mode={self.mode.value!r}, value={self.value!r}, open={self.open}, "
            f"typing={self.typing})"
        )
