"""Keyboard, focus and pointer state machine of the picker input."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .keyboard import KeyCode, KeyEvent
from .pointer import GlobalPointerRegistry
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass
class InteractionState:
    """Snapshot of the interaction flags."""

    open: bool = False
    typing: bool = False
    focused: bool = False
    prevent_blur: bool = False


class InteractionController:
    """Decides when the picker opens and closes and where keystrokes go.

    The controller knows nothing about panel modes; it only forwards keys
    through ``forward_key_down`` and asks the host to open, close, submit or
    cancel. Open state is owned here unless the host controls it, in which case
    ``trigger_open`` only notifies and the host calls ``set_open``.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        forward_key_down: Optional[Callable[[KeyEvent], bool]] = None,
        is_click_outside: Optional[Callable[[Any], bool]] = None,
        get_active_element: Optional[Callable[[], Any]] = None,
        pointer_registry: Optional[GlobalPointerRegistry] = None,
        open: Optional[bool] = None,
        blur_to_cancel: bool = False,
        on_open_change: Optional[Callable[[bool], None]] = None,
        close_panel: Optional[Callable[[], None]] = None,
        on_submit: Optional[Callable[[], Any]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        on_focus: Optional[Callable[[], None]] = None,
        on_blur: Optional[Callable[[], None]] = None,
    ) -> None:
        """Initialize the interaction controller.

        Args:
            scheduler: Runs the deferred focus checks on the next tick
            forward_key_down: Hands a key to the active panel, returns whether consumed
            is_click_outside: Whether a target lies outside the picker
            get_active_element: Current focus target, read on blur
            pointer_registry: Shared pointer-down dispatcher used by ``mount``
            open: Host-controlled open state, or None to own it
            blur_to_cancel: Cancel instead of closing when focus leaves
            on_open_change: Called with the requested open state
            close_panel: Called whenever the picker closes
            on_submit: Called on ENTER while open; ``False`` rejects
            on_cancel: Called on ESC and on blur-to-cancel
            on_focus: Called when the input gains focus
            on_blur: Called when focus leaves the picker
        """
        self.scheduler = scheduler
        self.pointer_registry = pointer_registry
        self.blur_to_cancel = blur_to_cancel

        self._forward_key_down = forward_key_down
        self._is_click_outside = is_click_outside
        self._get_active_element = get_active_element
        self._on_open_change = on_open_change
        self._close_panel = close_panel
        self._on_submit = on_submit
        self._on_cancel = on_cancel
        self._on_focus = on_focus
        self._on_blur = on_blur

        self._open_controlled = open is not None
        self.state = InteractionState(open=bool(open))
        self._release_pointer: Optional[Callable[[], None]] = None

    @property
    def open(self) -> bool:
        return self.state.open

    @property
    def typing(self) -> bool:
        return self.state.typing

    @property
    def focused(self) -> bool:
        return self.state.focused

    @property
    def prevent_blur(self) -> bool:
        return self.state.prevent_blur

    @property
    def is_mounted(self) -> bool:
        return self._release_pointer is not None

    # Host-facing collaborators

    def forward_key_down(self, event: KeyEvent) -> bool:
        if self._forward_key_down is None:
            return False
        return bool(self._forward_key_down(event))

    def is_click_outside(self, target: Any) -> bool:
        if self._is_click_outside is None:
            return True
        return bool(self._is_click_outside(target))

    def _active_element(self) -> Any:
        if self._get_active_element is None:
            return None
        return self._get_active_element()

    def _submit(self) -> Any:
        if self._on_submit is None:
            return None
        return self._on_submit()

    def _cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()

    # Open state

    def trigger_open(self, new_open: bool) -> None:
        """Request an open state change.

        ``on_open_change`` fires only on an actual change, or on every request
        when the host controls the open state.
        """
        changed = new_open != self.state.open
        if not changed and not self._open_controlled:
            return

        logger.debug(f"Open requested: {new_open} (controlled={self._open_controlled})")

        if not self._open_controlled:
            self.state.open = new_open
            if not new_open and self._close_panel is not None:
                self._close_panel()

        if self._on_open_change is not None:
            self._on_open_change(new_open)

    def set_open(self, value: bool) -> None:
        """Apply a host-controlled open state."""
        if self.state.open and not value and self._close_panel is not None:
            self._close_panel()
        self.state.open = value

    def set_typing(self, value: bool) -> None:
        self.state.typing = value

    # Input events

    def handle_mouse_down(self) -> None:
        """Pointer-down on the input surface."""
        self.state.typing = True
        self.trigger_open(True)

    def handle_key_down(self, event: KeyEvent) -> None:
        key = event.key

        if key is KeyCode.ENTER:
            if not self.state.open:
                self.trigger_open(True)
            elif self._submit() is not False:
                self.state.typing = True
            else:
                logger.debug("Submit rejected, staying in navigation")
            event.prevent_default()
            return

        if key is KeyCode.TAB:
            if self.state.typing and self.state.open and not event.shift:
                self.state.typing = False
                event.prevent_default()
            elif not self.state.typing and self.state.open:
                if not self.forward_key_down(event) and event.shift:
                    self.state.typing = True
                    event.prevent_default()
            return

        if key is KeyCode.ESCAPE:
            self.state.typing = True
            self._cancel()
            return

        if not self.state.open and not event.is_modifier:
            self.trigger_open(True)
        elif not self.state.typing:
            self.forward_key_down(event)

    def handle_focus(self) -> None:
        self.state.typing = True
        self.state.focused = True
        logger.debug("Input focused")
        if self._on_focus is not None:
            self._on_focus()

    def handle_blur(self) -> None:
        if self.state.prevent_blur or not self.is_click_outside(self._active_element()):
            self.state.prevent_blur = False
            logger.debug("Blur ignored, focus stays inside the picker")
            return

        if self.blur_to_cancel:
            self.scheduler.call_soon(self._cancel_if_outside)
        else:
            self.trigger_open(False)

        self.state.focused = False
        logger.debug("Input blurred")
        if self._on_blur is not None:
            self._on_blur()

    def _cancel_if_outside(self) -> None:
        if self.is_click_outside(self._active_element()):
            logger.debug("Focus settled outside the picker, cancelling")
            self._cancel()

    def handle_global_mouse_down(self, target: Any) -> None:
        """Pointer-down anywhere, as delivered by the shared pointer registry."""
        if not self.state.open:
            return

        if not self.is_click_outside(target):
            self.state.prevent_blur = True
            self.scheduler.call_soon(self._clear_prevent_blur)
        elif not self.state.focused:
            self.trigger_open(False)

    def _clear_prevent_blur(self) -> None:
        self.state.prevent_blur = False

    # Lifecycle

    def mount(self) -> None:
        """Subscribe to the shared pointer-down dispatcher."""
        if self.pointer_registry is None or self._release_pointer is not None:
            return
        self._release_pointer = self.pointer_registry.acquire(self.handle_global_mouse_down)

    def unmount(self) -> None:
        if self._release_pointer is None:
            return
        self._release_pointer()
        self._release_pointer = None
