"""Console mode: drive a picker from raw terminal keys.

Printable keys edit the input text while typing; TAB hands the keys to the
panel; ESC on a closed picker leaves the session.
"""

import logging
import sys
from typing import Any, Optional, TextIO

from ..config.settings import PickerSettings
from ..engine import DatetimeEngine
from ..picker import Picker, PickerCallbacks
from ..ui.keyboard import KeyboardHandler, KeyCode, KeyEvent
from ..ui.scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)


class ConsoleSession:
    """Connects a ``KeyboardHandler`` to a ``Picker`` and renders a status line."""

    def __init__(
        self,
        picker: Picker,
        keyboard: Optional[KeyboardHandler] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.picker = picker
        self.keyboard = keyboard or KeyboardHandler()
        self.output = output or sys.stdout
        self.keyboard.register_handler(self.handle_key)

    async def run(self) -> Optional[Any]:
        """Run until the user leaves; returns the committed value."""
        with self.picker:
            self.picker.focus()
            self.render()
            await self.keyboard.start_listening()
        self.output.write("\n")
        return self.picker.value

    def stop(self) -> None:
        self.keyboard.stop_listening()

    def handle_key(self, event: KeyEvent) -> None:
        if event.key is KeyCode.ESCAPE and not self.picker.open:
            logger.info("Leaving console session")
            self.stop()
            return

        self.picker.key_down(event)

        if self.picker.typing and not event.default_prevented:
            self._edit_text(event)

        self.render()

    def _edit_text(self, event: KeyEvent) -> None:
        text = self.picker.text
        if event.key in (KeyCode.CHARACTER, KeyCode.SPACE):
            self.picker.handle_text_input(text + event.char)
        elif event.key is KeyCode.BACKSPACE and text:
            self.picker.handle_text_input(text[:-1])

    def status_line(self) -> str:
        picker = self.picker
        view = picker.engine.format(picker.view_date, picker.format)
        state = "open" if picker.open else "closed"
        focus = "typing" if picker.typing else "navigating"
        return f"[{picker.mode.value}] {picker.text!r} view={view} {state}/{focus}"

    def render(self) -> None:
        self.output.write(f"\r\x1b[K{self.status_line()}")
        self.output.flush()


def create_picker(settings: PickerSettings, value_text: Optional[str] = None) -> Picker:
    """Build the picker for console mode.

    Raises:
        ValueError: If ``value_text`` cannot be read with the input format
    """
    engine = DatetimeEngine.from_settings(settings)

    value = None
    if value_text:
        value = engine.parse(value_text, settings.effective_format())
        if value is None:
            raise ValueError(
                f"Cannot read value {value_text!r} with format {settings.effective_format()!r}"
            )

    callbacks = PickerCallbacks(
        on_change=lambda date: logger.info(f"Value changed to {date}"),
        on_panel_change=lambda date, mode: logger.debug(f"Panel {mode.value} at {date}"),
    )
    return Picker(
        engine,
        settings,
        value=value,
        callbacks=callbacks,
        scheduler=AsyncioScheduler(),
    )


async def run_console_mode(settings: PickerSettings, args: Any) -> int:
    """Run the picker in the terminal.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        picker = create_picker(settings, getattr(args, "value", None))
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print("Type a date, TAB to navigate the panel, ENTER to pick, ESC to cancel and quit")
    session = ConsoleSession(picker)
    value = await session.run()

    if value is not None:
        print(picker.engine.format(value, picker.format))
    return 0


__all__ = ["ConsoleSession", "create_picker", "run_console_mode"]
