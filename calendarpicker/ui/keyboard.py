"""Keyboard event model and terminal key input handling."""

import asyncio
import logging
import sys
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)


class KeyCode(Enum):
    """Keys the picker distinguishes."""

    LEFT_ARROW = "left"
    RIGHT_ARROW = "right"
    UP_ARROW = "up"
    DOWN_ARROW = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    SPACE = "space"
    BACKSPACE = "backspace"
    SHIFT = "shift"
    CONTROL = "control"
    ALT = "alt"
    META = "meta"
    CHARACTER = "character"
    UNKNOWN = "unknown"


# Keys that never open a closed picker on their own
MODIFIER_KEYS = frozenset({KeyCode.SHIFT, KeyCode.CONTROL, KeyCode.ALT, KeyCode.META})

# Keys whose default effect is suppressed when a panel handles them
PANEL_NAVIGATION_KEYS = frozenset(
    {
        KeyCode.LEFT_ARROW,
        KeyCode.RIGHT_ARROW,
        KeyCode.UP_ARROW,
        KeyCode.DOWN_ARROW,
        KeyCode.PAGE_UP,
        KeyCode.PAGE_DOWN,
        KeyCode.ENTER,
    }
)


@dataclass
class KeyEvent:
    """A single key press with its modifier state."""

    key: KeyCode
    char: str = ""
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True

    @property
    def is_modifier(self) -> bool:
        return self.key in MODIFIER_KEYS


_SINGLE_CHAR_KEYS = {
    "\t": KeyCode.TAB,
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\x1b": KeyCode.ESCAPE,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}

_CSI_FINAL_KEYS = {
    "A": KeyCode.UP_ARROW,
    "B": KeyCode.DOWN_ARROW,
    "C": KeyCode.RIGHT_ARROW,
    "D": KeyCode.LEFT_ARROW,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}

_CSI_TILDE_KEYS = {
    "1": KeyCode.HOME,
    "4": KeyCode.END,
    "5": KeyCode.PAGE_UP,
    "6": KeyCode.PAGE_DOWN,
}

_FALLBACK_WORDS = {
    "left": KeyCode.LEFT_ARROW,
    "right": KeyCode.RIGHT_ARROW,
    "up": KeyCode.UP_ARROW,
    "down": KeyCode.DOWN_ARROW,
    "pgup": KeyCode.PAGE_UP,
    "pgdn": KeyCode.PAGE_DOWN,
    "home": KeyCode.HOME,
    "end": KeyCode.END,
    "enter": KeyCode.ENTER,
    "esc": KeyCode.ESCAPE,
    "escape": KeyCode.ESCAPE,
    "tab": KeyCode.TAB,
    "space": KeyCode.SPACE,
    "bs": KeyCode.BACKSPACE,
}


def _apply_csi_modifier(event: KeyEvent, modifier: str) -> KeyEvent:
    """Decode the xterm modifier parameter (1 + shift|alt<<1|ctrl<<2)."""
    try:
        bits = int(modifier) - 1
    except ValueError:
        return event
    event.shift = bool(bits & 1)
    event.alt = bool(bits & 2)
    event.ctrl = bool(bits & 4)
    return event


def parse_key_sequence(key_data: str) -> KeyEvent:
    """Translate raw terminal input into a ``KeyEvent``.

    Args:
        key_data: One key press as read from the terminal

    Returns:
        Parsed event; ``KeyCode.UNKNOWN`` for unrecognized sequences
    """
    if not key_data:
        return KeyEvent(KeyCode.UNKNOWN)

    if len(key_data) == 1:
        if key_data in _SINGLE_CHAR_KEYS:
            return KeyEvent(_SINGLE_CHAR_KEYS[key_data])
        if key_data == " ":
            return KeyEvent(KeyCode.SPACE, char=" ")
        if key_data.isprintable():
            return KeyEvent(KeyCode.CHARACTER, char=key_data, shift=key_data.isupper())
        return KeyEvent(KeyCode.UNKNOWN)

    if not key_data.startswith("\x1b["):
        return KeyEvent(KeyCode.UNKNOWN)

    body = key_data[2:]
    if body == "Z":
        return KeyEvent(KeyCode.TAB, shift=True)

    params, final = body[:-1], body[-1:]
    if final == "~":
        parts = params.split(";")
        key = _CSI_TILDE_KEYS.get(parts[0], KeyCode.UNKNOWN)
        event = KeyEvent(key)
        return _apply_csi_modifier(event, parts[1]) if len(parts) > 1 else event

    if final in _CSI_FINAL_KEYS:
        event = KeyEvent(_CSI_FINAL_KEYS[final])
        # e.g. "\x1b[1;5C" is Ctrl+Right
        if ";" in params:
            return _apply_csi_modifier(event, params.split(";")[1])
        return event

    return KeyEvent(KeyCode.UNKNOWN)


def parse_fallback_input(line: str) -> KeyEvent:
    """Parse a line typed in fallback mode, e.g. ``"shift+tab"`` or ``"ctrl+left"``."""
    words = line.strip().lower().split("+")
    name = words[-1]
    modifiers = set(words[:-1])

    if name in _FALLBACK_WORDS:
        event = KeyEvent(_FALLBACK_WORDS[name])
    elif len(line.strip()) == 1:
        return parse_key_sequence(line.strip())
    else:
        return KeyEvent(KeyCode.UNKNOWN)

    event.shift = "shift" in modifiers
    event.ctrl = "ctrl" in modifiers
    event.alt = "alt" in modifiers
    return event


KeyCallback = Union[Callable[[KeyEvent], None], Callable[[KeyEvent], Awaitable[None]]]


class KeyboardHandler:
    """Reads key presses from the terminal and hands them to a callback."""

    def __init__(self) -> None:
        self._running = False
        self._callback: Optional[KeyCallback] = None
        self._fallback_mode = False
        self._old_settings: Optional[list[Any]] = None

        logger.debug("Keyboard handler initialized")

    def register_handler(self, callback: KeyCallback) -> None:
        """Register the callback receiving every parsed key event."""
        self._callback = callback
        logger.debug("Registered key handler")

    def _getch(self) -> str:
        return sys.stdin.read(1)

    def _kbhit(self) -> bool:
        import select  # noqa: PLC0415

        return select.select([sys.stdin], [], [], 0) == ([sys.stdin], [], [])

    def _setup_terminal(self) -> None:
        """Set up raw, non-echoing input; fall back to line input when unavailable."""
        if not sys.stdin.isatty():
            self._setup_fallback_input()
            return

        try:
            import termios  # noqa: PLC0415

            fd = sys.stdin.fileno()
            self._old_settings = termios.tcgetattr(fd)

            new_settings = termios.tcgetattr(fd)
            new_settings[3] &= ~(termios.ICANON | termios.ECHO)
            new_settings[6][termios.VMIN] = 0
            new_settings[6][termios.VTIME] = 1

            termios.tcsetattr(fd, termios.TCSAFLUSH, new_settings)
            logger.debug("Terminal set to raw input mode")

        except (ImportError, OSError) as e:
            logger.warning(f"Could not set terminal to raw mode: {e}")
            self._setup_fallback_input()

    def _setup_fallback_input(self) -> None:
        logger.info("Using fallback input method - press Enter after each key")
        self._fallback_mode = True

    def _restore_terminal(self) -> None:
        if not self._old_settings:
            return
        try:
            import termios  # noqa: PLC0415

            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._old_settings)
            logger.debug("Terminal settings restored")
        except (ImportError, OSError) as e:
            logger.warning(f"Could not restore terminal settings: {e}")

    async def start_listening(self) -> None:
        """Read keys until ``stop_listening`` is called or input ends."""
        if self._running:
            logger.warning("Keyboard handler already running")
            return

        self._running = True
        self._setup_terminal()
        logger.info("Started keyboard input listening")

        try:
            await self._input_loop()
        finally:
            self._restore_terminal()
            self._running = False
            logger.info("Stopped keyboard input listening")

    def stop_listening(self) -> None:
        self._running = False
        logger.debug("Keyboard handler stop requested")

    async def _input_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while self._running:
            if self._fallback_mode:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                await self._dispatch(parse_fallback_input(line))
                continue

            if not self._kbhit():
                await asyncio.sleep(0.05)
                continue

            key_data = self._read_key_sequence()
            if key_data:
                await self._dispatch(parse_key_sequence(key_data))

    def _read_key_sequence(self) -> str:
        """Read one key, collecting the rest of an escape sequence if one starts."""
        key_data = self._getch()
        if key_data != "\x1b":
            return key_data

        sequence = key_data
        while len(sequence) < 8:
            next_char = self._getch()
            if not next_char:
                break
            sequence += next_char
            if next_char.isalpha() or next_char == "~":
                break
        logger.debug(f"Read escape sequence: {sequence!r}")
        return sequence

    async def _dispatch(self, event: KeyEvent) -> None:
        logger.debug(f"Key event: {event}")
        if self._callback is None:
            return
        result = self._callback(event)
        if asyncio.iscoroutine(result):
            await result

    @property
    def is_running(self) -> bool:
        return self._running
