"""
Unit tests for keyboard input handling.

This module tests the KeyEvent model, terminal sequence parsing, fallback
line parsing and the asynchronous KeyboardHandler loop.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from calendarpicker.ui.keyboard import (
    KeyboardHandler,
    KeyCode,
    KeyEvent,
    parse_fallback_input,
    parse_key_sequence,
)


class TestKeyEvent:
    """Test the event model."""

    def test_prevent_default(self):
        event = KeyEvent(KeyCode.ENTER)
        assert event.default_prevented is False
        event.prevent_default()
        assert event.default_prevented is True

    def test_is_modifier(self):
        assert KeyEvent(KeyCode.SHIFT).is_modifier is True
        assert KeyEvent(KeyCode.TAB).is_modifier is False


class TestParseKeySequence:
    """Test translation of raw terminal input."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("\t", KeyCode.TAB),
            ("\r", KeyCode.ENTER),
            ("\n", KeyCode.ENTER),
            ("\x1b", KeyCode.ESCAPE),
            ("\x7f", KeyCode.BACKSPACE),
            (" ", KeyCode.SPACE),
            ("\x1b[A", KeyCode.UP_ARROW),
            ("\x1b[B", KeyCode.DOWN_ARROW),
            ("\x1b[C", KeyCode.RIGHT_ARROW),
            ("\x1b[D", KeyCode.LEFT_ARROW),
            ("\x1b[5~", KeyCode.PAGE_UP),
            ("\x1b[6~", KeyCode.PAGE_DOWN),
            ("\x1b[H", KeyCode.HOME),
            ("\x1b[F", KeyCode.END),
            ("\x1b[99~", KeyCode.UNKNOWN),
            ("", KeyCode.UNKNOWN),
            ("\x01", KeyCode.UNKNOWN),
        ],
    )
    def test_keys(self, raw, expected):
        assert parse_key_sequence(raw).key is expected

    def test_printable_character(self):
        event = parse_key_sequence("Q")
        assert event.key is KeyCode.CHARACTER
        assert event.char == "Q"
        assert event.shift is True

    def test_shift_tab(self):
        event = parse_key_sequence("\x1b[Z")
        assert event.key is KeyCode.TAB
        assert event.shift is True

    def test_ctrl_arrow(self):
        event = parse_key_sequence("\x1b[1;5C")
        assert event.key is KeyCode.RIGHT_ARROW
        assert event.ctrl is True
        assert event.shift is False

    def test_modified_page_key(self):
        event = parse_key_sequence("\x1b[5;2~")
        assert event.key is KeyCode.PAGE_UP
        assert event.shift is True


class TestParseFallbackInput:
    """Test line based fallback parsing."""

    def test_named_key(self):
        assert parse_fallback_input("left\n").key is KeyCode.LEFT_ARROW

    def test_modifiers(self):
        event = parse_fallback_input("shift+tab")
        assert event.key is KeyCode.TAB
        assert event.shift is True

        event = parse_fallback_input("ctrl+right")
        assert event.ctrl is True

    def test_single_character(self):
        event = parse_fallback_input("7\n")
        assert event.key is KeyCode.CHARACTER
        assert event.char == "7"

    def test_unknown_word(self):
        assert parse_fallback_input("launch").key is KeyCode.UNKNOWN


class TestKeyboardHandler:
    """Test the handler lifecycle and dispatch."""

    def test_init_default_state(self):
        handler = KeyboardHandler()
        assert handler.is_running is False
        assert handler._callback is None

    @pytest.mark.asyncio
    async def test_dispatch_calls_sync_callback(self):
        handler = KeyboardHandler()
        callback = Mock()
        handler.register_handler(callback)
        event = KeyEvent(KeyCode.ENTER)

        await handler._dispatch(event)

        callback.assert_called_once_with(event)

    @pytest.mark.asyncio
    async def test_dispatch_awaits_async_callback(self):
        handler = KeyboardHandler()
        callback = AsyncMock()
        handler.register_handler(callback)

        await handler._dispatch(KeyEvent(KeyCode.ENTER))

        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatch_without_callback(self):
        await KeyboardHandler()._dispatch(KeyEvent(KeyCode.ENTER))

    def test_read_key_sequence_collects_escape_sequence(self):
        handler = KeyboardHandler()
        with patch.object(handler, "_getch", side_effect=["\x1b", "[", "1", ";", "5", "C"]):
            assert handler._read_key_sequence() == "\x1b[1;5C"

    def test_read_key_sequence_single_key(self):
        handler = KeyboardHandler()
        with patch.object(handler, "_getch", return_value="a"):
            assert handler._read_key_sequence() == "a"

    @pytest.mark.asyncio
    async def test_fallback_loop_dispatches_lines_until_eof(self):
        handler = KeyboardHandler()
        callback = Mock()
        handler.register_handler(callback)

        with patch("calendarpicker.ui.keyboard.sys.stdin") as mock_stdin:
            mock_stdin.isatty.return_value = False
            mock_stdin.readline.side_effect = ["tab\n", "left\n", ""]
            await handler.start_listening()

        keys = [call.args[0].key for call in callback.call_args_list]
        assert keys == [KeyCode.TAB, KeyCode.LEFT_ARROW]
        assert handler.is_running is False

    @pytest.mark.asyncio
    async def test_start_while_running_is_ignored(self, caplog):
        handler = KeyboardHandler()
        handler._running = True

        await handler.start_listening()

        assert "already running" in caplog.text

    def test_stop_listening(self):
        handler = KeyboardHandler()
        handler._running = True
        handler.stop_listening()
        assert handler.is_running is False
