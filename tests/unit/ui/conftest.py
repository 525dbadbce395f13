"""Shared fixtures for UI tests."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from calendarpicker.config.settings import ShowTimeSettings
from calendarpicker.ui.interactive import InteractionController
from calendarpicker.ui.keyboard import KeyCode, KeyEvent
from calendarpicker.ui.navigation import ModeController, PanelMode
from calendarpicker.ui.pointer import GlobalPointerRegistry
from calendarpicker.ui.scheduler import DeferredQueue

INSIDE = "inside-element"
OUTSIDE = "outside-element"


@pytest.fixture
def view_date():
    return datetime(2024, 5, 15, 9, 30, 0)


@pytest.fixture
def callbacks():
    """Mocks for every ModeController notification."""
    return Mock(on_select=Mock(), on_change=Mock(), on_panel_change=Mock())


@pytest.fixture
def make_controller(engine, callbacks, view_date):
    """Factory for ModeController instances wired to the ``callbacks`` mocks."""

    def _make(**kwargs):
        kwargs.setdefault("default_picker_value", view_date)
        return ModeController(
            engine,
            on_select=callbacks.on_select,
            on_change=callbacks.on_change,
            on_panel_change=callbacks.on_panel_change,
            **kwargs,
        )

    return _make


@pytest.fixture
def controller(make_controller):
    return make_controller()


@pytest.fixture
def datetime_controller(make_controller):
    return make_controller(show_time=ShowTimeSettings(minute_step=15))


@pytest.fixture
def queue():
    return DeferredQueue()


@pytest.fixture
def pointer_registry():
    return GlobalPointerRegistry()


@pytest.fixture
def host_callbacks():
    """Mocks for the host collaborators of InteractionController."""
    host = Mock()
    host.forward_key_down.return_value = False
    host.is_click_outside.side_effect = lambda target: target != INSIDE
    host.get_active_element.return_value = OUTSIDE
    host.on_submit.return_value = True
    return host


@pytest.fixture
def make_interaction(queue, pointer_registry, host_callbacks):
    """Factory for InteractionController instances driven by ``host_callbacks``."""

    def _make(**kwargs):
        options = {
            "scheduler": queue,
            "pointer_registry": pointer_registry,
            "forward_key_down": host_callbacks.forward_key_down,
            "is_click_outside": host_callbacks.is_click_outside,
            "get_active_element": host_callbacks.get_active_element,
            "on_open_change": host_callbacks.on_open_change,
            "close_panel": host_callbacks.close_panel,
            "on_submit": host_callbacks.on_submit,
            "on_cancel": host_callbacks.on_cancel,
            "on_focus": host_callbacks.on_focus,
            "on_blur": host_callbacks.on_blur,
        }
        options.update(kwargs)
        return InteractionController(**options)

    return _make


@pytest.fixture
def interaction(make_interaction):
    return make_interaction()


@pytest.fixture
def open_interaction(interaction):
    """Controller that is already open, typing and focused."""
    interaction.handle_focus()
    interaction.trigger_open(True)
    return interaction


def key(code: KeyCode, **modifiers) -> KeyEvent:
    return KeyEvent(code, **modifiers)


@pytest.fixture
def press():
    return key


@pytest.fixture
def all_modes():
    return list(PanelMode)
