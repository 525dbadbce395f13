"""Shared test configuration: isolated settings and a deterministic date engine."""

import logging
import os
from datetime import datetime
from unittest.mock import patch

import pytest

from calendarpicker.config.settings import ENV_PREFIX, PickerSettings, reset_settings
from calendarpicker.engine import DatetimeEngine
from calendarpicker.ui import pointer
from calendarpicker.ui.pointer import GlobalPointerRegistry


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep CALENDARPICKER_* variables, .env files and the global settings out of tests."""
    for key in list(os.environ):
        if key.upper().startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo ``setup_logging`` so caplog keeps seeing package records."""
    logger = logging.getLogger("calendarpicker")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def fresh_default_pointer_registry(monkeypatch):
    """Give each test its own process-wide pointer registry."""
    registry = GlobalPointerRegistry()
    monkeypatch.setattr(pointer, "_default_registry", registry)
    return registry


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 15, 10, 30, 0)


@pytest.fixture
def engine(fixed_now):
    """Engine whose ``now`` is pinned to ``fixed_now``."""
    engine = DatetimeEngine(week_starts={"en_US": 6, "de": 0})
    with patch.object(engine, "now", return_value=fixed_now):
        yield engine


@pytest.fixture
def settings_factory(tmp_path):
    """Build settings that never read the user's configuration directory."""

    def _make(**kwargs):
        kwargs.setdefault("config_dir", tmp_path / "config")
        return PickerSettings(**kwargs)

    return _make


@pytest.fixture
def settings(settings_factory):
    return settings_factory()
