"""Unit tests for the reference counted global pointer registry."""

from unittest.mock import Mock

from calendarpicker.ui.pointer import GlobalPointerRegistry


class TestGlobalPointerRegistry:
    """Test install-once semantics and dispatch."""

    def test_installs_once_for_many_subscribers(self):
        uninstall = Mock()
        install = Mock(return_value=uninstall)
        registry = GlobalPointerRegistry(install)

        registry.acquire(Mock())
        registry.acquire(Mock())

        install.assert_called_once_with(registry.dispatch)
        assert registry.is_installed is True
        assert registry.subscriber_count == 2

    def test_uninstalls_when_last_subscriber_leaves(self):
        uninstall = Mock()
        registry = GlobalPointerRegistry(Mock(return_value=uninstall))

        release_first = registry.acquire(Mock())
        release_second = registry.acquire(Mock())

        release_first()
        uninstall.assert_not_called()

        release_second()
        uninstall.assert_called_once_with()
        assert registry.is_installed is False

    def test_reinstalls_after_full_release(self):
        install = Mock(return_value=Mock())
        registry = GlobalPointerRegistry(install)

        registry.acquire(Mock())()
        registry.acquire(Mock())

        assert install.call_count == 2

    def test_dispatch_reaches_every_subscriber(self):
        registry = GlobalPointerRegistry()
        first, second = Mock(), Mock()
        registry.acquire(first)
        registry.acquire(second)

        registry.dispatch("target")

        first.assert_called_once_with("target")
        second.assert_called_once_with("target")

    def test_release_during_dispatch_is_safe(self):
        registry = GlobalPointerRegistry()
        second = Mock()
        release = None

        def first(target):
            release()

        release = registry.acquire(first)
        registry.acquire(second)

        registry.dispatch("target")

        second.assert_called_once_with("target")
        assert registry.subscriber_count == 1

    def test_failing_subscriber_does_not_block_others(self, caplog):
        registry = GlobalPointerRegistry()
        second = Mock()
        registry.acquire(Mock(side_effect=RuntimeError("boom")))
        registry.acquire(second)

        registry.dispatch("target")

        second.assert_called_once_with("target")
        assert "Error in pointer-down subscriber" in caplog.text

    def test_double_release_is_ignored(self):
        registry = GlobalPointerRegistry()
        release = registry.acquire(Mock())

        release()
        release()

        assert registry.subscriber_count == 0

    def test_without_install_hook(self):
        registry = GlobalPointerRegistry()
        registry.acquire(Mock())
        assert registry.is_installed is True
