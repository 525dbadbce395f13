"""Process-wide pointer-down dispatcher shared by every mounted picker."""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

PointerCallback = Callable[[Any], None]

# Receives the dispatcher, returns a function removing it again
InstallHook = Callable[[PointerCallback], Callable[[], None]]


class GlobalPointerRegistry:
    """Reference counted pointer-down listener.

    The underlying listener is installed when the first subscriber arrives and
    removed when the last one leaves; subscribers never install their own.
    """

    def __init__(self, install: Optional[InstallHook] = None) -> None:
        self._install = install
        self._uninstall: Optional[Callable[[], None]] = None
        self._subscribers: list[PointerCallback] = []
        self._installed = False

    def acquire(self, callback: PointerCallback) -> Callable[[], None]:
        """Subscribe ``callback`` to every pointer-down.

        Returns:
            Function releasing this subscription
        """
        self._subscribers.append(callback)
        if len(self._subscribers) == 1:
            self._install_listener()
        logger.debug(f"Pointer subscriber added ({len(self._subscribers)} active)")
        return lambda: self.release(callback)

    def release(self, callback: PointerCallback) -> None:
        if callback not in self._subscribers:
            return
        self._subscribers.remove(callback)
        logger.debug(f"Pointer subscriber removed ({len(self._subscribers)} active)")
        if not self._subscribers:
            self._remove_listener()

    def _install_listener(self) -> None:
        if self._install is not None:
            self._uninstall = self._install(self.dispatch)
        self._installed = True
        logger.debug("Global pointer listener installed")

    def _remove_listener(self) -> None:
        if self._uninstall is not None:
            self._uninstall()
            self._uninstall = None
        self._installed = False
        logger.debug("Global pointer listener removed")

    def dispatch(self, target: Any) -> None:
        """Deliver a pointer-down on ``target`` to every subscriber."""
        for callback in list(self._subscribers):
            try:
                callback(target)
            except Exception:
                logger.exception("Error in pointer-down subscriber")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def is_installed(self) -> bool:
        return self._installed


_default_registry = GlobalPointerRegistry()


def default_pointer_registry() -> GlobalPointerRegistry:
    """Registry shared by every picker built without an explicit one."""
    return _default_registry
