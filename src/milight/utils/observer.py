"""Thread-safe listener lists.

Used by the event channel (one list per group of lights) and by timers
(completion listeners). Listeners are called by method name so one class
can serve several listener protocols.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=object)


class ObserverManager(Generic[T]):
    """
    Ordered, duplicate-free list of listeners.

    The list is copy-on-write: ``notify`` iterates over an immutable
    snapshot taken under the lock, so a listener may add or remove
    listeners (itself included) from its callback. Such changes take effect
    from the next notification on.

    Example:
        ```python
        listeners = ObserverManager[TimerListener](observer_type_name="timer")
        listeners.register(listener)
        listeners.notify("on_timer_finished", timer)
        ```
    """

    def __init__(self, lock: Lock | None = None, observer_type_name: str = "observer"):
        """
        Args:
            lock: Lock guarding the list; a private one is created if None
            observer_type_name: Listener kind used in log messages ("timer", "group 1 light")
        """
        self._observers: tuple[T, ...] = ()
        self._lock = lock or Lock()
        self._kind = observer_type_name

    def register(self, observer: T) -> None:
        """Add observer at the end; registering twice is a no-op."""
        with self._lock:
            if observer in self._observers:
                return
            self._observers = (*self._observers, observer)
        logger.debug(f"Registered {self._kind} observer {observer!r}")

    def unregister(self, observer: T) -> None:
        with self._lock:
            remaining = tuple(o for o in self._observers if o != observer)
            removed = len(remaining) != len(self._observers)
            self._observers = remaining
        if removed:
            logger.debug(f"Unregistered {self._kind} observer {observer!r}")
        else:
            logger.warning(f"Attempted to unregister unknown {self._kind} observer: {observer!r}")

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``callback_name(*args, **kwargs)`` on every listener, in order.

        Runs on the caller's thread without holding the lock. A listener
        lacking the method or raising is logged and skipped; the others are
        still called.
        """
        with self._lock:
            observers = self._observers

        for observer in observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(f"{self._kind} observer {observer!r} has no method '{callback_name}'")
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.exception(f"{self._kind} observer {observer!r} failed in {callback_name}: {e}")

    def clear(self) -> None:
        with self._lock:
            count = len(self._observers)
            self._observers = ()
        if count:
            logger.debug(f"Cleared {count} {self._kind} observer(s)")

    def __contains__(self, observer: object) -> bool:
        return observer in self._observers

    def __len__(self) -> int:
        return len(self._observers)

    def __bool__(self) -> bool:
        return bool(self._observers)
