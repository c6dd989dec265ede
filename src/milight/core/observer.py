"""Open-loop state tracking for one group of lights.

The bulbs cannot be queried. What they display is reconstructed from the
commands this process sent, one event at a time, and kept as a history of
snapshots that can be rolled back.

Burst collapsing
----------------

Composite commands raise several events at once (``set_color_and_brightness``
raises four). Events closer together than the debounce window belong to one
logical change: the first one that changes the state pushes a snapshot and
the following ones replace it, so a burst adds at most one entry.
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional

from milight.exceptions import EmptyHistoryError, InvalidArgumentError
from milight.models import LightState
from milight.protocols import LightChange, LightEvent

if TYPE_CHECKING:
    from .lights import Lights

logger = logging.getLogger(__name__)


class LightObserver:
    """
    History of the states a group of lights went through.

    The history is oldest-first, never empty, and bounded by
    ``history_size``; the oldest snapshots are evicted first.

    Threading:
        Events arrive on whichever thread sent the command (caller, blink or
        timer thread). All history access is serialized by one lock.
    """

    def __init__(self, lights: "Lights", history_size: int = 100, debounce_window: float = 0.3):
        """
        Initialize the observer and subscribe it to the group's events.

        Args:
            lights: Controller whose events are tracked
            history_size: Maximum number of snapshots kept
            debounce_window: Events closer together than this (seconds)
                collapse into one snapshot
        """
        if history_size < 1:
            raise InvalidArgumentError("history_size", history_size, "of at least 1")
        if debounce_window < 0:
            raise InvalidArgumentError("debounce_window", debounce_window, "of at least 0 seconds")

        self._lights = lights
        self.history_size = history_size
        self.debounce_window = debounce_window

        self._lock = threading.Lock()
        self._history: list[LightState] = [LightState.initial()]
        self._last_event_time: Optional[float] = None
        # True while the top entry was pushed by the current burst
        self._burst_entry = False
        self._replaying_thread: Optional[int] = None

        lights.add_listener(self)

    # =================================================================
    # Event handling
    # =================================================================

    def on_light_event(self, change: LightChange) -> None:
        with self._lock:
            if self._replaying_thread == threading.get_ident():
                return

            in_burst = (
                self._last_event_time is not None
                and change.timestamp - self._last_event_time < self.debounce_window
            )
            self._last_event_time = change.timestamp
            if not in_burst:
                self._burst_entry = False

            top = self._history[-1]
            new_state = self._transition(top, change)
            if new_state == top:
                return

            if self._burst_entry:
                self._history[-1] = new_state
                if len(self._history) > 1 and self._history[-2] == new_state:
                    self._history.pop()
                    self._burst_entry = False
            else:
                self._history.append(new_state)
                self._burst_entry = True
                overflow = len(self._history) - self.history_size
                if overflow > 0:
                    del self._history[:overflow]

    @staticmethod
    def _transition(state: LightState, change: LightChange) -> LightState:
        match change.event:
            case LightEvent.COLOR_CHANGED if change.color is not None:
                return state.evolve(color=change.color)
            case LightEvent.BRIGHTNESS_CHANGED if change.brightness is not None:
                if state.white_mode:
                    return state.evolve(brightness=change.brightness)
                return state.evolve(color=state.color.with_brightness(change.brightness))
            case LightEvent.WHITE_MODE:
                return state.evolve(white_mode=True)
            case LightEvent.COLORED_MODE:
                return state.evolve(white_mode=False)
            case LightEvent.SWITCH_ON:
                return state.evolve(on=True)
            case LightEvent.SWITCH_OFF:
                return state.evolve(on=False)
            case LightEvent.DISCO_MODE | LightEvent.DISCO_FASTER | LightEvent.DISCO_SLOWER:
                return state
            case _:
                logger.warning(f"Ignoring {change.event.name} without payload on group {change.group}")
                return state

    # =================================================================
    # Queries
    # =================================================================

    @property
    def current_state(self) -> LightState:
        """What the lights are believed to display right now."""
        with self._lock:
            return self._history[-1]

    def get_last_state(self) -> LightState:
        """
        The snapshot preceding the current one.

        Raises:
            EmptyHistoryError: If only the current snapshot is known
        """
        with self._lock:
            if len(self._history) < 2:
                raise EmptyHistoryError(self._lights.group)
            return self._history[-2]

    @property
    def history(self) -> tuple[LightState, ...]:
        """Copy of the history, oldest first."""
        with self._lock:
            return tuple(self._history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    # =================================================================
    # Mutation
    # =================================================================

    def evict(self, keep: int) -> int:
        """
        Drop the oldest snapshots so that at most keep remain.

        Returns:
            Number of snapshots dropped
        """
        if keep < 1:
            raise InvalidArgumentError("keep", keep, "of at least 1")
        with self._lock:
            dropped = max(0, len(self._history) - keep)
            if dropped:
                del self._history[:dropped]
        if dropped:
            logger.debug(f"Evicted {dropped} state(s) of group {self._lights.group}")
        return dropped

    def restore(self) -> LightState:
        """
        Undo the last change: drop the current snapshot and replay the previous one.

        The events raised by the replay are not recorded.

        Returns:
            The snapshot that was replayed

        Raises:
            EmptyHistoryError: If only one snapshot is left
        """
        with self._lock:
            if len(self._history) < 2:
                raise EmptyHistoryError(self._lights.group)
            self._history.pop()
            target = self._history[-1]
            self._burst_entry = False
            self._last_event_time = None
            self._replaying_thread = threading.get_ident()

        logger.info(f"Restoring group {self._lights.group} to {target}")
        try:
            target.apply_to(self._lights)
        finally:
            with self._lock:
                self._replaying_thread = None
        return target

    def __repr__(self) -> str:
        return f"LightObserver(group={self._lights.group}, entries={len(self)})"
