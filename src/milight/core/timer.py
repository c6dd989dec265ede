"""Timed color transitions ("timers") for one group of lights."""

import logging
import math
import threading
from enum import Enum
from typing import TYPE_CHECKING, Optional

from milight.exceptions import InvalidArgumentError, MilightError, TimerStateError
from milight.models import MilightColor, from_device_brightness
from milight.protocol import MAX_BRIGHTNESS, MIN_BRIGHTNESS
from milight.protocols import TimerListener
from milight.utils import ObserverManager

if TYPE_CHECKING:
    from .lights import Lights

logger = logging.getLogger(__name__)

# Seconds allowed for a step's packets to leave before switching off
_DRAIN_TIMEOUT = 5.0

# Absorbs float noise in the remaining time
_EPSILON = 1e-9


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"


class Timer:
    """
    Moves a group of lights from one color to another over a duration.

    The run happens on a daemon thread. Every ``cadence`` seconds the color
    moves one step closer to the goal, so that the goal is reached when the
    duration is used up. Optionally the lights are switched off at the end.

    State machine::

        IDLE --start()--> RUNNING --(goal reached / time up)--> COMPLETED
                             |
                           stop() or send failure
                             v
                          STOPPED ---------------------------> COMPLETED

    Every run ends in COMPLETED and notifies each TimerListener exactly
    once, from the timer thread, whether it reached its goal or not.

    Example:
        ```python
        timer = Timer(lights, duration=600, start=MilightColor.named("blue"),
                      goal=MilightColor.named("black"))
        timer.start()
        ```
    """

    def __init__(
        self,
        lights: "Lights",
        duration: float,
        start: MilightColor,
        goal: MilightColor,
        switch_off: bool = True,
        cadence: Optional[float] = None,
    ):
        """
        Initialize the timer.

        Args:
            lights: Group to animate
            duration: Total run time in seconds
            start: First color shown
            goal: Color shown at the end
            switch_off: Switch the group off when the run ends, stopped or not
            cadence: Seconds between two steps (defaults to the box's
                timer_cadence setting)

        Raises:
            InvalidArgumentError: If duration or cadence is not positive
        """
        if cadence is None:
            cadence = lights.box.config.timer_cadence
        if duration <= 0:
            raise InvalidArgumentError("duration", duration, "greater than 0 seconds")
        if cadence <= 0:
            raise InvalidArgumentError("cadence", cadence, "greater than 0 seconds")
        for name, color in (("start", start), ("goal", goal)):
            if not isinstance(color, MilightColor):
                raise InvalidArgumentError(name, color, "a MilightColor")

        self.lights = lights
        self.duration = duration
        self.start_color = start
        self.goal = goal
        self.switch_off = switch_off
        self.cadence = cadence

        self._lock = threading.Lock()
        self._state = TimerState.IDLE
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        # Incremented per run so a finishing old run cannot clobber a new one
        self._generation = 0
        self._listeners = ObserverManager[TimerListener](observer_type_name="timer")

    @classmethod
    def brightness_fade(
        cls,
        lights: "Lights",
        duration: float,
        start_level: int = MAX_BRIGHTNESS,
        goal_level: int = MIN_BRIGHTNESS,
        switch_off: bool = True,
        cadence: Optional[float] = None,
    ) -> "Timer":
        """
        White-mode fade between two device brightness levels.

        With the defaults this is a "sleep timer": full white dimmed to the
        lowest level, then off.

        Raises:
            InvalidArgumentError: If a level is outside 0x02-0x1B
        """
        start = MilightColor.white(from_device_brightness(start_level))
        goal = MilightColor.white(from_device_brightness(goal_level))
        return cls(lights, duration, start, goal, switch_off=switch_off, cadence=cadence)

    # =================================================================
    # Listeners
    # =================================================================

    def add_listener(self, listener: TimerListener) -> None:
        self._listeners.register(listener)

    def remove_listener(self, listener: TimerListener) -> None:
        self._listeners.unregister(listener)

    # =================================================================
    # Control
    # =================================================================

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is TimerState.RUNNING

    def start(self) -> None:
        """
        Start a run in the background.

        Starting a running timer does nothing. A stopped timer whose run is
        still winding down waits for it, then runs again.

        Raises:
            TimerStateError: If the timer already completed
        """
        with self._lock:
            if self._state is TimerState.RUNNING:
                logger.warning(f"{self} is already running")
                return
            if self._state is TimerState.COMPLETED:
                raise TimerStateError(self._state.value, "start")

            previous = self._thread
            self._generation += 1
            generation = self._generation
            stop_event = self._stop_event = threading.Event()
            self._state = TimerState.RUNNING

        if previous is not None and previous is not threading.current_thread():
            previous.join()

        thread = threading.Thread(
            target=self._run,
            args=(generation, stop_event),
            name=f"milight-timer-{self.lights.group}",
            daemon=True,
        )
        with self._lock:
            self._thread = thread
        logger.info(f"Starting {self}")
        thread.start()

    def stop(self) -> None:
        """End the run at the next step; switch_off still applies."""
        with self._lock:
            if self._state is not TimerState.RUNNING:
                return
            self._state = TimerState.STOPPED
            self._stop_event.set()
        logger.info(f"Stopping {self}")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the current run to end.

        Returns:
            True if no run is in progress anymore
        """
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # =================================================================
    # Run loop
    # =================================================================

    def _run(self, generation: int, stop_event: threading.Event) -> None:
        try:
            self._animate(stop_event)
        except (MilightError, OSError) as e:
            logger.warning(f"{self} aborted: {e}")
            with self._lock:
                if generation == self._generation:
                    self._state = TimerState.STOPPED
        finally:
            with self._lock:
                if generation == self._generation:
                    self._state = TimerState.COMPLETED
            logger.info(f"{self} finished")
            self._listeners.notify("on_timer_finished", self)

    def _animate(self, stop_event: threading.Event) -> None:
        current = self.start_color
        # Let the start color settle before the first step
        sequence = self.lights.set_color_and_brightness(current)
        sequence.join(_DRAIN_TIMEOUT)

        remaining = self.duration
        while remaining > _EPSILON and current != self.goal and not stop_event.is_set():
            step = min(self.cadence, remaining)
            steps = max(1, math.ceil(remaining / step - _EPSILON))
            current = current.transition(self.goal, steps)
            logger.debug(f"{self}: {current.to_hex()}, {steps} step(s) to go")
            sequence = self.lights.set_color_and_brightness(current)
            remaining -= step
            if stop_event.wait(step):
                break

        # A stopped run still switches off; only send failures skip it
        if not self.switch_off:
            return
        sequence.join(_DRAIN_TIMEOUT)
        self.lights.off()

    def __repr__(self) -> str:
        return (
            f"Timer(group={self.lights.group}, {self.start_color.to_hex()} -> "
            f"{self.goal.to_hex()}, {self.duration:g}s)"
        )
