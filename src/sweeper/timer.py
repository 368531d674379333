"""
Elapsed-time tracking for a single game.

The start timestamp is captured once, on board activation, and the
duration is frozen once, when the game reaches a terminal state.
"""
import time
from typing import Callable, Optional


class Timer:
    """Wall-clock stopwatch that can be started and stopped exactly once."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the timer.

        Args:
            clock: Zero-argument callable returning seconds.
        """
        self._clock = clock
        self._start_time: Optional[float] = None
        self._frozen: Optional[float] = None

    @property
    def started(self) -> bool:
        return self._start_time is not None

    @property
    def stopped(self) -> bool:
        return self._frozen is not None

    def start(self) -> None:
        """Capture the start timestamp; later calls are ignored."""
        if self._start_time is None:
            self._start_time = self._clock()

    def stop(self) -> None:
        """Freeze the elapsed time; later calls are ignored."""
        if self._frozen is None:
            self._frozen = self.elapsed()

    def elapsed(self) -> float:
        """
        Get elapsed seconds.

        Returns:
            0.0 if never started, the frozen value if stopped,
            otherwise the live duration since start.
        """
        if self._frozen is not None:
            return self._frozen
        if self._start_time is None:
            return 0.0
        return self._clock() - self._start_time
