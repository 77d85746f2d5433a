"""
Delayed Callback Scheduling

The session needs exactly one timed transition: turning a mismatched
pair face-down again after a visible delay. The scheduler hides how
that delay is realised so tests can fire callbacks by hand.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable


class ScheduledTask(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the callback. Cancelling twice, or after it ran, is a no-op."""
        pass

    @property
    @abstractmethod
    def is_pending(self) -> bool:
        pass


class Scheduler(ABC):
    """Schedules one-shot callbacks."""

    @abstractmethod
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run callback once after delay_seconds, unless cancelled first."""
        pass


class _TimerTask(ScheduledTask):

    def __init__(self, delay_seconds: float, callback: Callable[[], None]):
        self._callback = callback
        self._done = threading.Event()
        self._timer = threading.Timer(delay_seconds, self._run)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def _run(self) -> None:
        if self._done.is_set():
            return
        self._done.set()
        self._callback()

    def cancel(self) -> None:
        self._done.set()
        self._timer.cancel()

    @property
    def is_pending(self) -> bool:
        return not self._done.is_set()


class TimerScheduler(Scheduler):
    """Scheduler backed by daemon threading.Timer threads."""

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        task = _TimerTask(delay_seconds, callback)
        task.start()
        return task
