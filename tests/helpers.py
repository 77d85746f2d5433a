"""Fakes and board helpers shared by the test modules."""

from collections import defaultdict
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone
from typing import Callable

from aurum_memory.models.game import Currency, GameState
from aurum_memory.services.scheduler import ScheduledTask, Scheduler


START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class ManualTask(ScheduledTask):

    def __init__(self, delay_seconds: float, callback: Callable[[], None]):
        self.delay_seconds = delay_seconds
        self._callback = callback
        self._pending = True

    def cancel(self) -> None:
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    def fire(self) -> None:
        """Run the callback as the timer thread would, even if cancelled."""
        self._pending = False
        self._callback()


class ManualScheduler(Scheduler):
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.tasks: list[ManualTask] = []

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(delay_seconds, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [task for task in self.tasks if task.is_pending]

    def fire_pending(self) -> None:
        for task in self.pending:
            task.fire()


class ImmediateExecutor(Executor):
    """Runs submitted work synchronously in the calling thread."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future


def pair_indices(state: GameState) -> dict[Currency, list[int]]:
    """Board indices of each currency's two cards."""
    pairs: dict[Currency, list[int]] = defaultdict(list)
    for index, card in enumerate(state.cards):
        pairs[card.currency].append(index)
    return dict(pairs)


def mismatched_indices(state: GameState) -> tuple[int, int]:
    """Two face-down cards with different currencies."""
    first = next(i for i, c in enumerate(state.cards) if not c.is_flipped)
    second = next(
        i for i, c in enumerate(state.cards)
        if not c.is_flipped and c.currency != state.cards[first].currency
    )
    return first, second


def play_perfect_game(select: Callable[[int], bool], state: GameState) -> None:
    """Match every pair on the first try."""
    for first, second in pair_indices(state).values():
        assert select(first)
        assert select(second)
