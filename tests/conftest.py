"""
Shared fixtures for the Aurum Memory tests

Test strategy:
1. Unit tests for models, deck, rules, stats and achievements
2. Session tests with a manual scheduler, a fixed clock and an
   in-memory store (no real timers, no background threads)
3. Storage tests write only under tmp_path
"""

import random

import pytest

from aurum_memory.audit import GameEventLogger
from aurum_memory.config import GameSettings
from aurum_memory.engine import MemoryGameEngine
from aurum_memory.models.game import Difficulty
from aurum_memory.services.storage import InMemoryGameRepository
from aurum_memory.session import MemoryGameSession

from helpers import FakeClock, ImmediateExecutor, ManualScheduler


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def engine(clock, rng) -> MemoryGameEngine:
    return MemoryGameEngine.fresh(Difficulty.EASY, clock=clock, rng=rng)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def repository() -> InMemoryGameRepository:
    return InMemoryGameRepository()


@pytest.fixture
def settings(tmp_path) -> GameSettings:
    return GameSettings(
        save_path=tmp_path / "preferences.json",
        flip_back_delay_seconds=1.0,
        default_difficulty=Difficulty.EASY,
    )


@pytest.fixture
def make_session(repository, scheduler, settings, clock, rng):
    """Build sessions wired to the fakes; extra kwargs override them."""

    def _make(**overrides) -> MemoryGameSession:
        kwargs = dict(
            repository=repository,
            scheduler=scheduler,
            settings=settings,
            clock=clock,
            rng=rng,
            event_logger=GameEventLogger(),
            writer=ImmediateExecutor(),
        )
        kwargs.update(overrides)
        return MemoryGameSession(**kwargs)

    return _make
