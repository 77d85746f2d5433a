"""Game engine package: deck, rules, stats and achievements."""

from aurum_memory.engine.achievements import (
    REQUIREMENT_CHECKS,
    AchievementEvaluator,
    create_default_achievements,
    summarize,
)
from aurum_memory.engine.deck import build_deck, currencies_for
from aurum_memory.engine.state_machine import Clock, MemoryGameEngine, utc_now
from aurum_memory.engine.stats import record_game

__all__ = [
    "REQUIREMENT_CHECKS",
    "AchievementEvaluator",
    "Clock",
    "MemoryGameEngine",
    "build_deck",
    "create_default_achievements",
    "currencies_for",
    "record_game",
    "summarize",
    "utc_now",
]
