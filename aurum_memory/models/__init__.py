"""
Data Models Package

This package contains all Pydantic models used by the memory game.
Everything that is saved, loaded or logged conforms to these schemas.
"""

from aurum_memory.models.game import (
    CURRENCY_DETAILS,
    GRID_SIZES,
    AchievementRequirement,
    AchievementSummary,
    Currency,
    CurrencyInfo,
    Difficulty,
    FirstWinRequirement,
    GameState,
    MemoryCard,
    MemoryGameAchievement,
    MemoryGameStats,
    PerfectGameRequirement,
    SavedGame,
    SpeedRunRequirement,
    TotalWinsRequirement,
    WinAllDifficultiesRequirement,
    WinStreakRequirement,
)
from aurum_memory.models.events import (
    GameEvent,
    GameEventBuilder,
    GameEventSeverity,
    GameEventType,
)

__all__ = [
    # Game models
    "CURRENCY_DETAILS",
    "GRID_SIZES",
    "AchievementRequirement",
    "AchievementSummary",
    "Currency",
    "CurrencyInfo",
    "Difficulty",
    "FirstWinRequirement",
    "GameState",
    "MemoryCard",
    "MemoryGameAchievement",
    "MemoryGameStats",
    "PerfectGameRequirement",
    "SavedGame",
    "SpeedRunRequirement",
    "TotalWinsRequirement",
    "WinAllDifficultiesRequirement",
    "WinStreakRequirement",
    # Event models
    "GameEvent",
    "GameEventBuilder",
    "GameEventSeverity",
    "GameEventType",
]
