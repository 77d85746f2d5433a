"""Services package."""

from aurum_memory.services.scheduler import (
    ScheduledTask,
    Scheduler,
    TimerScheduler,
)
from aurum_memory.services.storage import (
    CorruptSaveError,
    GameRepository,
    InMemoryGameRepository,
    JsonFileGameRepository,
    StorageError,
)

__all__ = [
    # Scheduling
    "ScheduledTask",
    "Scheduler",
    "TimerScheduler",
    # Storage
    "CorruptSaveError",
    "GameRepository",
    "InMemoryGameRepository",
    "JsonFileGameRepository",
    "StorageError",
]
