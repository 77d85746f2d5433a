"""
Storage Services Package

Provides the abstract repository interface and the concrete stores for
the saved game. The JSON preference file is the production backend; the
in-memory store backs tests.
"""

from aurum_memory.services.storage.interface import (
    CorruptSaveError,
    GameRepository,
    StorageError,
)
from aurum_memory.services.storage.json_file import JsonFileGameRepository
from aurum_memory.services.storage.memory import InMemoryGameRepository

__all__ = [
    # Interface
    "GameRepository",
    # Exceptions
    "CorruptSaveError",
    "StorageError",
    # Implementations
    "InMemoryGameRepository",
    "JsonFileGameRepository",
]
