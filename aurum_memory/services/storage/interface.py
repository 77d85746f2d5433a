"""
Abstract Storage Interface

DESIGN DECISION: The session never talks to a concrete store.
It receives a repository with two operations:
1. load() - the whole saved game, or None when nothing is stored
2. save() - replace the whole saved game

This allows us to:
1. Keep the JSON preference file swappable
2. Use in-memory storage for testing
3. Keep game rules decoupled from storage
"""

from abc import ABC, abstractmethod
from typing import Optional

from aurum_memory.models.game import SavedGame


class GameRepository(ABC):
    """
    Abstract interface for the saved-game store.

    The saved game is a single blob under a fixed key; it is always
    written and read as a whole.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Key the saved game is stored under."""
        pass

    @abstractmethod
    def load(self) -> Optional[SavedGame]:
        """
        Load the saved game.

        Returns:
            The saved game, or None if nothing is stored yet

        Raises:
            CorruptSaveError: If the stored blob cannot be decoded
            StorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    def save(self, game: SavedGame) -> None:
        """
        Replace the saved game.

        Args:
            game: The aggregate to persist

        Raises:
            StorageError: If the write fails
        """
        pass

    def save_json(self, payload: str) -> None:
        """
        Replace the saved game with an already serialized snapshot.

        The session serializes under its lock and hands the string to a
        background writer, so stores that can write text directly should
        override this.
        """
        try:
            game = SavedGame.model_validate_json(payload)
        except ValueError as e:
            raise StorageError(f"Refusing to save an invalid snapshot: {e}")
        self.save(game)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSaveError(StorageError):
    """The stored blob exists but is not a valid saved game."""
    pass
