"""
In-Memory Storage

Keeps saved games as JSON strings in a dict, with the same keyed
semantics as the preference file. Used by the tests and for throwaway
sessions that should not touch disk.
"""

import threading
from typing import Optional

from pydantic import ValidationError

from aurum_memory.config.settings import DEFAULT_SAVE_KEY
from aurum_memory.models.game import SavedGame
from aurum_memory.services.storage.interface import (
    CorruptSaveError,
    GameRepository,
)


class InMemoryGameRepository(GameRepository):
    """In-memory implementation of the saved-game store."""

    def __init__(
        self,
        key: str = DEFAULT_SAVE_KEY,
        blobs: Optional[dict[str, str]] = None,
    ):
        self._key = key
        self._blobs: dict[str, str] = dict(blobs or {})
        self._lock = threading.Lock()
        self.save_count = 0

    @property
    def key(self) -> str:
        return self._key

    def raw(self, key: Optional[str] = None) -> Optional[str]:
        """The stored JSON string for a key (this repository's key by default)."""
        with self._lock:
            return self._blobs.get(key or self._key)

    def load(self) -> Optional[SavedGame]:
        payload = self.raw()
        if payload is None:
            return None

        try:
            return SavedGame.model_validate_json(payload)
        except ValidationError as e:
            raise CorruptSaveError(f"Saved game under '{self._key}' is invalid: {e}")

    def save(self, game: SavedGame) -> None:
        self.save_json(game.model_dump_json())

    def save_json(self, payload: str) -> None:
        with self._lock:
            self._blobs[self._key] = payload
            self.save_count += 1
