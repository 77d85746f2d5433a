"""
JSON Preference File Storage

DESIGN DECISION: The saved game lives in a small JSON document that
maps keys to blobs, the way a platform preference store does.
1. Other tools can keep their own keys in the same file
2. The file is human readable for debugging
3. No database setup required

TRADEOFFS:
- The whole document is rewritten on every save (it is tiny)
- Writes go to a temp file first and are swapped in with os.replace,
  so a crash mid-write leaves the previous save intact
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from aurum_memory.config.settings import DEFAULT_SAVE_KEY
from aurum_memory.models.game import SavedGame
from aurum_memory.services.storage.interface import (
    CorruptSaveError,
    GameRepository,
    StorageError,
)


class JsonFileGameRepository(GameRepository):
    """
    JSON file implementation of the saved-game store.

    The saved game is stored as a nested JSON object under its key.
    Keys it does not own are preserved on every write.
    """

    def __init__(self, path: Path, key: str = DEFAULT_SAVE_KEY):
        self._path = Path(path)
        self._key = key
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        """Read the whole preference document ({} if there is none)."""
        if not self._path.exists():
            return {}

        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not text.strip():
            return {}

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSaveError(f"{self._path} is not valid JSON: {e}")

        if not isinstance(document, dict):
            raise CorruptSaveError(f"{self._path} does not hold a JSON object")

        return document

    def load(self) -> Optional[SavedGame]:
        """Load the saved game stored under this repository's key."""
        with self._lock:
            document = self._read_document()

        blob = document.get(self._key)
        if blob is None:
            return None

        try:
            return SavedGame.model_validate(blob)
        except ValidationError as e:
            raise CorruptSaveError(f"Saved game under '{self._key}' is invalid: {e}")

    def save(self, game: SavedGame) -> None:
        """Replace the saved game."""
        self._write_blob(game.model_dump(mode="json"))

    def save_json(self, payload: str) -> None:
        """Replace the saved game with a serialized snapshot."""
        try:
            blob = json.loads(payload)
        except json.JSONDecodeError as e:
            raise StorageError(f"Refusing to save an invalid snapshot: {e}")
        self._write_blob(blob)

    def _write_blob(self, blob: dict[str, Any]) -> None:
        with self._lock:
            try:
                document = self._read_document()
            except CorruptSaveError:
                # An unreadable document has nothing worth preserving
                document = {}

            document[self._key] = blob

            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self._path.name}.",
                    suffix=".tmp",
                    dir=self._path.parent,
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                        json.dump(document, tmp, ensure_ascii=False, indent=2)
                        tmp.flush()
                        os.fsync(tmp.fileno())
                    os.replace(tmp_name, self._path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise StorageError(f"Failed to write {self._path}: {e}")
