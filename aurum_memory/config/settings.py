"""
Configuration Management for Aurum Memory

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every value has a working default, so the game runs with no
environment at all; deployments override through MEMORY_GAME_* variables
or a .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aurum_memory.models.game import Difficulty


DEFAULT_SAVE_KEY = "AurumFocusMemoryGameState"


class GameSettings(BaseSettings):
    """
    Memory game settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMORY_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    save_path: Path = Field(
        default=Path("~/.aurum_memory/preferences.json"),
        validate_default=True,
        description="JSON preference file holding the saved game"
    )
    save_key: str = Field(
        default=DEFAULT_SAVE_KEY,
        min_length=1,
        description="Key of the saved game inside the preference file"
    )

    # Gameplay
    flip_back_delay_seconds: float = Field(
        default=1.0,
        gt=0.0,
        le=10.0,
        description="How long a mismatched pair stays visible"
    )
    default_difficulty: Difficulty = Field(
        default=Difficulty.EASY,
        description="Difficulty used when no saved game exists"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for game event logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = human readable console)"
    )

    @field_validator('save_path')
    @classmethod
    def expand_save_path(cls, v: Path) -> Path:
        """Resolve ~ so the repository never writes to a literal '~' directory."""
        return v.expanduser()

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> GameSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return GameSettings()
