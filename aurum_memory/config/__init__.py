"""Configuration package."""

from aurum_memory.config.settings import (
    DEFAULT_SAVE_KEY,
    GameSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_SAVE_KEY",
    "GameSettings",
    "get_settings",
]
