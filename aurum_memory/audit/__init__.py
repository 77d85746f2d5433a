"""Game event logging package."""

from aurum_memory.audit.logger import GameEventLogger, configure_logging

__all__ = ["GameEventLogger", "configure_logging"]
