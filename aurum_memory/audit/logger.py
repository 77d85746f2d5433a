"""
Game Event Logger

DESIGN DECISION: Every state change of the game is logged as a
structured event. This provides:
1. A replayable trace of each game
2. Visibility into persistence failures, which are never raised
3. A debugging aid for timing issues around the flip-back delay

The event logger:
- Is synchronous and safe to call from the timer and writer threads
- Routes events to the log level matching their severity
- Tags every event of one game with the game's id
"""

import logging
import threading
from typing import Iterable
from uuid import UUID

import structlog

from aurum_memory.models.events import (
    GameEvent,
    GameEventBuilder,
    GameEventSeverity,
)
from aurum_memory.models.game import MemoryGameAchievement


def _shared_processors() -> list:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    JSON output is the default; json_logs=False switches to the
    human-readable console renderer for local play.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=_shared_processors() + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
structlog.configure(
    processors=_shared_processors() + [structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class GameEventLogger:
    """
    Central game event logging service.

    Logs events to the structured local log. Keeps the most recent
    events in memory so the front end and tests can inspect them.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("aurum_memory")
        self._history_size = history_size
        self._history: list[GameEvent] = []
        self._history_lock = threading.Lock()

    @property
    def history(self) -> list[GameEvent]:
        """Most recent events, oldest first."""
        with self._history_lock:
            return list(self._history)

    def log(self, event: GameEvent) -> None:
        """Log a game event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == GameEventSeverity.ERROR:
            self._logger.error("game_event", **log_dict)
        elif event.severity == GameEventSeverity.WARNING:
            self._logger.warning("game_event", **log_dict)
        elif event.severity == GameEventSeverity.DEBUG:
            self._logger.debug("game_event", **log_dict)
        else:
            self._logger.info("game_event", **log_dict)

        with self._history_lock:
            self._history.append(event)
            if len(self._history) > self._history_size:
                del self._history[:-self._history_size]

    def log_achievements_unlocked(
        self,
        game_id: UUID,
        achievements: Iterable[MemoryGameAchievement],
    ) -> None:
        """Log one event per newly unlocked achievement."""
        for achievement in achievements:
            self.log(GameEventBuilder.achievement_unlocked(
                game_id=game_id,
                achievement_id=achievement.id,
                title=achievement.title,
            ))

    def log_save_failed(self, key: str, error: Exception) -> None:
        """Log a persistence write failure."""
        self.log(GameEventBuilder.save_failed(key=key, error_message=str(error)))

    def log_load_failed(self, key: str, error: Exception) -> None:
        """Log an unreadable save."""
        self.log(GameEventBuilder.state_load_failed(key=key, error_message=str(error)))
