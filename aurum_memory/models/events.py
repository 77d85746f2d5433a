"""
Game Event Models

Every state change of the memory game is described by a GameEvent.
Events give:
1. A structured trace of each game, move by move
2. Debugging information when a save fails to load or write
3. A single place that names what the engine can do

DESIGN DECISION: Events are emitted to the structured log only.
They are not persisted with the saved game.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class GameEventType(str, Enum):
    """
    Types of events we log.

    Every transition of the engine and every persistence outcome
    has its own event type.
    """
    # Gameplay
    GAME_STARTED = "game_started"
    CARD_SELECTED = "card_selected"
    SELECTION_REJECTED = "selection_rejected"
    PAIR_MATCHED = "pair_matched"
    PAIR_MISMATCHED = "pair_mismatched"
    CARDS_FLIPPED_BACK = "cards_flipped_back"
    GAME_WON = "game_won"

    # Progress
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    STATS_RESET = "stats_reset"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_LOAD_FAILED = "state_load_failed"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"


class GameEventSeverity(str, Enum):
    """Severity level for game events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameEvent(BaseModel):
    """
    A single game event.

    This is the core unit of the game log.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: GameEventType = Field(
        ...,
        description="Type of event"
    )
    severity: GameEventSeverity = Field(
        default=GameEventSeverity.INFO,
        description="Event severity"
    )

    # Correlation - all events of one game share the same game_id
    game_id: Optional[UUID] = Field(
        default=None,
        description="Identifier of the game the event belongs to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "game_id": str(self.game_id) if self.game_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class GameEventBuilder:
    """
    Helper class to build game events with common patterns.

    Usage:
        event = GameEventBuilder.game_started(game_id, "easy", 12)
        event = GameEventBuilder.pair_matched(game_id, "USD", 3, 6)
    """

    @staticmethod
    def game_started(
        game_id: UUID,
        difficulty: str,
        card_count: int,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.GAME_STARTED,
            game_id=game_id,
            description=f"New {difficulty} game with {card_count} cards",
            details={
                "difficulty": difficulty,
                "card_count": card_count,
            },
        )

    @staticmethod
    def card_selected(
        game_id: UUID,
        index: int,
        currency: str,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.CARD_SELECTED,
            severity=GameEventSeverity.DEBUG,
            game_id=game_id,
            description=f"Card {index} flipped: {currency}",
            details={
                "index": index,
                "currency": currency,
            },
        )

    @staticmethod
    def selection_rejected(
        game_id: UUID,
        index: int,
        reason: str,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.SELECTION_REJECTED,
            severity=GameEventSeverity.DEBUG,
            game_id=game_id,
            description=f"Selection of card {index} rejected: {reason}",
            details={
                "index": index,
                "reason": reason,
            },
        )

    @staticmethod
    def pair_matched(
        game_id: UUID,
        currency: str,
        matches: int,
        pair_count: int,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.PAIR_MATCHED,
            game_id=game_id,
            description=f"Pair found: {currency} ({matches}/{pair_count})",
            details={
                "currency": currency,
                "matches": matches,
                "pair_count": pair_count,
            },
        )

    @staticmethod
    def pair_mismatched(
        game_id: UUID,
        currencies: list[str],
        delay_seconds: float,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.PAIR_MISMATCHED,
            game_id=game_id,
            description=f"No match: {' / '.join(currencies)}",
            details={
                "currencies": currencies,
                "flip_back_delay_seconds": delay_seconds,
            },
        )

    @staticmethod
    def cards_flipped_back(
        game_id: UUID,
        card_count: int,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.CARDS_FLIPPED_BACK,
            severity=GameEventSeverity.DEBUG,
            game_id=game_id,
            description=f"{card_count} mismatched cards turned face-down",
            details={"card_count": card_count},
        )

    @staticmethod
    def game_won(
        game_id: UUID,
        difficulty: str,
        moves: int,
        seconds: float,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.GAME_WON,
            game_id=game_id,
            description=f"{difficulty.capitalize()} game won in {moves} moves and {int(seconds)} seconds",
            details={
                "difficulty": difficulty,
                "moves": moves,
                "seconds": seconds,
            },
        )

    @staticmethod
    def achievement_unlocked(
        game_id: UUID,
        achievement_id: str,
        title: str,
    ) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.ACHIEVEMENT_UNLOCKED,
            game_id=game_id,
            description=f"Achievement unlocked: {title}",
            details={
                "achievement_id": achievement_id,
                "title": title,
            },
        )

    @staticmethod
    def stats_reset(games_played: int) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.STATS_RESET,
            description=f"Stats reset after {games_played} games",
            details={"previous_games_played": games_played},
        )

    @staticmethod
    def state_loaded(key: str, fresh: bool) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.STATE_LOADED,
            description="Started with a fresh game" if fresh else "Saved game restored",
            details={
                "key": key,
                "fresh": fresh,
            },
        )

    @staticmethod
    def state_load_failed(key: str, error_message: str) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.STATE_LOAD_FAILED,
            severity=GameEventSeverity.WARNING,
            description="Saved game unreadable, starting fresh",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def state_saved(key: str) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.STATE_SAVED,
            severity=GameEventSeverity.DEBUG,
            description="Game state saved",
            details={"key": key},
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> GameEvent:
        return GameEvent(
            event_type=GameEventType.SAVE_FAILED,
            severity=GameEventSeverity.ERROR,
            description="Failed to save game state",
            error_message=error_message,
            details={"key": key},
        )
