"""
Game Session Controller

This module ties together the engine, the saved-game store, the
flip-back timer and the event log. It is the only entry point the
front end uses:
1. start_new_game(difficulty)
2. select_card(index) -> accepted
3. reset_stats()
4. read-only snapshots of state, stats and achievements

DESIGN DECISION: The session enforces the boundaries:
- All mutations run under one lock, including the timer callback
- Every accepted mutation is persisted, off the interactive path
- A mismatch is resolved only by the session's own timer
- Nothing here raises because storage misbehaved
"""

import random
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Optional

from aurum_memory.audit import GameEventLogger, configure_logging
from aurum_memory.config import GameSettings, get_settings
from aurum_memory.engine import (
    Clock,
    MemoryGameEngine,
    create_default_achievements,
    summarize,
    utc_now,
)
from aurum_memory.models.events import GameEventBuilder
from aurum_memory.models.game import (
    AchievementSummary,
    Difficulty,
    GameState,
    MemoryGameAchievement,
    MemoryGameStats,
    SavedGame,
)
from aurum_memory.services.scheduler import ScheduledTask, Scheduler, TimerScheduler
from aurum_memory.services.storage import (
    GameRepository,
    JsonFileGameRepository,
    StorageError,
)


class MemoryGameSession:
    """
    Owns the single live saved game of the process.

    Flow for a turn:
    1. select_card → engine flips the card
    2. Second card → engine counts the move and checks the pair
    3. Mismatch → schedule flip back after the configured delay
    4. Timer fires → engine flips the pair back → persist

    A new mismatch or a new game cancels any pending flip back first,
    so a stale timer can never clear a newer selection.
    """

    def __init__(
        self,
        repository: GameRepository,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[GameSettings] = None,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        event_logger: Optional[GameEventLogger] = None,
        writer: Optional[Executor] = None,
    ):
        self._repository = repository
        self._scheduler = scheduler or TimerScheduler()
        self._settings = settings or get_settings()
        self._clock = clock
        self._events = event_logger or GameEventLogger()

        self._lock = threading.RLock()
        self._owns_writer = writer is None
        self._writer = writer or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="aurum-memory-save",
        )
        self._pending_writes: list[Future] = []
        self._closed = False

        self._flip_back_task: Optional[ScheduledTask] = None
        self._flip_back_generation = 0

        self._engine = self._load_engine(rng)

    def __enter__(self) -> "MemoryGameSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    def _load_engine(self, rng: Optional[random.Random]) -> MemoryGameEngine:
        """
        Restore the saved game, or start fresh.

        A missing or unreadable save is not an error for the caller:
        it is logged and replaced by a new game at the default difficulty.
        """
        key = self._repository.key
        saved: Optional[SavedGame] = None

        try:
            saved = self._repository.load()
        except StorageError as e:
            self._events.log_load_failed(key, e)

        if saved is None:
            self._events.log(GameEventBuilder.state_loaded(key=key, fresh=True))
            engine = MemoryGameEngine.fresh(
                self._settings.default_difficulty,
                clock=self._clock,
                rng=rng,
            )
            self._events.log(GameEventBuilder.game_started(
                game_id=engine.state.game_id,
                difficulty=engine.state.difficulty.value,
                card_count=len(engine.state.cards),
            ))
            return engine

        self._add_missing_achievements(saved)
        engine = MemoryGameEngine(saved, clock=self._clock, rng=rng)
        self._events.log(GameEventBuilder.state_loaded(key=key, fresh=False))

        # The app was closed while a mismatch was on screen
        if engine.has_pending_mismatch:
            flipped = engine.flip_back_mismatched_cards()
            self._events.log(GameEventBuilder.cards_flipped_back(
                game_id=engine.state.game_id,
                card_count=flipped,
            ))

        return engine

    @staticmethod
    def _add_missing_achievements(saved: SavedGame) -> None:
        """Append catalog entries the save does not know yet (locked)."""
        known = {achievement.id for achievement in saved.achievements}
        for achievement in create_default_achievements():
            if achievement.id not in known:
                saved.achievements.append(achievement)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start_new_game(self, difficulty: Optional[Difficulty] = None) -> None:
        """
        Deal a new game.

        Args:
            difficulty: Difficulty to play. None replays the current one.
        """
        with self._lock:
            self._cancel_flip_back()
            difficulty = difficulty or self._engine.state.difficulty
            self._engine.start_new_game(difficulty)

            state = self._engine.state
            self._events.log(GameEventBuilder.game_started(
                game_id=state.game_id,
                difficulty=difficulty.value,
                card_count=len(state.cards),
            ))
            self._persist()

    def select_card(self, index: int) -> bool:
        """
        Flip the card at `index`.

        Returns:
            True if the selection was accepted, False if it was rejected
            (game over, bad index, card already up or matched, or a
            pair is still waiting to be flipped back)
        """
        with self._lock:
            state = self._engine.state
            reason = self._engine.rejection_reason(index)
            if reason is not None:
                self._events.log(GameEventBuilder.selection_rejected(
                    game_id=state.game_id,
                    index=index,
                    reason=reason,
                ))
                return False

            matches_before = state.matches
            self._engine.select_card(index)

            card = state.cards[index]
            self._events.log(GameEventBuilder.card_selected(
                game_id=state.game_id,
                index=index,
                currency=card.currency.value,
            ))

            if state.matches > matches_before:
                self._events.log(GameEventBuilder.pair_matched(
                    game_id=state.game_id,
                    currency=card.currency.value,
                    matches=state.matches,
                    pair_count=state.difficulty.pair_count,
                ))
                if not state.is_game_active:
                    self._events.log(GameEventBuilder.game_won(
                        game_id=state.game_id,
                        difficulty=state.difficulty.value,
                        moves=state.moves,
                        seconds=self._engine.game_time,
                    ))
                    self._events.log_achievements_unlocked(
                        state.game_id,
                        self._engine.last_unlocked,
                    )
            elif self._engine.has_pending_mismatch:
                currencies = [
                    state.cards[state.index_of(card_id)].currency.value
                    for card_id in state.selected_cards
                ]
                self._events.log(GameEventBuilder.pair_mismatched(
                    game_id=state.game_id,
                    currencies=currencies,
                    delay_seconds=self._settings.flip_back_delay_seconds,
                ))
                self._schedule_flip_back()

            self._persist()
            return True

    def reset_stats(self) -> None:
        """Zero the lifetime stats. Achievements keep their unlock state."""
        with self._lock:
            games_played = self._engine.stats.games_played
            self._engine.reset_stats()
            self._events.log(GameEventBuilder.stats_reset(games_played))
            self._persist()

    # -------------------------------------------------------------------------
    # Flip-back timer
    # -------------------------------------------------------------------------

    def _schedule_flip_back(self) -> None:
        self._cancel_flip_back()
        generation = self._flip_back_generation
        self._flip_back_task = self._scheduler.schedule(
            self._settings.flip_back_delay_seconds,
            lambda: self._on_flip_back_due(generation),
        )

    def _cancel_flip_back(self) -> None:
        """Cancel the pending flip back and invalidate any callback already firing."""
        if self._flip_back_task is not None:
            self._flip_back_task.cancel()
            self._flip_back_task = None
        self._flip_back_generation += 1

    def _on_flip_back_due(self, generation: int) -> None:
        with self._lock:
            if generation != self._flip_back_generation:
                return
            self._flip_back_task = None

            flipped = self._engine.flip_back_mismatched_cards()
            self._events.log(GameEventBuilder.cards_flipped_back(
                game_id=self._engine.state.game_id,
                card_count=flipped,
            ))
            self._persist()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _persist(self) -> None:
        """
        Queue a write of the current aggregate.

        Must be called with the lock held. The snapshot is serialized
        here, so the writer never reads the live aggregate.
        """
        payload = self._engine.game.model_dump_json()

        if self._closed:
            self._write(payload)
            return

        self._pending_writes = [f for f in self._pending_writes if not f.done()]
        self._pending_writes.append(self._writer.submit(self._write, payload))

    def _write(self, payload: str) -> bool:
        key = self._repository.key
        try:
            self._repository.save_json(payload)
        except Exception as e:
            # Fire-and-forget: the in-memory state is already updated
            self._events.log_save_failed(key, e)
            return False

        self._events.log(GameEventBuilder.state_saved(key))
        return True

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every queued write has finished."""
        with self._lock:
            pending = list(self._pending_writes)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        """Cancel the pending flip back, finish queued writes and stop the writer."""
        with self._lock:
            if self._closed:
                return
            self._cancel_flip_back()
            # Queued writes finish before any synchronous write after close
            wait(self._pending_writes)
            self._pending_writes = []
            self._closed = True

        if self._owns_writer:
            self._writer.shutdown(wait=True)

    # -------------------------------------------------------------------------
    # Read-only snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> SavedGame:
        """Deep copy of the whole aggregate."""
        with self._lock:
            return self._engine.game.model_copy(deep=True)

    @property
    def state(self) -> GameState:
        with self._lock:
            return self._engine.state.model_copy(deep=True)

    @property
    def stats(self) -> MemoryGameStats:
        with self._lock:
            return self._engine.stats.model_copy(deep=True)

    @property
    def achievements(self) -> list[MemoryGameAchievement]:
        with self._lock:
            return [a.model_copy(deep=True) for a in self._engine.achievements]

    def achievement_summary(self) -> AchievementSummary:
        return summarize(self.achievements)

    @property
    def game_time(self) -> float:
        with self._lock:
            return self._engine.game_time

    @property
    def has_pending_mismatch(self) -> bool:
        with self._lock:
            return self._engine.has_pending_mismatch

    @property
    def flip_back_delay(self) -> float:
        return self._settings.flip_back_delay_seconds

    @property
    def events(self) -> GameEventLogger:
        return self._events


def create_session(
    settings: Optional[GameSettings] = None,
    repository: Optional[GameRepository] = None,
) -> MemoryGameSession:
    """
    Factory function to create a session from settings.

    Args:
        settings: Settings to use (environment/.env if None)
        repository: Store to use (the JSON preference file if None)

    Returns:
        A session with the saved game restored (or a fresh one)
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    if repository is None:
        repository = JsonFileGameRepository(settings.save_path, settings.save_key)

    return MemoryGameSession(repository=repository, settings=settings)
