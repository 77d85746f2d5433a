"""
Game State Machine

Applies the rules of the memory game to a SavedGame aggregate:
1. start_new_game deals a fresh shuffled deck
2. select_card flips cards, counts moves and checks pairs
3. flip_back_mismatched_cards resolves a failed pair
4. Finding the last pair ends the game, records stats and
   unlocks achievements

DESIGN DECISION: A mismatch is NOT resolved here. Both cards stay
face-up and selected until flip_back_mismatched_cards is called,
which the session does after a visible delay. Until then every
selection is rejected.

The clock and random source are injected so games are reproducible
in tests.
"""

import random
from datetime import datetime, timezone
from typing import Callable, Optional

from aurum_memory.engine.achievements import (
    AchievementEvaluator,
    create_default_achievements,
)
from aurum_memory.engine.deck import build_deck
from aurum_memory.engine.stats import record_game
from aurum_memory.models.game import (
    Difficulty,
    GameState,
    MemoryGameAchievement,
    MemoryGameStats,
    SavedGame,
)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryGameEngine:
    """
    Rules engine for one saved game.

    The engine mutates the aggregate it was given; callers that need a
    stable view take a copy (see MemoryGameSession.snapshot).
    """

    def __init__(
        self,
        game: SavedGame,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        evaluator: Optional[AchievementEvaluator] = None,
    ):
        self._game = game
        self._clock = clock
        self._rng = rng or random.Random()
        self._evaluator = evaluator or AchievementEvaluator()
        self._last_unlocked: list[MemoryGameAchievement] = []

    @classmethod
    def fresh(
        cls,
        difficulty: Difficulty = Difficulty.EASY,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        evaluator: Optional[AchievementEvaluator] = None,
    ) -> "MemoryGameEngine":
        """
        Engine for a first launch: zeroed stats, locked catalog and a
        game already dealt at `difficulty`.
        """
        engine = cls(
            SavedGame(achievements=create_default_achievements()),
            clock=clock,
            rng=rng,
            evaluator=evaluator,
        )
        engine.start_new_game(difficulty)
        return engine

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def game(self) -> SavedGame:
        return self._game

    @property
    def state(self) -> GameState:
        return self._game.state

    @property
    def stats(self) -> MemoryGameStats:
        return self._game.stats

    @property
    def achievements(self) -> list[MemoryGameAchievement]:
        return self._game.achievements

    @property
    def game_time(self) -> float:
        """Seconds played: live while active, frozen once the game ended."""
        return self._game.state.game_time(self._clock())

    @property
    def has_pending_mismatch(self) -> bool:
        """Two cards are selected and waiting to be flipped back."""
        state = self._game.state
        if len(state.selected_cards) != 2:
            return False
        for card_id in state.selected_cards:
            index = state.index_of(card_id)
            if index is None or not state.cards[index].is_temporarily_flipped:
                return False
        return True

    @property
    def last_unlocked(self) -> list[MemoryGameAchievement]:
        """Achievements unlocked when the most recent game ended."""
        return list(self._last_unlocked)

    def rejection_reason(self, index: int) -> Optional[str]:
        """Why select_card(index) would be rejected, None if it would be accepted."""
        state = self._game.state

        if not state.is_game_active:
            return "game is not active"
        if index < 0 or index >= len(state.cards):
            return "index out of range"
        if state.cards[index].is_matched:
            return "card already matched"
        if state.cards[index].is_flipped:
            return "card already face-up"
        if len(state.selected_cards) >= 2:
            return "two cards already selected"
        return None

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start_new_game(self, difficulty: Difficulty) -> None:
        """Deal a new game. Stats and achievements carry over."""
        self._game.state = GameState(
            difficulty=difficulty,
            cards=build_deck(difficulty, self._rng),
            moves=0,
            matches=0,
            game_start_time=self._clock(),
            game_end_time=None,
            is_game_active=True,
            selected_cards=[],
        )
        self._last_unlocked = []

    def select_card(self, index: int) -> bool:
        """
        Flip the card at `index`.

        Returns False without changing anything if the selection is not
        allowed (see rejection_reason). The second card of a turn counts
        a move and is checked against the first.
        """
        if self.rejection_reason(index) is not None:
            return False

        state = self._game.state
        card = state.cards[index]
        card.is_flipped = True
        state.selected_cards.append(card.id)

        if len(state.selected_cards) == 2:
            state.moves += 1
            self._check_for_match()

        return True

    def flip_back_mismatched_cards(self) -> int:
        """
        Turn every temporarily flipped card face-down and clear the selection.

        Returns the number of cards turned. Calling it again without a
        new mismatch turns nothing.
        """
        state = self._game.state
        flipped_back = 0

        for card in state.cards:
            if card.is_temporarily_flipped:
                card.is_flipped = False
                card.is_temporarily_flipped = False
                flipped_back += 1

        state.selected_cards = []
        return flipped_back

    def reset_stats(self) -> None:
        """Zero the lifetime stats. Unlocked achievements stay unlocked."""
        self._game.stats = MemoryGameStats()

    def _check_for_match(self) -> None:
        state = self._game.state
        first = state.index_of(state.selected_cards[0])
        second = state.index_of(state.selected_cards[1])
        if first is None or second is None:
            return

        first_card = state.cards[first]
        second_card = state.cards[second]

        if first_card.currency == second_card.currency:
            first_card.is_flipped = True
            first_card.is_matched = True
            second_card.is_flipped = True
            second_card.is_matched = True
            state.matches += 1
            state.selected_cards = []

            if state.is_game_complete:
                self._end_game()
        else:
            first_card.is_temporarily_flipped = True
            second_card.is_temporarily_flipped = True

    def _end_game(self) -> None:
        state = self._game.state
        now = self._clock()
        if state.game_start_time is not None:
            # A clock that stepped back must not end the game before it began
            now = max(now, state.game_start_time)

        state.is_game_active = False
        state.game_end_time = now

        record_game(
            self._game.stats,
            won=state.is_game_complete,
            moves=state.moves,
            time=state.game_time(now),
            difficulty=state.difficulty,
        )
        self._last_unlocked = self._evaluator.check(
            self._game.achievements,
            self._game.stats,
            state,
            now,
        )
