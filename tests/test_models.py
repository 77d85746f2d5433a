"""
Tests for the Aurum Memory data models
"""

import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from aurum_memory.models.game import (
    AchievementSummary,
    Currency,
    Difficulty,
    FirstWinRequirement,
    GameState,
    MemoryCard,
    MemoryGameAchievement,
    MemoryGameStats,
    PerfectGameRequirement,
    SavedGame,
    SpeedRunRequirement,
)
from aurum_memory.models.events import (
    GameEvent,
    GameEventBuilder,
    GameEventSeverity,
    GameEventType,
)


NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


class TestCardModel:
    """Tests for MemoryCard flag invariants."""

    def test_card_defaults_face_down(self):
        """Test a new card is face-down and unmatched."""
        card = MemoryCard(currency=Currency.USD)
        assert card.is_flipped is False
        assert card.is_matched is False
        assert card.is_temporarily_flipped is False

    def test_cards_get_unique_ids(self):
        """Test each card gets its own id."""
        assert MemoryCard(currency=Currency.EUR).id != MemoryCard(currency=Currency.EUR).id

    def test_matched_card_must_be_face_up(self):
        """Test that a face-down matched card is rejected."""
        with pytest.raises(ValueError, match="matched card must be face-up"):
            MemoryCard(currency=Currency.USD, is_matched=True)

    def test_temporarily_flipped_card_must_be_face_up(self):
        """Test that an unflipped card cannot be pending a flip back."""
        with pytest.raises(ValueError, match="temporarily flipped card must be face-up"):
            MemoryCard(currency=Currency.USD, is_temporarily_flipped=True)

    def test_matched_card_cannot_be_temporarily_flipped(self):
        """Test matched and temporarily flipped are exclusive."""
        with pytest.raises(ValueError):
            MemoryCard(
                currency=Currency.USD,
                is_flipped=True,
                is_matched=True,
                is_temporarily_flipped=True,
            )


class TestDifficulty:
    """Tests for the difficulty lookup table."""

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_grid_is_even(self, difficulty):
        """Test every grid holds a whole number of pairs."""
        assert (difficulty.rows * difficulty.columns) % 2 == 0
        assert difficulty.pair_count * 2 == difficulty.card_count

    def test_pair_counts(self):
        """Test the pair count of each tier."""
        assert Difficulty.EASY.pair_count == 6
        assert Difficulty.MEDIUM.pair_count == 8
        assert Difficulty.HARD.pair_count == 12

    def test_grid_sizes(self):
        """Test grid shapes."""
        assert Difficulty.EASY.grid_size == (3, 4)
        assert Difficulty.MEDIUM.grid_size == (4, 4)
        assert Difficulty.HARD.grid_size == (4, 6)

    def test_catalog_covers_hardest_difficulty(self):
        """Test there are enough currencies for the largest board."""
        assert len(Currency) >= max(d.pair_count for d in Difficulty)


class TestCurrency:
    """Tests for the currency catalog."""

    def test_every_currency_has_details(self):
        """Test that symbol, name and flag exist for every currency."""
        for currency in Currency:
            assert currency.symbol
            assert currency.display_name
            assert currency.flag

    def test_currency_values(self):
        """Test currency details."""
        assert Currency.GBP.symbol == "£"
        assert Currency.INR.display_name == "Indian Rupee"
        assert Currency("BRL") is Currency.BRL


class TestGameState:
    """Tests for GameState derived values."""

    def test_game_time_is_zero_before_start(self):
        """Test a never-started game reports 0 seconds."""
        assert GameState().game_time(NOW) == 0.0

    def test_game_time_is_live_while_running(self):
        """Test game time follows the clock while active."""
        state = GameState(game_start_time=NOW, is_game_active=True)
        assert state.game_time(NOW + timedelta(seconds=12)) == 12.0
        assert state.game_time(NOW + timedelta(seconds=40)) == 40.0

    def test_game_time_is_frozen_after_end(self):
        """Test game time stops at the end timestamp."""
        state = GameState(
            game_start_time=NOW,
            game_end_time=NOW + timedelta(seconds=25),
        )
        assert state.game_time(NOW + timedelta(hours=1)) == 25.0

    def test_end_before_start_rejected(self):
        """Test end time cannot precede start time."""
        with pytest.raises(ValueError, match="end time cannot be before start"):
            GameState(game_start_time=NOW, game_end_time=NOW - timedelta(seconds=1))

    def test_matches_cannot_exceed_pair_count(self):
        """Test match counter is bounded by the difficulty."""
        with pytest.raises(ValueError):
            GameState(difficulty=Difficulty.EASY, matches=7)

    def test_selection_holds_at_most_two_cards(self):
        """Test a saved selection of three cards is rejected."""
        with pytest.raises(ValueError):
            GameState(selected_cards=[uuid4(), uuid4(), uuid4()])

    def test_index_of(self):
        """Test card lookup by id."""
        cards = [MemoryCard(currency=Currency.USD), MemoryCard(currency=Currency.EUR)]
        state = GameState(cards=cards)
        assert state.index_of(cards[1].id) == 1
        assert state.index_of(uuid4()) is None

    def test_game_time_never_negative(self):
        """Test a clock behind the start time reports 0 seconds."""
        state = GameState(game_start_time=NOW, is_game_active=True)
        assert state.game_time(NOW - timedelta(seconds=5)) == 0.0

    def test_selection_must_be_on_the_board(self):
        """Test a selected id that is not a card on the board is rejected."""
        card = MemoryCard(currency=Currency.USD, is_flipped=True)
        with pytest.raises(ValueError, match="not on the board"):
            GameState(cards=[card], selected_cards=[card.id, uuid4()])

    def test_selected_card_must_be_face_up(self):
        """Test a face-down card cannot be part of the selection."""
        card = MemoryCard(currency=Currency.USD)
        with pytest.raises(ValueError, match="must be face-up and unmatched"):
            GameState(cards=[card], selected_cards=[card.id])

    def test_selected_card_must_not_be_matched(self):
        """Test a matched card cannot be part of the selection."""
        card = MemoryCard(currency=Currency.USD, is_flipped=True, is_matched=True)
        with pytest.raises(ValueError, match="must be face-up and unmatched"):
            GameState(cards=[card], selected_cards=[card.id])

    def test_card_cannot_be_selected_twice(self):
        """Test duplicate selection ids are rejected."""
        card = MemoryCard(currency=Currency.USD, is_flipped=True)
        with pytest.raises(ValueError, match="selected twice"):
            GameState(cards=[card], selected_cards=[card.id, card.id])


class TestStatsModel:
    """Tests for MemoryGameStats derived values."""

    def test_derived_values_without_games(self):
        """Test win rate and average moves never divide by zero."""
        stats = MemoryGameStats()
        assert stats.win_rate == 0
        assert stats.average_moves == 0

    def test_win_rate_without_wins(self):
        """Test average moves is 0 when games were played but none won."""
        stats = MemoryGameStats(games_played=3)
        assert stats.win_rate == 0
        assert stats.average_moves == 0

    def test_derived_values(self):
        """Test win rate and average moves."""
        stats = MemoryGameStats(games_played=4, games_won=3, total_moves=27)
        assert stats.win_rate == 75.0
        assert stats.average_moves == 9.0

    def test_wins_by_difficulty_zero_filled(self):
        """Test every difficulty has a counter, even when the save omits some."""
        stats = MemoryGameStats.model_validate({"wins_by_difficulty": {"hard": 2}})
        assert stats.wins_for(Difficulty.EASY) == 0
        assert stats.wins_for(Difficulty.MEDIUM) == 0
        assert stats.wins_for(Difficulty.HARD) == 2

    def test_negative_counters_rejected(self):
        """Test counters cannot be negative."""
        with pytest.raises(ValueError):
            MemoryGameStats(games_played=-1)


class TestAchievementModel:
    """Tests for achievements and requirement parsing."""

    def _achievement(self) -> MemoryGameAchievement:
        return MemoryGameAchievement(
            id="first_victory",
            title="First Victory",
            requirement=FirstWinRequirement(),
        )

    def test_unlock_sets_timestamp(self):
        """Test unlocking stamps the unlock time."""
        achievement = self._achievement()
        assert achievement.unlock(NOW) is True
        assert achievement.is_unlocked is True
        assert achievement.unlocked_at == NOW

    def test_unlock_is_idempotent(self):
        """Test a second unlock keeps the first timestamp."""
        achievement = self._achievement()
        achievement.unlock(NOW)
        assert achievement.unlock(NOW + timedelta(days=1)) is False
        assert achievement.unlocked_at == NOW

    def test_requirement_parsed_by_kind(self):
        """Test the requirement union is resolved from its kind tag."""
        achievement = MemoryGameAchievement.model_validate({
            "id": "perfect_memory",
            "title": "Perfect Memory",
            "requirement": {"kind": "perfect_game", "difficulty": "easy"},
        })
        assert isinstance(achievement.requirement, PerfectGameRequirement)
        assert achievement.requirement.difficulty == Difficulty.EASY

    def test_unknown_requirement_kind_rejected(self):
        """Test an unknown requirement kind fails validation."""
        with pytest.raises(ValueError):
            MemoryGameAchievement.model_validate({
                "id": "x",
                "title": "X",
                "requirement": {"kind": "lucky_guess"},
            })

    def test_locked_achievement_cannot_have_unlock_time(self):
        """Test inconsistent unlock state is rejected."""
        with pytest.raises(ValueError):
            MemoryGameAchievement(
                id="speed_demon",
                title="Speed Demon",
                requirement=SpeedRunRequirement(seconds=30),
                unlocked_at=NOW,
            )

    def test_summary_percent(self):
        """Test completion percentage is a whole number."""
        unlocked = self._achievement()
        unlocked.unlock(NOW)
        locked = [self._achievement(), self._achievement()]
        summary = AchievementSummary(unlocked=[unlocked], locked=locked)
        assert summary.total == 3
        assert summary.unlocked_count == 1
        assert summary.completion_percent == 33

    def test_empty_summary(self):
        """Test an empty catalog is 0% complete."""
        assert AchievementSummary().completion_percent == 0


class TestSavedGame:
    """Tests for the persisted aggregate."""

    def test_json_round_trip(self):
        """Test the aggregate survives JSON serialization."""
        card = MemoryCard(currency=Currency.JPY, is_flipped=True, is_temporarily_flipped=True)
        game = SavedGame(
            state=GameState(
                cards=[card, MemoryCard(currency=Currency.JPY)],
                game_start_time=NOW,
                is_game_active=True,
                selected_cards=[card.id],
            ),
            stats=MemoryGameStats(games_played=2, games_won=1, best_time=31.5),
            achievements=[self._first_win_unlocked()],
        )

        restored = SavedGame.model_validate_json(game.model_dump_json())

        assert restored == game
        assert restored.state.cards[0].is_temporarily_flipped is True
        assert restored.stats.wins_for(Difficulty.HARD) == 0
        assert restored.achievements[0].unlocked_at == NOW

    def test_json_uses_field_names(self):
        """Test the encoding is field-named text."""
        payload = SavedGame().model_dump_json()
        assert '"selected_cards"' in payload
        assert '"wins_by_difficulty"' in payload

    def _first_win_unlocked(self) -> MemoryGameAchievement:
        achievement = MemoryGameAchievement(
            id="first_victory",
            title="First Victory",
            requirement=FirstWinRequirement(),
        )
        achievement.unlock(NOW)
        return achievement


class TestEventModels:
    """Tests for game event models."""

    def test_event_defaults(self):
        """Test GameEvent model creation."""
        event = GameEvent(
            event_type=GameEventType.GAME_STARTED,
            description="New easy game",
        )
        assert event.severity == GameEventSeverity.INFO
        assert event.game_id is None

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        game_id = uuid4()
        event = GameEventBuilder.pair_matched(
            game_id=game_id,
            currency="USD",
            matches=2,
            pair_count=6,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "pair_matched"
        assert log_dict["game_id"] == str(game_id)
        assert log_dict["details"]["matches"] == 2

    def test_save_failed_is_an_error(self):
        """Test persistence failures are logged at error severity."""
        event = GameEventBuilder.save_failed(key="k", error_message="disk full")
        assert event.severity == GameEventSeverity.ERROR
        assert event.error_message == "disk full"

    def test_game_won_description(self):
        """Test the win description uses whole seconds."""
        event = GameEventBuilder.game_won(uuid4(), "easy", moves=8, seconds=41.7)
        assert event.description == "Easy game won in 8 moves and 41 seconds"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
