"""
Core Data Models for the Memory Game

These models define the schemas for everything the game persists:
cards, the running game, lifetime stats and achievements.
They are designed to:
1. Reject impossible states when a save is loaded
2. Serialize to field-named JSON for the preference store
3. Keep enumerated catalogs in lookup tables, not switch statements

DESIGN DECISION: Models hold data and derived read-only values only.
Game rules live in aurum_memory.engine so they can be tested with an
injected clock and random source.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, NamedTuple, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """
    Tokens printed on the cards.

    DESIGN DECISION: The declaration order is the deal order. A game with
    N pairs always uses the first N currencies, so a difficulty always
    shows the same faces.
    """
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CHF = "CHF"
    CNY = "CNY"
    RUB = "RUB"
    INR = "INR"
    KRW = "KRW"
    BRL = "BRL"

    @property
    def symbol(self) -> str:
        return CURRENCY_DETAILS[self].symbol

    @property
    def display_name(self) -> str:
        return CURRENCY_DETAILS[self].display_name

    @property
    def flag(self) -> str:
        return CURRENCY_DETAILS[self].flag


class CurrencyInfo(NamedTuple):
    symbol: str
    display_name: str
    flag: str


CURRENCY_DETAILS: dict[Currency, CurrencyInfo] = {
    Currency.USD: CurrencyInfo("$", "US Dollar", "🇺🇸"),
    Currency.EUR: CurrencyInfo("€", "Euro", "🇪🇺"),
    Currency.GBP: CurrencyInfo("£", "British Pound", "🇬🇧"),
    Currency.JPY: CurrencyInfo("¥", "Japanese Yen", "🇯🇵"),
    Currency.CAD: CurrencyInfo("C$", "Canadian Dollar", "🇨🇦"),
    Currency.AUD: CurrencyInfo("A$", "Australian Dollar", "🇦🇺"),
    Currency.CHF: CurrencyInfo("CHF", "Swiss Franc", "🇨🇭"),
    Currency.CNY: CurrencyInfo("¥", "Chinese Yuan", "🇨🇳"),
    Currency.RUB: CurrencyInfo("₽", "Russian Ruble", "🇷🇺"),
    Currency.INR: CurrencyInfo("₹", "Indian Rupee", "🇮🇳"),
    Currency.KRW: CurrencyInfo("₩", "South Korean Won", "🇰🇷"),
    Currency.BRL: CurrencyInfo("R$", "Brazilian Real", "🇧🇷"),
}


class Difficulty(str, Enum):
    """Difficulty tiers. Each maps to a fixed grid in GRID_SIZES."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def grid_size(self) -> tuple[int, int]:
        """(rows, columns) of the board."""
        return GRID_SIZES[self]

    @property
    def rows(self) -> int:
        return GRID_SIZES[self][0]

    @property
    def columns(self) -> int:
        return GRID_SIZES[self][1]

    @property
    def card_count(self) -> int:
        rows, columns = GRID_SIZES[self]
        return rows * columns

    @property
    def pair_count(self) -> int:
        return self.card_count // 2

    @property
    def label(self) -> str:
        return self.value.capitalize()


GRID_SIZES: dict[Difficulty, tuple[int, int]] = {
    Difficulty.EASY: (3, 4),    # 12 cards, 6 pairs
    Difficulty.MEDIUM: (4, 4),  # 16 cards, 8 pairs
    Difficulty.HARD: (4, 6),    # 24 cards, 12 pairs
}


# =============================================================================
# CARD & GAME STATE
# =============================================================================

class MemoryCard(BaseModel):
    """
    A single card on the board.

    The three flags are independent fields, but only some combinations
    are legal:
    - matched implies face-up
    - temporarily flipped implies face-up
    - a matched card is never pending a flip back
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique card identifier"
    )
    currency: Currency = Field(
        ...,
        description="Token printed on the card face"
    )
    is_flipped: bool = Field(
        default=False,
        description="Card is face-up"
    )
    is_matched: bool = Field(
        default=False,
        description="Card belongs to a found pair"
    )
    is_temporarily_flipped: bool = Field(
        default=False,
        description="Card is face-up only until the mismatch is resolved"
    )

    @model_validator(mode='after')
    def validate_flags(self) -> 'MemoryCard':
        """Validate flag combinations."""
        if self.is_matched and not self.is_flipped:
            raise ValueError("A matched card must be face-up")

        if self.is_temporarily_flipped and not self.is_flipped:
            raise ValueError("A temporarily flipped card must be face-up")

        if self.is_matched and self.is_temporarily_flipped:
            raise ValueError("A matched card cannot be pending a flip back")

        return self


class GameState(BaseModel):
    """
    The game currently on the board.

    The game is active from start_new_game until every pair is matched.
    """

    game_id: UUID = Field(
        default_factory=uuid4,
        description="Correlates the log events of one game"
    )
    cards: list[MemoryCard] = Field(
        default_factory=list,
        description="The deck in board order"
    )
    difficulty: Difficulty = Field(
        default=Difficulty.EASY,
        description="Difficulty of the game on the board"
    )
    moves: int = Field(
        default=0,
        ge=0,
        description="Number of two-card turns taken"
    )
    matches: int = Field(
        default=0,
        ge=0,
        description="Number of pairs found"
    )
    game_start_time: Optional[datetime] = None
    game_end_time: Optional[datetime] = None
    is_game_active: bool = False
    selected_cards: list[UUID] = Field(
        default_factory=list,
        max_length=2,
        description="Ids of the face-up cards of the current turn"
    )

    @model_validator(mode='after')
    def validate_counters(self) -> 'GameState':
        """Validate counters against the difficulty."""
        if self.matches > self.difficulty.pair_count:
            raise ValueError(
                f"{self.matches} matches exceed the {self.difficulty.pair_count} "
                f"pairs of a {self.difficulty.value} game"
            )

        if self.game_start_time and self.game_end_time:
            if self.game_end_time < self.game_start_time:
                raise ValueError("Game end time cannot be before start time")

        return self

    @model_validator(mode='after')
    def validate_selection(self) -> 'GameState':
        """Every selected id must be a distinct face-up, unmatched card on the board."""
        if len(set(self.selected_cards)) != len(self.selected_cards):
            raise ValueError("A card cannot be selected twice")

        cards = {card.id: card for card in self.cards}
        for card_id in self.selected_cards:
            card = cards.get(card_id)
            if card is None:
                raise ValueError(f"Selected card {card_id} is not on the board")
            if not card.is_flipped or card.is_matched:
                raise ValueError(f"Selected card {card_id} must be face-up and unmatched")

        return self

    @property
    def is_game_complete(self) -> bool:
        """Check if every pair has been found."""
        return self.matches == self.difficulty.pair_count

    def game_time(self, now: datetime) -> float:
        """
        Elapsed game time in seconds.

        Live (now - start) while the game runs, frozen (end - start)
        once it has ended, 0 when no game was ever started. Never negative,
        even if the clock stepped back behind the start time.
        """
        if self.game_start_time is None:
            return 0.0
        end = self.game_end_time or now
        return max((end - self.game_start_time).total_seconds(), 0.0)

    def index_of(self, card_id: UUID) -> Optional[int]:
        """Board index of a card, None if it is not on the board."""
        for index, card in enumerate(self.cards):
            if card.id == card_id:
                return index
        return None


# =============================================================================
# STATS
# =============================================================================

def _zeroed_wins() -> dict[Difficulty, int]:
    return {difficulty: 0 for difficulty in Difficulty}


class MemoryGameStats(BaseModel):
    """
    Lifetime play statistics.

    Created once, changed only when a game ends (or by an explicit reset).
    best_time and best_moves use 0 for "no win yet".
    """

    games_played: int = Field(default=0, ge=0)
    games_won: int = Field(default=0, ge=0)
    total_moves: int = Field(
        default=0,
        ge=0,
        description="Moves summed over winning games only"
    )
    best_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Fastest win in seconds (0 = unset)"
    )
    best_moves: int = Field(
        default=0,
        ge=0,
        description="Fewest moves in a win (0 = unset)"
    )
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    wins_by_difficulty: dict[Difficulty, int] = Field(
        default_factory=_zeroed_wins,
        description="Wins per difficulty tier"
    )

    @field_validator('wins_by_difficulty')
    @classmethod
    def fill_missing_difficulties(cls, v: dict[Difficulty, int]) -> dict[Difficulty, int]:
        """Every tier has a counter, even in saves written before it existed."""
        if any(count < 0 for count in v.values()):
            raise ValueError("Win counters cannot be negative")
        return {difficulty: v.get(difficulty, 0) for difficulty in Difficulty}

    @property
    def win_rate(self) -> float:
        """Percentage of games won (0 when no games were played)."""
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played * 100

    @property
    def average_moves(self) -> float:
        """Average moves per win (0 when there are no wins)."""
        if self.games_won == 0:
            return 0.0
        return self.total_moves / self.games_won

    def wins_for(self, difficulty: Difficulty) -> int:
        return self.wins_by_difficulty.get(difficulty, 0)


# =============================================================================
# ACHIEVEMENTS
# =============================================================================

class FirstWinRequirement(BaseModel):
    """Win any game."""
    kind: Literal["first_win"] = "first_win"


class WinStreakRequirement(BaseModel):
    """Win `count` games in a row."""
    kind: Literal["win_streak"] = "win_streak"
    count: int = Field(..., ge=1)


class PerfectGameRequirement(BaseModel):
    """Win a game of `difficulty` using exactly one move per pair."""
    kind: Literal["perfect_game"] = "perfect_game"
    difficulty: Difficulty


class SpeedRunRequirement(BaseModel):
    """Win a game in at most `seconds`."""
    kind: Literal["speed_run"] = "speed_run"
    seconds: float = Field(..., gt=0)


class TotalWinsRequirement(BaseModel):
    """Win `count` games in total."""
    kind: Literal["total_wins"] = "total_wins"
    count: int = Field(..., ge=1)


class WinAllDifficultiesRequirement(BaseModel):
    """Win at least one game on every difficulty."""
    kind: Literal["win_all_difficulties"] = "win_all_difficulties"


AchievementRequirement = Annotated[
    Union[
        FirstWinRequirement,
        WinStreakRequirement,
        PerfectGameRequirement,
        SpeedRunRequirement,
        TotalWinsRequirement,
        WinAllDifficultiesRequirement,
    ],
    Field(discriminator="kind"),
]


class MemoryGameAchievement(BaseModel):
    """
    An achievement definition plus its unlock state.

    CRITICAL: Unlocking is one-way. There is no operation that locks
    an achievement again.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Stable achievement identifier"
    )
    title: str = Field(..., min_length=1)
    description: str = Field(default="")
    icon: str = Field(
        default="",
        description="Icon reference used by the front end"
    )
    requirement: AchievementRequirement
    is_unlocked: bool = False
    unlocked_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_unlock_state(self) -> 'MemoryGameAchievement':
        if self.unlocked_at is not None and not self.is_unlocked:
            raise ValueError("A locked achievement cannot have an unlock time")
        return self

    def unlock(self, at: datetime) -> bool:
        """
        Unlock the achievement.

        Returns True if this call unlocked it, False if it already was.
        """
        if self.is_unlocked:
            return False
        self.is_unlocked = True
        self.unlocked_at = at
        return True


class AchievementSummary(BaseModel):
    """Read model for the achievements screen."""

    unlocked: list[MemoryGameAchievement] = Field(
        default_factory=list,
        description="Unlocked achievements, most recent first"
    )
    locked: list[MemoryGameAchievement] = Field(
        default_factory=list,
        description="Locked achievements in catalog order"
    )

    @property
    def unlocked_count(self) -> int:
        return len(self.unlocked)

    @property
    def total(self) -> int:
        return len(self.unlocked) + len(self.locked)

    @property
    def completion_percent(self) -> int:
        """Whole-number percentage of unlocked achievements."""
        if self.total == 0:
            return 0
        return int(self.unlocked_count / self.total * 100)


# =============================================================================
# PERSISTED AGGREGATE
# =============================================================================

class SavedGame(BaseModel):
    """
    Everything the game persists, saved and loaded as one unit.

    The session owns exactly one live instance of this.
    """

    state: GameState = Field(default_factory=GameState)
    stats: MemoryGameStats = Field(default_factory=MemoryGameStats)
    achievements: list[MemoryGameAchievement] = Field(default_factory=list)
