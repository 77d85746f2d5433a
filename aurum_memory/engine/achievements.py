"""
Achievement Evaluator

Scans the achievement catalog after a game ends and unlocks every
locked achievement whose requirement is now satisfied.

DESIGN DECISION: Requirement kinds are resolved through a lookup table
(REQUIREMENT_CHECKS) keyed by the requirement's `kind` tag. Adding a
requirement type means adding a model to the union in models.game and
one entry here; the test suite checks that the two stay in sync.

Evaluation follows catalog order. Requirements are independent today,
so order only decides the order of the returned list.
"""

from datetime import datetime
from typing import Callable, Iterable, Optional

from aurum_memory.models.game import (
    AchievementSummary,
    Difficulty,
    FirstWinRequirement,
    GameState,
    MemoryGameAchievement,
    MemoryGameStats,
    PerfectGameRequirement,
    SpeedRunRequirement,
    TotalWinsRequirement,
    WinAllDifficultiesRequirement,
    WinStreakRequirement,
)


# (requirement, stats, finished game, frozen game time in seconds) -> satisfied?
RequirementCheck = Callable[[object, MemoryGameStats, GameState, float], bool]


def _first_win(requirement, stats, state, game_time) -> bool:
    return stats.games_won >= 1


def _win_streak(requirement: WinStreakRequirement, stats, state, game_time) -> bool:
    return stats.current_streak >= requirement.count


def _perfect_game(requirement: PerfectGameRequirement, stats, state, game_time) -> bool:
    target = requirement.difficulty
    return (
        state.difficulty == target
        and state.moves == target.pair_count
        and state.is_game_complete
    )


def _speed_run(requirement: SpeedRunRequirement, stats, state, game_time) -> bool:
    return game_time <= requirement.seconds and state.is_game_complete


def _total_wins(requirement: TotalWinsRequirement, stats, state, game_time) -> bool:
    return stats.games_won >= requirement.count


def _win_all_difficulties(requirement, stats, state, game_time) -> bool:
    return all(stats.wins_for(difficulty) > 0 for difficulty in Difficulty)


REQUIREMENT_CHECKS: dict[str, RequirementCheck] = {
    "first_win": _first_win,
    "win_streak": _win_streak,
    "perfect_game": _perfect_game,
    "speed_run": _speed_run,
    "total_wins": _total_wins,
    "win_all_difficulties": _win_all_difficulties,
}


class AchievementEvaluator:
    """
    Unlocks achievements against the stats and the game that just ended.

    GUARANTEES:
    - Already unlocked achievements are skipped, never re-locked
    - Each achievement is unlocked at most once
    """

    def __init__(self, checks: Optional[dict[str, RequirementCheck]] = None):
        self._checks = dict(checks or REQUIREMENT_CHECKS)

    def is_satisfied(
        self,
        achievement: MemoryGameAchievement,
        stats: MemoryGameStats,
        state: GameState,
        game_time: float,
    ) -> bool:
        """Evaluate one achievement's requirement."""
        kind = achievement.requirement.kind
        try:
            check = self._checks[kind]
        except KeyError:
            raise ValueError(f"No rule for achievement requirement '{kind}'")
        return check(achievement.requirement, stats, state, game_time)

    def check(
        self,
        achievements: Iterable[MemoryGameAchievement],
        stats: MemoryGameStats,
        state: GameState,
        now: datetime,
    ) -> list[MemoryGameAchievement]:
        """
        Unlock every locked achievement that is now satisfied.

        Args:
            achievements: The catalog, mutated in place
            stats: Stats after the finished game was recorded
            state: The finished game
            now: Unlock timestamp (also the end time if the game has none)

        Returns:
            The achievements unlocked by this call, in catalog order
        """
        game_time = state.game_time(now)
        unlocked = []

        for achievement in achievements:
            if achievement.is_unlocked:
                continue
            if self.is_satisfied(achievement, stats, state, game_time):
                achievement.unlock(now)
                unlocked.append(achievement)

        return unlocked


def create_default_achievements() -> list[MemoryGameAchievement]:
    """The catalog every new player starts with, all locked."""
    return [
        MemoryGameAchievement(
            id="first_victory",
            title="First Victory",
            description="Win your first memory game",
            icon="trophy.fill",
            requirement=FirstWinRequirement(),
        ),
        MemoryGameAchievement(
            id="perfect_memory",
            title="Perfect Memory",
            description="Win an easy game with minimum moves",
            icon="brain.head.profile",
            requirement=PerfectGameRequirement(difficulty=Difficulty.EASY),
        ),
        MemoryGameAchievement(
            id="speed_demon",
            title="Speed Demon",
            description="Win a game in under 30 seconds",
            icon="bolt.fill",
            requirement=SpeedRunRequirement(seconds=30),
        ),
        MemoryGameAchievement(
            id="win_streak",
            title="Win Streak",
            description="Win 5 games in a row",
            icon="flame.fill",
            requirement=WinStreakRequirement(count=5),
        ),
        MemoryGameAchievement(
            id="memory_master",
            title="Memory Master",
            description="Win 25 games total",
            icon="star.fill",
            requirement=TotalWinsRequirement(count=25),
        ),
        MemoryGameAchievement(
            id="all_difficulties",
            title="All Difficulties",
            description="Win at least one game on each difficulty",
            icon="medal.fill",
            requirement=WinAllDifficultiesRequirement(),
        ),
    ]


def summarize(achievements: Iterable[MemoryGameAchievement]) -> AchievementSummary:
    """Split the catalog for display: newest unlocks first, locked in catalog order."""
    achievements = list(achievements)
    unlocked = [a for a in achievements if a.is_unlocked]
    unlocked.sort(
        key=lambda a: a.unlocked_at.timestamp() if a.unlocked_at else float("-inf"),
        reverse=True,
    )
    locked = [a for a in achievements if not a.is_unlocked]
    return AchievementSummary(unlocked=unlocked, locked=locked)
