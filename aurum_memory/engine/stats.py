"""
Stats Aggregator

Folds the outcome of a finished game into the lifetime stats.
"""

from aurum_memory.models.game import Difficulty, MemoryGameStats


def record_game(
    stats: MemoryGameStats,
    *,
    won: bool,
    moves: int,
    time: float,
    difficulty: Difficulty,
) -> MemoryGameStats:
    """
    Record a finished game in place and return the same stats object.

    Only wins count towards total moves, bests and per-difficulty wins.
    A loss only breaks the current streak.
    """
    stats.games_played += 1

    if not won:
        stats.current_streak = 0
        return stats

    stats.games_won += 1
    stats.total_moves += moves
    stats.current_streak += 1
    stats.longest_streak = max(stats.longest_streak, stats.current_streak)

    if stats.best_time == 0 or time < stats.best_time:
        stats.best_time = time

    if stats.best_moves == 0 or moves < stats.best_moves:
        stats.best_moves = moves

    stats.wins_by_difficulty[difficulty] = stats.wins_for(difficulty) + 1
    return stats
