"""
Card Deck Generator

A deck for N pairs always uses the first N currencies of the catalog;
only the board order is random.
"""

import random
from typing import Optional

from aurum_memory.models.game import Currency, Difficulty, MemoryCard


def currencies_for(difficulty: Difficulty) -> list[Currency]:
    """The currencies dealt at a difficulty, in catalog order."""
    return list(Currency)[:difficulty.pair_count]


def build_deck(
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> list[MemoryCard]:
    """
    Build a shuffled deck of 2 x pair_count face-down cards.

    Args:
        difficulty: Difficulty to deal for
        rng: Random source for the shuffle (module-level random if None)
    """
    cards = []
    for currency in currencies_for(difficulty):
        cards.append(MemoryCard(currency=currency))
        cards.append(MemoryCard(currency=currency))

    (rng or random).shuffle(cards)
    return cards
