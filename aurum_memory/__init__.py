"""
Aurum Memory - Source Package

The memory-matching mini-game engine behind the AurumFocus productivity app:
currency cards are dealt in pairs, the player flips two at a time, and
every finished game feeds lifetime stats and unlockable achievements.

DESIGN PRINCIPLES:
1. Game rules are deterministic given a clock and a random source
2. Rejected moves are answered with False, never with exceptions
3. Persistence is swappable and never fatal
4. Every state change is logged as a structured event
"""

__version__ = "1.0.0"
__author__ = "AurumFocus Team"
