"""
dice.py
Defines the Die record and dice rolling utilities for the Perudo engine.
Related modules:
- state.py: Players hold an ordered tuple of Die.
- rules.py: Uses roll_die to re-roll hands at the start of a round.
"""

import random
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

FACES = (1, 2, 3, 4, 5, 6)


@dataclass(frozen=True)
class Die:
    """
    A single die in a player's hand.
    Fields:
        id (str): Stable identifier; survives re-rolls.
        value (int): Face showing (1-6).
        is_visible (bool): Presentation flag only. Never affects counting or validation.
    """
    id: str
    value: int
    is_visible: bool = False


def random_die_value(rng) -> int:
    """
    Draw a uniform face in [1, 6].
    Args:
        rng: Any object exposing randint(a, b), e.g. random.Random.
    Returns:
        int: Die face (1-6).
    """
    return rng.randint(1, 6)


def create_die(die_id: str, value: Optional[int] = None, rng=None) -> Die:
    """
    Create a hidden die. A fixed value may be supplied; otherwise the face is rolled.
    Raises:
        ValueError: If a fixed value is outside 1-6.
    """
    if value is None:
        value = random_die_value(rng or random)
    elif value not in FACES:
        raise ValueError("die value must be between 1 and 6")
    return Die(id=die_id, value=value, is_visible=False)


def roll_die(die: Die, rng) -> Die:
    """Return a copy of the die showing a fresh face. Identity and visibility are kept."""
    return replace(die, value=random_die_value(rng))


def show_dice(dice: Iterable[Die]) -> Tuple[Die, ...]:
    return tuple(replace(d, is_visible=True) for d in dice)


def hide_dice(dice: Iterable[Die]) -> Tuple[Die, ...]:
    return tuple(replace(d, is_visible=False) for d in dice)
