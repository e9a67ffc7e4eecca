"""
rules.py
Helper functions for Perudo rules: rolling hands and counting dice on the table, including
wild ace and Palifico handling.
Related modules:
- engine.py: Uses these helpers to roll at round start and to resolve calls.
- validator.py: total_dice bounds bid quantities.
"""

from dataclasses import replace
from typing import List, Sequence, Tuple

from .dice import Die, roll_die
from .state import Player


def roll_hand(player: Player, rng) -> Player:
    """
    Re-roll every die in a player's hand.
    Die identity and hand size are preserved; turn and activity flags are untouched.
    """
    return replace(player, dice=tuple(roll_die(d, rng) for d in player.dice))


def roll_all(players: Sequence[Player], rng) -> Tuple[Player, ...]:
    """Roll the hands of active players. Inactive players pass through unchanged."""
    return tuple(roll_hand(p, rng) if p.is_active else p for p in players)


def count_matching(players: Sequence[Player], value: int, wild_aces: bool = True, is_palifico: bool = False) -> int:
    """
    Count dice showing `value` across active players.
    Args:
        players: All players; inactive ones are skipped.
        value (int): Face value to count.
        wild_aces (bool): If True, aces count toward any non-ace value.
        is_palifico (bool): Palifico rounds never count aces as wild.
    Returns:
        int: Total count of matching dice. An ace counts at most once.
    """
    count_wild = wild_aces and not is_palifico and value != 1
    count = 0
    for player in players:
        if not player.is_active:
            continue
        for die in player.dice:
            if die.value == value:
                count += 1
            elif count_wild and die.value == 1:
                count += 1
    return count


def total_dice(players: Sequence[Player]) -> int:
    """Number of dice still in play."""
    return sum(len(p.dice) for p in players if p.is_active)


def all_dice(players: Sequence[Player]) -> List[Die]:
    """Every active player's dice, in player order then hand order."""
    dice: List[Die] = []
    for player in players:
        if player.is_active:
            dice.extend(player.dice)
    return dice
