"""
resolver.py
Resolves a Dudo or Calza call against the true dice count and produces a RoundResult.
Both entry points are pure: they decide who wins or loses a die but do not touch any hands.
Related modules:
- rules.py: count_matching supplies actual_count.
- engine.py: Applies the RoundResult to the players.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .bid import Bid
from .dice import Die


class ResultKind(Enum):
    """Which call produced a RoundResult."""
    DUDO = "DUDO"
    CALZA = "CALZA"


@dataclass(frozen=True)
class RoundResult:
    """
    Outcome of a Dudo or Calza call.
    Fields:
        kind (ResultKind): DUDO or CALZA.
        challenger_id (str): Player who made the call.
        challenged_player_id (str): Player who made the challenged bid.
        challenged_bid (Bid): The bid that was called.
        actual_count (int): Dice on the table matching the bid, wild aces included where allowed.
        was_correct (bool): Dudo: the bid overstated the count. Calza: the bid was exact.
        loser_player_id (str|None): Player who loses a die, if any.
        winner_player_id (str|None): Player who gains a die (successful Calza only).
        dice_changed (int): Dice lost or gained; always 1.
        all_dice (tuple[Die]): Every revealed die, player order then hand order.
    """
    kind: ResultKind
    challenger_id: str
    challenged_player_id: str
    challenged_bid: Bid
    actual_count: int
    was_correct: bool
    loser_player_id: Optional[str]
    winner_player_id: Optional[str]
    dice_changed: int
    all_dice: Tuple[Die, ...]

    @property
    def is_calza(self) -> bool:
        return self.kind is ResultKind.CALZA


def resolve_dudo(challenger_id: str, challenged_bid: Bid, actual_count: int, revealed_dice: Sequence[Die]) -> RoundResult:
    """
    The challenger claims the bid overstates reality. If fewer dice match than were bid the
    bidder loses a die, otherwise the challenger does.
    """
    was_correct = actual_count < challenged_bid.quantity
    loser = challenged_bid.player_id if was_correct else challenger_id
    return RoundResult(
        kind=ResultKind.DUDO,
        challenger_id=challenger_id,
        challenged_player_id=challenged_bid.player_id,
        challenged_bid=challenged_bid,
        actual_count=actual_count,
        was_correct=was_correct,
        loser_player_id=loser,
        winner_player_id=None,
        dice_changed=1,
        all_dice=tuple(revealed_dice),
    )


def resolve_calza(challenger_id: str, challenged_bid: Bid, actual_count: int, revealed_dice: Sequence[Die]) -> RoundResult:
    """
    The challenger claims the bid is exact. On an exact count the original bidder is
    rewarded with a die; otherwise the challenger loses one.
    """
    is_exact = actual_count == challenged_bid.quantity
    return RoundResult(
        kind=ResultKind.CALZA,
        challenger_id=challenger_id,
        challenged_player_id=challenged_bid.player_id,
        challenged_bid=challenged_bid,
        actual_count=actual_count,
        was_correct=is_exact,
        loser_player_id=None if is_exact else challenger_id,
        winner_player_id=challenged_bid.player_id if is_exact else None,
        dice_changed=1,
        all_dice=tuple(revealed_dice),
    )
