"""
validator.py
Bid legality for Perudo. validate_bid is the single source of truth for whether a proposed
bid supersedes the current one; suggest_minimum_bids only offers candidate defaults.
Related modules:
- bid.py: Bid model and the ace conversion arithmetic.
- engine.py: Calls validate_bid before placing a bid.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .bid import Bid, is_ace_bid, to_ace_quantity, from_ace_quantity


class ReasonKind(Enum):
    """Why a bid was rejected."""
    INVALID_BID_QUANTITY = "InvalidBidQuantity"
    INVALID_BID_VALUE = "InvalidBidValue"
    INSUFFICIENT_DICE_IN_PLAY = "InsufficientDiceInPlay"
    PALIFICO_VALUE_LOCKED = "PalificoValueLocked"
    BID_NOT_INCREASING = "BidNotIncreasing"
    NO_ACTIVE_GAME = "NoActiveGame"


@dataclass(frozen=True)
class BidValidation:
    """
    Structured validation result. Truthy iff the bid is legal.
    Fields:
        valid (bool): Whether the bid may be placed.
        reason (ReasonKind|None): Why not, when invalid.
    """
    valid: bool
    reason: Optional[ReasonKind] = None

    def __bool__(self) -> bool:
        return self.valid


VALID = BidValidation(True)


def _invalid(reason: ReasonKind) -> BidValidation:
    return BidValidation(False, reason)


def validate_bid(new_bid: Bid, previous_bid: Optional[Bid], is_palifico: bool, total_dice_in_play: int) -> BidValidation:
    """
    Decide whether `new_bid` legally follows `previous_bid`.
    Base checks run first and the first failure wins: quantity at least 1, value 1-6,
    quantity no more than the dice in play. Any bid passing them opens a round.
    In Palifico the value is locked to the previous bid's value. Otherwise the rule depends
    on whether each bid is on aces:
      normal -> normal: more dice, or the same dice on a higher value
      normal -> ace:    at least half the previous quantity, rounded up
      ace -> normal:    at least double the previous quantity plus one
      ace -> ace:       more dice
    Timestamps are never compared.
    """
    if new_bid.quantity < 1:
        return _invalid(ReasonKind.INVALID_BID_QUANTITY)
    if not 1 <= new_bid.value <= 6:
        return _invalid(ReasonKind.INVALID_BID_VALUE)
    if new_bid.quantity > total_dice_in_play:
        return _invalid(ReasonKind.INSUFFICIENT_DICE_IN_PLAY)

    if previous_bid is None:
        return VALID

    if is_palifico and new_bid.value != previous_bid.value:
        return _invalid(ReasonKind.PALIFICO_VALUE_LOCKED)

    return _validate_increase(new_bid, previous_bid)


def _validate_increase(new_bid: Bid, previous_bid: Bid) -> BidValidation:
    new_is_ace = is_ace_bid(new_bid)
    prev_is_ace = is_ace_bid(previous_bid)

    if not new_is_ace and not prev_is_ace:
        ok = (new_bid.quantity > previous_bid.quantity
              or (new_bid.quantity == previous_bid.quantity and new_bid.value > previous_bid.value))
    elif new_is_ace and not prev_is_ace:
        ok = new_bid.quantity >= to_ace_quantity(previous_bid.quantity)
    elif not new_is_ace and prev_is_ace:
        ok = new_bid.quantity >= from_ace_quantity(previous_bid.quantity)
    else:
        ok = new_bid.quantity > previous_bid.quantity

    return VALID if ok else _invalid(ReasonKind.BID_NOT_INCREASING)


def suggest_minimum_bids(previous_bid: Optional[Bid], is_palifico: bool) -> List[Tuple[int, int]]:
    """
    Offer a few (quantity, value) candidates a caller may present as defaults.
    Advisory only: candidates are not checked against the dice in play.
    """
    if previous_bid is None:
        return [(1, 2)]

    q, v = previous_bid.quantity, previous_bid.value
    if is_palifico:
        return [(q + 1, v)]

    if not is_ace_bid(previous_bid):
        suggestions = []
        if v < 6:
            suggestions.append((q, v + 1))
        suggestions.append((q + 1, v))
        suggestions.append((to_ace_quantity(q), 1))
        return suggestions

    return [(q + 1, 1), (from_ace_quantity(q), 2)]
