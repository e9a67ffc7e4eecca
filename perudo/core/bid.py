"""
bid.py
Defines the Bid model for Perudo and the ace conversion arithmetic used when bidding moves
into or out of the ace sub-game.
Related modules:
- validator.py: Decides whether a Bid legally supersedes the previous one.
- engine.py: Creates bids on behalf of the current player.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Bid:
    """
    A claim that at least `quantity` dice on the table show `value`.
    Args:
        player_id (str): Player who made the bid.
        quantity (int): Number of dice claimed.
        value (int): Face value claimed (1-6). A value of 1 is an ace bid.
        timestamp (datetime): When the bid was made. Excluded from equality.
    """
    player_id: str
    quantity: int
    value: int
    timestamp: datetime = field(default_factory=_now, compare=False)

    @property
    def is_ace(self) -> bool:
        return self.value == 1


def create_bid(player_id: str, quantity: int, value: int) -> Bid:
    """Create a bid stamped with the current time."""
    return Bid(player_id=player_id, quantity=quantity, value=value)


def is_ace_bid(bid: Bid) -> bool:
    return bid.value == 1


def to_ace_quantity(quantity: int) -> int:
    """Minimum ace quantity after a normal bid of `quantity`: half, rounded up."""
    return math.ceil(quantity / 2)


def from_ace_quantity(quantity: int) -> int:
    """Minimum normal quantity after an ace bid of `quantity`: double plus one."""
    return quantity * 2 + 1
