"""
actions.py
Defines the base Action type and concrete action classes a player can submit during bidding.
Related modules:
- session.py: GameSession.apply_action dispatches on these types.
"""

from dataclasses import dataclass


class Action:
    """
    Base class for all player actions. Subclassed by BidAction, CallDudoAction and CallCalzaAction.
    """
    pass


@dataclass(frozen=True)
class BidAction(Action):
    """
    A bid: the current player claims there are at least `quantity` dice showing `value`.
    Args:
        quantity (int): Number of dice claimed.
        value (int): Face value claimed (1-6).
    """
    quantity: int
    value: int


@dataclass(frozen=True)
class CallDudoAction(Action):
    """Challenge the current bid as an overstatement."""
    pass


@dataclass(frozen=True)
class CallCalzaAction(Action):
    """Claim the current bid is exactly right."""
    pass
