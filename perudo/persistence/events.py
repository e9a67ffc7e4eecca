"""
events.py
Defines the GameEvent dataclass for event-sourced recording of Perudo actions and state changes.
Used by recorder.py and session.py to log every accepted action and resolution for replay or analysis.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GameEvent:
    """
    Represents a single event in the game (e.g., round started, bid placed, Dudo called).
    Fields:
        game_id (str): Game identifier.
        event_type (str): Type of event (e.g., 'BidPlaced').
        round_number (int): Round the event belongs to.
        payload (dict): Event-specific data, JSON-compatible.
        player_id (str|None): Player who acted, if the event is a player action.
    """
    game_id: str
    event_type: str
    round_number: int
    payload: Dict[str, Any] = field(default_factory=dict)
    player_id: Optional[str] = None
