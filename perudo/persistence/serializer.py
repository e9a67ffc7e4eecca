"""
serializer.py
Converts GameState snapshots to and from JSON-compatible dicts and JSON strings.
Enums are written by value and bid timestamps as ISO-8601 strings.
Used by session.py for turn_log snapshots and by callers that persist or transmit games.
"""

import json
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional

from perudo.core.bid import Bid
from perudo.core.config import GameConfig
from perudo.core.dice import Die
from perudo.core.resolver import ResultKind, RoundResult
from perudo.core.state import GamePhase, GameState, Player


def die_to_dict(die: Die) -> Dict[str, Any]:
    return {"id": die.id, "value": die.value, "is_visible": die.is_visible}


def die_from_dict(data: Dict[str, Any]) -> Die:
    return Die(id=data["id"], value=int(data["value"]), is_visible=bool(data.get("is_visible", False)))


def bid_to_dict(bid: Optional[Bid]) -> Optional[Dict[str, Any]]:
    if bid is None:
        return None
    return {
        "player_id": bid.player_id,
        "quantity": bid.quantity,
        "value": bid.value,
        "timestamp": bid.timestamp.isoformat(),
    }


def bid_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Bid]:
    if data is None:
        return None
    return Bid(
        player_id=data["player_id"],
        quantity=int(data["quantity"]),
        value=int(data["value"]),
        timestamp=datetime.fromisoformat(data["timestamp"]),
    )


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "dice": [die_to_dict(d) for d in player.dice],
        "is_active": player.is_active,
        "is_current_turn": player.is_current_turn,
        "position": player.position,
    }


def player_from_dict(data: Dict[str, Any]) -> Player:
    return Player(
        id=data["id"],
        name=data["name"],
        dice=tuple(die_from_dict(d) for d in data["dice"]),
        is_active=bool(data["is_active"]),
        is_current_turn=bool(data["is_current_turn"]),
        position=int(data["position"]),
    )


def result_to_dict(result: Optional[RoundResult]) -> Optional[Dict[str, Any]]:
    if result is None:
        return None
    return {
        "kind": result.kind.value,
        "challenger_id": result.challenger_id,
        "challenged_player_id": result.challenged_player_id,
        "challenged_bid": bid_to_dict(result.challenged_bid),
        "actual_count": result.actual_count,
        "was_correct": result.was_correct,
        "loser_player_id": result.loser_player_id,
        "winner_player_id": result.winner_player_id,
        "dice_changed": result.dice_changed,
        "all_dice": [die_to_dict(d) for d in result.all_dice],
    }


def result_from_dict(data: Optional[Dict[str, Any]]) -> Optional[RoundResult]:
    if data is None:
        return None
    return RoundResult(
        kind=ResultKind(data["kind"]),
        challenger_id=data["challenger_id"],
        challenged_player_id=data["challenged_player_id"],
        challenged_bid=bid_from_dict(data["challenged_bid"]),
        actual_count=int(data["actual_count"]),
        was_correct=bool(data["was_correct"]),
        loser_player_id=data["loser_player_id"],
        winner_player_id=data["winner_player_id"],
        dice_changed=int(data["dice_changed"]),
        all_dice=tuple(die_from_dict(d) for d in data["all_dice"]),
    )


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Serialize a GameState to a JSON-compatible dict."""
    return {
        "id": state.id,
        "phase": state.phase.value,
        "players": [player_to_dict(p) for p in state.players],
        "current_player_index": state.current_player_index,
        "current_bid": bid_to_dict(state.current_bid),
        "bid_history": [bid_to_dict(b) for b in state.bid_history],
        "round_number": state.round_number,
        "is_palifico": state.is_palifico,
        "last_round_result": result_to_dict(state.last_round_result),
        "config": asdict(state.config),
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """Rebuild a GameState from the output of state_to_dict."""
    return GameState(
        id=data["id"],
        phase=GamePhase(data["phase"]),
        players=tuple(player_from_dict(p) for p in data["players"]),
        current_player_index=int(data["current_player_index"]),
        current_bid=bid_from_dict(data["current_bid"]),
        bid_history=tuple(bid_from_dict(b) for b in data["bid_history"]),
        round_number=int(data["round_number"]),
        is_palifico=bool(data["is_palifico"]),
        last_round_result=result_from_dict(data.get("last_round_result")),
        config=GameConfig(**data["config"]),
    )


def dumps(state: GameState) -> str:
    """
    Serialize a GameState to a JSON string.
    Args:
        state: Snapshot to serialize.
    Returns:
        str: JSON string.
    """
    return json.dumps(state_to_dict(state))


def loads(s: str) -> GameState:
    """
    Deserialize a JSON string produced by dumps back into a GameState.
    Args:
        s (str): JSON string.
    Returns:
        GameState: The rebuilt snapshot.
    """
    return state_from_dict(json.loads(s))
