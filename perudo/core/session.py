"""
session.py
Implements GameSession, the holder of the current GameState. It gates actions by phase,
forwards them to the GameEngine, replaces its snapshot with the engine's result, and emits
events and per-action snapshots for tracing and replay.
Related modules:
- engine.py: All rule logic; the session only decides whether an action is allowed now.
- actions.py: apply_action dispatches on Action types.
- persistence/recorder.py: Optional sink for emitted events.
- persistence/serializer.py: Snapshots in turn_log are serialized states.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .actions import Action, BidAction, CallCalzaAction, CallDudoAction
from .bid import Bid
from .engine import GameEngine, IllegalMoveError
from .resolver import RoundResult
from .rules import total_dice
from .state import GamePhase, GameState, Player
from .validator import BidValidation, ReasonKind, suggest_minimum_bids
from perudo.persistence import serializer
from perudo.persistence.events import GameEvent

logger = logging.getLogger(__name__)


class NoGameError(IllegalMoveError):
    """Raised when an action needs a game and none is in progress."""
    pass


class PhaseError(IllegalMoveError):
    """Raised when an action is not allowed in the current phase."""
    pass


class GameSession:
    """
    Single owner of the current game snapshot. Callers submit actions here rather than to
    the engine so that phase gating happens before any rule is evaluated.
    """
    def __init__(self, engine: Optional[GameEngine] = None, recorder=None):
        """
        Args:
            engine (GameEngine|None): Engine to forward actions to. A default one is built if omitted.
            recorder: Optional object with record(GameEvent), e.g. InMemoryRecorder.
        """
        self.engine = engine or GameEngine()
        self.recorder = recorder
        self._state: Optional[GameState] = None
        self._history: List[GameState] = []
        self._events: List[Dict] = []
        # per-action snapshots that can be serialized to JSON
        self.turn_log: List[Dict] = []

    # -- projections -------------------------------------------------------------------

    @property
    def state(self) -> Optional[GameState]:
        return self._state

    @property
    def history(self) -> Tuple[GameState, ...]:
        """Every snapshot held by this session for the current game, oldest first."""
        return tuple(self._history)

    @property
    def is_game_active(self) -> bool:
        return self._state is not None

    @property
    def current_player(self) -> Optional[Player]:
        return self.engine.current_player(self._state) if self._state else None

    @property
    def active_players(self) -> List[Player]:
        return self.engine.active_players(self._state) if self._state else []

    @property
    def current_bid(self) -> Optional[Bid]:
        return self._state.current_bid if self._state else None

    @property
    def phase(self) -> Optional[GamePhase]:
        return self._state.phase if self._state else None

    @property
    def last_round_result(self) -> Optional[RoundResult]:
        return self._state.last_round_result if self._state else None

    @property
    def is_palifico(self) -> bool:
        return self._state.is_palifico if self._state else False

    @property
    def total_dice_count(self) -> int:
        return total_dice(self._state.players) if self._state else 0

    @property
    def winner(self) -> Optional[Player]:
        """The winning player once the game is over; None before that."""
        if self._state is None or self._state.phase is not GamePhase.GAME_OVER:
            return None
        return self.engine.winner(self._state)

    # -- actions -----------------------------------------------------------------------

    def start_game(self, player_names: Sequence[str]) -> GameState:
        """Start a new game, discarding any game in progress."""
        state = self.engine.start_new_game(player_names)
        self._history = []
        self._events = []
        self.turn_log = []
        self._update(state)
        self._emit({"type": "GameStarted", "players": [p.name for p in state.players]})
        self._emit_round_started()
        self._snapshot(actor=None, action=None)
        return state

    def validate_bid(self, quantity: int, value: int) -> BidValidation:
        if self._state is None:
            return BidValidation(False, ReasonKind.NO_ACTIVE_GAME)
        return self.engine.validate_bid(self._state, quantity, value)

    def suggest_bids(self) -> List[Tuple[int, int]]:
        """Candidate (quantity, value) defaults for the current player."""
        state = self._require_phase("suggest bids", GamePhase.BIDDING)
        return suggest_minimum_bids(state.current_bid, state.is_palifico)

    def place_bid(self, quantity: int, value: int) -> GameState:
        state = self._require_phase("bid", GamePhase.BIDDING)
        actor = self.engine.current_player(state).id
        new_state = self.engine.place_bid(state, quantity, value)
        self._update(new_state)
        self._emit({"type": "BidPlaced", "quantity": quantity, "value": value}, player_id=actor)
        self._snapshot(actor=actor, action={"type": "Bid", "bid": (quantity, value)})
        return new_state

    def call_dudo(self) -> GameState:
        return self._challenge("Dudo", self.engine.call_dudo)

    def call_calza(self) -> GameState:
        return self._challenge("Calza", self.engine.call_calza)

    def _challenge(self, name: str, transition) -> GameState:
        state = self._require_phase(f"call {name}", GamePhase.BIDDING)
        actor = self.engine.current_player(state).id
        new_state = transition(state)
        self._update(new_state)
        result = new_state.last_round_result
        self._emit({"type": f"{name}Called"}, player_id=actor)
        self._emit({"type": "DiceRevealed", "all_dice": [(d.id, d.value) for d in result.all_dice]})
        self._emit({
            "type": "RoundResolved",
            "kind": result.kind.value,
            "actual_count": result.actual_count,
            "was_correct": result.was_correct,
            "loser": result.loser_player_id,
            "winner": result.winner_player_id,
        })
        self._snapshot(actor=actor, action={"type": name})
        return new_state

    def continue_to_next_round(self) -> GameState:
        """End the resolved round and, unless the game is over, roll the next one."""
        state = self._require_phase("continue", GamePhase.DUDO_CHALLENGE)
        ended = self.engine.end_round(state)
        if ended.phase is GamePhase.GAME_OVER:
            self._update(ended)
            self._emit({"type": "GameOver", "winner": self.engine.winner(ended).id})
        else:
            self._update(self.engine.start_new_round(ended))
            self._emit_round_started()
        self._snapshot(actor=None, action={"type": "Continue"})
        return self._state

    def apply_action(self, action: Action) -> GameState:
        """
        Apply a player action for the current player.
        Raises:
            IllegalMoveError: If the action is unknown or not allowed now.
        """
        if isinstance(action, BidAction):
            return self.place_bid(action.quantity, action.value)
        if isinstance(action, CallDudoAction):
            return self.call_dudo()
        if isinstance(action, CallCalzaAction):
            return self.call_calza()
        raise IllegalMoveError("Unknown action")

    def undo(self) -> GameState:
        """Restore the snapshot held before the latest accepted action."""
        if len(self._history) < 2:
            raise IllegalMoveError("nothing to undo")
        self._history.pop()
        self.turn_log.pop()
        self._state = self._history[-1]
        self._emit({"type": "Undone"})
        return self._state

    def reset_game(self) -> None:
        """Drop the current game along with its snapshots, events and turn log."""
        self._state = None
        self._history = []
        self._events = []
        self.turn_log = []

    # -- internals ---------------------------------------------------------------------

    def _require_phase(self, action: str, phase: GamePhase) -> GameState:
        if self._state is None:
            raise NoGameError(f"cannot {action}: no game in progress")
        if self._state.phase is not phase:
            logger.info("rejected %s in phase %s", action, self._state.phase.value)
            raise PhaseError(f"cannot {action} during {self._state.phase.value}")
        return self._state

    def _update(self, state: GameState) -> None:
        self._state = state
        self._history.append(state)

    def _emit_round_started(self):
        self._emit({
            "type": "RoundStarted",
            "palifico": self._state.is_palifico,
            "opener": self.engine.current_player(self._state).id,
            "total_dice": total_dice(self._state.players),
        })

    def _emit(self, event: Dict, player_id: Optional[str] = None):
        self._events.append(event)
        if self.recorder is not None:
            payload = {k: v for k, v in event.items() if k != "type"}
            self.recorder.record(GameEvent(
                game_id=self._state.id,
                event_type=event["type"],
                round_number=self._state.round_number,
                payload=payload,
                player_id=player_id,
            ))

    def pop_events(self):
        """
        Return and clear all emitted events since last call.
        Returns:
            list[dict]: List of event dicts.
        """
        ev = list(self._events)
        self._events.clear()
        return ev

    def get_events(self):
        """Return all events emitted so far (does not clear)."""
        return list(self._events)

    def _snapshot(self, actor: Optional[str], action: Optional[Dict]) -> Dict:
        snap = {
            "actor": actor,
            "action": action,
            "state": serializer.state_to_dict(self._state),
        }
        self.turn_log.append(snap)
        return snap
