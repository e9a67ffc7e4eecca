"""
engine.py
Implements the GameEngine class, the Perudo state machine. Every operation takes a GameState
snapshot and returns a new one; no snapshot is ever modified in place.
Lifecycle: SETUP -> ROLLING -> BIDDING <-> DUDO_CHALLENGE -> ROUND_END -> BIDDING ... | GAME_OVER
Related modules:
- config.py: GameConfig sets starting hand size and Palifico.
- state.py: GameState, Player and GamePhase.
- rules.py: Rolling and dice counting.
- validator.py: Bid legality.
- resolver.py: Dudo/Calza outcomes.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .bid import Bid, create_bid
from .config import GameConfig, DEFAULT_GAME_CONFIG
from .dice import Die, hide_dice, show_dice
from .resolver import RoundResult, resolve_dudo, resolve_calza
from .rules import roll_all, count_matching, total_dice, all_dice
from .state import (
    GamePhase,
    GameState,
    Player,
    add_die,
    create_initial_game_state,
    create_player,
    is_in_palifico,
    remove_die,
)
from .validator import BidValidation, ReasonKind, validate_bid

logger = logging.getLogger(__name__)


class IllegalMoveError(Exception):
    """
    Raised when an operation is used outside its contract (no bid to call, illegal bid,
    finished game). Never raised for a bid that merely fails validation in validate_bid.
    """
    pass


class NoActiveBidError(IllegalMoveError):
    """Raised by call_dudo/call_calza when there is no bid to challenge."""
    pass


class IllegalBidError(IllegalMoveError):
    """Raised by place_bid when the bid fails validation. Carries the ReasonKind."""

    def __init__(self, reason: ReasonKind, quantity: int, value: int):
        self.reason = reason
        self.quantity = quantity
        self.value = value
        super().__init__(f"[{reason.value}] illegal bid: quantity={quantity}, value={value}")


class GameEngine:
    """
    Main state machine for Perudo. Holds only the rules (config) and the dice source (rng);
    all game data lives in the GameState snapshots passed in and returned.
    """
    def __init__(self, config: Optional[GameConfig] = None, rng=None):
        """
        Args:
            config (GameConfig|None): Rules for new games. Defaults to DEFAULT_GAME_CONFIG.
            rng: Dice source exposing randint(a, b). Defaults to random.Random(config.rng_seed).
        """
        self.config = config or DEFAULT_GAME_CONFIG
        self.rng = rng if rng is not None else random.Random(self.config.rng_seed)

    # -- lifecycle ---------------------------------------------------------------------

    def start_new_game(self, player_names: Sequence[str]) -> GameState:
        """
        Seat one player per name in input order, deal starting hands and roll the first round.
        Raises:
            ValueError: If the number of names is outside the configured player range.
        """
        names = list(player_names)
        if not self.config.validate_player_count(len(names)):
            raise ValueError(
                f"need between {self.config.min_players} and {self.config.max_players} players, got {len(names)}"
            )
        players = [
            create_player(f"player-{i}", name, i, self.config.starting_dice_per_player, rng=self.rng)
            for i, name in enumerate(names)
        ]
        state = create_initial_game_state(players, self.config)
        logger.debug("game %s created with %d players", state.id, len(players))
        return self.start_new_round(state)

    def start_new_round(self, state: GameState) -> GameState:
        """
        Roll every active hand, decide Palifico for the round, clear bids and the previous
        result, and open bidding. The opener is whoever the last resolution set as current
        (player 0 at game start); if that player was eliminated the turn moves to the next
        active player.
        """
        if state.phase is GamePhase.GAME_OVER:
            raise IllegalMoveError("game is over")
        players = tuple(replace(p, dice=hide_dice(p.dice)) for p in roll_all(state.players, self.rng))
        palifico = state.config.enable_palifico and any(is_in_palifico(p) for p in players)

        opener = state.current_player_index
        if not players[opener].is_active:
            opener = _next_active_index(players, opener)

        logger.debug("round %d started (palifico=%s, opener=%s)", state.round_number, palifico, players[opener].id)
        return replace(
            state,
            phase=GamePhase.BIDDING,
            players=_with_current_turn(players, opener),
            current_player_index=opener,
            current_bid=None,
            bid_history=(),
            is_palifico=palifico,
            last_round_result=None,
        )

    # -- bidding -----------------------------------------------------------------------

    def validate_bid(self, state: GameState, quantity: int, value: int) -> BidValidation:
        """Check a bid by the current player against the current bid and the dice in play."""
        new_bid = create_bid(self.current_player(state).id, quantity, value)
        return validate_bid(new_bid, state.current_bid, state.is_palifico, total_dice(state.players))

    def place_bid(self, state: GameState, quantity: int, value: int) -> GameState:
        """
        Place a bid for the current player and pass the turn to the next active player.
        Raises:
            IllegalBidError: If the bid fails validation. Nothing is clamped or corrected.
        """
        bidder = self.current_player(state)
        new_bid = create_bid(bidder.id, quantity, value)
        validation = validate_bid(new_bid, state.current_bid, state.is_palifico, total_dice(state.players))
        if not validation.valid:
            raise IllegalBidError(validation.reason, quantity, value)

        next_index = _next_active_index(state.players, state.current_player_index)
        logger.debug("%s bids %d x %d", bidder.id, quantity, value)
        return replace(
            state,
            current_bid=new_bid,
            bid_history=state.bid_history + (new_bid,),
            current_player_index=next_index,
            players=_with_current_turn(state.players, next_index),
        )

    # -- challenges --------------------------------------------------------------------

    def call_dudo(self, state: GameState) -> GameState:
        """
        The current player calls Dudo on the current bid. The loser gives up one die and
        opens the next round.
        Raises:
            NoActiveBidError: If no bid has been made this round.
        """
        challenged_bid, actual_count, revealed = self._reveal(state, "Dudo")
        result = resolve_dudo(self.current_player(state).id, challenged_bid, actual_count, revealed)

        players = tuple(remove_die(p) if p.id == result.loser_player_id else p for p in state.players)
        return self._after_challenge(state, players, result, result.loser_player_id)

    def call_calza(self, state: GameState) -> GameState:
        """
        The current player calls Calza on the current bid. If the count is exact the bidder
        gains a die (never beyond the starting hand size) and opens the next round; otherwise
        the caller loses a die and opens.
        Raises:
            NoActiveBidError: If no bid has been made this round.
        """
        challenged_bid, actual_count, revealed = self._reveal(state, "Calza")
        result = resolve_calza(self.current_player(state).id, challenged_bid, actual_count, revealed)

        cap = state.config.starting_dice_per_player
        players = []
        for p in state.players:
            if result.winner_player_id is not None and p.id == result.winner_player_id:
                p = add_die(p, cap, rng=self.rng)
            elif result.loser_player_id is not None and p.id == result.loser_player_id:
                p = remove_die(p)
            players.append(p)

        next_id = result.winner_player_id or result.loser_player_id
        return self._after_challenge(state, tuple(players), result, next_id)

    def _reveal(self, state: GameState, call: str) -> Tuple[Bid, int, Tuple[Die, ...]]:
        if state.current_bid is None:
            raise NoActiveBidError(f"cannot call {call} without a bid")
        bid = state.current_bid
        actual_count = count_matching(state.players, bid.value, True, state.is_palifico)
        revealed = show_dice(all_dice(state.players))
        return bid, actual_count, revealed

    def _after_challenge(self, state: GameState, players: Tuple[Player, ...], result: RoundResult,
                         next_player_id: str) -> GameState:
        next_index = next(i for i, p in enumerate(players) if p.id == next_player_id)
        logger.debug(
            "%s resolved: bid %d x %d, actual %d, loser=%s, winner=%s",
            result.kind.value,
            result.challenged_bid.quantity,
            result.challenged_bid.value,
            result.actual_count,
            result.loser_player_id,
            result.winner_player_id,
        )
        return replace(
            state,
            phase=GamePhase.DUDO_CHALLENGE,
            players=_with_current_turn(players, next_index),
            last_round_result=result,
            current_player_index=next_index,
        )

    def end_round(self, state: GameState) -> GameState:
        """
        Close the resolved round. With a single active player left the game is over;
        otherwise the round counter moves on and the caller starts the next round.
        """
        if state.phase is GamePhase.GAME_OVER:
            raise IllegalMoveError("game is over")
        if len(self.active_players(state)) == 1:
            logger.debug("game %s over, winner %s", state.id, self.winner(state).id)
            return replace(state, phase=GamePhase.GAME_OVER)
        return replace(state, phase=GamePhase.ROUND_END, round_number=state.round_number + 1)

    # -- queries -----------------------------------------------------------------------

    def current_player(self, state: GameState) -> Player:
        return state.players[state.current_player_index]

    def active_players(self, state: GameState) -> List[Player]:
        return [p for p in state.players if p.is_active]

    def winner(self, state: GameState) -> Optional[Player]:
        """The sole remaining active player, whatever the phase; None while two or more remain."""
        active = self.active_players(state)
        return active[0] if len(active) == 1 else None


def _next_active_index(players: Sequence[Player], index: int) -> int:
    n = len(players)
    for step in range(1, n + 1):
        candidate = (index + step) % n
        if players[candidate].is_active:
            return candidate
    raise IllegalMoveError("no active player left")


def _with_current_turn(players: Sequence[Player], current_index: int) -> Tuple[Player, ...]:
    return tuple(
        p if p.is_current_turn == (i == current_index) else replace(p, is_current_turn=i == current_index)
        for i, p in enumerate(players)
    )
