"""
state.py
Defines all game state records for Perudo: Player, GamePhase and GameState.
Every record is frozen; transitions build a new record with dataclasses.replace so that
earlier snapshots stay valid for replay, undo and tests.
Related modules:
- engine.py: Produces a new GameState for every transition.
- bid.py: Bids are held in current_bid and bid_history.
- resolver.py: RoundResult is kept as last_round_result.
- config.py: GameConfig is part of GameState.
"""

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from .bid import Bid
from .config import GameConfig, DEFAULT_GAME_CONFIG
from .dice import Die, create_die
from .resolver import RoundResult


class GamePhase(Enum):
    """Lifecycle phase of a game."""
    SETUP = "SETUP"
    ROLLING = "ROLLING"
    BIDDING = "BIDDING"
    DUDO_CHALLENGE = "DUDO_CHALLENGE"
    ROUND_END = "ROUND_END"
    GAME_OVER = "GAME_OVER"


@dataclass(frozen=True)
class Player:
    """
    A seat at the table.
    Fields:
        id (str): Player identifier.
        name (str): Display name.
        dice (tuple[Die]): Hand, in order. Empty once eliminated.
        is_active (bool): False iff dice is empty.
        is_current_turn (bool): True for the single player expected to act.
        position (int): Fixed seat in the cyclic turn order (0..N-1).
    """
    id: str
    name: str
    dice: Tuple[Die, ...] = ()
    is_active: bool = True
    is_current_turn: bool = False
    position: int = 0


def create_player(player_id: str, name: str, position: int, number_of_dice: int = 5, rng=None) -> Player:
    """
    Create a player holding `number_of_dice` freshly rolled, hidden dice.
    The player in position 0 starts with the turn.
    """
    dice = tuple(create_die(f"{player_id}-die-{i}", rng=rng) for i in range(number_of_dice))
    return Player(
        id=player_id,
        name=name,
        dice=dice,
        is_active=number_of_dice > 0,
        is_current_turn=position == 0,
        position=position,
    )


def remove_die(player: Player) -> Player:
    """Drop the last die from the hand. A hand never goes below zero; an empty hand is inactive."""
    if not player.dice:
        return replace(player, is_active=False)
    dice = player.dice[:-1]
    return replace(player, dice=dice, is_active=len(dice) > 0)


def add_die(player: Player, max_dice: int = 5, rng=None) -> Player:
    """
    Add one die to the hand unless it already holds `max_dice` or more.
    An existing excess over the cap is left as is.
    """
    if len(player.dice) >= max_dice:
        return player
    taken = {d.id for d in player.dice}
    index = len(player.dice)
    while f"{player.id}-die-{index}" in taken:
        index += 1
    new_die = create_die(f"{player.id}-die-{index}", rng=rng)
    return replace(player, dice=player.dice + (new_die,), is_active=True)


def is_in_palifico(player: Player) -> bool:
    """True if the player is active with exactly one die."""
    return player.is_active and len(player.dice) == 1


@dataclass(frozen=True)
class GameState:
    """
    Single authoritative snapshot of a game. Replaced wholesale on every transition.
    Fields:
        id (str): Game identifier.
        phase (GamePhase): Lifecycle phase.
        players (tuple[Player]): All seats in turn order, eliminated players included.
        current_player_index (int): Index into players of the player expected to act.
        current_bid (Bid|None): Latest bid this round; None before the opening bid.
        bid_history (tuple[Bid]): Every bid of the current round, oldest first.
        round_number (int): Starts at 1; increases at every end_round that does not end the game.
        is_palifico (bool): Fixed for the whole round when it starts.
        last_round_result (RoundResult|None): Outcome of the latest Dudo/Calza; cleared by a new round.
        config (GameConfig): Rules this game is played with.
    """
    id: str
    phase: GamePhase
    players: Tuple[Player, ...]
    current_player_index: int = 0
    current_bid: Optional[Bid] = None
    bid_history: Tuple[Bid, ...] = ()
    round_number: int = 1
    is_palifico: bool = False
    last_round_result: Optional[RoundResult] = None
    config: GameConfig = DEFAULT_GAME_CONFIG


def new_game_id() -> str:
    return f"game-{uuid.uuid4().hex[:12]}"


def create_initial_game_state(players: Sequence[Player], config: GameConfig = DEFAULT_GAME_CONFIG) -> GameState:
    """Build the pre-roll snapshot of a new game: phase ROLLING, round 1, player 0 to act."""
    return GameState(
        id=new_game_id(),
        phase=GamePhase.ROLLING,
        players=tuple(players),
        current_player_index=0,
        current_bid=None,
        bid_history=(),
        round_number=1,
        is_palifico=False,
        last_round_result=None,
        config=config,
    )
