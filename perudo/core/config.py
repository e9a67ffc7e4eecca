"""
config.py
Defines the GameConfig dataclass, which centralizes the rule options and numeric constraints for a Perudo game.
Related modules:
- engine.py: Uses GameConfig to build players and to cap dice gained on a successful Calza.
- state.py: GameState carries the GameConfig it was started with.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class GameConfig:
    """
    Centralizes all rule options for a Perudo game. Immutable for the life of a game.
    Fields:
        min_players (int): Fewest players allowed at the table (default 2).
        max_players (int): Most players allowed at the table (default 6).
        starting_dice_per_player (int): Hand size at game start; also the cap for Calza gains.
        enable_palifico (bool): If True, a round where any active player holds one die is played as Palifico.
        rng_seed (int|None): Seed for the engine's default RNG. None means non-deterministic.
    """
    min_players: int = 2
    max_players: int = 6
    starting_dice_per_player: int = 5
    enable_palifico: bool = True
    rng_seed: Optional[int] = None

    def __post_init__(self):
        if self.min_players < 2:
            raise ValueError("min_players must be at least 2")
        if self.max_players < self.min_players:
            raise ValueError(f"max_players ({self.max_players}) must be >= min_players ({self.min_players})")
        if self.starting_dice_per_player < 1:
            raise ValueError("starting_dice_per_player must be at least 1")

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is allowed by this configuration."""
        return self.min_players <= player_count <= self.max_players


DEFAULT_GAME_CONFIG = GameConfig()


def create_config(**overrides) -> GameConfig:
    """Create a GameConfig from the defaults with optional overrides."""
    return replace(DEFAULT_GAME_CONFIG, **overrides)
