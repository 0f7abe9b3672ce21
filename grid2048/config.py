"""
Configuration for a 2048 game session.

Two rules vary between known variants of the game: the odds of spawning a 2 rather than a 4, and whether a
move that changes nothing is still followed by a spawn. Both are explicit parameters here.
"""

from dataclasses import dataclass
from enum import Enum

from grid2048.core.gameboard import DEFAULT_TWO_PROBABILITY

# ##>: Even odds between 2 and 4, used by some variants of the game.
HALF_SPLIT_PROBABILITY = 0.5

# ##>: Number of cells on the board.
BOARD_CELLS = 16


class SpawnPolicy(str, Enum):
    """
    When a tile is spawned after a move.

    ON_CHANGE: Spawn only after a move that changed the grid.
    ALWAYS: Spawn after every move attempt, even a no-op one.
    """

    ON_CHANGE = 'on_change'
    ALWAYS = 'always'


@dataclass
class GameConfig:
    """
    Configuration for a game session.

    Attributes
    ----------
    two_probability : float
        Probability that a spawned tile is a 2 (otherwise a 4).
    spawn_policy : SpawnPolicy
        Whether no-op moves are followed by a spawn.
    initial_tiles : int
        Number of tiles placed when a game starts.
    seed : int | None
        Seed of the session's random generator. None draws fresh entropy.
    """

    two_probability: float = DEFAULT_TWO_PROBABILITY
    spawn_policy: SpawnPolicy = SpawnPolicy.ON_CHANGE
    initial_tiles: int = 2
    seed: int | None = None

    def __post_init__(self):
        """Validate and normalise the configuration."""
        if not 0.0 <= self.two_probability <= 1.0:
            raise ValueError(f'two_probability must be in [0, 1], got {self.two_probability}')
        if not 0 <= self.initial_tiles <= BOARD_CELLS:
            raise ValueError(f'initial_tiles must be in [0, {BOARD_CELLS}], got {self.initial_tiles}')

        # ##>: Accept the plain string value, e.g. from the command line.
        self.spawn_policy = SpawnPolicy(self.spawn_policy)


def default_config() -> GameConfig:
    """Configuration of the classic game: 90% twos, spawn only after a grid-changing move."""
    return GameConfig()


def half_split_config() -> GameConfig:
    """Configuration of the variant with even odds, spawning after every move attempt."""
    return GameConfig(two_probability=HALF_SPLIT_PROBABILITY, spawn_policy=SpawnPolicy.ALWAYS)
