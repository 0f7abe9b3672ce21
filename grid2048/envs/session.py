"""Game session: a grid engine, its running score, and the rules deciding when the game is over."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from numpy import array_equal, ndarray
from numpy.random import Generator, default_rng

from grid2048.config import GameConfig, SpawnPolicy
from grid2048.core.gamemove import Direction
from grid2048.envs.grid import Grid

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """Logical state of a session."""

    PLAYABLE = 'playable'
    OVER = 'over'


@dataclass(frozen=True, eq=False)
class StepResult:
    """
    Outcome of a single step.

    Attributes
    ----------
    board : ndarray
        Copy of the grid after the move and any spawn.
    score_delta : int
        Sum of the merge results produced by the move.
    changed : bool
        Whether the move itself changed the grid.
    spawned : bool
        Whether a tile was spawned after the move.
    done : bool
        Whether the session is over after this step.
    """

    board: ndarray
    score_delta: int
    changed: bool
    spawned: bool
    done: bool

    def __eq__(self, other) -> bool:
        if not isinstance(other, StepResult):
            return NotImplemented
        return (
            (self.score_delta, self.changed, self.spawned, self.done)
            == (other.score_delta, other.changed, other.spawned, other.done)
            and bool(array_equal(self.board, other.board))
        )

    def __hash__(self) -> int:
        return hash((self.board.tobytes(), self.score_delta, self.changed, self.spawned, self.done))


class GameSession:
    """
    A single game of 2048.

    The session owns the grid and the score; callers drive it with ``step`` and read ``board`` and
    ``score`` back. Only ``reset`` and ``step`` are serialised by the session lock; the properties read
    without it, and calling ``grid.move`` or ``grid.spawn_random_tile`` directly bypasses the lock and the
    score.
    """

    def __init__(self, config: GameConfig | None = None, rng: Generator | None = None):
        """
        Create a session and start a first game.

        Parameters
        ----------
        config : GameConfig, optional
            Rules of the session (default is the classic configuration).
        rng : Generator, optional
            Random source. When omitted, one is created from ``config.seed``.
        """
        self.config = config if config is not None else GameConfig()
        self._lock = threading.Lock()
        self._grid = Grid(
            rng=rng if rng is not None else default_rng(self.config.seed),
            two_probability=self.config.two_probability,
        )
        self._score = 0
        self._moves = 0
        self._status = Status.PLAYABLE
        self._start()

    def _start(self) -> None:
        """Clear the grid and place the initial tiles."""
        self._grid.clear()
        for _ in range(self.config.initial_tiles):
            self._grid.spawn_random_tile()
        self._score = 0
        self._moves = 0
        self._status = Status.OVER if self._grid.is_stuck else Status.PLAYABLE

    @property
    def grid(self) -> Grid:
        """
        The grid engine of this session.

        Meant for read access such as ``legal_moves``. Mutating it directly skips the lock, the score and
        the game-over rules.
        """
        return self._grid

    @property
    def board(self) -> ndarray:
        """Read-only view of the current grid."""
        return self._grid.cells

    @property
    def score(self) -> int:
        """Sum of every score delta since the game started."""
        return self._score

    @property
    def moves(self) -> int:
        """Number of moves that changed the grid since the game started."""
        return self._moves

    @property
    def status(self) -> Status:
        """Current state of the session."""
        return self._status

    @property
    def is_finished(self) -> bool:
        """Check if the game is over."""
        return self._status is Status.OVER

    def reset(self, seed: int | None = None) -> ndarray:
        """
        Start a new game.

        Parameters
        ----------
        seed : int, optional
            Re-seed the random source before spawning the initial tiles.

        Returns
        -------
        ndarray
            Read-only view of the new grid.
        """
        with self._lock:
            if seed is not None:
                self._grid.rng = default_rng(seed)
            self._start()
        return self.board

    def step(self, direction: Direction | int | str) -> StepResult:
        """
        Apply a move, accumulate its score, then spawn according to the spawn policy.

        Parameters
        ----------
        direction : Direction | int | str
            The move, as a Direction, its integer value or its name.

        Returns
        -------
        StepResult
            The grid after the step and what happened during it.

        Notes
        -----
        - The session becomes over when an attempted spawn finds no empty cell, or when the grid is
          left with no move that would change it.
        - Once over, ``step`` leaves the grid and score untouched.
        """
        if isinstance(direction, str):
            direction = Direction.from_name(direction)
        direction = Direction.coerce(direction)

        with self._lock:
            if self._status is Status.OVER:
                logger.debug('Ignoring move %s: game is over', direction.name)
                return StepResult(self._grid.cells.copy(), 0, False, False, True)

            before = self._grid.cells.copy()
            delta = self._grid.move(direction)
            changed = not (before == self._grid.cells).all()

            self._score += delta
            if changed:
                self._moves += 1

            spawned = False
            if changed or self.config.spawn_policy is SpawnPolicy.ALWAYS:
                spawned = self._grid.spawn_random_tile()
                if not spawned:
                    self._status = Status.OVER
            logger.debug('Step %s: delta %d, changed %s, spawned %s', direction.name, delta, changed, spawned)

            if self._grid.is_stuck:
                self._status = Status.OVER

            done = self._status is Status.OVER
            if done:
                logger.info(
                    'Game over after %d moves: score %d, max tile %d', self._moves, self._score, self._grid.max_tile
                )

            return StepResult(self._grid.cells.copy(), delta, changed, spawned, done)
