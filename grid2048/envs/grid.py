"""The grid engine: sole owner of the 4x4 tile matrix."""

import logging
from collections.abc import Iterable

from numpy import array, count_nonzero, int64, ndarray, zeros
from numpy.random import Generator, default_rng

from grid2048.core.gameboard import DEFAULT_TWO_PROBABILITY, apply_move, fill_cells, is_done
from grid2048.core.gamemove import Direction, legal_actions, legal_actions_mask

logger = logging.getLogger(__name__)


class Grid:
    """
    A 4x4 grid of tiles.

    The matrix is mutated only through ``move``, ``spawn_random_tile`` and ``clear``; callers read it
    through the read-only ``cells`` view.
    """

    SIZE = 4

    def __init__(self, rng: Generator | None = None, two_probability: float = DEFAULT_TWO_PROBABILITY):
        """
        Create an empty grid.

        Parameters
        ----------
        rng : Generator, optional
            Random source used for spawning. A fresh unseeded generator is created when omitted.
        two_probability : float, optional
            Probability that a spawned tile is a 2 (default is 0.9).
        """
        if not 0.0 <= two_probability <= 1.0:
            raise ValueError(f'two_probability must be in [0, 1], got {two_probability}')
        self._board = zeros((self.SIZE, self.SIZE), dtype=int64)
        self.rng = rng if rng is not None else default_rng()
        self.two_probability = two_probability

    @classmethod
    def from_cells(cls, cells: Iterable, rng: Generator | None = None, **kwargs) -> 'Grid':
        """
        Build a grid from existing cell values.

        Parameters
        ----------
        cells : Iterable
            Either 4 rows of 4 values or 16 values in row-major order.
        rng : Generator, optional
            Random source used for spawning.

        Returns
        -------
        Grid
            A grid holding a copy of the values.

        Raises
        ------
        ValueError
            If the shape is wrong, a value is not an integer, or a value is neither 0 nor a power of two of
            at least 2.
        """
        raw = array(cells)
        if raw.shape not in ((cls.SIZE * cls.SIZE,), (cls.SIZE, cls.SIZE)):
            raise ValueError(f'Expected {cls.SIZE * cls.SIZE} cells, got shape {raw.shape}')

        # ##: Reject values the integer conversion would truncate.
        values = raw.astype(int64)
        if not (raw == values).all():
            raise ValueError(f'Cells must be integers, got {raw.tolist()}')
        values = values.reshape(cls.SIZE, cls.SIZE)

        # ##: Every tile is 0 or a power of two >= 2.
        tiles = values[values != 0]
        if (tiles < 2).any() or (tiles & (tiles - 1)).any():
            raise ValueError(f'Cells must be 0 or powers of two >= 2, got {values.tolist()}')

        grid = cls(rng=rng, **kwargs)
        grid._board[...] = values
        return grid

    @property
    def cells(self) -> ndarray:
        """Read-only view of the 4x4 matrix."""
        view = self._board.view()
        view.flags.writeable = False
        return view

    def __getitem__(self, position: tuple[int, int]) -> int:
        row, col = position
        if not (0 <= row < self.SIZE and 0 <= col < self.SIZE):
            raise IndexError(f'Cell ({row}, {col}) is outside the grid')
        return int(self._board[row, col])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return bool((self._board == other._board).all())

    def __repr__(self) -> str:
        return f'Grid({self.tolist()})'

    def tolist(self) -> list[list[int]]:
        """Cell values as nested lists of rows."""
        return self._board.tolist()

    @property
    def empty_count(self) -> int:
        """Number of empty cells."""
        return self._board.size - int(count_nonzero(self._board))

    @property
    def total(self) -> int:
        """Sum of all tile values."""
        return int(self._board.sum())

    @property
    def max_tile(self) -> int:
        """Largest tile on the grid, 0 when empty."""
        return int(self._board.max())

    @property
    def is_full(self) -> bool:
        """True when there is no empty cell."""
        return self.empty_count == 0

    @property
    def is_stuck(self) -> bool:
        """True when the grid is full and no move in any direction changes it."""
        return is_done(self._board)

    def can_move(self, direction: Direction | int) -> bool:
        """Check whether a move in ``direction`` would change the grid."""
        return legal_actions_mask(self._board)[Direction.coerce(direction)]

    def legal_moves(self) -> list[Direction]:
        """Directions that would change the grid."""
        return legal_actions(self._board)

    def clear(self) -> None:
        """Empty every cell."""
        self._board[...] = 0

    def move(self, direction: Direction | int) -> int:
        """
        Slide and merge every row or column toward an edge.

        Parameters
        ----------
        direction : Direction | int
            Edge the tiles move toward.

        Returns
        -------
        int
            The score delta: the sum of the values produced by merges.

        Notes
        -----
        - A tile produced by a merge does not merge again in the same move.
        - A move that changes nothing leaves the grid identical and returns 0.
        """
        direction = Direction.coerce(direction)
        score = apply_move(self._board, direction)
        logger.debug('Move %s scored %d', direction.name, score)
        return score

    def spawn_random_tile(self) -> bool:
        """
        Place a 2 or a 4 in a uniformly chosen empty cell.

        Returns
        -------
        bool
            False if there is no empty cell, True otherwise.
        """
        return fill_cells(self._board, number_tile=1, rng=self.rng, two_probability=self.two_probability) == 1
