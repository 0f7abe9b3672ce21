"""
Game move utilities for the 2048 grid engine, providing the direction enumeration and functions for
determining legal and illegal moves.
"""

from enum import IntEnum

from numpy import ndarray


class Direction(IntEnum):
    """
    Direction of a move.

    The value is the number of counter-clockwise quarter turns that brings the target edge of the board
    to column 0.
    """

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @classmethod
    def from_name(cls, name: str) -> 'Direction':
        """
        Parse a direction from its name.

        Parameters
        ----------
        name : str
            One of ``left``, ``up``, ``right`` or ``down`` (case-insensitive).

        Returns
        -------
        Direction
            The matching direction.

        Raises
        ------
        ValueError
            If the name is not a known direction.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f'Unknown direction: {name!r}') from None

    @classmethod
    def coerce(cls, value: 'Direction | int') -> 'Direction':
        """Return ``value`` as a Direction, raising ValueError when it is not one."""
        if isinstance(value, bool):
            raise ValueError(f'Unknown direction: {value!r}')
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f'Unknown direction: {value!r}') from None


def can_move(board: ndarray, direction: Direction | int) -> bool:
    """
    Check if a move in a specific direction would change the board.

    Parameters
    ----------
    board : ndarray
        The game board to check.
    direction : Direction | int
        Direction to check.

    Returns
    -------
    bool
        True if the move is possible, False otherwise.
    """
    return legal_actions_mask(board)[Direction.coerce(direction)]


def legal_actions_mask(state: ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions in a single pass.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the move changes the board.

    Notes
    -----
    A move is possible if a tile has an empty cell on its target side, or if two adjacent tiles along
    the move axis hold the same non-zero value.
    """
    # ##>: Horizontal adjacency serves both left and right.
    left_cols, right_cols = state[:, :-1], state[:, 1:]
    h_can_merge = (left_cols != 0) & (left_cols == right_cols)

    # ##>: Vertical adjacency serves both up and down.
    top_rows, bottom_rows = state[:-1, :], state[1:, :]
    v_can_merge = (top_rows != 0) & (top_rows == bottom_rows)

    left = (left_cols == 0) & (right_cols != 0)
    right = (right_cols == 0) & (left_cols != 0)
    up = (top_rows == 0) & (bottom_rows != 0)
    down = (bottom_rows == 0) & (top_rows != 0)

    return (
        bool(left.any() or h_can_merge.any()),
        bool(up.any() or v_can_merge.any()),
        bool(right.any() or h_can_merge.any()),
        bool(down.any() or v_can_merge.any()),
    )


def illegal_actions(state: ndarray) -> list[Direction]:
    """
    Determine the directions that leave the board unchanged.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    list[Direction]
        Directions whose move would be a no-op.
    """
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if not mask[direction]]


def legal_actions(state: ndarray) -> list[Direction]:
    """
    Determine the directions that change the board.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    list[Direction]
        Directions whose move would slide or merge at least one tile.
    """
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if mask[direction]]
