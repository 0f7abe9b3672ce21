"""
Core functionality for the 2048 grid, including line merging, directional moves, tile spawning and
terminal detection.
"""

from numpy import all as np_all
from numpy import any as np_any
from numpy import argwhere, array, int64, ndarray, rot90, zeros_like
from numpy.random import PCG64DXSM, Generator, default_rng

from grid2048.core.gamemove import Direction

# ##>: Probability that a spawned tile is a 2 rather than a 4.
DEFAULT_TWO_PROBABILITY = 0.9

# ##>: Values a spawned tile can take.
SPAWN_VALUES = (2, 4)

# ##>: Module-level generator used when the caller does not inject one.
_GENERATOR = default_rng(PCG64DXSM())


def merge_line(line: ndarray) -> tuple[int, ndarray]:
    """
    Compact a line toward index 0, merge adjacent equal values and compute the score.

    Parameters
    ----------
    line : ndarray
        A 1D array representing one row or column of the board, oriented so that index 0 faces the
        edge the tiles move toward.

    Returns
    -------
    score : int
        The sum of the values produced by merges.
    merged_line : ndarray
        The non-zero values of the line after compaction and merging.

    Notes
    -----
    - Zeros (empty cells) are removed before merging.
    - Merging proceeds from index 0 outward.
    - A tile produced by a merge never merges again in the same call.

    Examples
    --------
    >>> merge_line(array([2, 2, 2, 2]))
    (8, array([4, 4]))

    >>> merge_line(array([0, 2, 0, 2]))
    (4, array([4]))
    """
    non_zero = line[line != 0]
    if len(non_zero) <= 1:
        return 0, non_zero

    result = []
    score = 0

    # ##: Walk the tiles, consuming pairs on merge.
    i = 0
    while i < len(non_zero) - 1:
        if non_zero[i] == non_zero[i + 1]:
            merged = non_zero[i] * 2
            result.append(merged)
            score += int(merged)
            i += 2
        else:
            result.append(non_zero[i])
            i += 1

    if i == len(non_zero) - 1:
        result.append(non_zero[-1])

    return score, array(result, dtype=line.dtype)


def slide_and_merge(board: ndarray) -> tuple[int, ndarray]:
    """
    Slide the board to the left, merge adjacent cells, and compute the score.

    Parameters
    ----------
    board : ndarray
        The game board represented as a 2D array.

    Returns
    -------
    score : int
        The total score obtained from all merges.
    updated_board : ndarray
        A new board after sliding and merging.

    Notes
    -----
    - Only rows are processed, so this is a left move.
    - For other directions, rotate the board before calling this function.
    """
    result = zeros_like(board)
    score = 0

    for i, row in enumerate(board):
        score_row, merged_row = merge_line(row)
        score += score_row
        result[i, : len(merged_row)] = merged_row

    return score, result


def apply_move(board: ndarray, direction: Direction | int) -> int:
    """
    Apply a move to the board in place.

    Parameters
    ----------
    board : ndarray
        The game board. **Modified in-place.**
    direction : Direction | int
        The direction of the move.

    Returns
    -------
    int
        The score produced by the merges of this move.

    Notes
    -----
    ``rot90`` returns a view, so the four directions map to row-forward (left), column-forward (up),
    row-backward (right) and column-backward (down) addressing over the same memory. Writing the swept
    board back into the view updates ``board`` directly.
    """
    rotated = rot90(board, k=Direction.coerce(direction))
    score, updated = slide_and_merge(rotated)
    rotated[...] = updated
    return score


def latent_state(state: ndarray, action: Direction | int) -> tuple[ndarray, int]:
    """
    Compute the board after a move, without adding a new tile.

    Parameters
    ----------
    state : ndarray
        The current state of the game board. Not modified.
    action : Direction | int
        The direction of the move.

    Returns
    -------
    new_state : ndarray
        The board after the move.
    reward : int
        The score obtained from this move.
    """
    new_state = state.copy()
    reward = apply_move(new_state, action)
    return new_state, reward


def empty_cells(state: ndarray) -> ndarray:
    """
    Positions of empty cells as ``(row, col)`` pairs, in row-major order.
    """
    return argwhere(state == 0)


def fill_cells(
    state: ndarray,
    number_tile: int,
    rng: Generator | None = None,
    two_probability: float = DEFAULT_TWO_PROBABILITY,
) -> int:
    """
    Fill empty cells with new tiles (2 or 4).

    Parameters
    ----------
    state : ndarray
        The current state of the game board. **Modified in-place.**
    number_tile : int
        Number of new tiles to add.
    rng : Generator, optional
        Random source. The module-level generator is used when omitted.
    two_probability : float, optional
        Probability that a new tile is a 2; otherwise it is a 4.

    Returns
    -------
    int
        The number of tiles actually placed.

    Notes
    -----
    - Cells are chosen uniformly among the empty ones, without replacement.
    - If there are fewer empty cells than requested, all of them are filled.
    """
    rng = rng if rng is not None else _GENERATOR

    available_cells = empty_cells(state)
    count = min(number_tile, len(available_cells))
    if count <= 0:
        return 0

    # ##: Randomly choose cell positions, then their values.
    chosen_indices = rng.choice(len(available_cells), size=count, replace=False)
    values = rng.choice(SPAWN_VALUES, size=count, p=[two_probability, 1.0 - two_probability])

    state[tuple(available_cells[chosen_indices].T)] = values.astype(int64)
    return count


def is_done(state: ndarray) -> bool:
    """
    Check if no move can change the board.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    bool
        True if there are no empty cells AND no orthogonally adjacent cells share a value.
    """
    return bool(
        np_all(state != 0) and not np_any(state[:-1] == state[1:]) and not np_any(state[:, :-1] == state[:, 1:])
    )
