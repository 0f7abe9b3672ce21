"""Colours and text layout for displaying a board."""

from numpy import ndarray

# ##>: Classic background colour for each tile value; 0 is the empty cell.
TILE_COLOURS: dict[int, str] = {
    0: '#cdc1b4',
    2: '#eee4da',
    4: '#ede0c8',
    8: '#f2b179',
    16: '#f59563',
    32: '#f67c5f',
    64: '#f65e3b',
    128: '#edcf72',
    256: '#edcc61',
    512: '#edc850',
    1024: '#edc53f',
    2048: '#edc22e',
}

# ##>: High-visibility colour for values outside the table.
FALLBACK_COLOUR = '#ff00ff'

TEXT_DARK = '#776e65'
TEXT_LIGHT = '#f9f6f2'


def tile_colour(value: int) -> str:
    """
    Background colour of a tile.

    Parameters
    ----------
    value : int
        The tile value.

    Returns
    -------
    str
        Hex colour string. Values beyond 2048, or not powers of two, get ``FALLBACK_COLOUR``.
    """
    return TILE_COLOURS.get(int(value), FALLBACK_COLOUR)


def text_colour(value: int) -> str:
    """Text colour readable on top of ``tile_colour(value)``."""
    return TEXT_DARK if int(value) in (2, 4) else TEXT_LIGHT


def format_board(board: ndarray) -> str:
    """Tab-separated rows of the board, one line per row."""
    return '\n'.join(' \t'.join(map(str, row)) for row in board.tolist())
