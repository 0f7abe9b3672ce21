# -*- coding: utf-8 -*-
"""
This module provides the board-level rules of the 2048 grid.

It includes the direction enumeration, functions for checking legal and illegal moves, merging a single
line, sliding and merging a whole board, spawning tiles and checking if the board is stuck.
"""

from .gameboard import (
    DEFAULT_TWO_PROBABILITY,
    apply_move,
    empty_cells,
    fill_cells,
    is_done,
    latent_state,
    merge_line,
    slide_and_merge,
)
from .gamemove import Direction, can_move, illegal_actions, legal_actions, legal_actions_mask

__all__ = [
    "DEFAULT_TWO_PROBABILITY",
    "Direction",
    "apply_move",
    "can_move",
    "empty_cells",
    "fill_cells",
    "illegal_actions",
    "is_done",
    "latent_state",
    "legal_actions",
    "legal_actions_mask",
    "merge_line",
    "slide_and_merge",
]
