# -*- coding: utf-8 -*-
"""
This module provides helpers for displaying a game board: tile colours and a plain-text layout.
"""

from .palette import FALLBACK_COLOUR, format_board, text_colour, tile_colour

__all__ = ["FALLBACK_COLOUR", "format_board", "text_colour", "tile_colour"]
