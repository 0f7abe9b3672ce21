# -*- coding: utf-8 -*-
"""
Python implementation of the 2048 game.

This module provides the `Grid` engine, which owns the tile matrix, and the `GameSession` class, which
drives a grid through a game and keeps its score.
"""

from .grid import Grid
from .session import GameSession, Status, StepResult

__all__ = ["Grid", "GameSession", "Status", "StepResult"]
