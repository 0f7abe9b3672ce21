# -*- coding: utf-8 -*-
"""
Rule engine for the 2048 sliding-tile puzzle.
"""

from grid2048.config import GameConfig, SpawnPolicy
from grid2048.core import Direction
from grid2048.envs import GameSession, Grid, Status, StepResult

__version__ = "0.1.0"

__all__ = ["Direction", "GameConfig", "GameSession", "Grid", "SpawnPolicy", "Status", "StepResult"]
