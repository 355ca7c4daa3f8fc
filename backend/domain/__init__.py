"""
Domain entities for the snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (timers, HTTP, rendering).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES,
    GRID_SIZE, CELL_SIZE, TICK_INTERVAL_MS, FOOD_POINTS,
)
from .snake import Snake
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITES',
    'GRID_SIZE', 'CELL_SIZE', 'TICK_INTERVAL_MS', 'FOOD_POINTS',
    'Snake',
    'GameState',
]
