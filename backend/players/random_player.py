"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from domain.constants import UP, DOWN, LEFT, RIGHT, OPPOSITES
from domain.game_state import GameState
from .base import Player


class RandomPlayer(Player):
    """
    A random AI that picks a direction that avoids walls, its own body and
    reversing onto itself.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameState) -> str:
        head_x, head_y = game_state.head

        # Screen coordinates: y grows downward
        possible_moves = {
            UP:    (head_x, head_y - 1),
            DOWN:  (head_x, head_y + 1),
            LEFT:  (head_x - 1, head_y),
            RIGHT: (head_x + 1, head_y)
        }

        # The engine counts the tail as occupied on the tick it moves away,
        # so every segment is off limits.
        body = set(game_state.snake)
        valid_moves: List[str] = []
        for move, (new_x, new_y) in possible_moves.items():
            if move == OPPOSITES[game_state.direction]:
                continue
            if (new_x < 0 or new_x >= game_state.width or
                new_y < 0 or new_y >= game_state.height):
                continue
            if (new_x, new_y) in body:
                continue
            valid_moves.append(move)

        # No safe move: keep going and accept the collision
        if not valid_moves:
            return game_state.direction

        # Head for the food when it is one step away
        if game_state.food is not None:
            for move in valid_moves:
                if possible_moves[move] == game_state.food:
                    return move

        return self.rng.choice(valid_moves)
