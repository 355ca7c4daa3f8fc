"""
Base player interface for driving the engine without a keyboard.
"""

from domain.game_state import GameState


class Player:
    """
    Base class/interface for player logic.

    A player returns the direction it wants the snake to take on the next
    tick, given the current game state.
    """

    def get_move(self, game_state: GameState) -> str:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError
