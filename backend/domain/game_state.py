"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import List, Tuple, Optional, Dict, Any

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
GAME_OVER = "game_over"


class GameState:
    """
    A read-only snapshot of the game at a specific tick.

    Attributes:
        snake: list of (x, y), head first
        food: (x, y) of the food, or None when the board has no free cell
        direction: direction applied on the last tick
        score: points collected so far
        game_over, is_paused, is_playing: engine flags
        tick_number: number of completed moves since start
        width, height: board dimensions
        death_reason: 'wall' or 'self' once the game is over
    """

    def __init__(
        self,
        snake: List[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        direction: str,
        score: int,
        game_over: bool,
        is_paused: bool,
        is_playing: bool,
        width: int,
        height: int,
        tick_number: int = 0,
        death_reason: Optional[str] = None
    ):
        self.snake = snake
        self.food = food
        self.direction = direction
        self.score = score
        self.game_over = game_over
        self.is_paused = is_paused
        self.is_playing = is_playing
        self.width = width
        self.height = height
        self.tick_number = tick_number
        self.death_reason = death_reason

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]

    @property
    def phase(self) -> str:
        """Engine-level state machine position."""
        if self.game_over:
            return GAME_OVER
        if not self.is_playing:
            return IDLE
        if self.is_paused:
            return PAUSED
        return RUNNING

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-serializable dict. Positions become [x, y] lists.
        """
        return {
            "snake": [list(pos) for pos in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "direction": self.direction,
            "score": self.score,
            "gameOver": self.game_over,
            "isPaused": self.is_paused,
            "isPlaying": self.is_playing,
            "phase": self.phase,
            "tickNumber": self.tick_number,
            "deathReason": self.death_reason,
            "width": self.width,
            "height": self.height,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        S = snake body
        Row 0 is printed first, matching the screen (y grows downward).
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake):
            if 0 <= x < self.width and 0 <= y < self.height:
                board[y][x] = 'H' if pos_idx == 0 else 'S'

        result = []
        for y in range(self.height):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # x-axis labels, last digit only so columns stay aligned
        result.append("   " + " ".join(str(i % 10) for i in range(self.width)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick_number}, phase={self.phase}, "
            f"head={self.snake[0]}, length={len(self.snake)}, food={self.food}, "
            f"score={self.score}>"
        )
