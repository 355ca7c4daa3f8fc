import logging
import random
import threading
from typing import List, Optional, Tuple

from domain.constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES,
    GRID_SIZE, INITIAL_SNAKE, INITIAL_DIRECTION, INITIAL_FOOD, FOOD_POINTS,
    PAUSE_KEY, KEY_DIRECTIONS,
)
from domain.game_state import GameState
from domain.snake import Snake

logger = logging.getLogger(__name__)


class SnakeGame:
    """
    Manages:
      - Board (grid_size x grid_size)
      - The snake and its buffered direction
      - Food placement
      - Score
      - Pause / playing / game over flags

    Input handlers and tick() are serialized through one lock so a direction
    change is always applied before the move that reads it.
    """
    def __init__(self, grid_size: int = GRID_SIZE, rng: Optional[random.Random] = None):
        if any(not (0 <= x < grid_size and 0 <= y < grid_size) for x, y in INITIAL_SNAKE):
            raise ValueError(f"Grid size {grid_size} is too small for the starting snake {INITIAL_SNAKE}.")
        self.width = grid_size
        self.height = grid_size
        self.rng = rng or random.Random()
        self._lock = threading.RLock()

        # Pre-start state mirrors a fresh board with food at a fixed cell
        self._initialize()
        self.food: Optional[Tuple[int, int]] = INITIAL_FOOD

    def _initialize(self):
        self.snake = Snake(list(INITIAL_SNAKE))
        self.direction = INITIAL_DIRECTION
        self.pending_direction: Optional[str] = None
        self.score = 0
        self.game_over = False
        self.is_paused = False
        self.is_playing = False
        self.tick_number = 0

    def start(self):
        """Reset to the initial state and begin playing."""
        with self._lock:
            self._initialize()
            self.food = self.place_food()
            self.is_playing = True
        logger.info(f"Game started, food at {self.food}")

    def reset(self):
        """Reset to the initial state without playing (back to idle)."""
        with self._lock:
            self._initialize()
            self.food = self.place_food()
        logger.info("Game reset")

    def set_direction(self, direction: str) -> bool:
        """
        Buffer a direction for the next tick.

        Ignored while not playing, after game over, and when the direction
        reverses the current one. Returns True if the direction was buffered.
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Invalid direction: {direction!r}")

        with self._lock:
            if not self.is_playing or self.game_over:
                return False
            if OPPOSITES[direction] == self.direction:
                return False
            self.pending_direction = direction
            return True

    def toggle_pause(self) -> bool:
        """Flip the paused flag. Returns the new value, or False when ignored."""
        with self._lock:
            if not self.is_playing or self.game_over:
                return False
            self.is_paused = not self.is_paused
            logger.info("Game paused" if self.is_paused else "Game resumed")
            return self.is_paused

    def handle_key(self, key: str) -> bool:
        """
        Map a keyboard event name to an engine input.

        Arrow keys set the direction, Space toggles pause. Returns True if the
        key is one the game listens to (even if the input itself was ignored).
        """
        if key == PAUSE_KEY:
            self.toggle_pause()
            return True
        direction = KEY_DIRECTIONS.get(key)
        if direction is None:
            return False
        self.set_direction(direction)
        return True

    def _next_head(self) -> Tuple[int, int]:
        hx, hy = self.snake.head
        if self.direction == UP:       hy -= 1
        elif self.direction == DOWN:   hy += 1
        elif self.direction == LEFT:   hx -= 1
        elif self.direction == RIGHT:  hx += 1
        return (hx, hy)

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tick(self) -> GameState:
        """
        Execute one step:
          1) Do nothing unless playing, unpaused and alive
          2) Apply the buffered direction
          3) Compute the new head
          4) Wall collision -> game over
          5) Self collision (any current segment) -> game over
          6) Prepend the head; eat food (grow + score) or drop the tail
        Returns the resulting snapshot.
        """
        with self._lock:
            if self.game_over or self.is_paused or not self.is_playing:
                return self.get_current_state()

            if self.pending_direction is not None:
                self.direction = self.pending_direction
                self.pending_direction = None

            new_head = self._next_head()

            if not self._in_bounds(*new_head):
                self._end_game("wall")
                return self.get_current_state()

            if new_head in self.snake:
                self._end_game("self")
                return self.get_current_state()

            self.snake.positions.appendleft(new_head)

            if new_head == self.food:
                self.score += FOOD_POINTS
                self.food = self.place_food()
                logger.debug(f"Food eaten at {new_head}, score {self.score}, next food {self.food}")
            else:
                self.snake.positions.pop()

            self.tick_number += 1
            return self.get_current_state()

    def _end_game(self, reason: str):
        self.game_over = True
        self.pending_direction = None
        self.snake.kill(reason, self.tick_number)
        logger.info(f"Game Over: {reason} collision at tick {self.tick_number}, score {self.score}")

    def free_cells(self) -> List[Tuple[int, int]]:
        """All grid cells not occupied by the snake, in row-major order."""
        occupied = set(self.snake.positions)
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in occupied
        ]

    def place_food(self) -> Optional[Tuple[int, int]]:
        """
        Return a random cell not occupied by the snake.

        Samples from the set of free cells directly, so it always terminates.
        Returns None when the snake covers the whole board.
        """
        with self._lock:
            cells = self.free_cells()
            if not cells:
                logger.warning("No free cell left for food; board is full")
                return None
            return self.rng.choice(cells)

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        with self._lock:
            return GameState(
                snake=list(self.snake.positions),
                food=self.food,
                direction=self.direction,
                score=self.score,
                game_over=self.game_over,
                is_paused=self.is_paused,
                is_playing=self.is_playing,
                width=self.width,
                height=self.height,
                tick_number=self.tick_number,
                death_reason=self.snake.death_reason
            )

    def load_snake(self, positions: List[Tuple[int, int]], direction: str = INITIAL_DIRECTION):
        """Replace the snake body and direction; used to set up positions for play-testing."""
        if direction not in VALID_MOVES:
            raise ValueError(f"Invalid direction: {direction!r}")
        for (x, y) in positions:
            if not self._in_bounds(x, y):
                raise ValueError(f"Snake segment out of bounds at {(x, y)}.")
        if len(set(positions)) != len(positions):
            raise ValueError("Snake segments must not overlap.")
        with self._lock:
            self.snake = Snake(list(positions))
            self.direction = direction
            self.pending_direction = None

    def set_food(self, position: Optional[Tuple[int, int]]):
        if position is not None:
            if not self._in_bounds(*position):
                raise ValueError(f"Food out of bounds at {position}.")
            if position in self.snake:
                raise ValueError(f"Food cannot be placed on the snake at {position}.")
        with self._lock:
            self.food = position

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.get_current_state().print_board() + "\n")
