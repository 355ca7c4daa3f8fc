"""
Game session - one engine, one tick loop and one keyboard listener.

The session maps the user-facing controls (Play, Pause/Resume, Replay) onto
the engine and ties the timer to the Idle <-> Running transitions.
"""

import logging
import threading
from typing import Optional

from domain.game_state import GameState
from main import SnakeGame
from services.game_loop import GameLoop, DEFAULT_INTERVAL_MS

logger = logging.getLogger(__name__)


class GameSession:
    """
    Owns the engine and the scoped resources that drive it.

    Attributes:
        game: the SnakeGame engine
        loop: the GameLoop ticking the engine, or None when use_timer is False
        listening: whether keyboard input is currently accepted
    """

    def __init__(
        self,
        game: Optional[SnakeGame] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        use_timer: bool = True
    ):
        self.game = game or SnakeGame()
        self.loop: Optional[GameLoop] = GameLoop(self.game, interval_ms) if use_timer else None
        self.listening = True
        # Serializes the stop -> engine change -> start sequences
        self._lock = threading.RLock()

    def play(self) -> GameState:
        """Play button: start a fresh game and acquire the timer and key listener."""
        with self._lock:
            self._stop_loop()
            self.game.start()
            self.listening = True
            if self.loop is not None:
                self.loop.start()
            return self.snapshot()

    def toggle_pause(self) -> GameState:
        self.game.toggle_pause()
        return self.snapshot()

    def reset(self) -> GameState:
        """Release the timer and return to the idle state."""
        with self._lock:
            self._stop_loop()
            self.game.reset()
            return self.snapshot()

    def replay(self) -> GameState:
        """Replay button: reset then start."""
        with self._lock:
            self._stop_loop()
            self.game.reset()
            return self.play()

    def key_press(self, key: str) -> bool:
        """Keyboard listener. Returns True if the key is one the game handles."""
        if not self.listening:
            return False
        return self.game.handle_key(key)

    def set_direction(self, direction: str) -> bool:
        if not self.listening:
            return False
        return self.game.set_direction(direction)

    def snapshot(self) -> GameState:
        return self.game.get_current_state()

    def close(self):
        """Tear down the timer and the key listener. A later play() acquires both again."""
        with self._lock:
            self._stop_loop()
            self.listening = False
        logger.info("Game session closed")

    def _stop_loop(self):
        if self.loop is not None:
            self.loop.stop()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
