"""
Fixed-interval tick loop for the snake engine.

The loop is a scoped resource: start() spawns one timer thread, stop()
releases it. The thread also exits on its own once the game is over, so no
timer keeps running after the game ends.
"""

import logging
import os
import threading
from typing import Callable, List, Optional

from domain.constants import TICK_INTERVAL_MS
from domain.game_state import GameState

logger = logging.getLogger(__name__)


def interval_from_env(default: int = TICK_INTERVAL_MS) -> int:
    """
    Read SNAKE_TICK_INTERVAL_MS, falling back to the default when it is
    missing, not an integer, or not positive.
    """
    raw = os.getenv("SNAKE_TICK_INTERVAL_MS")
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring SNAKE_TICK_INTERVAL_MS={raw!r}: not an integer, using {default} ms")
        return default
    if value <= 0:
        logger.warning(f"Ignoring SNAKE_TICK_INTERVAL_MS={raw!r}: must be positive, using {default} ms")
        return default
    return value


DEFAULT_INTERVAL_MS = interval_from_env()

TickListener = Callable[[GameState], None]


class GameLoop:
    """Calls game.tick() every interval_ms and forwards snapshots to listeners."""

    def __init__(
        self,
        game,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        on_tick: Optional[TickListener] = None
    ):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.game = game
        self.interval_ms = interval_ms
        self.listeners: List[TickListener] = []
        if on_tick is not None:
            self.listeners.append(on_tick)

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        # start/stop run from request threads as well as the owner
        self._lifecycle_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def add_listener(self, listener: TickListener):
        self.listeners.append(listener)

    def start(self):
        with self._lifecycle_lock:
            if self.running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="snake-game-loop",
                daemon=True
            )
            self._thread.start()
        logger.info(f"Game loop started ({self.interval_ms} ms per tick)")

    def stop(self, timeout: Optional[float] = None):
        """Stop the timer thread. Safe to call more than once."""
        with self._lifecycle_lock:
            self._stop_event.set()
            thread = self._thread
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout)
            self._thread = None

    def _run(self, stop_event: threading.Event):
        interval = self.interval_ms / 1000.0
        while not stop_event.wait(interval):
            state = self.game.tick()
            for listener in list(self.listeners):
                try:
                    listener(state)
                except Exception as e:  # noqa: BLE001 - keep ticking if a view fails
                    logger.error(f"Tick listener {listener!r} failed: {e}")
            if state.game_over:
                logger.info(f"Game loop finished at tick {state.tick_number} (score {state.score})")
                break

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
