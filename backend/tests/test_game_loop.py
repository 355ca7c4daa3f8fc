"""
Tests for the fixed-interval tick loop and the game session that owns it.

Timer tests use a short interval and wait on events with a timeout rather
than sleeping for fixed periods.
"""

import logging
import random
import sys
import os
import threading
import time

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import LEFT  # noqa: E402
from main import SnakeGame  # noqa: E402
from services.game_loop import GameLoop, interval_from_env  # noqa: E402
from services.game_session import GameSession  # noqa: E402

FAST_MS = 5
LOOP_THREAD_NAME = "snake-game-loop"


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def live_loop_threads():
    return [t for t in threading.enumerate() if t.name == LOOP_THREAD_NAME and t.is_alive()]


def call_together(func, callers=8):
    """Run func from several threads released at the same moment."""
    barrier = threading.Barrier(callers)

    def worker():
        barrier.wait()
        func()

    threads = [threading.Thread(target=worker) for _ in range(callers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5.0)


class TestGameLoop:
    """Tests for the GameLoop timer thread."""

    def test_invalid_interval_raises(self):
        """A non-positive interval is rejected up front."""
        with pytest.raises(ValueError):
            GameLoop(SnakeGame(), interval_ms=0)

    def test_loop_ticks_and_stops_on_game_over(self):
        """The loop moves the snake every tick and exits once it hits a wall."""
        game = SnakeGame(rng=random.Random(0))
        game.start()
        game.load_snake([(2, 5)], LEFT)

        states = []
        finished = threading.Event()

        def listener(state):
            states.append(state)
            if state.game_over:
                finished.set()

        loop = GameLoop(game, interval_ms=FAST_MS, on_tick=listener)
        loop.start()

        assert finished.wait(5.0)
        assert wait_until(lambda: not loop.running)
        assert [s.head for s in states[:2]] == [(1, 5), (0, 5)]
        assert states[-1].death_reason == "wall"
        loop.stop()

    def test_stop_releases_thread(self):
        """stop() joins the timer thread and can be called again safely."""
        game = SnakeGame()
        game.start()
        game.toggle_pause()

        loop = GameLoop(game, interval_ms=FAST_MS)
        loop.start()
        assert loop.running is True

        loop.stop(timeout=1.0)
        assert loop.running is False
        loop.stop()

    def test_start_twice_keeps_one_thread(self):
        """A second start() while running reuses the existing thread."""
        game = SnakeGame()
        loop = GameLoop(game, interval_ms=FAST_MS)
        loop.start()
        thread = loop._thread
        loop.start()
        assert loop._thread is thread
        loop.stop(timeout=1.0)

    def test_concurrent_starts_leave_no_thread_after_stop(self):
        """Simultaneous start() calls spawn one thread, and stop() releases it."""
        game = SnakeGame()
        game.start()
        game.toggle_pause()  # a paused game never ends the loop by itself
        existing = set(live_loop_threads())

        loop = GameLoop(game, interval_ms=FAST_MS)
        call_together(loop.start)
        started = [t for t in live_loop_threads() if t not in existing]
        assert len(started) == 1

        loop.stop(timeout=1.0)
        assert wait_until(lambda: not [t for t in live_loop_threads() if t not in existing])

    def test_paused_game_keeps_ticking_without_changes(self):
        """Ticks while paused reach listeners but leave the state untouched."""
        game = SnakeGame()
        game.start()
        game.toggle_pause()
        before = game.get_current_state().to_dict()

        ticks = []
        loop = GameLoop(game, interval_ms=FAST_MS, on_tick=ticks.append)
        with loop:
            assert wait_until(lambda: len(ticks) >= 3)
        assert game.get_current_state().to_dict() == before
        assert loop.running is False

    def test_failing_listener_does_not_stop_loop(self):
        """A listener that raises is logged and the other listeners keep receiving ticks."""
        game = SnakeGame()
        game.start()
        game.toggle_pause()

        def broken(state):
            raise RuntimeError("view crashed")

        seen = []
        loop = GameLoop(game, interval_ms=FAST_MS, on_tick=broken)
        loop.add_listener(seen.append)
        with loop:
            assert wait_until(lambda: len(seen) >= 3)
            assert loop.running is True


class TestIntervalFromEnv:
    """Tests for reading the tick interval from the environment."""

    def test_missing_value_uses_default(self, monkeypatch):
        """Without SNAKE_TICK_INTERVAL_MS the default interval applies."""
        monkeypatch.delenv("SNAKE_TICK_INTERVAL_MS", raising=False)
        assert interval_from_env(150) == 150

    def test_valid_value_is_used(self, monkeypatch):
        """A positive integer overrides the default."""
        monkeypatch.setenv("SNAKE_TICK_INTERVAL_MS", "80")
        assert interval_from_env(150) == 80

    @pytest.mark.parametrize("raw", ["fast", "1.5", "0", "-20"])
    def test_malformed_value_falls_back(self, monkeypatch, caplog, raw):
        """Non-integer or non-positive values fall back to the default with a warning."""
        monkeypatch.setenv("SNAKE_TICK_INTERVAL_MS", raw)
        with caplog.at_level(logging.WARNING):
            assert interval_from_env(150) == 150
        assert "SNAKE_TICK_INTERVAL_MS" in caplog.text


class TestGameSession:
    """Tests for GameSession controls and resource lifecycle."""

    def test_play_starts_game_and_timer(self):
        """Play starts the engine and acquires the timer; close releases it."""
        session = GameSession(interval_ms=FAST_MS)
        try:
            state = session.play()
            assert state.is_playing is True
            assert session.loop.running is True
        finally:
            session.close()
        assert session.loop.running is False

    def test_concurrent_plays_run_one_timer(self):
        """Overlapping Play presses leave exactly one timer, released by close()."""
        existing = set(live_loop_threads())
        session = GameSession(interval_ms=200)

        call_together(session.play)
        session.toggle_pause()
        started = [t for t in live_loop_threads() if t not in existing]
        assert len(started) == 1

        session.close()
        assert wait_until(lambda: not [t for t in live_loop_threads() if t not in existing])

    def test_reset_releases_timer(self):
        """Reset stops the timer and returns to idle."""
        session = GameSession(interval_ms=FAST_MS)
        session.play()
        state = session.reset()

        assert session.loop.running is False
        assert state.is_playing is False
        session.close()

    def test_replay_after_game_over(self):
        """Replay resets and starts a fresh game."""
        session = GameSession(game=SnakeGame(rng=random.Random(1)), use_timer=False)
        session.play()
        session.game.load_snake([(0, 5)], LEFT)
        session.game.tick()
        assert session.snapshot().game_over is True

        state = session.replay()
        assert state.game_over is False
        assert state.is_playing is True
        assert state.snake == [(5, 5)]
        assert state.score == 0

    def test_key_press_routes_to_engine(self):
        """Arrow keys and Space reach the engine through the session."""
        session = GameSession(use_timer=False)
        session.play()

        assert session.key_press("ArrowDown") is True
        assert session.game.pending_direction == "DOWN"
        session.key_press(" ")
        assert session.snapshot().is_paused is True

    def test_toggle_pause(self):
        """The Pause/Resume control flips the paused flag."""
        session = GameSession(use_timer=False)
        session.play()
        assert session.toggle_pause().is_paused is True
        assert session.toggle_pause().is_paused is False

    def test_closed_session_ignores_keys(self):
        """After close() the key listener is released."""
        with GameSession(use_timer=False) as session:
            session.play()
        assert session.listening is False
        assert session.key_press("ArrowUp") is False
        assert session.set_direction("UP") is False
        assert session.game.pending_direction is None

    def test_play_after_close_restores_key_listener(self):
        """Playing again on a closed session accepts keyboard input."""
        session = GameSession(use_timer=False)
        session.play()
        session.close()

        session.play()
        assert session.listening is True
        assert session.key_press("ArrowUp") is True
        assert session.game.pending_direction == "UP"

    def test_timer_stops_after_game_over(self):
        """The timer thread exits by itself once the snake dies."""
        game = SnakeGame(rng=random.Random(2))
        session = GameSession(game=game, interval_ms=FAST_MS)
        session.play()
        # steer into the top wall
        session.set_direction("UP")

        assert wait_until(lambda: session.snapshot().game_over)
        assert wait_until(lambda: not session.loop.running)
        session.close()
