import os
import atexit
import logging
from flask import Flask, jsonify, request, render_template
from flask_cors import CORS
from dotenv import load_dotenv

# Load before the engine modules read their env settings
load_dotenv()

from domain.constants import CELL_SIZE, GRID_SIZE, VALID_MOVES  # noqa: E402
from services.board_renderer import build_frame  # noqa: E402
from services.game_loop import DEFAULT_INTERVAL_MS  # noqa: E402
from services.game_session import GameSession  # noqa: E402

app = Flask(__name__)
logging.basicConfig(level=logging.INFO)

# Enable CORS for API routes so a separately hosted view can poll the game.
# Allowed origins can be configured via CORS_ALLOWED_ORIGINS env var (comma-separated)
allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
if allowed_origins_env:
    allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
else:
    # sensible defaults for local dev
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

# One engine per server process; the browser view is its only client.
game_session = GameSession(interval_ms=DEFAULT_INTERVAL_MS)
atexit.register(lambda: game_session.close())


def _state_payload(state):
    """Snapshot plus the pixel frame the view draws."""
    return {
        "state": state.to_dict(),
        "frame": build_frame(state, CELL_SIZE),
    }


@app.route("/", methods=["GET"])
def index():
    """Serve the browser view."""
    return render_template(
        "index.html",
        grid_size=GRID_SIZE,
        cell_size=CELL_SIZE,
        tick_interval_ms=DEFAULT_INTERVAL_MS,
    )


@app.route("/api/state", methods=["GET"])
def get_state():
    """
    Get the current game snapshot.

    Returns:
    - state: engine flags, snake, food, score
    - frame: the same snapshot mapped to pixel coordinates
    """
    try:
        return jsonify(_state_payload(game_session.snapshot()))
    except Exception as error:
        logging.error(f"Error fetching game state: {error}")
        return jsonify({"error": "Failed to load game state"}), 500


@app.route("/api/start", methods=["POST"])
def start_game():
    """Play button: start a new game and the tick loop."""
    try:
        state = game_session.play()
        return jsonify(_state_payload(state))
    except Exception as error:
        logging.error(f"Error starting game: {error}")
        return jsonify({"error": "Failed to start game"}), 500


@app.route("/api/pause", methods=["POST"])
def toggle_pause():
    """Pause/Resume button."""
    try:
        state = game_session.toggle_pause()
        return jsonify(_state_payload(state))
    except Exception as error:
        logging.error(f"Error toggling pause: {error}")
        return jsonify({"error": "Failed to toggle pause"}), 500


@app.route("/api/reset", methods=["POST"])
def reset_game():
    """Stop the tick loop and return to the idle screen."""
    try:
        state = game_session.reset()
        return jsonify(_state_payload(state))
    except Exception as error:
        logging.error(f"Error resetting game: {error}")
        return jsonify({"error": "Failed to reset game"}), 500


@app.route("/api/replay", methods=["POST"])
def replay_game():
    """Replay button (shown on game over): reset then start."""
    try:
        state = game_session.replay()
        return jsonify(_state_payload(state))
    except Exception as error:
        logging.error(f"Error replaying game: {error}")
        return jsonify({"error": "Failed to replay game"}), 500


@app.route("/api/input", methods=["POST"])
def handle_input():
    """
    Forward a keyboard event or a direction to the engine.

    Body (JSON), one of:
    - {"key": "ArrowUp" | "ArrowDown" | "ArrowLeft" | "ArrowRight" | " "}
    - {"direction": "UP" | "DOWN" | "LEFT" | "RIGHT"}

    "accepted" reports whether the key is one the game listens to, or whether
    the direction was buffered (reversals and input while idle are not).
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    key = payload.get("key")
    direction = payload.get("direction")

    if key is None and direction is None:
        return jsonify({"error": "Provide a 'key' or a 'direction'"}), 400
    if direction is not None and (not isinstance(direction, str) or direction not in VALID_MOVES):
        return jsonify({"error": f"Invalid direction '{direction}'"}), 400

    try:
        if direction is not None:
            accepted = game_session.set_direction(direction)
        else:
            accepted = game_session.key_press(str(key))

        response = _state_payload(game_session.snapshot())
        response["accepted"] = accepted
        return jsonify(response)
    except Exception as error:
        logging.error(f"Error handling input {payload}: {error}")
        return jsonify({"error": "Failed to handle input"}), 500


if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"
    # The reloader would start a second engine with its own timer
    app.run(host="0.0.0.0", port=port, debug=debug, use_reloader=False)
