"""
Board rendering for snake game snapshots.

Two views consume the same GameState snapshot:
1. build_frame() produces the pixel layout the browser view draws
2. render_image() draws the playfield with Pillow (used by the CLI to dump frames)

Both use the same mapping: pixel = grid coordinate * cell size.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Tuple, Optional, Union

from PIL import Image, ImageDraw

from domain.constants import CELL_SIZE
from domain.game_state import GameState

logger = logging.getLogger(__name__)


class ColorScheme:
    """Color configuration matching the browser view"""

    BACKGROUND = "#F0FDF4"
    BORDER = "#86EFAC"
    GRID_LINE = "#DCFCE7"
    SNAKE_HEAD = "#16A34A"
    SNAKE_BODY = "#22C55E"
    APPLE = "#EF4444"
    APPLE_STEM = "#15803D"
    EYE = "#FFFFFF"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def darken_color(hex_color: str, amount: float = 0.3) -> Tuple[int, int, int]:
    """Darken a hex color by a given amount"""
    r, g, b = hex_to_rgb(hex_color)
    r = max(0, int(r * (1 - amount)))
    g = max(0, int(g * (1 - amount)))
    b = max(0, int(b * (1 - amount)))
    return (r, g, b)


def to_pixels(position: Tuple[int, int], cell_size: int = CELL_SIZE) -> Tuple[int, int]:
    """Map a grid position to the top-left pixel of its cell."""
    x, y = position
    return (x * cell_size, y * cell_size)


def build_frame(state: GameState, cell_size: int = CELL_SIZE) -> Dict[str, Any]:
    """
    Build the JSON-friendly frame the browser view renders.

    Returns a dict with the board size in pixels, one entry per snake segment
    (head first) and the food cell, all in pixel coordinates.
    """
    segments = []
    for index, position in enumerate(state.snake):
        left, top = to_pixels(position, cell_size)
        segments.append({
            "x": position[0],
            "y": position[1],
            "left": left,
            "top": top,
            "head": index == 0,
        })

    food = None
    if state.food is not None:
        left, top = to_pixels(state.food, cell_size)
        food = {"x": state.food[0], "y": state.food[1], "left": left, "top": top}

    return {
        "cellSize": cell_size,
        "boardWidth": state.width * cell_size,
        "boardHeight": state.height * cell_size,
        "snake": segments,
        "food": food,
        "score": state.score,
        "phase": state.phase,
    }


def _draw_cell(
    draw: ImageDraw.ImageDraw,
    x: int,
    y: int,
    size: int,
    color: Tuple[int, int, int],
    padding: int = 1
):
    """Draw a single rounded cell (for snake segments)"""
    draw.ellipse(
        [x + padding, y + padding, x + size - padding - 1, y + size - padding - 1],
        fill=color
    )


def render_image(state: GameState, cell_size: int = CELL_SIZE) -> Image.Image:
    """Draw the playfield for a snapshot."""
    board_width = state.width * cell_size
    board_height = state.height * cell_size

    img = Image.new("RGB", (board_width, board_height), hex_to_rgb(ColorScheme.BACKGROUND))
    draw = ImageDraw.Draw(img)

    # Grid
    for i in range(1, state.width):
        draw.line([i * cell_size, 0, i * cell_size, board_height], fill=hex_to_rgb(ColorScheme.GRID_LINE))
    for i in range(1, state.height):
        draw.line([0, i * cell_size, board_width, i * cell_size], fill=hex_to_rgb(ColorScheme.GRID_LINE))
    draw.rectangle([0, 0, board_width - 1, board_height - 1], outline=hex_to_rgb(ColorScheme.BORDER), width=2)

    # Apple with a stem
    if state.food is not None:
        fx, fy = to_pixels(state.food, cell_size)
        pad = max(1, cell_size // 10)
        draw.ellipse(
            [fx + pad, fy + pad, fx + cell_size - pad - 1, fy + cell_size - pad - 1],
            fill=hex_to_rgb(ColorScheme.APPLE)
        )
        stem_x = fx + cell_size // 2
        draw.line([stem_x, fy, stem_x, fy + cell_size // 4], fill=hex_to_rgb(ColorScheme.APPLE_STEM), width=2)

    # Body, shaded darker toward the tail
    total = len(state.snake)
    for index in range(total - 1, 0, -1):
        sx, sy = to_pixels(state.snake[index], cell_size)
        shade = 0.4 * index / total
        _draw_cell(draw, sx, sy, cell_size, darken_color(ColorScheme.SNAKE_BODY, shade))

    # Head with eyes
    if total > 0:
        hx, hy = to_pixels(state.snake[0], cell_size)
        _draw_cell(draw, hx, hy, cell_size, hex_to_rgb(ColorScheme.SNAKE_HEAD), padding=0)

        eye_size = max(2, cell_size // 5)
        eye_y = hy + cell_size // 4
        draw.ellipse(
            [hx + cell_size // 5, eye_y, hx + cell_size // 5 + eye_size, eye_y + eye_size],
            fill=hex_to_rgb(ColorScheme.EYE)
        )
        draw.ellipse(
            [hx + 3 * cell_size // 5, eye_y, hx + 3 * cell_size // 5 + eye_size, eye_y + eye_size],
            fill=hex_to_rgb(ColorScheme.EYE)
        )

    return img


def save_frame(
    state: GameState,
    path: Union[str, Path],
    cell_size: int = CELL_SIZE,
    image_format: Optional[str] = None
) -> Path:
    """Render a snapshot and write it to disk. Returns the written path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    render_image(state, cell_size).save(path, format=image_format)
    logger.debug(f"Saved frame for tick {state.tick_number} to {path}")
    return path
