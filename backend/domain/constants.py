"""
Game constants for the snake engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Board settings
GRID_SIZE = 20
CELL_SIZE = 20  # pixels per grid cell in the browser view

# Game settings
TICK_INTERVAL_MS = 150
INITIAL_SNAKE = [(5, 5)]
INITIAL_DIRECTION = RIGHT
INITIAL_FOOD = (10, 10)
FOOD_POINTS = 10

# Keyboard event names (DOM KeyboardEvent.key)
PAUSE_KEY = " "
KEY_DIRECTIONS = {
    "ArrowUp": UP,
    "ArrowDown": DOWN,
    "ArrowLeft": LEFT,
    "ArrowRight": RIGHT,
}
