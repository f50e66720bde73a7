from __future__ import annotations

"""Game configuration constants for RunnerX."""

from pathlib import Path

# Window / play field
FIELD_WIDTH = 800
FIELD_HEIGHT = 200
HEADER_HEIGHT = 44
LEADERBOARD_HEIGHT = 190
WINDOW_WIDTH = FIELD_WIDTH
WINDOW_HEIGHT = HEADER_HEIGHT + FIELD_HEIGHT + LEADERBOARD_HEIGHT
FPS = 60

# Ground
GROUND_BAND_HEIGHT = 20  # ground line sits this far above the field bottom
GROUND_TILE_WIDTH = 50  # chevron period, also the scroll wrap threshold

# Player (the eye); physics are per tick, not per second
PLAYER_X = 50
PLAYER_WIDTH = 40
PLAYER_HEIGHT = 40
JUMP_POWER = 15.0
GRAVITY = 0.8
HITBOX_INSET = 5

# Run pacing
INITIAL_SPEED = 6.0  # px per tick
SPEED_STEP = 0.5
SPEED_RAMP_TICKS = 100  # raw ticks, not displayed points
SCORE_DIVISOR = 10

# Obstacles
MIN_OBSTACLE_DISTANCE = 200
MAX_OBSTACLE_DISTANCE = 400
ELEVATED_THRESHOLD = 0.7  # rng.random() above this spawns a bird
GROUND_OBSTACLE_SIZE = (20, 40)
GROUND_OBSTACLE_LIFT = 40  # top edge above ground line
ELEVATED_OBSTACLE_SIZE = (30, 20)
ELEVATED_OBSTACLE_LIFT = 80

# Clouds: (base x, y, drift per tick); drift wraps every CLOUD_PERIOD px
CLOUDS = ((100, 30, 0.1), (300, 50, 0.05), (600, 25, 0.08))
CLOUD_PERIOD = 900

# Palette
SKY_TOP = (135, 206, 235)
SKY_BOTTOM = (186, 228, 245)
GROUND_COLOR = (139, 69, 19)
GROUND_LINE_COLOR = (101, 67, 33)
EYE_BODY = (79, 70, 229)
EYE_RIM = (49, 46, 129)
EYE_PUPIL = (31, 41, 55)
EYE_IRIS = (255, 255, 255)
EYE_HIGHLIGHT = (229, 231, 235)
CACTUS_COLOR = (34, 139, 34)
CACTUS_STRIPE = (50, 205, 50)
BIRD_COLOR = (139, 69, 19)
BIRD_WING = (160, 82, 45)
CLOUD_COLOR = (255, 255, 255, 204)

# Host shell
HEADER_BG = (30, 27, 75)
PANEL_BG = (17, 24, 39)
TEXT_COLOR = (229, 231, 235)
TEXT_DIM = (156, 163, 175)
ACCENT_COLOR = (250, 204, 21)
OVERLAY_COLOR = (0, 0, 0, 150)
HIGH_SCORE_PATH = Path.home() / ".runnerx" / "highscore.json"

# Static leaderboard (name, score, date)
LEADERBOARD = (
    ("EyeMaster", 2847, "2024-01-15"),
    ("VisionRunner", 2156, "2024-01-14"),
    ("IntuitionPro", 1923, "2024-01-13"),
    ("EyeSeeker", 1745, "2024-01-12"),
    ("RunnerX_Fan", 1432, "2024-01-11"),
)


class ConfigurationError(ValueError):
    """Raised when the engine is handed geometry it cannot lay out a field on."""
