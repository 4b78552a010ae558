"""
game_settings.py
----------------
Centralized constants for all game systems.

Times are in milliseconds where the value describes a gameplay timer
(power-up durations, spawn intervals) and in seconds for frame timing.
"""

import os


# ===========================================================
# Display & Performance
# ===========================================================

class Display:
    """Screen and window configuration."""
    BASE_WIDTH: int = 360
    BASE_HEIGHT: int = 640
    WIDTH: int = 480
    HEIGHT: int = 854
    FPS: int = 60
    CAPTION: str = "BirdDash"
    BACKGROUND_COLOR = (62, 39, 35)


# ===========================================================
# Font Configuration
# ===========================================================

class Fonts:
    # Tried in order when rendering emoji glyphs
    EMOJI_FONTS = ("notocoloremoji", "segoeuiemoji", "applecoloremoji", "symbola")
    UI_FONT = None
    SIZES = {"SMALL": 16, "MEDIUM": 22, "LARGE": 32, "XLARGE": 48}


# ===========================================================
# Physics & Timing
# ===========================================================

class Physics:
    """Physics and update timing."""
    UPDATE_RATE: int = 60
    FIXED_DT: float = 1 / UPDATE_RATE
    MAX_FRAME_TIME: float = 0.1
    FRAME_MS: float = 16.67
    GRAVITY: float = 800.0
    MAX_FALL_SPEED: float = 600.0


# ===========================================================
# Game Speed
# ===========================================================

class Speed:
    """Scroll speed ramp."""
    BASE_GAME_SPEED: float = 300.0
    SPEED_INCREASE_RATE: float = 0.00002  # per ms
    TIME_SLOW_FACTOR: float = 0.6
    MOVE_SCALE: float = 0.02  # game_speed -> px per 16.67ms frame


# ===========================================================
# Spawning
# ===========================================================

class Spawning:
    """Spawn cadence and pool sizes."""
    BEAN_INTERVAL_MS: int = 800
    POWER_UP_INTERVAL_MS: int = 8000
    OBSTACLE_INTERVAL_MS: int = 2000
    OBSTACLE_MIN_INTERVAL_MS: int = 800

    BEAN_POOL_SIZE: int = 30
    POWER_UP_POOL_SIZE: int = 10
    OBSTACLE_POOL_SIZE: int = 20
    POOL_WARMUP: int = 10

    SPAWN_X_OFFSET = (20, 80)
    BEAN_Y_RANGE = (0.25, 0.75)
    POWER_UP_Y_RANGE = (0.35, 0.65)

    BEAN_BASE_SPEED: float = 1.0
    POWER_UP_BASE_SPEED: float = 0.9


# ===========================================================
# Power-ups
# ===========================================================

class PowerUps:
    """Default power-up durations (ms) and tuning."""
    SHIELD_DURATION: int = 3000
    SPEED_BOOST_DURATION: int = 4000
    SCORE_MULTIPLIER_DURATION: int = 5000
    TIME_SLOW_DURATION: int = 6000
    MAGNET_DURATION: int = 5000
    COMPANION_DURATION: int = 15000

    SCORE_MULTIPLIER: float = 2.0
    SPEED_BOOST_MULTIPLIER: float = 1.5
    MAGNET_RANGE: float = 150.0
    MAGNET_PULL_SPEED: float = 300.0
    COMPANION_COLLECT_RADIUS: float = 80.0
    COLLECT_HIT_STOP_MS: int = 40


# ===========================================================
# Scoring & Session
# ===========================================================

class Scoring:
    """Combo limits."""
    MAX_COMBO_MULTIPLIER: int = 10


class Session:
    """Session phases: (name, starts_at_ms, bonus multiplier)."""
    PHASES = (
        ("warmup", 0, 1.0),
        ("cruise", 30000, 1.1),
        ("rush", 120000, 1.25),
    )


class Online:
    """End-of-run leaderboard."""
    PLAYER_NAME: str = os.getenv("BIRDDASH_PLAYER_NAME", "Guest")
    LEADERBOARD_SIZE: int = 20
    VISIBLE_ROWS: int = 10


# ===========================================================
# Bounds & Margins
# ===========================================================

class Bounds:
    """Margin values for entity lifecycle management."""
    PLAYER_SIDE_MARGIN: int = 50
    PLAYER_SIDE_RATIO: float = 0.12
    PLAYER_VERTICAL_MARGIN: int = 40
    PLAYER_VERTICAL_RATIO: float = 0.08


# ===========================================================
# Rendering Layers
# ===========================================================

class Layers:
    """Z-order for rendering."""
    BACKGROUND: int = 0
    PICKUPS: int = 100
    OBSTACLES: int = 200
    COMPANION: int = 300
    PLAYER: int = 400
    PARTICLES: int = 500
    UI: int = 600
    OVERLAY: int = 700
    DEBUG: int = 900


# ===========================================================
# Player Defaults
# ===========================================================

class PlayerSettings:
    """Player configuration defaults."""
    MAX_HEALTH: int = 3
    INVULNERABILITY_MS: int = 1000
    JUMP_POWER: float = -600.0
    FLY_POWER: float = -450.0
    FLY_MIN_IMPULSE: float = -400.0
    QUICK_BOOST_POWER: float = -350.0
    FLUID_SPEED: float = 0.45
    MOVE_SPEED: float = 8.0
    MIN_MOVE_SPEED: float = 6.0
    DASH_DISTANCE: float = 100.0
    DASH_DURATION_MS: int = 200
    HITBOX_SCALE: float = 0.6


# ===========================================================
# Debug Display
# ===========================================================

class Debug:
    """Visual debug toggles -- not related to logging."""
    SHOW_FPS: bool = False
    HITBOX_VISIBLE: bool = False
    HITBOX_LINE_WIDTH: int = 1
