"""
Runtime configuration exports.

Provides game-wide constants, per-run state and session statistics.
"""

from birddash.core.runtime.game_settings import (
    Display,
    Fonts,
    Physics,
    Speed,
    Spawning,
    PowerUps,
    Scoring,
    Session,
    Online,
    Bounds,
    Layers,
    PlayerSettings,
    Debug,
)
from birddash.core.runtime.game_state import GameState
from birddash.core.runtime.session_stats import get_session_stats, reset_session_stats

__all__ = [
    # Display & Rendering
    'Display',
    'Fonts',
    'Layers',
    # Gameplay tuning
    'Physics',
    'Speed',
    'Spawning',
    'PowerUps',
    'Scoring',
    'Session',
    'Online',
    'Bounds',
    'PlayerSettings',
    # Debug
    'Debug',
    # State
    'GameState',
    'get_session_stats',
    'reset_session_stats',
]
