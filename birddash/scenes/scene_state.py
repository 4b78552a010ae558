"""
scene_state.py
--------------
Defines the lifecycle states a scene can be in.
"""

from enum import Enum


class SceneState(Enum):
    """Lifecycle states for scene management."""
    INACTIVE = "inactive"       # Not loaded
    LOADING = "loading"         # Building textures / sounds
    ACTIVE = "active"           # Running normally
    EXITING = "exiting"         # Cleaning up before transition
