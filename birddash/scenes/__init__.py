"""
Scene module exports.

Provides the base scene class, lifecycle states and the two game scenes.
"""

from birddash.scenes.base_scene import BaseScene
from birddash.scenes.scene_state import SceneState
from birddash.scenes.preloader_scene import PreloaderScene
from birddash.scenes.game_scene import GameScene

__all__ = [
    'BaseScene',
    'SceneState',
    'PreloaderScene',
    'GameScene',
]
