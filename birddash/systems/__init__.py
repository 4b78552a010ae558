"""
Gameplay systems exports.

Provides pooling, spawning, difficulty and power-up coordination.
"""

from birddash.systems.object_pool import ObjectPool
from birddash.systems.power_ups import PowerUpSystem, PowerUpType
from birddash.systems.difficulty import DifficultyManager, DifficultySnapshot, compute_difficulty
from birddash.systems.collectible_manager import CollectibleManager
from birddash.systems.obstacle_manager import ObstacleManager

__all__ = [
    'ObjectPool',
    'PowerUpSystem',
    'PowerUpType',
    'DifficultyManager',
    'DifficultySnapshot',
    'compute_difficulty',
    'CollectibleManager',
    'ObstacleManager',
]
