"""
Entity exports.
"""

from birddash.entities.player import Player
from birddash.entities.pooled_sprite import PooledSprite
from birddash.entities.bird_companion import BirdCompanion

__all__ = [
    'Player',
    'PooledSprite',
    'BirdCompanion',
]
