"""
Particle system exports.

Provides particle emitters and ambient overlays for visual feedback.
"""

from birddash.graphics.particles.particle_manager import (
    ParticleEmitter,
    ParticleOverlay,
    Particle,
    SpriteCache,
)

__all__ = [
    'ParticleEmitter',
    'ParticleOverlay',
    'Particle',
    'SpriteCache',
]
