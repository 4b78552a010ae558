"""
Graphics exports.

Provides the layered draw queue, texture synthesis and element sizing.
"""

from birddash.graphics.draw_manager import DrawManager
from birddash.graphics.texture_factory import TextureFactory
from birddash.graphics.element_sizing import ElementSizing

__all__ = [
    'DrawManager',
    'TextureFactory',
    'ElementSizing',
]
