"""
Audio exports.
"""

from birddash.audio.sound_manager import SoundManager, get_sound_manager

__all__ = [
    'SoundManager',
    'get_sound_manager',
]
