"""
UI exports.
"""

from birddash.ui.hud_manager import HUDManager
from birddash.ui.responsive_utils import ResponsiveUtils

__all__ = [
    'HUDManager',
    'ResponsiveUtils',
]
