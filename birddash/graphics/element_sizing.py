"""
element_sizing.py
-----------------
Standard pixel sizes for every sprite family, scaled to the window.

Sizes are authored for a 480x854 window and multiplied by a responsive
factor clamped to [0.8, 1.4].
"""

from birddash.core.runtime.game_settings import Display


STANDARD_SIZES = {
    "player": 77,
    "collectible": 114,
    "coffee_small": 104,
    "coffee_medium": 124,
    "coffee_large": 143,
    "coffee_specialty": 163,
    "power_up": 61,
    "obstacle": 72,
    "companion": 57,
    "ui_icon": 51,
}

SIZE_ALIASES = {
    "smoothie": "collectible",
    "bagel": "collectible",
    "small_coffee": "coffee_small",
    "medium_coffee": "coffee_medium",
    "large_coffee": "coffee_large",
    "specialty_coffee": "coffee_specialty",
    "powerup": "power_up",
    "power-up": "power_up",
    "bird": "companion",
    "ui": "ui_icon",
}

MIN_SCALE_FACTOR = 0.8
MAX_SCALE_FACTOR = 1.4


class ElementSizing:
    """Maps element types to on-screen pixel sizes."""

    def __init__(self, screen_width=Display.WIDTH, screen_height=Display.HEIGHT):
        self.update_dimensions(screen_width, screen_height)

    def update_dimensions(self, screen_width, screen_height):
        self.screen_width = screen_width
        self.screen_height = screen_height
        ratio = min(screen_width / Display.WIDTH, screen_height / Display.HEIGHT)
        self.scale_factor = max(MIN_SCALE_FACTOR, min(MAX_SCALE_FACTOR, ratio))

    @staticmethod
    def standard_size(element_type: str) -> int:
        """Unscaled size; unknown types fall back to the collectible size."""
        key = element_type.lower()
        key = SIZE_ALIASES.get(key, key)
        return STANDARD_SIZES.get(key, STANDARD_SIZES["collectible"])

    def size_for(self, element_type: str) -> int:
        """Final display size in pixels."""
        return int(round(self.standard_size(element_type) * self.scale_factor))
