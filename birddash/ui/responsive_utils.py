"""
responsive_utils.py
-------------------
Screen-relative helpers for HUD layout: font sizes, margins and clamped
popup positions, computed from a 360x640 base resolution.
"""

from birddash.core.runtime.game_settings import Display


FONT_SIZES = {
    "TINY": 12, "SMALL": 14, "MEDIUM": 16, "LARGE": 18,
    "XLARGE": 24, "HUGE": 32, "GIANT": 48,
}
MARGINS = {"SMALL": 24, "MEDIUM": 28, "LARGE": 32}
SAFE_MARGIN_X = 0.12
SAFE_MARGIN_Y = 0.10
MIN_SCALE = 0.8


class ResponsiveUtils:
    """Derived layout metrics for the current window size."""

    def __init__(self, screen_width=Display.WIDTH, screen_height=Display.HEIGHT):
        self.update_dimensions(screen_width, screen_height)

    def update_dimensions(self, screen_width, screen_height):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.center_x = screen_width / 2
        self.center_y = screen_height / 2

        height_scale = screen_height / Display.BASE_HEIGHT
        width_scale = screen_width / Display.BASE_WIDTH
        self.min_scale = max(MIN_SCALE, min(height_scale, width_scale * 1.2))

        if screen_height < 600:
            self.screen_type = "small"
        elif screen_height < 800:
            self.screen_type = "medium"
        else:
            self.screen_type = "large"

    def font_size(self, size="MEDIUM") -> int:
        base = FONT_SIZES.get(size, FONT_SIZES["MEDIUM"])
        return int(max(base * 0.8, min(base * 1.2, base * self.min_scale)))

    def margin(self, size="MEDIUM") -> int:
        base = MARGINS.get(size, MARGINS["MEDIUM"])
        return int(max(base, base * self.min_scale))

    def safe_position(self, x, y, margin_x=SAFE_MARGIN_X, margin_y=SAFE_MARGIN_Y):
        """Clamp a point into the screen minus proportional margins."""
        mx = self.screen_width * margin_x
        my = self.screen_height * margin_y
        return (
            min(max(x, mx), self.screen_width - mx),
            min(max(y, my), self.screen_height - my),
        )

    @property
    def screen_speed_multiplier(self) -> float:
        """Scroll speed scale so larger windows do not feel slower."""
        return max(0.8, self.min_scale)
