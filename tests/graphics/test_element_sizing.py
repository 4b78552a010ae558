"""
test_element_sizing.py
----------------------
Sprite size scaling and responsive layout metrics.
"""

import pytest

from birddash.graphics.element_sizing import ElementSizing
from birddash.ui.responsive_utils import ResponsiveUtils


class TestElementSizing:

    def test_reference_window_is_unscaled(self, sizing):
        assert sizing.scale_factor == pytest.approx(1.0)
        assert sizing.size_for("player") == 77
        assert sizing.size_for("obstacle") == 72

    @pytest.mark.parametrize("size, factor", [((240, 427), 0.8), ((960, 1708), 1.4)])
    def test_scale_factor_is_clamped(self, size, factor):
        assert ElementSizing(*size).scale_factor == pytest.approx(factor)

    def test_small_window_shrinks_sprites(self):
        assert ElementSizing(240, 427).size_for("player") == 62

    def test_aliases_and_fallback(self):
        assert ElementSizing.standard_size("Small_Coffee") == 104
        assert ElementSizing.standard_size("bird") == 57
        assert ElementSizing.standard_size("mystery") == 114


class TestResponsiveUtils:

    def test_font_size_is_capped_at_120_percent(self):
        assert ResponsiveUtils(480, 854).font_size("MEDIUM") == 19

    def test_small_screen_floor(self):
        utils = ResponsiveUtils(300, 500)
        assert utils.screen_type == "small"
        assert utils.min_scale == pytest.approx(0.8)
        assert utils.font_size("LARGE") == 14

    def test_margin_never_shrinks(self):
        assert ResponsiveUtils(300, 500).margin("LARGE") == 32

    def test_speed_multiplier_floor(self):
        assert ResponsiveUtils(300, 500).screen_speed_multiplier == pytest.approx(0.8)
