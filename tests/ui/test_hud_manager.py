"""
test_hud_manager.py
-------------------
HUD binding resolution, label rendering and floating text lifetime.
"""

import pytest

from birddash.systems.difficulty import DifficultyManager
from birddash.systems.power_ups import PowerUpSystem, PowerUpType
from birddash.ui.hud_manager import BindingSystem, HUDManager
from birddash.ui.responsive_utils import ResponsiveUtils


@pytest.fixture
def hud(game_state, player):
    manager = HUDManager(ResponsiveUtils(480, 854))
    manager.bind(
        state=game_state,
        player=player,
        power_ups=PowerUpSystem(game_state, player),
        difficulty=DifficultyManager(game_state),
    )
    return manager


def queued_texts(draw_manager):
    return [c.args[0] for c in draw_manager.queue_text.call_args_list]


class TestBindingSystem:

    def test_resolves_attributes_and_dict_keys(self, game_state):
        bindings = BindingSystem()
        bindings.register("state", game_state)
        bindings.register("cfg", {"nested": {"value": 7}})

        game_state.score = 120
        assert bindings.resolve("state.score") == 120
        assert bindings.resolve("cfg.nested.value") == 7

    def test_missing_segments_resolve_to_none(self):
        bindings = BindingSystem()
        bindings.register("cfg", {"a": None})
        assert bindings.resolve("cfg.a.b") is None
        assert bindings.resolve("unknown.path") is None
        assert bindings.resolve("") is None

    def test_unregister(self, game_state):
        bindings = BindingSystem()
        bindings.register("state", game_state)
        bindings.unregister("state")
        assert bindings.resolve("state.score") is None


class TestHUDDrawing:

    def test_labels_follow_bound_values(self, hud, game_state, mock_draw_manager):
        game_state.score = 340
        hud.draw(mock_draw_manager)
        texts = queued_texts(mock_draw_manager)
        assert "Score: 340" in texts
        assert "WARMUP" in texts
        assert "Level 0" in texts

    def test_combo_hidden_below_two(self, hud, game_state, mock_draw_manager):
        game_state.combo_count = 1
        hud.draw(mock_draw_manager)
        assert not any(t.startswith("Combo") for t in queued_texts(mock_draw_manager))

        mock_draw_manager.reset_mock()
        game_state.combo_count = 3
        hud.draw(mock_draw_manager)
        assert "Combo x3" in queued_texts(mock_draw_manager)

    def test_hearts_drawn_as_shapes_without_textures(self, hud, player, mock_draw_manager):
        hud.draw(mock_draw_manager)
        hearts = [c for c in mock_draw_manager.queue_shape.call_args_list if c.args[0] == "circle"]
        assert len(hearts) == player.max_health

    def test_active_power_up_gets_timer_row(self, hud, mock_draw_manager):
        hud.bindings.resolve("power_ups").activate(PowerUpType.SHIELD, 3000)
        hud.draw(mock_draw_manager)
        assert "Shield 3.0s" in queued_texts(mock_draw_manager)


class TestFloatingText:

    def test_rises_fades_and_expires(self, hud):
        hud.add_floating_text("+20", (240, 400))
        text = hud.floating_texts[0]
        start_y = text.y

        hud.update(0.3)
        assert text.y < start_y
        assert 0 < text.alpha < 255

        hud.update(1.0)
        assert hud.floating_texts == []

    def test_positions_are_kept_on_screen(self, hud):
        hud.add_floating_text("BLOCKED!", (-50, 5000))
        text = hud.floating_texts[0]
        assert 0 < text.x < 480
        assert 0 < text.y < 854
