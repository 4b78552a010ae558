"""
test_input_manager.py
---------------------
Edge detection, contexts and pointer taps.
"""

from collections import defaultdict

import pygame
import pytest

from birddash.core.services.input_manager import InputManager


def key_state(*down):
    keys = defaultdict(bool)
    for key in down:
        keys[key] = True
    return keys


@pytest.fixture
def input_manager():
    return InputManager()


class TestEdgeDetection:

    def test_press_hold_release(self, input_manager):
        input_manager.update(key_state(pygame.K_SPACE))
        assert input_manager.action_pressed("fly")
        assert input_manager.action_held("fly")

        input_manager.update(key_state(pygame.K_SPACE))
        assert not input_manager.action_pressed("fly")
        assert input_manager.action_held("fly")

        input_manager.update(key_state())
        assert input_manager.action_released("fly")
        assert not input_manager.action_held("fly")

    def test_any_bound_key_counts(self, input_manager):
        input_manager.update(key_state(pygame.K_a))
        assert input_manager.action_held("move_left")

    def test_unknown_action_is_false(self, input_manager):
        assert input_manager.action_pressed("teleport") is False


class TestContexts:

    def test_switch_clears_edges(self, input_manager):
        input_manager.update(key_state(pygame.K_SPACE))
        input_manager.set_context("ui")
        assert not input_manager.action_pressed("fly")

    def test_unknown_context_is_ignored(self, input_manager):
        input_manager.set_context("cutscene")
        assert input_manager.context == "gameplay"


class TestPointerAndSystemKeys:

    def test_tap_lasts_one_frame(self, input_manager):
        input_manager.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(10, 20), button=1))
        assert input_manager.pointer_pressed()
        assert input_manager.pointer_pos == (10, 20)

        input_manager.end_frame()
        assert not input_manager.pointer_pressed()

    @pytest.mark.parametrize("action, key", [
        ("toggle_debug", pygame.K_F3), ("toggle_mute", pygame.K_m), ("quit", pygame.K_ESCAPE),
    ])
    def test_system_keys(self, input_manager, action, key):
        assert input_manager.is_system_key(action, pygame.event.Event(pygame.KEYDOWN, key=key))
        assert not input_manager.is_system_key(action, pygame.event.Event(pygame.KEYUP, key=key))
