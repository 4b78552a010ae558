"""
test_sound_manager.py
---------------------
Tone synthesis and silent-fallback tests.
"""

import pygame
import pytest
from unittest.mock import patch

from birddash.audio.sound_manager import SOUND_DEFINITIONS, SoundManager, synthesize


class TestSynthesize:

    def test_length_covers_delayed_layers(self):
        samples = synthesize([(440, 0.1, "sine", 0.5, 0.0), (880, 0.1, "square", 0.5, 0.2)], 1000)
        assert len(samples) == 300

    @pytest.mark.parametrize("name", sorted(SOUND_DEFINITIONS))
    def test_samples_are_normalised(self, name):
        samples = synthesize(SOUND_DEFINITIONS[name], 8000)
        assert max(abs(s) for s in samples) <= 1.0
        assert any(s != 0.0 for s in samples)


class TestSoundManager:

    @pytest.mark.parametrize("level, expected", [(0, 0.0), (50, 0.25), (100, 1.0), (150, 1.0)])
    def test_volume_curve(self, level, expected):
        assert SoundManager.volume_scale(level) == pytest.approx(expected)

    def test_missing_mixer_leaves_manager_silent(self):
        with patch("birddash.audio.sound_manager.pygame.mixer") as mixer:
            mixer.get_init.return_value = None
            mixer.init.side_effect = pygame.error("no audio device")
            manager = SoundManager()

        assert manager.enabled is False
        manager.play_sfx("collect")
        assert manager.sfx == {}

    def test_mute_toggle(self):
        with patch("birddash.audio.sound_manager.pygame.mixer") as mixer:
            mixer.get_init.return_value = None
            mixer.init.side_effect = pygame.error("no audio device")
            manager = SoundManager()

        assert manager.toggle_mute() is True
        assert manager.toggle_mute() is False
