"""
test_particles.py
-----------------
Burst cap, expiry and ambient overlay budget.
"""

import pytest

from birddash.graphics.particles import ParticleEmitter, ParticleOverlay
from birddash.graphics.particles.particle_manager import PARTICLE_PRESETS, get_preset


@pytest.fixture(autouse=True)
def no_particles():
    ParticleEmitter.clear_all()
    yield
    ParticleEmitter.clear_all()


class TestPresets:

    def test_bundled_presets_load_as_tuples(self):
        for name in ("collect", "sparkle", "burst", "impact", "shield", "steam"):
            assert isinstance(PARTICLE_PRESETS[name]["lifetime"], tuple)

    def test_unknown_preset_falls_back_to_burst(self):
        assert get_preset("confetti") is PARTICLE_PRESETS["burst"]


class TestEmitter:

    def test_burst_spawns_requested_count(self):
        assert ParticleEmitter.burst("collect", (100, 100), 8) == 8
        assert ParticleEmitter.particle_count() == 8

    def test_global_cap(self, monkeypatch):
        monkeypatch.setattr(ParticleEmitter, "_particle_limit", 5)
        assert ParticleEmitter.burst("impact", (0, 0), 10) == 5
        assert ParticleEmitter.burst("impact", (0, 0), 1) == 0

    def test_particles_expire(self):
        ParticleEmitter.burst("shield", (50, 50), 6)
        ParticleEmitter.update_all(1.0)
        assert ParticleEmitter.particle_count() == 0


class TestOverlay:

    def test_spawns_at_rate_up_to_budget(self):
        overlay = ParticleOverlay("steam", max_particles=4, spawn_rate=10, spawn_area=(0, 0, 100, 100))
        overlay.update(0.25)
        assert overlay.particle_count == 2

        overlay.update(1.0)
        assert overlay.particle_count == 4

    def test_clear(self):
        overlay = ParticleOverlay("steam", spawn_rate=10)
        overlay.update(0.5)
        overlay.clear()
        assert overlay.particle_count == 0
