"""
test_power_ups.py
-----------------
Regression tests for the power-up timer coordinator.

Covers:
1. Activation applies side effects and dispatches events
2. Re-activation refreshes the countdown instead of stacking
3. Countdown is monotonic and expiry happens exactly once
4. Deactivation is idempotent and reverts side effects
5. Time-slow expiry restores game speed
"""

import pytest
from unittest.mock import MagicMock

from birddash.core.services.event_manager import PowerUpActivatedEvent, PowerUpExpiredEvent
from birddash.systems.power_ups import PowerUpSystem, PowerUpType


@pytest.fixture
def system(game_state, player):
    return PowerUpSystem(game_state, player)


class TestActivation:

    def test_shield_sets_player_flag(self, system, player):
        assert system.activate(PowerUpType.SHIELD, 3000)
        assert player.shield_active
        assert system.is_active(PowerUpType.SHIELD)

    def test_string_kinds_are_accepted(self, system):
        system.activate("magnet", 5000, range=200)
        assert system.is_active(PowerUpType.MAGNET)
        assert system.magnet_range == 200

    def test_unknown_kind_raises(self, system):
        with pytest.raises(ValueError):
            system.activate("invisibility", 1000)

    def test_score_multiplier_applies_to_state(self, system, game_state):
        system.activate(PowerUpType.SCORE_MULTIPLIER, 5000, multiplier=3.0)
        assert game_state.score_multiplier_active
        assert game_state.score_multiplier == 3.0

    def test_speed_boost_uses_default_multiplier(self, system, player):
        system.activate(PowerUpType.SPEED_BOOST)
        assert player.speed_multiplier == 1.5
        assert system.time_remaining(PowerUpType.SPEED_BOOST) == 4000

    def test_companion_requires_player(self, game_state):
        system = PowerUpSystem(game_state, player=None)
        assert system.activate(PowerUpType.BIRD_COMPANION, 15000) is False
        assert not system.is_active(PowerUpType.BIRD_COMPANION)

    def test_activation_dispatches_event(self, system, fresh_events):
        received = []
        fresh_events.subscribe(PowerUpActivatedEvent, received.append)

        system.activate(PowerUpType.SHIELD, 3000)
        system.activate(PowerUpType.SHIELD, 3000)

        assert [e.refreshed for e in received] == [False, True]


class TestCountdown:

    def test_reactivation_resets_instead_of_stacking(self, system):
        system.activate(PowerUpType.SHIELD, 3000)
        system.update(1.0)
        assert system.time_remaining(PowerUpType.SHIELD) == pytest.approx(2000)

        system.activate(PowerUpType.SHIELD, 3000)
        assert system.time_remaining(PowerUpType.SHIELD) == pytest.approx(3000)

    def test_remaining_time_only_decreases(self, system):
        system.activate(PowerUpType.MAGNET, 1000)
        previous = system.time_remaining(PowerUpType.MAGNET)
        for _ in range(20):
            system.update(1 / 60)
            current = system.time_remaining(PowerUpType.MAGNET)
            assert current <= previous
            previous = current

    def test_expiry_fires_once(self, system, fresh_events, player):
        expired = []
        fresh_events.subscribe(PowerUpExpiredEvent, expired.append)

        system.activate(PowerUpType.SHIELD, 100)
        system.update(0.2)
        system.update(0.2)

        assert [e.power_up for e in expired] == ["shield"]
        assert not player.shield_active
        assert system.time_remaining(PowerUpType.SHIELD) == 0

    def test_progress_tracks_remaining_fraction(self, system):
        system.activate(PowerUpType.MAGNET, 1000)
        system.update(0.25)
        assert system.timers[PowerUpType.MAGNET].progress == pytest.approx(0.75)


class TestDeactivation:

    def test_deactivate_is_idempotent(self, system, fresh_events):
        expired = MagicMock()
        fresh_events.subscribe(PowerUpExpiredEvent, expired)

        system.activate(PowerUpType.SPEED_BOOST, 4000)
        assert system.deactivate(PowerUpType.SPEED_BOOST) is True
        assert system.deactivate(PowerUpType.SPEED_BOOST) is False
        assert expired.call_count == 1

    def test_time_slow_expiry_restores_speed(self, system, game_state):
        game_state.update(1 / 60)
        normal_speed = game_state.game_speed

        system.activate(PowerUpType.TIME_SLOW, 500, factor=0.5)
        assert game_state.game_speed == pytest.approx(normal_speed * 0.5)

        system.update(1.0)
        assert not game_state.time_slow_active
        assert game_state.game_speed == pytest.approx(normal_speed)

    def test_score_multiplier_expiry_resets_state(self, system, game_state):
        system.activate(PowerUpType.SCORE_MULTIPLIER, 100, multiplier=2.0)
        system.update(0.5)
        assert game_state.score_multiplier == 1.0
        assert not game_state.score_multiplier_active

    def test_deactivate_all_clears_everything(self, system, player):
        system.activate(PowerUpType.SHIELD)
        system.activate(PowerUpType.MAGNET)
        system.activate(PowerUpType.BIRD_COMPANION)
        system.deactivate_all()

        assert system.active_timers() == []
        assert system.companion is None
        assert not player.shield_active
