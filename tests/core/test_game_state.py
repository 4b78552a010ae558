"""
test_game_state.py
------------------
Scoring, speed and session-phase tests for GameState, plus the
cross-run SessionStats.
"""

import pytest

from birddash.core.runtime.game_settings import Speed
from birddash.core.runtime.session_stats import get_session_stats, reset_session_stats


class TestScoring:

    def test_first_pickup_scores_base_points(self, game_state):
        assert game_state.add_score(20) == 20
        assert game_state.combo_count == 1

    def test_combo_multiplies_from_second_pickup(self, game_state):
        game_state.add_score(20)
        assert game_state.add_score(20) == 40
        assert game_state.add_score(20) == 60
        assert game_state.max_combo_reached == 3

    def test_combo_multiplier_is_capped(self, game_state):
        game_state.combo_count = 25
        assert game_state.add_score(10) == 100

    @pytest.mark.parametrize("combo, multiplier, session, expected", [
        (0, 1.0, 1.0, 10),
        (3, 1.0, 1.0, 30),
        (3, 2.0, 1.0, 60),
        (3, 2.0, 1.25, 75),
        (0, 3.0, 1.1, 33),
    ])
    def test_multipliers_compose_multiplicatively(self, game_state, combo, multiplier, session, expected):
        game_state.combo_count = combo
        game_state.set_score_multiplier(multiplier, multiplier != 1.0)
        game_state.session_bonus_multiplier = session
        assert game_state.add_score(10) == expected

    def test_non_comboable_points_skip_combo(self, game_state):
        game_state.combo_count = 5
        assert game_state.add_score(25, comboable=False) == 25
        assert game_state.combo_count == 5

    def test_reset_combo_keeps_max(self, game_state):
        for _ in range(4):
            game_state.add_score(1)
        game_state.reset_combo()
        assert game_state.combo_count == 0
        assert game_state.max_combo_reached == 4


class TestSpeedAndSession:

    def test_speed_ramps_with_time(self, game_state):
        game_state.update(1.0)
        expected = Speed.BASE_GAME_SPEED * (1 + 1000 * Speed.SPEED_INCREASE_RATE)
        assert game_state.game_speed == pytest.approx(expected)
        assert game_state.distance_traveled == pytest.approx(expected)

    def test_time_slow_scales_current_speed(self, game_state):
        game_state.set_time_slow(True, 0.6)
        assert game_state.game_speed == pytest.approx(Speed.BASE_GAME_SPEED * 0.6)
        game_state.set_time_slow(False)
        assert game_state.game_speed == pytest.approx(Speed.BASE_GAME_SPEED)

    @pytest.mark.parametrize("elapsed_s, phase, bonus", [
        (10, "warmup", 1.0),
        (31, "cruise", 1.1),
        (121, "rush", 1.25),
    ])
    def test_session_phases(self, game_state, elapsed_s, phase, bonus):
        game_state.update(elapsed_s)
        assert game_state.session_phase == phase
        assert game_state.session_bonus_multiplier == bonus

    def test_summary_shape(self, game_state):
        game_state.add_score(20)
        game_state.collectibles_collected = 1
        game_state.update(2.5)
        summary = game_state.summary()
        assert summary["score"] == 20
        assert summary["time_played"] == 2
        assert set(summary) == {
            "score", "time_played", "collectibles_collected",
            "power_ups_collected", "distance_traveled", "max_combo",
        }


class TestSessionStats:

    @pytest.fixture(autouse=True)
    def fresh_stats(self):
        reset_session_stats()
        yield
        reset_session_stats()

    def test_singleton_survives_until_reset(self):
        stats = get_session_stats()
        assert get_session_stats() is stats
        reset_session_stats()
        assert get_session_stats() is not stats

    def test_runs_fold_into_totals(self):
        stats = get_session_stats()
        stats.record_run({"score": 300, "time_played": 40, "max_combo": 5})
        stats.record_run({"score": 100, "time_played": 20, "max_combo": 2})

        assert stats.games_played == 2
        assert stats.best_score == 300
        assert stats.best_combo == 5
        assert stats.total_time_played == 60
        assert stats.average_score == 200

    def test_reset_clears_best(self):
        stats = get_session_stats()
        stats.record_run({"score": 50})
        stats.reset()
        assert stats.best_score == 0
        assert stats.average_score == 0
