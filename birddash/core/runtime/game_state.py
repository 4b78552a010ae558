"""
game_state.py
-------------
Per-run mutable state owned by the game scene.

Holds score, combo, scroll speed, distance and session phase. Power-up
timers live in PowerUpSystem but write their side effects back here
(score multiplier, time-slow factor).
"""

import math

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Speed, Scoring, Session


class GameState:
    """Score, speed and session bookkeeping for a single run."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset state to defaults when starting a new run."""
        self.score = 0
        self.combo_count = 0
        self.max_combo_reached = 0

        self.base_game_speed = Speed.BASE_GAME_SPEED
        self.speed_increase = 1.0
        self.game_speed = self.base_game_speed
        self.time_slow_factor = 1.0
        self.time_slow_active = False
        self.score_multiplier = 1.0
        self.score_multiplier_active = False

        self.distance_traveled = 0.0
        self.elapsed_ms = 0.0
        self.collectibles_collected = 0
        self.power_ups_collected = 0

        self.game_running = True
        self.is_dashing = False

        self.session_phase = Session.PHASES[0][0]
        self.session_bonus_multiplier = Session.PHASES[0][2]

    # ===========================================================
    # Scoring
    # ===========================================================

    def add_score(self, points, comboable=True):
        """
        Add points after applying combo, power-up and session multipliers.

        Args:
            points: Base point value
            comboable: Whether this pickup counts toward the combo chain

        Returns:
            int: Points actually added
        """
        if comboable and self.combo_count > 1:
            points *= min(self.combo_count, Scoring.MAX_COMBO_MULTIPLIER)

        if self.score_multiplier_active:
            points *= self.score_multiplier

        points *= self.session_bonus_multiplier

        gained = int(math.floor(points))
        self.score += gained

        if comboable:
            self.combo_count += 1
            self.max_combo_reached = max(self.max_combo_reached, self.combo_count)

        DebugLogger.trace(
            f"+{gained} (combo {self.combo_count}, total {self.score})",
            category="scores"
        )
        return gained

    def reset_combo(self):
        self.combo_count = 0

    # ===========================================================
    # Speed & Distance
    # ===========================================================

    def set_score_multiplier(self, multiplier: float, active: bool):
        self.score_multiplier = multiplier if active else 1.0
        self.score_multiplier_active = active

    def set_time_slow(self, active: bool, factor: float = Speed.TIME_SLOW_FACTOR):
        """Toggle time-slow and recompute game speed immediately."""
        self.time_slow_active = active
        self.time_slow_factor = factor if active else 1.0
        self._recompute_speed()

    def update(self, dt: float):
        """
        Advance the speed ramp, distance, run clock and session phase.

        Args:
            dt: Delta time in seconds
        """
        delta_ms = dt * 1000.0
        self.elapsed_ms += delta_ms
        self.speed_increase += delta_ms * Speed.SPEED_INCREASE_RATE
        self._recompute_speed()
        self.distance_traveled += self.game_speed * dt
        self._update_session_phase()

    def _recompute_speed(self):
        slow = self.time_slow_factor if self.time_slow_active else 1.0
        self.game_speed = self.base_game_speed * self.speed_increase * slow

    def _update_session_phase(self):
        phase, bonus = self.session_phase, self.session_bonus_multiplier
        for name, starts_at, multiplier in Session.PHASES:
            if self.elapsed_ms >= starts_at:
                phase, bonus = name, multiplier

        if phase != self.session_phase:
            DebugLogger.state(f"Session phase → {phase} (x{bonus})", category="game_state")
            self.session_phase = phase
            self.session_bonus_multiplier = bonus

    # ===========================================================
    # Reporting
    # ===========================================================

    def summary(self) -> dict:
        """Run results in the shape the leaderboard API expects."""
        return {
            "score": self.score,
            "time_played": int(self.elapsed_ms // 1000),
            "collectibles_collected": self.collectibles_collected,
            "power_ups_collected": self.power_ups_collected,
            "distance_traveled": int(self.distance_traveled),
            "max_combo": self.max_combo_reached,
        }
