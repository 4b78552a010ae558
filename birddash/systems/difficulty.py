"""
difficulty.py
-------------
Time- and distance-based difficulty ramp.

All values are pure functions of the run clock and distance travelled,
so managers can query them every frame without side effects.
"""

import math
from dataclasses import dataclass

from birddash.core.debug.debug_logger import DebugLogger


MAX_LEVEL = 10


@dataclass(frozen=True)
class DifficultySnapshot:
    """Multipliers consumed by the spawn managers."""
    spawn_rate: float
    movement_complexity: float
    reward_frequency: float
    level: int

    @property
    def rare_obstacle_chance(self) -> float:
        return min(0.3, 0.1 * self.movement_complexity + 0.02 * self.level)

    @property
    def obstacle_speed(self) -> float:
        return 1.0 + 0.05 * self.level


def compute_difficulty(elapsed_ms: float, distance: float) -> DifficultySnapshot:
    """
    Args:
        elapsed_ms: Run clock in milliseconds
        distance: Distance travelled in pixels

    Returns:
        DifficultySnapshot
    """
    minutes = elapsed_ms / 60000.0
    distance_level = math.floor(distance / 1000)
    level = min(math.floor(minutes) + math.floor(distance_level / 5), MAX_LEVEL)

    return DifficultySnapshot(
        spawn_rate=max(0.5, 1 - minutes * 0.1),
        movement_complexity=min(1.0, minutes * 0.2),
        reward_frequency=max(0.7, 1 - minutes * 0.05),
        level=level,
    )


class DifficultyManager:
    """Caches the current snapshot and logs level changes."""

    def __init__(self, state):
        self.state = state
        self.current = compute_difficulty(0, 0)

    def update(self) -> DifficultySnapshot:
        previous_level = self.current.level
        self.current = compute_difficulty(self.state.elapsed_ms, self.state.distance_traveled)
        if self.current.level != previous_level:
            DebugLogger.state(f"Difficulty level {self.current.level}", category="difficulty")
        return self.current

    def reset(self):
        self.current = compute_difficulty(0, 0)
