"""
obstacle_manager.py
-------------------
Spawns, moves and resolves collisions for obstacles.

Responsibilities
----------------
- Difficulty-weighted type selection from obstacles.json
- Vertical move patterns driven by each obstacle's own clock
- Shield blocks ("BLOCKED!", shield score, particles) vs. damage hand-off
"""

import math
import random

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Spawning, Layers
from birddash.core.services.config_manager import load_config
from birddash.core.services.event_manager import (
    get_events, ObstacleHitEvent, FloatingTextEvent
)
from birddash.entities.pooled_sprite import PooledSprite
from birddash.systems.collectible_manager import pick_weighted, scroll_step
from birddash.systems.object_pool import ObjectPool


MAX_MOVE_PATTERN = 7
VERTICAL_MARGIN = 60
VERTICAL_MARGIN_RATIO = 0.08


def pattern_offset(pattern: int, t_ms: float) -> float:
    """Vertical offset from start_y for a move pattern at obstacle age ``t_ms``."""
    if pattern == 0:
        return 0.0
    if pattern == 1:
        return math.sin(t_ms * 0.001) * 20
    if pattern == 2:
        return math.sin(t_ms * 0.0008) * 35
    return math.sin(t_ms * 0.0012) * 25


class ObstacleManager:
    """Owns the obstacle pool and hit resolution."""

    def __init__(self, state, screen_size, sizing, player=None, textures=None,
                 on_damage=None, screen_mult=1.0, rng=None):
        """
        Args:
            state: GameState (game speed, scoring)
            screen_size: (width, height)
            sizing: ElementSizing for the obstacle base size
            player: Player used for overlap tests and the shield flag
            textures: Optional TextureFactory
            on_damage: Called with the obstacle when an unshielded hit lands
            screen_mult: Responsive scroll speed multiplier
            rng: Random source
        """
        self.state = state
        self.screen_width, self.screen_height = screen_size
        self.sizing = sizing
        self.player = player
        self.textures = textures
        self.on_damage = on_damage
        self.screen_mult = screen_mult
        self.rng = rng or random.Random()

        self.obstacle_types = load_config("obstacles.json", default_dict={})
        self.pool = ObjectPool(
            lambda: PooledSprite("obstacle"), PooledSprite.spawn,
            max_size=Spawning.OBSTACLE_POOL_SIZE, warmup=Spawning.POOL_WARMUP, name="obstacles"
        )
        self._since_spawn_ms = 0.0
        self.spawning_enabled = True

        DebugLogger.init_entry("ObstacleManager")
        DebugLogger.init_sub(f"{len(self.obstacle_types)} obstacle types")

    # ===========================================================
    # Update
    # ===========================================================

    def spawn_interval(self, difficulty) -> float:
        return max(Spawning.OBSTACLE_MIN_INTERVAL_MS, Spawning.OBSTACLE_INTERVAL_MS * difficulty.spawn_rate)

    def update(self, dt, difficulty):
        """
        Args:
            dt: Delta time in seconds
            difficulty: DifficultySnapshot
        """
        delta_ms = dt * 1000.0
        self._since_spawn_ms += delta_ms
        if self.spawning_enabled and self._since_spawn_ms > self.spawn_interval(difficulty):
            self.spawn_obstacle(difficulty)
            self._since_spawn_ms = 0.0

        for obstacle in self.pool.get_active():
            obstacle.x -= scroll_step(self.state.game_speed, obstacle.base_speed, self.screen_mult, dt)

            age = obstacle.data.get("_age_ms", 0.0) + delta_ms
            obstacle.data["_age_ms"] = age
            obstacle.y = obstacle.start_y + pattern_offset(obstacle.data.get("_pattern", 0), age)

            if obstacle.x < -max(50, obstacle.width):
                self.pool.release(obstacle)

    # ===========================================================
    # Spawning
    # ===========================================================

    def weighted_types(self, difficulty):
        """(type, effective weight) pairs after the rarity reshaping."""
        chance = difficulty.rare_obstacle_chance
        return [
            (key, data.get("weight", 0) * (1 + data.get("rarity_bias", 0) * chance))
            for key, data in self.obstacle_types.items()
        ]

    def choose_pattern(self, data, difficulty) -> int:
        pattern = data.get("move_pattern", 0)
        if isinstance(pattern, (list, tuple)):
            low, high = pattern
            high = min(high + difficulty.level // 2, MAX_MOVE_PATTERN)
            return self.rng.randint(low, high)

        complexity = difficulty.movement_complexity
        if complexity > 0.5 and self.rng.random() < complexity * 0.3:
            return min(pattern + self.rng.randint(1, 3), MAX_MOVE_PATTERN)
        return pattern

    def spawn_obstacle(self, difficulty, type_key=None):
        """Spawn one obstacle just off the right edge."""
        if type_key is None:
            type_key = pick_weighted(self.weighted_types(difficulty), self.rng)
        data = self.obstacle_types.get(type_key)
        if data is None:
            DebugLogger.warn(f"Unknown obstacle type '{type_key}'", category="spawns")
            return None

        scale_min, scale_max = data.get("scale", (1.0, 1.0))
        size = int(self.sizing.size_for("obstacle") * self.rng.uniform(scale_min, scale_max))

        margin = max(VERTICAL_MARGIN, self.screen_height * VERTICAL_MARGIN_RATIO)
        x = self.screen_width + self.rng.uniform(50, 100)
        y = self.rng.uniform(margin, self.screen_height - margin)

        # Per-instance state lives in a copy so the shared table stays clean
        instance = dict(data)
        instance["_pattern"] = self.choose_pattern(data, difficulty)
        instance["_age_ms"] = 0.0

        obstacle = self.pool.get(
            type_key, x, y, size,
            points=data.get("shield_score", 0), data=instance,
            image=self.textures.get(data.get("texture", type_key), size) if self.textures else None,
            base_speed=data.get("speed", 1.0) * difficulty.obstacle_speed,
            spawn_time=self.state.elapsed_ms,
        )
        DebugLogger.trace(
            f"Spawned {type_key} pattern {instance['_pattern']} at ({x:.0f}, {y:.0f})",
            category="spawns"
        )
        return obstacle

    # ===========================================================
    # Collisions
    # ===========================================================

    def check_collisions(self):
        if self.player is None:
            return
        hitbox = self.player.hitbox()
        for obstacle in self.pool.get_active():
            if hitbox.colliderect(obstacle.hitbox(0.85)):
                self.hit_obstacle(obstacle)

    def hit_obstacle(self, obstacle):
        """
        Resolve an overlap with the player.

        Returns:
            bool: True if the shield blocked the hit
        """
        position = (obstacle.x, obstacle.y)
        blocked = bool(self.player and self.player.shield_active)
        events = get_events()

        if blocked:
            self.state.add_score(obstacle.points, comboable=False)
            events.dispatch(FloatingTextEvent("BLOCKED!", (position[0], position[1] - 30), (255, 215, 0)))
            DebugLogger.trace(f"Shield blocked {obstacle.type_key}", category="collisions")
        else:
            DebugLogger.trace(f"Hit {obstacle.type_key}", category="collisions")

        events.dispatch(ObstacleHitEvent(obstacle.type_key, position, blocked))
        particles = obstacle.data.get("particles", 8)
        self.pool.release(obstacle)

        if not blocked and self.on_damage is not None:
            self.on_damage(obstacle.type_key, position, particles)
        return blocked

    # ===========================================================
    # Lifecycle & Rendering
    # ===========================================================

    def active_obstacles(self):
        return self.pool.get_active()

    def release_all(self):
        self.pool.release_all()
        self._since_spawn_ms = 0.0

    def draw(self, draw_manager):
        for obstacle in self.pool.get_active():
            if obstacle.type_key == "bomb":
                radius = int(obstacle.width * 0.6)
                draw_manager.queue_circle_alpha(obstacle.rect.center, radius, (255, 69, 0), 50, Layers.OBSTACLES - 1)
            if obstacle.image is not None:
                draw_manager.queue_draw(obstacle.image, obstacle.rect, Layers.OBSTACLES)
            else:
                draw_manager.queue_shape("rect", obstacle.rect, (90, 60, 40), Layers.OBSTACLES)
