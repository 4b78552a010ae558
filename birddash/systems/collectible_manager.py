"""
collectible_manager.py
----------------------
Spawns, scrolls, recycles and collects beans and power-up pickups.

Responsibilities
----------------
- Load bean and power-up tables from JSON
- Weighted type selection on a difficulty-scaled spawn cadence
- Pool-backed sprite lifecycle (spawn, scroll, release off-screen)
- Player / companion collection: score, counters, effects, events
"""

import random

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Spawning, Speed, Physics, Layers
from birddash.core.services.config_manager import load_config
from birddash.core.services.event_manager import (
    get_events, ItemCollectedEvent, FloatingTextEvent, PlayerHealedEvent
)
from birddash.entities.pooled_sprite import PooledSprite
from birddash.systems.object_pool import ObjectPool


# ===========================================================
# Weighted Selection
# ===========================================================

def pick_weighted(entries, rng=random):
    """
    Pick a key from (key, weight) pairs by cumulative subtraction.

    Zero or negative weights never win. Falls back to the first key
    if float rounding leaves a remainder.

    Args:
        entries: Sequence of (key, weight)
        rng: Object with a ``random()`` method

    Returns:
        The selected key, or None for an empty table
    """
    entries = [(key, weight) for key, weight in entries if weight > 0]
    if not entries:
        return None

    total = sum(weight for _, weight in entries)
    roll = rng.random() * total
    for key, weight in entries:
        roll -= weight
        if roll <= 0:
            return key
    return entries[0][0]


def scroll_step(game_speed, base_speed, screen_mult, dt):
    """Pixels to move left this frame, normalised to a 60 FPS baseline."""
    normalized = (dt * 1000.0) / Physics.FRAME_MS
    return game_speed * Speed.MOVE_SCALE * base_speed * screen_mult * normalized


# ===========================================================
# Collectible Manager
# ===========================================================

class CollectibleManager:
    """Owns the bean and power-up pools."""

    def __init__(self, state, screen_size, sizing, power_ups=None, player=None,
                 textures=None, screen_mult=1.0, rng=None):
        """
        Args:
            state: GameState (score, counters, game speed)
            screen_size: (width, height)
            sizing: ElementSizing for pickup sizes
            power_ups: PowerUpSystem receiving timed effects
            player: Player receiving heals and used for overlap tests
            textures: Optional TextureFactory
            screen_mult: Responsive scroll speed multiplier
            rng: Random source (tests inject a seeded one)
        """
        self.state = state
        self.screen_width, self.screen_height = screen_size
        self.sizing = sizing
        self.power_ups = power_ups
        self.player = player
        self.textures = textures
        self.screen_mult = screen_mult
        self.rng = rng or random.Random()

        self.collectible_types = load_config("collectibles.json", default_dict={})
        self.power_up_types = load_config("power_ups.json", default_dict={})

        self.bean_pool = ObjectPool(
            lambda: PooledSprite("collectible"), PooledSprite.spawn,
            max_size=Spawning.BEAN_POOL_SIZE, warmup=Spawning.POOL_WARMUP, name="beans"
        )
        self.power_up_pool = ObjectPool(
            lambda: PooledSprite("power_up"), PooledSprite.spawn,
            max_size=Spawning.POWER_UP_POOL_SIZE, warmup=Spawning.POOL_WARMUP, name="power_ups"
        )

        self._since_bean_ms = 0.0
        self._since_power_up_ms = 0.0

        DebugLogger.init_entry("CollectibleManager")
        DebugLogger.init_sub(
            f"{len(self.collectible_types)} bean types, {len(self.power_up_types)} power-up types"
        )

    # ===========================================================
    # Queries
    # ===========================================================

    def active_beans(self):
        return self.bean_pool.get_active()

    def active_power_ups(self):
        return self.power_up_pool.get_active()

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, dt, difficulty):
        """
        Spawn on cadence, scroll, and release off-screen items.

        Args:
            dt: Delta time in seconds
            difficulty: DifficultySnapshot
        """
        delta_ms = dt * 1000.0
        self._since_bean_ms += delta_ms
        self._since_power_up_ms += delta_ms

        if self._since_bean_ms > Spawning.BEAN_INTERVAL_MS * difficulty.spawn_rate:
            self.spawn_bean()
            self._since_bean_ms = 0.0

        if self._since_power_up_ms > Spawning.POWER_UP_INTERVAL_MS * difficulty.reward_frequency:
            self.spawn_power_up()
            self._since_power_up_ms = 0.0

        self._scroll(self.bean_pool, dt)
        self._scroll(self.power_up_pool, dt)

    def _scroll(self, pool, dt):
        for item in pool.get_active():
            if item.being_collected:
                continue
            item.x -= scroll_step(self.state.game_speed, item.base_speed, self.screen_mult, dt)
            if item.x < -item.width:
                pool.release(item)

    # ===========================================================
    # Spawning
    # ===========================================================

    def _spawn_position(self, y_range):
        x = self.screen_width + self.rng.uniform(*Spawning.SPAWN_X_OFFSET)
        y = self.rng.uniform(self.screen_height * y_range[0], self.screen_height * y_range[1])
        return x, y

    def spawn_bean(self, type_key=None):
        """Spawn a bean of ``type_key`` (weighted random when None)."""
        if type_key is None:
            type_key = pick_weighted(
                ((key, data.get("weight", 0)) for key, data in self.collectible_types.items()),
                self.rng
            )
        data = self.collectible_types.get(type_key)
        if data is None:
            DebugLogger.warn(f"Unknown collectible type '{type_key}'", category="spawns")
            return None

        size = self.sizing.size_for(data.get("size", "collectible"))
        x, y = self._spawn_position(Spawning.BEAN_Y_RANGE)
        bean = self.bean_pool.get(
            type_key, x, y, size,
            points=data.get("points", 0), data=data,
            image=self._texture(data.get("texture", type_key), size),
            base_speed=Spawning.BEAN_BASE_SPEED, spawn_time=self.state.elapsed_ms,
        )
        DebugLogger.trace(f"Spawned {data.get('name', type_key)} at ({x:.0f}, {y:.0f})", category="spawns")
        return bean

    def spawn_power_up(self, type_key=None):
        """Spawn a power-up pickup of ``type_key`` (weighted random when None)."""
        if type_key is None:
            type_key = pick_weighted(
                ((key, data.get("weight", 0)) for key, data in self.power_up_types.items()),
                self.rng
            )
        data = self.power_up_types.get(type_key)
        if data is None:
            DebugLogger.warn(f"Unknown power-up type '{type_key}'", category="spawns")
            return None

        size = self.sizing.size_for("power_up")
        x, y = self._spawn_position(Spawning.POWER_UP_Y_RANGE)
        item = self.power_up_pool.get(
            type_key, x, y, size,
            points=data.get("points", 50), data=data,
            image=self._texture(data.get("texture", type_key), size),
            base_speed=Spawning.POWER_UP_BASE_SPEED, spawn_time=self.state.elapsed_ms,
        )
        DebugLogger.trace(f"Spawned power-up {type_key} at ({x:.0f}, {y:.0f})", category="spawns")
        return item

    def _texture(self, key, size):
        if self.textures is None:
            return None
        return self.textures.get(key, size)

    # ===========================================================
    # Collection
    # ===========================================================

    def check_collisions(self):
        """Collect every pickup overlapping the player's hitbox."""
        if self.player is None:
            return
        hitbox = self.player.hitbox()
        for bean in self.bean_pool.get_active():
            if not bean.being_collected and hitbox.colliderect(bean.hitbox()):
                self.collect_bean(bean)
        for item in self.power_up_pool.get_active():
            if hitbox.colliderect(item.hitbox()):
                self.collect_power_up(item)

    def collect_bean(self, bean, by_companion=False):
        """
        Score a bean, apply its effects and return it to the pool.

        Returns:
            int: Points added
        """
        if not bean.active:
            return 0
        position = (bean.x, bean.y)
        data = bean.data
        effects = list(data.get("effects", ()))

        gained = self.state.add_score(bean.points, comboable=True)
        self.state.collectibles_collected += 1
        self.apply_effects(effects)
        self.bean_pool.release(bean)

        events = get_events()
        events.dispatch(ItemCollectedEvent(
            bean.type_key, data.get("category", "coffee"), gained, position, effects, by_companion
        ))
        events.dispatch(FloatingTextEvent(f"+{gained}", position, (255, 215, 0)))
        DebugLogger.trace(f"Collected {bean.type_key} (+{gained})", category="collisions")
        return gained

    def collect_power_up(self, item):
        """
        Trigger a power-up pickup's effects, score it and return it to the pool.

        Returns:
            int: Points added
        """
        if not item.active:
            return 0
        position = (item.x, item.y)
        data = item.data
        effects = list(data.get("effects", ()))

        self.apply_effects(effects)
        self.power_up_pool.release(item)
        gained = self.state.add_score(item.points, comboable=True)
        self.state.power_ups_collected += 1

        events = get_events()
        events.dispatch(ItemCollectedEvent(item.type_key, "power_up", gained, position, effects))
        label = data.get("label")
        if label:
            events.dispatch(FloatingTextEvent(label, position, tuple(data.get("color", (255, 255, 255)))))
        DebugLogger.trace(f"Collected power-up {item.type_key} (+{gained})", category="collisions")
        return gained

    def apply_effects(self, effects):
        """Run effect records ({"type": ..., params}) against player and power-ups."""
        for effect in effects:
            effect = dict(effect)
            kind = effect.pop("type", None)

            if kind == "heal":
                if self.player is None:
                    DebugLogger.warn("Heal effect without a player", category="effects")
                    continue
                self.player.heal(effect.get("amount", 1))
                get_events().dispatch(PlayerHealedEvent(self.player.health, self.player.max_health))
                continue

            if self.power_ups is None:
                DebugLogger.warn(f"Effect '{kind}' ignored - no power-up system", category="effects")
                continue

            duration = effect.pop("duration", None)
            try:
                self.power_ups.activate(kind, duration, **effect)
            except ValueError:
                DebugLogger.warn(f"Unknown effect '{kind}'", category="effects")

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def release_all(self):
        self.bean_pool.release_all()
        self.power_up_pool.release_all()
        self._since_bean_ms = 0.0
        self._since_power_up_ms = 0.0

    def draw(self, draw_manager):
        for pool in (self.bean_pool, self.power_up_pool):
            for item in pool.get_active():
                if not item.visible:
                    continue
                if item.image is not None:
                    draw_manager.queue_draw(item.image, item.rect, Layers.PICKUPS)
                else:
                    color = (255, 215, 0) if item.kind == "power_up" else (160, 100, 50)
                    draw_manager.queue_shape("circle", item.rect, color, Layers.PICKUPS)
