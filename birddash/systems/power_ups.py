"""
power_ups.py
------------
Timer coordinator for the six timed power-ups.

Every effect owns an ``active`` flag and a countdown in milliseconds that
is decremented by the frame delta. Expiry is detected on the frame the
countdown reaches zero. Activating an effect that is already running only
refreshes its countdown. Deactivation is idempotent and undoes the effect's
side effects on the player and game state.

Responsibilities
----------------
- Activate / refresh / expire timers
- Apply and revert side effects (shield, speed, multiplier, time-slow)
- Drive per-frame behaviour (magnet pull, bird companion)
- Announce changes through the event bus
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import PowerUps, Speed
from birddash.core.services.event_manager import (
    get_events, PowerUpActivatedEvent, PowerUpExpiredEvent
)
from birddash.entities.bird_companion import BirdCompanion


# ===========================================================
# Power-up Registry
# ===========================================================

class PowerUpType(Enum):
    """All timed effects."""
    SHIELD = "shield"
    SPEED_BOOST = "speed_boost"
    SCORE_MULTIPLIER = "score_multiplier"
    TIME_SLOW = "time_slow"
    MAGNET = "magnet"
    BIRD_COMPANION = "bird_companion"


DEFAULT_DURATIONS = {
    PowerUpType.SHIELD: PowerUps.SHIELD_DURATION,
    PowerUpType.SPEED_BOOST: PowerUps.SPEED_BOOST_DURATION,
    PowerUpType.SCORE_MULTIPLIER: PowerUps.SCORE_MULTIPLIER_DURATION,
    PowerUpType.TIME_SLOW: PowerUps.TIME_SLOW_DURATION,
    PowerUpType.MAGNET: PowerUps.MAGNET_DURATION,
    PowerUpType.BIRD_COMPANION: PowerUps.COMPANION_DURATION,
}


@dataclass
class PowerUpTimer:
    """Countdown record for one effect."""
    active: bool = False
    time_remaining: float = 0.0
    duration: float = 0.0
    params: dict = field(default_factory=dict)

    @property
    def progress(self) -> float:
        """Remaining fraction in [0, 1], for HUD bars."""
        if not self.active or self.duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self.time_remaining / self.duration))


# ===========================================================
# Power-up System
# ===========================================================

class PowerUpSystem:
    """Owns the six timers and their side effects."""

    def __init__(self, state, player=None,
                 get_collectibles: Optional[Callable[[], Iterable]] = None,
                 collect_fn: Optional[Callable] = None,
                 textures=None, sounds=None):
        """
        Args:
            state: GameState receiving multiplier / time-slow changes
            player: Player receiving shield / speed changes
            get_collectibles: Returns active bean sprites (magnet, companion)
            collect_fn: Called for each bean the companion delivers
            textures: Optional TextureFactory for the companion sprite
            sounds: Optional SoundManager for activation cues
        """
        self.state = state
        self.player = player
        self.get_collectibles = get_collectibles or (lambda: ())
        self.collect_fn = collect_fn
        self.textures = textures
        self.sounds = sounds

        self.timers: Dict[PowerUpType, PowerUpTimer] = {
            kind: PowerUpTimer() for kind in PowerUpType
        }
        self.magnet_range = PowerUps.MAGNET_RANGE
        self.companion: Optional[BirdCompanion] = None

        DebugLogger.init_sub("PowerUpSystem ready")

    # ===========================================================
    # Queries
    # ===========================================================

    def is_active(self, kind: PowerUpType) -> bool:
        return self.timers[kind].active

    def time_remaining(self, kind: PowerUpType) -> float:
        return self.timers[kind].time_remaining

    def active_timers(self):
        """(type, timer) pairs for every running effect, in registry order."""
        return [(kind, t) for kind, t in self.timers.items() if t.active]

    # ===========================================================
    # Activation
    # ===========================================================

    def activate(self, kind, duration_ms: Optional[float] = None, **params) -> bool:
        """
        Start an effect, or refresh its countdown if already running.

        Args:
            kind: PowerUpType or its string value
            duration_ms: Countdown length (defaults per type)
            **params: Effect parameters (multiplier, factor, range, companion)

        Returns:
            bool: False if the effect could not start
        """
        kind = PowerUpType(kind)
        duration = float(duration_ms if duration_ms is not None else DEFAULT_DURATIONS[kind])

        if kind is PowerUpType.BIRD_COMPANION and self.player is None:
            DebugLogger.warn("Cannot activate bird companion - player not ready", category="power_ups")
            return False

        timer = self.timers[kind]
        refreshed = timer.active
        timer.active = True
        timer.time_remaining = duration
        timer.duration = duration
        timer.params = params

        self._apply(kind, params)

        DebugLogger.state(
            f"{kind.value} {'refreshed' if refreshed else 'activated'} ({duration:.0f}ms)",
            category="power_ups"
        )
        get_events().dispatch(PowerUpActivatedEvent(kind.value, duration, refreshed))
        return True

    def _apply(self, kind, params):
        if kind is PowerUpType.SHIELD:
            if self.player:
                self.player.set_shield(True)

        elif kind is PowerUpType.SPEED_BOOST:
            if self.player:
                self.player.set_speed_multiplier(params.get("multiplier", PowerUps.SPEED_BOOST_MULTIPLIER))
            self._play("power_up")

        elif kind is PowerUpType.SCORE_MULTIPLIER:
            self.state.set_score_multiplier(params.get("multiplier", PowerUps.SCORE_MULTIPLIER), True)

        elif kind is PowerUpType.TIME_SLOW:
            self.state.set_time_slow(True, params.get("factor", Speed.TIME_SLOW_FACTOR))

        elif kind is PowerUpType.MAGNET:
            self.magnet_range = params.get("range", PowerUps.MAGNET_RANGE)

        elif kind is PowerUpType.BIRD_COMPANION:
            self._spawn_companion(params.get("companion", "sparrow"))

    def _spawn_companion(self, companion_kind):
        # A refresh replaces a departing companion but keeps an active one
        if self.companion is not None and not self.companion.flying_away:
            return
        x, y = self.player.x - 60, self.player.y - 40
        image = None
        companion = BirdCompanion(companion_kind, x, y)
        if self.textures is not None:
            image = self.textures.get(f"companion_{companion.kind}", companion.size)
        companion.image = image
        self.companion = companion

    # ===========================================================
    # Deactivation
    # ===========================================================

    def deactivate(self, kind) -> bool:
        """
        Stop an effect and revert its side effects. No-op when inactive.

        Returns:
            bool: True if the effect was running
        """
        kind = PowerUpType(kind)
        timer = self.timers[kind]
        if not timer.active:
            return False

        timer.active = False
        timer.time_remaining = 0.0
        timer.params = {}

        if kind is PowerUpType.SHIELD:
            if self.player:
                self.player.set_shield(False)

        elif kind is PowerUpType.SPEED_BOOST:
            if self.player:
                self.player.set_speed_multiplier(1.0)

        elif kind is PowerUpType.SCORE_MULTIPLIER:
            self.state.set_score_multiplier(1.0, False)

        elif kind is PowerUpType.TIME_SLOW:
            self.state.set_time_slow(False)

        elif kind is PowerUpType.MAGNET:
            self.magnet_range = PowerUps.MAGNET_RANGE

        elif kind is PowerUpType.BIRD_COMPANION:
            if self.companion is not None:
                self.companion.fly_away()

        DebugLogger.state(f"{kind.value} expired", category="power_ups")
        get_events().dispatch(PowerUpExpiredEvent(kind.value))
        return True

    def deactivate_all(self):
        """Stop every effect. Used on game over and restart."""
        for kind in PowerUpType:
            self.deactivate(kind)
        self.companion = None

    # ===========================================================
    # Per-frame Update
    # ===========================================================

    def update(self, dt: float):
        """
        Count down timers and run continuous effects.

        Args:
            dt: Delta time in seconds
        """
        delta_ms = dt * 1000.0

        for kind, timer in self.timers.items():
            if not timer.active:
                continue
            timer.time_remaining -= delta_ms
            if timer.time_remaining <= 0:
                self.deactivate(kind)

        if self.timers[PowerUpType.MAGNET].active:
            self._apply_magnet(dt)

        self._update_companion(dt)

    def _apply_magnet(self, dt):
        if self.player is None:
            return
        px, py = self.player.x, self.player.y
        for bean in self.get_collectibles():
            if not bean.active or bean.being_collected:
                continue
            distance = bean.distance_to(px, py)
            if distance >= self.magnet_range:
                continue
            angle = math.atan2(py - bean.y, px - bean.x)
            speed = PowerUps.MAGNET_PULL_SPEED * (self.magnet_range - distance) / self.magnet_range
            bean.x += math.cos(angle) * speed * dt
            bean.y += math.sin(angle) * speed * dt

    def _update_companion(self, dt):
        if self.companion is None:
            return
        if self.companion.finished:
            self.companion = None
            return
        self.companion.update(
            dt, self.player, list(self.get_collectibles()),
            self.collect_fn or (lambda item: None)
        )

    def _play(self, sound_name):
        if self.sounds is not None:
            self.sounds.play_sfx(sound_name)

    # ===========================================================
    # Rendering
    # ===========================================================

    def draw(self, draw_manager):
        """Magnet aura and companion."""
        if self.timers[PowerUpType.MAGNET].active and self.player is not None:
            r = int(self.magnet_range)
            draw_manager.queue_circle_alpha((int(self.player.x), int(self.player.y)), r,
                                            (255, 20, 147), alpha=50)
        if self.companion is not None:
            self.companion.draw(draw_manager)
