"""
bird_companion.py
-----------------
Helper bird that trails the player and vacuums up nearby collectibles.
Created by the bird-companion power-up and removed after its fly-away.
"""

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Layers, PowerUps


# kind -> (scale, follow speed, collection radius)
COMPANION_TYPES = {
    "sparrow": (0.8, 1.0, 80),
    "robin": (1.0, 1.3, 100),
    "cardinal": (1.2, 1.5, 120),
}

COMPANION_ALIASES = {"basic": "sparrow", "fast": "robin", "super": "cardinal"}

FOLLOW_OFFSET = (40, -25)
PULL_DURATION_MS = 200.0
FLY_AWAY_MS = 800.0


def resolve_companion_kind(kind):
    """Map effect names (basic/fast/super) to companion species."""
    kind = COMPANION_ALIASES.get(kind, kind)
    return kind if kind in COMPANION_TYPES else "sparrow"


class BirdCompanion:
    """Follower sprite with auto-collect behaviour."""

    def __init__(self, kind, x, y, base_size=57, image=None):
        self.kind = resolve_companion_kind(kind)
        scale, speed, radius = COMPANION_TYPES[self.kind]
        self.size = int(base_size * scale)
        self.speed = speed
        self.collection_radius = radius or PowerUps.COMPANION_COLLECT_RADIUS
        self.image = image
        self.x = float(x)
        self.y = float(y)
        self.alpha = 255

        self.flying_away = False
        self.finished = False
        self._fly_elapsed = 0.0
        self._fly_from = (self.x, self.y)

        # items being pulled in: [item, elapsed_ms, start_x, start_y]
        self._incoming = []

        DebugLogger.action(f"Companion '{self.kind}' joined", category="effects")

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, dt, player, collectibles, collect_fn):
        """
        Follow the player, pull in nearby items and hand them to collect_fn.

        Args:
            dt: Delta time in seconds
            player: Player being followed
            collectibles: Iterable of active PooledSprite beans
            collect_fn: Called with each item once it reaches the companion
        """
        if self.flying_away:
            self._update_fly_away(dt)
            return

        target_x = player.x + FOLLOW_OFFSET[0]
        target_y = player.y + FOLLOW_OFFSET[1]
        self.x += (target_x - self.x) * 0.1 * self.speed
        self.y += (target_y - self.y) * 0.08 * self.speed

        for item in collectibles:
            if not item.active or not item.visible or item.being_collected:
                continue
            if item.distance_to(self.x, self.y) < self.collection_radius:
                item.being_collected = True
                self._incoming.append([item, 0.0, item.x, item.y])

        self._update_incoming(dt, collect_fn)

    def _update_incoming(self, dt, collect_fn):
        still_incoming = []
        for entry in self._incoming:
            item, elapsed, sx, sy = entry
            if not item.active:
                continue
            elapsed += dt * 1000.0
            t = min(1.0, elapsed / PULL_DURATION_MS)
            eased = 1 - (1 - t) ** 2
            item.x = sx + (self.x - sx) * eased
            item.y = sy + (self.y - sy) * eased
            if t >= 1.0:
                collect_fn(item)
            else:
                entry[1] = elapsed
                still_incoming.append(entry)
        self._incoming = still_incoming

    # ===========================================================
    # Departure
    # ===========================================================

    def fly_away(self):
        """Start the exit animation; ``finished`` flips when it completes."""
        if self.flying_away:
            return
        self.flying_away = True
        self._fly_from = (self.x, self.y)
        self._fly_elapsed = 0.0
        for item, *_ in self._incoming:
            item.being_collected = False
        self._incoming.clear()

    def _update_fly_away(self, dt):
        self._fly_elapsed += dt * 1000.0
        t = min(1.0, self._fly_elapsed / FLY_AWAY_MS)
        eased = 1 - (1 - t) ** 2
        self.x = self._fly_from[0] + 200 * eased
        self.y = self._fly_from[1] - 100 * eased
        self.alpha = int(255 * (1 - t))
        if t >= 1.0:
            self.finished = True

    # ===========================================================
    # Rendering
    # ===========================================================

    @property
    def rect(self):
        r = pygame.Rect(0, 0, self.size, self.size)
        r.center = (int(self.x), int(self.y))
        return r

    def draw(self, draw_manager):
        if self.finished:
            return
        if self.image is not None:
            image = self.image
            if self.alpha < 255:
                image = image.copy()
                image.set_alpha(self.alpha)
            draw_manager.queue_draw(image, self.rect, Layers.COMPANION)
        else:
            draw_manager.queue_shape("circle", self.rect, (230, 126, 34), Layers.COMPANION)
