"""
pooled_sprite.py
----------------
Reusable sprite record for collectibles, power-ups and obstacles.

Instances are created once by an ObjectPool and re-dressed via ``spawn``
each time they are handed out.
"""

import pygame


class PooledSprite:
    """Position, texture and scoring data for one pooled game object."""

    __slots__ = (
        "kind", "type_key", "texture_key", "image",
        "x", "y", "start_y", "width", "height",
        "points", "data", "base_speed",
        "active", "visible", "being_collected",
        "spawn_time", "vx", "vy",
    )

    def __init__(self, kind: str):
        """
        Args:
            kind: Pool family ("collectible", "power_up", "obstacle")
        """
        self.kind = kind
        self.type_key = None
        self.texture_key = None
        self.image = None
        self.x = 0.0
        self.y = 0.0
        self.start_y = 0.0
        self.width = 0
        self.height = 0
        self.points = 0
        self.data = {}
        self.base_speed = 1.0
        self.active = False
        self.visible = False
        self.being_collected = False
        self.spawn_time = 0.0
        self.vx = 0.0
        self.vy = 0.0

    def spawn(self, type_key, x, y, size, points=0, data=None,
              image=None, base_speed=1.0, spawn_time=0.0):
        """
        Re-dress this object for a new life.

        Args:
            type_key: Definition key (e.g. "coffee_small", "bomb")
            x, y: Centre position
            size: Square edge length in pixels
            points: Score value
            data: Type definition dict (effects, move patterns...)
            image: Optional pygame.Surface
            base_speed: Per-type scroll multiplier
            spawn_time: Run clock (ms) at spawn, used by move patterns
        """
        self.type_key = type_key
        self.texture_key = (data or {}).get("texture", type_key)
        self.image = image
        self.x = float(x)
        self.y = float(y)
        self.start_y = float(y)
        self.width = size
        self.height = size
        self.points = points
        self.data = data or {}
        self.base_speed = base_speed
        self.being_collected = False
        self.spawn_time = spawn_time
        self.vx = 0.0
        self.vy = 0.0

    @property
    def rect(self) -> pygame.Rect:
        r = pygame.Rect(0, 0, self.width, self.height)
        r.center = (int(self.x), int(self.y))
        return r

    def hitbox(self, scale: float = 0.7) -> pygame.Rect:
        """Shrunken rect used for overlap tests."""
        r = pygame.Rect(0, 0, int(self.width * scale), int(self.height * scale))
        r.center = (int(self.x), int(self.y))
        return r

    def distance_to(self, x: float, y: float) -> float:
        return ((self.x - x) ** 2 + (self.y - y) ** 2) ** 0.5

    def destroy(self):
        self.image = None
        self.data = {}

    def __repr__(self):
        return f"PooledSprite({self.kind}:{self.type_key} @ {self.x:.0f},{self.y:.0f})"
