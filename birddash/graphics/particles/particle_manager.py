"""
particle_manager.py
-------------------
Lightweight particle system with pre-rendered sprites.

Usage:
    # One-shot burst (pickup sparkle, obstacle debris)
    ParticleEmitter.burst("collect", position, count=8)

    # Ambient café steam behind the playfield
    steam = ParticleOverlay("steam", spawn_area=(0, 600, 480, 254))
    steam.update(dt)
    steam.render(draw_manager)
"""

import math
import random

import pygame

from birddash.core.runtime.game_settings import Display, Layers
from birddash.core.services.config_manager import load_config


# ===========================================================
# Preset Loading
# ===========================================================

_FALLBACK_PRESET = {
    "colors": [(255, 255, 255)],
    "size_range": (2, 4),
    "speed_range": (50, 150),
    "lifetime": (0.3, 0.6),
    "spread": 360,
}

_TUPLE_KEYS = ("size_range", "speed_range", "lifetime", "direction")


def _load_presets():
    """Read particles.json and convert JSON lists to tuples."""
    data = load_config("particles.json", default_dict={"burst": dict(_FALLBACK_PRESET)})

    for preset in data.values():
        if "colors" in preset:
            preset["colors"] = [tuple(c) for c in preset["colors"]]
        for key in _TUPLE_KEYS:
            if key in preset:
                preset[key] = tuple(preset[key])
    return data


PARTICLE_PRESETS = _load_presets()


def get_preset(name):
    """Preset by name, falling back to ``burst``."""
    return PARTICLE_PRESETS.get(name) or PARTICLE_PRESETS.get("burst", _FALLBACK_PRESET)


# ===========================================================
# Pre-rendered Sprite Cache
# ===========================================================

class SpriteCache:
    """Caches one surface per (color, size, glow)."""

    _cache = {}

    @classmethod
    def get_sprite(cls, color, size, glow=False):
        key = (color, size, glow)
        sprite = cls._cache.get(key)
        if sprite is None:
            sprite = cls._cache[key] = cls._create_sprite(color, size, glow)
        return sprite

    @staticmethod
    def _create_sprite(color, size, glow):
        if glow:
            edge = size * 3
            surf = pygame.Surface((edge, edge), pygame.SRCALPHA)
            center = edge // 2
            pygame.draw.circle(surf, (*color, 40), (center, center), size + 2)
            pygame.draw.circle(surf, (*color, 255), (center, center), size)
            return surf

        surf = pygame.Surface((size * 2, size * 2), pygame.SRCALPHA)
        pygame.draw.circle(surf, (*color, 255), (size, size), size)
        return surf

    @classmethod
    def clear(cls):
        cls._cache.clear()


# ===========================================================
# Single Particle
# ===========================================================

class Particle:
    """Point particle with velocity, optional gravity and a lifetime in seconds."""

    __slots__ = (
        "x", "y", "vx", "vy", "gravity",
        "size", "max_size", "color",
        "lifetime", "max_lifetime", "alpha",
        "glow", "shrink", "grow", "fade_delay",
    )

    def __init__(self, x, y, vx, vy, size, color, lifetime,
                 gravity=0.0, glow=False, shrink=False, grow=False, fade_delay=0.0):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.gravity = gravity
        self.size = size
        self.max_size = size
        self.color = color
        self.lifetime = lifetime
        self.max_lifetime = lifetime
        self.alpha = 255
        self.glow = glow
        self.shrink = shrink
        self.grow = grow
        self.fade_delay = fade_delay

    def update(self, dt, wobble=0.0):
        """Advance one step. Returns False once expired."""
        self.vy += self.gravity * dt
        self.x += self.vx * dt
        self.y += self.vy * dt
        if wobble:
            self.x += random.uniform(-wobble, wobble) * dt

        self.lifetime -= dt
        t = max(0.0, self.lifetime / self.max_lifetime)

        if self.fade_delay > 0:
            self.alpha = 255 if t > self.fade_delay else int(255 * t / self.fade_delay)
        else:
            self.alpha = int(255 * t)

        if self.shrink:
            self.size = max(1, int(self.max_size * t))
        elif self.grow:
            self.size = int(self.max_size * (1 + (1 - t) * 0.5))

        return self.lifetime > 0


def _spawn_particle(preset, x, y, direction=None):
    speed = random.uniform(*preset["speed_range"])
    spread = preset.get("spread", 0)
    base_dir = direction or preset.get("direction") or (0, 0)

    if spread >= 360:
        angle = random.uniform(0, 360)
    else:
        base_angle = math.degrees(math.atan2(base_dir[1], base_dir[0])) if base_dir != (0, 0) else -90
        angle = base_angle + random.uniform(-spread / 2, spread / 2)
    rad = math.radians(angle)

    return Particle(
        x, y,
        math.cos(rad) * speed, math.sin(rad) * speed,
        random.randint(*preset["size_range"]),
        random.choice(preset["colors"]),
        random.uniform(*preset["lifetime"]),
        gravity=preset.get("gravity", 0.0),
        glow=preset.get("glow", False),
        shrink=preset.get("shrink", False),
        grow=preset.get("grow", False),
        fade_delay=preset.get("fade_delay", 0.0),
    )


def _queue_particles(particles, draw_manager, layer):
    for p in particles:
        sprite = SpriteCache.get_sprite(p.color, p.size, p.glow)
        if p.alpha < 255:
            sprite = sprite.copy()
            sprite.set_alpha(p.alpha)
        draw_manager.queue_draw(sprite, sprite.get_rect(center=(int(p.x), int(p.y))), layer)


# ===========================================================
# Particle Emitter (bursts)
# ===========================================================

class ParticleEmitter:
    """
    Spawns preset particles into a shared class-level list.
    A global cap keeps explosions from flooding the frame.
    """

    _active_particles = []
    _particle_limit = 400

    def __init__(self, preset_name):
        self.preset = get_preset(preset_name)

    def emit(self, pos, count=1, direction=None):
        """
        Emit ``count`` particles at ``pos``.

        Returns:
            int: Number of particles actually spawned
        """
        spawned = 0
        for _ in range(count):
            if len(ParticleEmitter._active_particles) >= ParticleEmitter._particle_limit:
                break
            ParticleEmitter._active_particles.append(
                _spawn_particle(self.preset, pos[0], pos[1], direction)
            )
            spawned += 1
        return spawned

    @classmethod
    def burst(cls, preset_name, pos, count=8, direction=None):
        """One-shot particle burst."""
        return cls(preset_name).emit(pos, count, direction)

    @classmethod
    def update_all(cls, dt):
        cls._active_particles = [p for p in cls._active_particles if p.update(dt)]

    @classmethod
    def render_all(cls, draw_manager, layer=Layers.PARTICLES):
        _queue_particles(cls._active_particles, draw_manager, layer)

    @classmethod
    def clear_all(cls):
        cls._active_particles.clear()

    @classmethod
    def particle_count(cls):
        return len(cls._active_particles)


# ===========================================================
# Particle Overlay (ambient steam)
# ===========================================================

class ParticleOverlay:
    """Continuous ambient effect with its own particle budget."""

    def __init__(self, preset_name, max_particles=60, spawn_rate=12, spawn_area=None):
        """
        Args:
            preset_name: Key from PARTICLE_PRESETS
            max_particles: Concurrent particle cap for this overlay
            spawn_rate: Particles per second
            spawn_area: (x, y, w, h); defaults to the bottom fifth of the screen
        """
        self.preset = get_preset(preset_name)
        self.max_particles = max_particles
        self.spawn_rate = spawn_rate
        self.spawn_area = spawn_area or (0, Display.HEIGHT * 0.8, Display.WIDTH, Display.HEIGHT * 0.2)
        self.spawn_timer = 0.0
        self.particles = []
        self.active = True

    def update(self, dt):
        if not self.active:
            return
        wobble = self.preset.get("wobble", 0)
        self.particles = [p for p in self.particles if p.update(dt, wobble)]

        self.spawn_timer += dt
        interval = 1.0 / self.spawn_rate if self.spawn_rate > 0 else 1.0
        while self.spawn_timer >= interval and len(self.particles) < self.max_particles:
            ax, ay, aw, ah = self.spawn_area
            x = random.uniform(ax, ax + aw)
            y = random.uniform(ay, ay + ah)
            self.particles.append(_spawn_particle(self.preset, x, y))
            self.spawn_timer -= interval

    def render(self, draw_manager, layer=Layers.BACKGROUND + 10):
        _queue_particles(self.particles, draw_manager, layer)

    def clear(self):
        self.particles.clear()

    @property
    def particle_count(self):
        return len(self.particles)
