"""
player.py
---------
The bird. Gravity-driven flight with tap impulses, horizontal nudges,
a short forward dash and a fluid vertical-follow mode for pointer control.

Responsibilities
----------------
- Integrate gravity and clamp velocity
- Keep the sprite inside responsive screen boundaries
- Health, invulnerability window and shield flag
"""

import math

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Physics, PlayerSettings, Bounds, Layers


class Player:
    """Player-controlled bird."""

    def __init__(self, x, y, screen_size, scale=1.0, size=77, image=None):
        """
        Args:
            x, y: Spawn centre
            screen_size: (width, height) used for boundary calculation
            scale: Responsive scale factor from ElementSizing
            size: Rendered edge length in pixels
            image: Optional pygame.Surface
        """
        self.x = float(x)
        self.y = float(y)
        self.vx = 0.0
        self.vy = 0.0
        self.size = size
        self.image = image
        self.angle = 0.0

        self.move_speed = max(PlayerSettings.MIN_MOVE_SPEED, PlayerSettings.MOVE_SPEED * scale)
        self.jump_power = PlayerSettings.JUMP_POWER
        self.fly_power = PlayerSettings.FLY_POWER
        self.is_flying = False
        self.shield_active = False
        self.speed_multiplier = 1.0

        self.max_health = PlayerSettings.MAX_HEALTH
        self.health = self.max_health
        self.invulnerable = False
        self.invulnerable_until = 0.0
        self._clock_ms = 0.0

        self.is_fluid_moving = False
        self.target_y = self.y
        self.fluid_speed = PlayerSettings.FLUID_SPEED

        self.is_dashing = False
        self._dash_elapsed = 0.0
        self._dash_start_x = self.x

        self.update_boundaries(*screen_size)
        DebugLogger.init_entry("Player")

    # ===========================================================
    # Boundaries
    # ===========================================================

    def update_boundaries(self, screen_width, screen_height):
        """Recompute movement limits for the current screen size."""
        self.screen_width = screen_width
        self.screen_height = screen_height

        self.left_boundary = max(Bounds.PLAYER_SIDE_MARGIN, screen_width * Bounds.PLAYER_SIDE_RATIO)
        self.right_boundary = min(
            screen_width - Bounds.PLAYER_SIDE_MARGIN,
            screen_width * (1 - Bounds.PLAYER_SIDE_RATIO)
        )
        vertical_margin = max(Bounds.PLAYER_VERTICAL_MARGIN, screen_height * Bounds.PLAYER_VERTICAL_RATIO)
        self.top_boundary = vertical_margin
        self.bottom_boundary = screen_height - vertical_margin

    def enforce_boundaries(self):
        """Clamp position; zero velocity pushing out through top or bottom."""
        self.x = min(max(self.x, self.left_boundary), self.right_boundary)

        if self.y < self.top_boundary:
            self.y = self.top_boundary
            if self.vy < 0:
                self.vy = 0.0
        elif self.y > self.bottom_boundary:
            self.y = self.bottom_boundary
            if self.vy > 0:
                self.vy = 0.0

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, dt: float):
        """
        Integrate physics and timers.

        Args:
            dt: Delta time in seconds
        """
        self._clock_ms += dt * 1000.0

        if self.is_fluid_moving:
            self._update_fluid_movement()
        else:
            self.vy = min(self.vy + Physics.GRAVITY * dt, Physics.MAX_FALL_SPEED)
            self.vy = max(self.vy, -Physics.MAX_FALL_SPEED)
            self.y += self.vy * dt

        if self.is_flying and self.vy > -100:
            self.is_flying = False

        target_angle = max(-15.0, min(15.0, self.vy * 0.03))
        self.angle += (target_angle - self.angle) * 0.1

        self._update_dash(dt)

        if self.invulnerable and self._clock_ms > self.invulnerable_until:
            self.invulnerable = False

        self.enforce_boundaries()

    def _update_fluid_movement(self):
        self.x = self.screen_width / 2
        self.y += (self.target_y - self.y) * self.fluid_speed
        self.vy = 0.0

    # ===========================================================
    # Movement Actions
    # ===========================================================

    def jump(self):
        self.vy = self.jump_power
        self.is_flying = True
        self.angle = -15.0

    def fly(self):
        """Tap impulse; always at least as strong as FLY_MIN_IMPULSE."""
        self.vy = min(PlayerSettings.FLY_MIN_IMPULSE, self.fly_power)
        self.is_flying = True
        self.angle = -25.0

    def quick_boost(self):
        self.vy = PlayerSettings.QUICK_BOOST_POWER
        self.is_flying = True

    def move_left(self):
        if self.x > self.left_boundary:
            self.x -= self.move_speed * self.speed_multiplier

    def move_right(self):
        if self.x < self.right_boundary:
            self.x += self.move_speed * self.speed_multiplier

    def dash(self) -> bool:
        """
        Start a forward dash (+100 px over 200 ms).

        Returns:
            bool: False if a dash is already running
        """
        if self.is_dashing:
            return False
        self.is_dashing = True
        self._dash_elapsed = 0.0
        self._dash_start_x = self.x
        DebugLogger.action("Dash", category="player")
        return True

    def _update_dash(self, dt):
        if not self.is_dashing:
            return
        self._dash_elapsed += dt * 1000.0
        t = min(1.0, self._dash_elapsed / PlayerSettings.DASH_DURATION_MS)
        # ease-out quad
        eased = 1 - (1 - t) * (1 - t)
        self.x = self._dash_start_x + PlayerSettings.DASH_DISTANCE * eased
        if t >= 1.0:
            self.is_dashing = False

    # ===========================================================
    # Fluid (pointer-follow) Mode
    # ===========================================================

    def start_fluid_movement(self):
        self.is_fluid_moving = True
        self.x = self.screen_width / 2
        if math.isnan(self.y):
            self.y = self.screen_height / 2

    def update_fluid_position(self, target_y):
        """Only the vertical target moves; horizontal stays locked to centre."""
        self.target_y = target_y
        if not self.is_fluid_moving:
            self.start_fluid_movement()

    def stop_fluid_movement(self):
        self.is_fluid_moving = False

    # ===========================================================
    # Health & Shield
    # ===========================================================

    def set_shield(self, active: bool):
        self.shield_active = active

    def set_speed_multiplier(self, multiplier: float):
        self.speed_multiplier = multiplier

    def take_damage(self) -> bool:
        """
        Lose one heart unless shielded or invulnerable.

        Returns:
            bool: True if damage was applied
        """
        if self.shield_active or self.invulnerable:
            return False

        self.health = max(0, self.health - 1)
        self.invulnerable = True
        self.invulnerable_until = self._clock_ms + PlayerSettings.INVULNERABILITY_MS
        DebugLogger.state(f"Player hit, health {self.health}/{self.max_health}", category="player")
        return True

    def heal(self, amount: int = 1):
        self.health = min(self.max_health, self.health + amount)

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    # ===========================================================
    # Collision & Rendering
    # ===========================================================

    @property
    def pos(self):
        return (self.x, self.y)

    @property
    def rect(self) -> pygame.Rect:
        r = pygame.Rect(0, 0, self.size, self.size)
        r.center = (int(self.x), int(self.y))
        return r

    def hitbox(self) -> pygame.Rect:
        edge = int(self.size * PlayerSettings.HITBOX_SCALE)
        r = pygame.Rect(0, 0, edge, edge)
        r.center = (int(self.x), int(self.y))
        return r

    def draw(self, draw_manager):
        # Blink while invulnerable
        if self.invulnerable and int(self._clock_ms / 100) % 2 == 0:
            return
        if self.image is not None:
            image = pygame.transform.rotate(self.image, -self.angle)
            if self.shield_active:
                image.set_alpha(205)
            draw_manager.queue_draw(image, image.get_rect(center=self.rect.center), Layers.PLAYER)
        else:
            draw_manager.queue_shape("circle", self.rect, (255, 200, 60), Layers.PLAYER)

        if self.shield_active:
            ring = self.rect.inflate(18, 18)
            draw_manager.queue_shape("circle", ring, (255, 215, 0), Layers.PLAYER, width=3)
