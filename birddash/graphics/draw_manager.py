"""
draw_manager.py
---------------
Centralized rendering manager for batching and layered draw calls.

Responsibilities:
- Maintain layered draw queue (surfaces, shapes, text)
- Render the café background gradient
- Screen shake and full-screen flash effects
- Debug hitbox overlay
"""

import math

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Display, Fonts


class DrawManager:
    """Handles all rendering operations with layered batching."""

    # ===========================================================
    # Initialization
    # ===========================================================

    def __init__(self):
        self.surface_layers = {}  # {layer: [(surface, rect), ...]}
        self.shape_layers = {}    # {layer: [(shape_type, rect, color, kwargs), ...]}
        self._layer_keys_cache = []
        self._layers_dirty = False

        self._fonts = {}
        self._text_cache = {}
        self._bg_cache = None

        self.debug_hitboxes = []

        # Screen shake
        self.shake_offset = (0, 0)
        self.shake_timer = 0.0
        self.shake_intensity = 0.0
        self.shake_duration = 0.0

        # Full-screen flash (impact feedback)
        self.flash_color = (255, 255, 255)
        self.flash_timer = 0.0
        self.flash_duration = 0.0

        DebugLogger.init_entry("DrawManager")

    # ===========================================================
    # Fonts & Text
    # ===========================================================

    def get_font(self, size: int, bold: bool = False) -> pygame.font.Font:
        key = (size, bold)
        font = self._fonts.get(key)
        if font is None:
            font = pygame.font.SysFont(Fonts.UI_FONT, size, bold=bold)
            self._fonts[key] = font
        return font

    def render_text(self, text, size, color=(255, 255, 255), bold=False, outline=None):
        """
        Render (and cache) a text surface.

        Args:
            text: String to render
            size: Font size in px
            color: RGB text color
            bold: Use bold weight
            outline: Optional RGB color for a 1px outline

        Returns:
            pygame.Surface
        """
        key = (text, size, color, bold, outline)
        surf = self._text_cache.get(key)
        if surf is not None:
            return surf

        font = self.get_font(size, bold)
        base = font.render(text, True, color)
        if outline is None:
            surf = base
        else:
            edge = font.render(text, True, outline)
            w, h = base.get_size()
            surf = pygame.Surface((w + 2, h + 2), pygame.SRCALPHA)
            for dx, dy in ((0, 1), (2, 1), (1, 0), (1, 2)):
                surf.blit(edge, (dx, dy))
            surf.blit(base, (1, 1))

        if len(self._text_cache) > 256:
            self._text_cache.clear()
        self._text_cache[key] = surf
        return surf

    def queue_text(self, text, pos, size=22, color=(255, 255, 255), layer=0,
                   anchor="center", bold=False, outline=(0, 0, 0), alpha=255):
        """Queue text anchored at ``pos`` ("center", "topleft", "topright", "midtop")."""
        surf = self.render_text(str(text), size, color, bold, outline)
        if alpha < 255:
            surf = surf.copy()
            surf.set_alpha(alpha)
        rect = surf.get_rect(**{anchor: (int(pos[0]), int(pos[1]))})
        self.queue_draw(surf, rect, layer)
        return rect

    # ===========================================================
    # Queue Management
    # ===========================================================

    def clear(self):
        """Clear all draw queues for new frame."""
        for layer_items in self.surface_layers.values():
            layer_items.clear()
        for layer_items in self.shape_layers.values():
            layer_items.clear()
        self.debug_hitboxes.clear()

    def queue_draw(self, surface, rect, layer=0):
        """
        Queue a surface for drawing.

        Args:
            surface: pygame.Surface to draw
            rect: Position rectangle
            layer: Render layer (lower = first)
        """
        if surface is None or rect is None:
            DebugLogger.warn(f"Skipped invalid draw call at layer {layer}", category="drawing")
            return

        if layer not in self.surface_layers:
            self.surface_layers[layer] = []
            self._layers_dirty = True
        self.surface_layers[layer].append((surface, rect))

    def queue_shape(self, shape_type, rect, color, layer=0, **kwargs):
        """
        Queue a primitive shape.

        Args:
            shape_type: "rect", "circle", "ellipse" or "polygon"
            rect: Position and dimensions
            color: RGB tuple
            layer: Render layer
            **kwargs: Shape-specific params (width, points, border_radius)
        """
        rect = pygame.Rect(rect)
        if layer not in self.shape_layers:
            self.shape_layers[layer] = []
            self._layers_dirty = True
        self.shape_layers[layer].append((shape_type, rect, color, kwargs))

    def queue_circle_alpha(self, center, radius, color, alpha=60, layer=0):
        """Queue a translucent filled circle (magnet aura, bomb glow)."""
        if radius <= 0:
            return
        surf = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(surf, (*color, alpha), (radius, radius), radius)
        self.queue_draw(surf, surf.get_rect(center=center), layer)

    def queue_hitbox(self, rect, color=(255, 255, 0), width=1):
        """Queue debug hitbox rectangle."""
        self.debug_hitboxes.append((rect, color, width))

    # ===========================================================
    # Effects
    # ===========================================================

    def trigger_shake(self, intensity=8.0, duration=0.3):
        """Start screen shake effect."""
        self.shake_intensity = intensity
        self.shake_duration = duration
        self.shake_timer = duration

    def trigger_flash(self, color=(255, 255, 255), duration=0.15):
        """Fade a full-screen colour over ``duration`` seconds."""
        self.flash_color = color
        self.flash_duration = duration
        self.flash_timer = duration

    def update_effects(self, dt):
        """Advance shake and flash timers (call each frame)."""
        if self.shake_timer > 0:
            self.shake_timer -= dt
            t = self.shake_timer / self.shake_duration if self.shake_duration > 0 else 0
            self.shake_offset = (
                int(math.sin(self.shake_timer * 50) * self.shake_intensity * t),
                int(math.cos(self.shake_timer * 40) * self.shake_intensity * t),
            )
        else:
            self.shake_offset = (0, 0)

        if self.flash_timer > 0:
            self.flash_timer = max(0.0, self.flash_timer - dt)

    # ===========================================================
    # Shape Helpers
    # ===========================================================

    @staticmethod
    def _draw_shape(surface, shape_type, rect, color, **kwargs):
        width = kwargs.get("width", 0)
        if shape_type == "rect":
            pygame.draw.rect(surface, color, rect, width, border_radius=kwargs.get("border_radius", 0))
        elif shape_type == "circle":
            pygame.draw.circle(surface, color, rect.center, rect.width // 2, width)
        elif shape_type == "ellipse":
            pygame.draw.ellipse(surface, color, rect, width)
        elif shape_type == "polygon":
            pygame.draw.polygon(surface, color, kwargs.get("points", []), width)
        else:
            DebugLogger.warn(f"Unknown shape type: {shape_type}", category="drawing")

    # ===========================================================
    # Rendering
    # ===========================================================

    def render(self, target_surface, debug=False):
        """
        Render all queued items to target surface.

        Args:
            target_surface: Main display surface
            debug: Log render stats if True
        """
        self._render_background(target_surface)

        if self._layers_dirty:
            all_layers = set(self.surface_layers) | set(self.shape_layers)
            self._layer_keys_cache = sorted(all_layers)
            self._layers_dirty = False

        offset = self.shake_offset
        for layer in self._layer_keys_cache:
            items = self.surface_layers.get(layer)
            if items:
                if offset != (0, 0):
                    target_surface.blits([(surf, rect.move(offset)) for surf, rect in items])
                else:
                    target_surface.blits(items)

            for shape_type, rect, color, kwargs in self.shape_layers.get(layer, ()):
                if offset != (0, 0):
                    rect = rect.move(offset)
                self._draw_shape(target_surface, shape_type, rect, color, **kwargs)

        self._render_flash(target_surface)

        for rect, color, width in self.debug_hitboxes:
            pygame.draw.rect(target_surface, color, rect, width)

        if debug:
            surface_count = sum(len(items) for items in self.surface_layers.values())
            shape_count = sum(len(items) for items in self.shape_layers.values())
            DebugLogger.state(f"Rendered {surface_count} surfaces and {shape_count} shapes", category="drawing")

    def _render_background(self, target_surface):
        """Vertical café gradient, built once per surface size."""
        size = target_surface.get_size()
        if self._bg_cache is None or self._bg_cache.get_size() != size:
            self._bg_cache = self._build_gradient(size, Display.BACKGROUND_COLOR, (139, 90, 60))
        target_surface.blit(self._bg_cache, (0, 0))

    @staticmethod
    def _build_gradient(size, top, bottom):
        w, h = size
        surf = pygame.Surface(size)
        for y in range(h):
            t = y / max(1, h - 1)
            color = tuple(int(top[i] + (bottom[i] - top[i]) * t) for i in range(3))
            pygame.draw.line(surf, color, (0, y), (w, y))
        return surf

    def _render_flash(self, target_surface):
        if self.flash_timer <= 0 or self.flash_duration <= 0:
            return
        alpha = int(180 * self.flash_timer / self.flash_duration)
        overlay = pygame.Surface(target_surface.get_size(), pygame.SRCALPHA)
        overlay.fill((*self.flash_color, alpha))
        target_surface.blit(overlay, (0, 0))
