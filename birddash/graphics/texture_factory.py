"""
texture_factory.py
------------------
Builds sprite textures from emoji glyphs, with drawn-shape fallbacks.

No image assets ship with the game: each texture key maps to an emoji
and a fallback shape. The first installed emoji font that renders a
visible glyph wins; otherwise the shape is drawn. Scaled variants are
cached per (key, size).
"""

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Fonts


BASE_TEXTURE_SIZE = 128

# key -> (emoji, fallback shape, fallback color)
TEXTURE_CATALOG = {
    "player": ("🐦", "bird", (255, 200, 60)),
    "coffee_small": ("☕", "cup", (160, 100, 50)),
    "coffee_medium": ("☕", "cup", (140, 85, 40)),
    "coffee_large": ("☕", "cup", (120, 70, 35)),
    "coffee_specialty": ("☕", "cup", (212, 175, 55)),
    "smoothie": ("🥤", "cup", (220, 80, 140)),
    "bagel": ("🥯", "ring", (222, 170, 100)),
    "power_shield": ("🥐", "circle", (255, 215, 0)),
    "power_espresso": ("⚡", "diamond", (255, 99, 71)),
    "power_webster": ("👨‍💼", "circle", (0, 200, 0)),
    "power_thabo": ("👨‍🍳", "circle", (153, 102, 255)),
    "power_magnet": ("🧲", "diamond", (255, 20, 147)),
    "power_health": ("❤️", "heart", (255, 105, 180)),
    "power_barista": ("☕", "circle", (139, 69, 19)),
    "companion_sparrow": ("🐦", "bird", (139, 69, 19)),
    "companion_robin": ("🦅", "bird", (255, 69, 0)),
    "companion_cardinal": ("🦜", "bird", (220, 20, 60)),
    "obstacle_machine": ("🚧", "rect", (255, 165, 0)),
    "obstacle_cup": ("🥤", "cup", (200, 60, 60)),
    "obstacle_bean": ("🫘", "circle", (74, 74, 74)),
    "obstacle_customer": ("😠", "circle", (255, 182, 193)),
    "obstacle_wifi": ("📵", "rect", (255, 0, 0)),
    "obstacle_bomb": ("💣", "circle", (30, 30, 30)),
    "heart": ("❤️", "heart", (255, 80, 80)),
}


class TextureFactory:
    """Creates and caches textures keyed by catalog name."""

    def __init__(self, catalog=None):
        self.catalog = catalog or TEXTURE_CATALOG
        self._base = {}
        self._scaled = {}
        self._emoji_font = None
        self.emoji_supported = False

    # ===========================================================
    # Building
    # ===========================================================

    def build_all(self, progress_fn=None):
        """
        Render every catalog entry at base size.

        Args:
            progress_fn: Optional callback(done, total) for the preloader bar
        """
        self._emoji_font = self._find_emoji_font()
        total = len(self.catalog)
        emoji_count = 0
        for done, key in enumerate(self.catalog, start=1):
            surf, used_emoji = self._build(key)
            self._base[key] = surf
            emoji_count += used_emoji
            if progress_fn:
                progress_fn(done, total)

        self.emoji_supported = emoji_count > 0
        DebugLogger.init_entry("TextureFactory")
        DebugLogger.init_sub(f"{emoji_count}/{total} emoji textures, {total - emoji_count} fallbacks")

    def _find_emoji_font(self):
        for name in Fonts.EMOJI_FONTS:
            path = pygame.font.match_font(name)
            if not path:
                continue
            try:
                return pygame.font.Font(path, BASE_TEXTURE_SIZE - 24)
            except (pygame.error, OSError) as e:
                DebugLogger.warn(f"Emoji font '{name}' unusable: {e}", category="loading")
        return None

    def _build(self, key):
        emoji, shape, color = self.catalog[key]
        if self._emoji_font is not None:
            surf = self._render_emoji(emoji)
            if surf is not None:
                return surf, True
        return self.draw_fallback(shape, color, BASE_TEXTURE_SIZE), False

    def _render_emoji(self, emoji):
        try:
            glyph = self._emoji_font.render(emoji, True, (255, 255, 255))
        except pygame.error as e:
            DebugLogger.trace(f"Emoji render failed: {e}", category="loading")
            return None
        if glyph.get_bounding_rect().width == 0:
            return None

        surf = pygame.Surface((BASE_TEXTURE_SIZE, BASE_TEXTURE_SIZE), pygame.SRCALPHA)
        surf.blit(glyph, glyph.get_rect(center=surf.get_rect().center))
        return surf

    @staticmethod
    def draw_fallback(shape, color, size):
        """Draw a simple stand-in sprite."""
        surf = pygame.Surface((size, size), pygame.SRCALPHA)
        r = surf.get_rect()
        pad = size // 8
        inner = r.inflate(-pad * 2, -pad * 2)
        dark = tuple(max(0, c - 60) for c in color)

        if shape == "cup":
            body = pygame.Rect(inner.left + pad, inner.top + pad, inner.width - pad * 2, inner.height - pad)
            pygame.draw.rect(surf, color, body, border_radius=pad // 2)
            pygame.draw.rect(surf, (245, 245, 245), (body.left - 4, body.top - 6, body.width + 8, 10), border_radius=4)
        elif shape == "ring":
            pygame.draw.circle(surf, color, r.center, inner.width // 2)
            pygame.draw.circle(surf, (0, 0, 0, 0), r.center, inner.width // 6)
        elif shape == "diamond":
            points = [(r.centerx, inner.top), (inner.right, r.centery), (r.centerx, inner.bottom), (inner.left, r.centery)]
            pygame.draw.polygon(surf, color, points)
        elif shape == "heart":
            radius = inner.width // 4
            pygame.draw.circle(surf, color, (r.centerx - radius, r.centery - radius // 2), radius)
            pygame.draw.circle(surf, color, (r.centerx + radius, r.centery - radius // 2), radius)
            pygame.draw.polygon(surf, color, [
                (inner.left + 2, r.centery - radius // 4),
                (inner.right - 2, r.centery - radius // 4),
                (r.centerx, inner.bottom),
            ])
        elif shape == "bird":
            pygame.draw.ellipse(surf, color, inner)
            pygame.draw.circle(surf, (255, 255, 255), (inner.right - pad * 2, inner.top + pad * 2), pad)
            pygame.draw.circle(surf, (0, 0, 0), (inner.right - pad * 2, inner.top + pad * 2), pad // 2)
            pygame.draw.polygon(surf, (255, 140, 0), [
                (inner.right - 2, r.centery - pad // 2), (r.right, r.centery), (inner.right - 2, r.centery + pad // 2)
            ])
        elif shape == "rect":
            pygame.draw.rect(surf, color, inner, border_radius=pad)
            pygame.draw.rect(surf, dark, inner, 2, border_radius=pad)
        else:
            pygame.draw.circle(surf, color, r.center, inner.width // 2)
            pygame.draw.circle(surf, dark, r.center, inner.width // 2, 2)
        return surf

    # ===========================================================
    # Access
    # ===========================================================

    def get(self, key, size):
        """
        Texture ``key`` scaled to ``size`` x ``size`` (cached).

        Unknown keys get a magenta placeholder so missing catalog entries
        are visible instead of crashing the frame.
        """
        size = max(1, int(size))
        cache_key = (key, size)
        surf = self._scaled.get(cache_key)
        if surf is not None:
            return surf

        base = self._base.get(key)
        if base is None:
            if key in self.catalog:
                base, _ = self._build(key)
                self._base[key] = base
            else:
                DebugLogger.warn(f"No texture for '{key}', using placeholder", category="loading")
                base = self.draw_fallback("rect", (255, 0, 255), BASE_TEXTURE_SIZE)
                self._base[key] = base

        surf = pygame.transform.smoothscale(base, (size, size))
        self._scaled[cache_key] = surf
        return surf
