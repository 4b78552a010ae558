"""
hud_manager.py
--------------
In-game heads-up display built from ``config/ui/hud.yaml``.

Responsibilities
----------------
- Resolve dotted data bindings (``state.score``) against registered objects
- Lay out labels, hearts and power-up timer bars from screen anchors
- Animate short-lived floating texts ("+40", "BLOCKED!")
"""

from typing import Any, Dict, List, Optional

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Layers
from birddash.core.services.config_manager import load_config


DEFAULT_LAYOUT = {
    "elements": [],
    "floating_text": {"lifetime_ms": 900, "rise_speed": 60, "size": "MEDIUM"},
}

TIMER_LABELS = {
    "shield": "Shield",
    "speed_boost": "Speed",
    "score_multiplier": "Score x",
    "time_slow": "Slow-mo",
    "magnet": "Magnet",
    "bird_companion": "Companion",
}


# ===========================================================
# Data Bindings
# ===========================================================

class BindingSystem:
    """Resolves dotted paths against named objects."""

    def __init__(self):
        self.context: Dict[str, Any] = {}
        self._path_cache: Dict[str, List[str]] = {}

    def register(self, name: str, obj: Any):
        self.context[name] = obj

    def unregister(self, name: str):
        self.context.pop(name, None)

    def resolve(self, path: str) -> Optional[Any]:
        """
        Resolve ``path`` to its current value.

        Args:
            path: Dot-separated path, e.g. 'player.health'

        Returns:
            Current value, or None if any segment is missing
        """
        if not path:
            return None
        parts = self._path_cache.get(path)
        if parts is None:
            parts = self._path_cache[path] = path.split(".")

        obj = self.context.get(parts[0])
        for attr in parts[1:]:
            if obj is None:
                return None
            if isinstance(obj, dict):
                obj = obj.get(attr)
            else:
                obj = getattr(obj, attr, None)
        return obj


# ===========================================================
# Floating Text
# ===========================================================

class FloatingText:
    __slots__ = ("text", "x", "y", "color", "age_ms", "lifetime_ms")

    def __init__(self, text, x, y, color, lifetime_ms):
        self.text = text
        self.x = x
        self.y = y
        self.color = color
        self.age_ms = 0.0
        self.lifetime_ms = lifetime_ms

    @property
    def alpha(self) -> int:
        return max(0, int(255 * (1 - self.age_ms / self.lifetime_ms)))

    @property
    def alive(self) -> bool:
        return self.age_ms < self.lifetime_ms


# ===========================================================
# HUD Manager
# ===========================================================

class HUDManager:
    """Owns the HUD layout and draws it on the UI layer each frame."""

    def __init__(self, responsive, textures=None, layout_file="hud.yaml"):
        """
        Args:
            responsive: ResponsiveUtils for margins and font sizes
            textures: Optional TextureFactory for heart icons
            layout_file: YAML layout under config/ui
        """
        self.responsive = responsive
        self.textures = textures
        self.bindings = BindingSystem()

        layout = load_config(layout_file, default_dict=DEFAULT_LAYOUT)
        self.elements = layout.get("elements", [])
        self.floating_config = layout.get("floating_text", DEFAULT_LAYOUT["floating_text"])
        self.floating_texts: List[FloatingText] = []

        DebugLogger.init_entry("HUDManager")
        DebugLogger.init_sub(f"{len(self.elements)} HUD elements from {layout_file}")

    # ===========================================================
    # Binding Registration
    # ===========================================================

    def bind(self, **objects):
        """Register binding roots, e.g. ``hud.bind(state=state, player=player)``."""
        for name, obj in objects.items():
            self.bindings.register(name, obj)

    # ===========================================================
    # Floating Text
    # ===========================================================

    def add_floating_text(self, text, pos, color=(255, 255, 255)):
        x, y = self.responsive.safe_position(*pos)
        self.floating_texts.append(
            FloatingText(text, x, y, tuple(color), self.floating_config.get("lifetime_ms", 900))
        )

    def update(self, dt):
        """Advance floating texts. ``dt`` in seconds."""
        rise = self.floating_config.get("rise_speed", 60) * dt
        for ft in self.floating_texts:
            ft.age_ms += dt * 1000.0
            ft.y -= rise
        self.floating_texts = [ft for ft in self.floating_texts if ft.alive]

    # ===========================================================
    # Layout
    # ===========================================================

    def anchor_position(self, anchor, offset=(0, 0)):
        """Screen position for an anchor plus a scaled offset."""
        r = self.responsive
        margin = r.margin("SMALL")
        ox, oy = offset[0] * r.min_scale, offset[1] * r.min_scale

        if anchor == "top_right":
            return r.screen_width - margin - ox, margin + oy
        if anchor == "top_center":
            return r.center_x + ox, margin + oy
        if anchor == "bottom_left":
            return margin + ox, r.screen_height - margin - oy
        if anchor == "bottom_center":
            return r.center_x + ox, r.screen_height - margin - oy
        return margin + ox, margin + oy

    # ===========================================================
    # Rendering
    # ===========================================================

    def draw(self, draw_manager):
        for element in self.elements:
            kind = element.get("type", "label")
            if kind == "label":
                self._draw_label(draw_manager, element)
            elif kind == "hearts":
                self._draw_hearts(draw_manager, element)
            elif kind == "timers":
                self._draw_timers(draw_manager, element)
            else:
                DebugLogger.warn(f"Unknown HUD element type '{kind}'", category="ui")

        font_size = self.responsive.font_size(self.floating_config.get("size", "MEDIUM"))
        for ft in self.floating_texts:
            draw_manager.queue_text(ft.text, (ft.x, ft.y), font_size, ft.color,
                                    Layers.UI, bold=True, alpha=ft.alpha)

    def _draw_label(self, draw_manager, element):
        value = self.bindings.resolve(element.get("bind"))
        if value is None:
            return
        if "hide_below" in element and value < element["hide_below"]:
            return
        if "scale" in element:
            value = value * element["scale"]

        text = element.get("format", "{value}").format(value=value)
        if element.get("upper"):
            text = text.upper()

        anchor = element.get("anchor", "top_left")
        text_anchor = {"top_right": "topright", "top_center": "midtop"}.get(anchor, "topleft")
        if anchor.startswith("bottom"):
            text_anchor = "bottomleft" if anchor == "bottom_left" else "midbottom"

        draw_manager.queue_text(
            text, self.anchor_position(anchor, element.get("offset", (0, 0))),
            self.responsive.font_size(element.get("size", "MEDIUM")),
            tuple(element.get("color", (255, 255, 255))), Layers.UI,
            anchor=text_anchor, bold=element.get("bold", False)
        )

    def _draw_hearts(self, draw_manager, element):
        health = self.bindings.resolve(element.get("bind"))
        max_health = self.bindings.resolve(element.get("max_bind"))
        if health is None or max_health is None:
            return

        size = int(element.get("icon_size", 26) * self.responsive.min_scale)
        spacing = element.get("spacing", 4)
        right, top = self.anchor_position(element.get("anchor", "top_right"), element.get("offset", (0, 0)))
        icon = self.textures.get("heart", size) if self.textures else None

        for i in range(max_health):
            x = right - (max_health - i) * (size + spacing)
            filled = i < health
            if icon is not None:
                image = icon if filled else self._dimmed(icon)
                draw_manager.queue_draw(image, image.get_rect(topleft=(x, top)), Layers.UI)
            else:
                color = (255, 80, 80) if filled else (90, 90, 90)
                draw_manager.queue_shape("circle", (x, top, size, size), color, Layers.UI)

    def _dimmed(self, icon):
        dim = icon.copy()
        dim.set_alpha(70)
        return dim

    def _draw_timers(self, draw_manager, element):
        power_ups = self.bindings.resolve("power_ups")
        if power_ups is None:
            return

        scale = self.responsive.min_scale
        bar_w = int(element.get("bar_width", 120) * scale)
        bar_h = int(element.get("bar_height", 10) * scale)
        spacing = element.get("spacing", 26) * scale
        colors = element.get("colors", {})
        font_size = self.responsive.font_size(element.get("size", "SMALL"))
        left, bottom = self.anchor_position(element.get("anchor", "bottom_left"), element.get("offset", (0, 0)))

        for row, (kind, timer) in enumerate(power_ups.active_timers()):
            y = bottom - (row + 1) * spacing
            color = tuple(colors.get(kind.value, (255, 255, 255)))
            label = TIMER_LABELS.get(kind.value, kind.value)
            seconds = max(0.0, timer.time_remaining) / 1000.0

            draw_manager.queue_text(f"{label} {seconds:.1f}s", (left, y), font_size, color,
                                    Layers.UI, anchor="bottomleft")
            draw_manager.queue_shape("rect", (left, y + 2, bar_w, bar_h), (40, 40, 40), Layers.UI,
                                     border_radius=3)
            fill = int(bar_w * timer.progress)
            if fill > 0:
                draw_manager.queue_shape("rect", (left, y + 2, fill, bar_h), color, Layers.UI + 1,
                                         border_radius=3)
