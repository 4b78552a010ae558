"""
preloader_scene.py
------------------
Builds textures on the first frame, then shows the title splash until
the player clicks or presses a key.
"""

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Layers, Online
from birddash.graphics.particles import ParticleOverlay
from birddash.scenes.base_scene import BaseScene
from birddash.ui.responsive_utils import ResponsiveUtils


CONTROLS = (
    "SPACE / W / UP or click - fly",
    "Arrows / A D - move",
    "SHIFT - dash",
    "F3 - debug",
)


class PreloaderScene(BaseScene):
    """Loading + intro splash."""

    def __init__(self, services):
        super().__init__(services)
        self.input_context = "ui"
        self.textures = services.get_global("textures")
        self.api_client = services.get_global("api_client")
        self.loaded = False
        self._frames = 0
        self._blink_ms = 0.0
        self.steam = None
        self.responsive = None

    def on_enter(self):
        w, h = self.screen_size
        self.responsive = ResponsiveUtils(w, h)
        self.steam = ParticleOverlay("steam", max_particles=40, spawn_rate=10,
                                     spawn_area=(w * 0.3, h * 0.85, w * 0.4, h * 0.1))

    def on_exit(self):
        if self.steam:
            self.steam.clear()

    # ===========================================================
    # Loading
    # ===========================================================

    def _load_assets(self):
        if self.textures is not None:
            self.textures.build_all()
        if self.api_client is not None and self.api_client.enabled:
            self.api_client.run_async(self.api_client.connect, Online.PLAYER_NAME)
        self.loaded = True
        DebugLogger.state("Assets ready", category="scene")

    def start_game(self):
        if not self.loaded:
            return
        self.services.transition_to("Game")

    # ===========================================================
    # Frame
    # ===========================================================

    def update(self, dt: float):
        self._frames += 1
        # Let the "Loading" frame render before the blocking build
        if not self.loaded and self._frames > 1:
            self._load_assets()

        self._blink_ms += dt * 1000.0
        if self.steam:
            self.steam.update(dt)

        if self.loaded and (self.input_manager.pointer_pressed()
                            or self.input_manager.action_pressed("confirm")):
            self.start_game()

    def handle_event(self, event):
        if event.type == pygame.KEYDOWN and self.loaded:
            self.start_game()

    def draw(self, draw_manager):
        w, h = self.screen_size
        r = self.responsive
        cx = w / 2

        if self.steam:
            self.steam.render(draw_manager)

        draw_manager.queue_text("BirdDash", (cx, h * 0.28), r.font_size("GIANT"),
                                (255, 215, 0), Layers.UI, bold=True)
        draw_manager.queue_text("Café Flight", (cx, h * 0.36), r.font_size("XLARGE"),
                                (255, 240, 220), Layers.UI)

        if self.textures is not None and self.loaded:
            icon = self.textures.get("player", int(96 * r.min_scale))
            draw_manager.queue_draw(icon, icon.get_rect(center=(cx, h * 0.5)), Layers.UI)

        if not self.loaded:
            draw_manager.queue_text("Loading...", (cx, h * 0.62), r.font_size("LARGE"),
                                    (255, 255, 255), Layers.UI)
            return

        for i, line in enumerate(CONTROLS):
            draw_manager.queue_text(line, (cx, h * 0.62 + i * r.font_size("SMALL") * 1.6),
                                    r.font_size("SMALL"), (230, 220, 200), Layers.UI)

        if int(self._blink_ms / 500) % 2 == 0:
            draw_manager.queue_text("Click or press any key to start", (cx, h * 0.85),
                                    r.font_size("LARGE"), (255, 255, 255), Layers.UI, bold=True)
