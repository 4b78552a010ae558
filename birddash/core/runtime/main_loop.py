"""
main_loop.py
------------
Core game loop orchestrating timing, events, updates, and rendering.

Responsibilities:
- Initialize pygame and core systems
- Maintain fixed timestep update loop
- Coordinate event handling, updates, and rendering
- Global hotkeys (F3 debug logging + hitboxes, M mute, ESC quit)
"""

import time

import pygame

from birddash.audio.sound_manager import get_sound_manager
from birddash.core.runtime.game_settings import Display, Physics, Debug
from birddash.core.services.input_manager import InputManager
from birddash.core.services.scene_manager import SceneManager
from birddash.core.debug.debug_logger import DebugLogger
from birddash.graphics.draw_manager import DrawManager


FRAME_TIME_WARNING_MS = 25.0


class MainLoop:
    """
    Core runtime controller managing the game's main loop.

    Implements a fixed timestep for logic with variable rendering.
    """

    # ===========================================================
    # Initialization
    # ===========================================================

    def __init__(self, start_scene="Preloader"):
        DebugLogger.section("Initializing MainLoop")

        self._init_pygame()
        self._init_core_systems()
        self._init_scene_manager(start_scene)

    def _init_pygame(self):
        pygame.init()
        pygame.font.init()
        pygame.display.set_caption(Display.CAPTION)

        DebugLogger.init_entry("Pygame")
        DebugLogger.init_sub(f"pygame {pygame.version.ver}, window caption set")

    def _init_core_systems(self):
        self.display = pygame.display.set_mode((Display.WIDTH, Display.HEIGHT), pygame.RESIZABLE)
        self.input_manager = InputManager()
        self.draw_manager = DrawManager()
        self._last_perf_warn_time = 0.0

    def _init_scene_manager(self, start_scene):
        self.scenes = SceneManager(
            self.display,
            self.input_manager,
            self.draw_manager,
            start_scene=start_scene,
        )

        self.clock = pygame.time.Clock()
        self.running = True

        DebugLogger.init_entry("Main Loop Runtime")
        DebugLogger.init_sub("Game Clock Initialized", level=1)

    # ===========================================================
    # Main Loop
    # ===========================================================

    def run(self):
        """
        Execute main game loop until quit.

        Uses fixed timestep for updates with accumulator pattern.
        Rendering happens once per frame after all updates.
        """
        DebugLogger.section("Game Loop")

        fixed_dt = Physics.FIXED_DT
        accumulator = 0.0

        while self.running:
            frame_time = self.clock.tick(Display.FPS) / 1000.0
            frame_time = min(frame_time, Physics.MAX_FRAME_TIME)
            accumulator += frame_time

            self._handle_events()

            while accumulator >= fixed_dt:
                self.input_manager.update()
                self.scenes.update(fixed_dt)
                self.input_manager.end_frame()
                accumulator -= fixed_dt

            self._draw()

        api_client = self.scenes.services.get_global("api_client")
        if api_client is not None:
            api_client.shutdown()
        pygame.quit()
        DebugLogger.system("Pygame terminated")

    # ===========================================================
    # Event Handling
    # ===========================================================

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT or self.input_manager.is_system_key("quit", event):
                self.running = False
                DebugLogger.action("Quit signal received")
                break

            if self.input_manager.is_system_key("toggle_debug", event):
                enabled = DebugLogger.toggle_debug_mode()
                Debug.HITBOX_VISIBLE = enabled
                Debug.SHOW_FPS = enabled
                continue

            if self.input_manager.is_system_key("toggle_mute", event):
                sounds = get_sound_manager()
                if sounds is not None:
                    muted = sounds.toggle_mute()
                    DebugLogger.action(f"Sound {'muted' if muted else 'unmuted'}", category="audio")
                continue

            self.input_manager.handle_event(event)
            self.scenes.handle_event(event)

    # ===========================================================
    # Rendering
    # ===========================================================

    def _draw(self):
        start = time.perf_counter()
        self.draw_manager.clear()
        self.scenes.draw(self.draw_manager)

        if Debug.SHOW_FPS:
            self.draw_manager.queue_text(
                f"{self.clock.get_fps():.0f} FPS", (8, self.display.get_height() - 8),
                14, (0, 255, 0), layer=999, anchor="bottomleft"
            )

        self.draw_manager.render(self.display)
        pygame.display.flip()

        frame_time_ms = (time.perf_counter() - start) * 1000
        self._check_slow_frame(frame_time_ms)

    def _check_slow_frame(self, frame_time_ms: float):
        """Log slow frames, throttled to once per second."""
        if frame_time_ms <= FRAME_TIME_WARNING_MS:
            return
        now = time.perf_counter()
        if now - self._last_perf_warn_time > 1.0:
            self._last_perf_warn_time = now
            DebugLogger.warn(f"Slow frame: {frame_time_ms:.2f}ms", category="drawing")
