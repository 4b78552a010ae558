"""
scene_manager.py
----------------
Scene coordinator with direct class registration.

Owns the ServiceLocator and the systems that outlive a single scene
(sound bank, texture factory, session stats, online client).
"""

from birddash.core.debug.debug_logger import DebugLogger
from birddash.scenes.scene_state import SceneState
from birddash.core.services.service_locator import ServiceLocator
from birddash.core.runtime.session_stats import get_session_stats

from birddash.audio.sound_manager import SoundManager
from birddash.graphics.texture_factory import TextureFactory
from birddash.online.api_client import ApiClient

# Scene classes
from birddash.scenes.preloader_scene import PreloaderScene
from birddash.scenes.game_scene import GameScene


class SceneManager:
    """Coordinates scene transitions and delegates update/draw logic."""

    def __init__(self, display, input_manager, draw_manager, start_scene="Preloader"):
        """
        Args:
            display: pygame display surface
            input_manager: InputManager instance
            draw_manager: DrawManager instance
            start_scene: Name of the first scene to activate
        """
        self.display = display
        self.input_manager = input_manager
        self.draw_manager = draw_manager
        DebugLogger.init_entry("SceneManager")

        self.services = ServiceLocator(self)
        self.services.register_managers(
            display=display,
            input_mgr=input_manager,
            draw=draw_manager,
        )
        DebugLogger.init_sub("ServiceLocator initialized")

        self.sound_manager = SoundManager()
        self.sound_manager.set_master_volume(80)

        self.services.register_global("session_stats", get_session_stats())
        self.services.register_global("sound_manager", self.sound_manager)
        self.services.register_global("textures", TextureFactory())
        self.services.register_global("api_client", ApiClient())
        DebugLogger.init_sub("Registered global systems")

        self.scene_classes = {
            "Preloader": PreloaderScene,
            "Game": GameScene,
        }

        self._active_scene = None
        self._active_name = None
        DebugLogger.init_sub(f"Registered scenes: {list(self.scene_classes.keys())}")

        self.set_scene(start_scene)

    # ===========================================================
    # Scene Control
    # ===========================================================

    def set_scene(self, name: str, **scene_data):
        """
        Switch to another scene.

        Args:
            name: Scene name ("Preloader", "Game")
            **scene_data: Data passed to the new scene's on_load()
        """
        if name not in self.scene_classes:
            DebugLogger.warn(f"Unknown scene: '{name}'", category="scene")
            return

        prev_name = self._active_name or "None"
        DebugLogger.system(f"Transitioning [{prev_name}] → [{name}]", category="scene")

        new_scene = self.scene_classes[name](self.services)
        new_scene.state = SceneState.LOADING
        new_scene.on_load(**scene_data)

        if self._active_scene:
            DebugLogger.state(f"Exiting {self._active_name}", category="scene")
            self._active_scene.state = SceneState.EXITING
            self._active_scene.on_exit()
            self.services.clear_entities()

        self._active_scene = new_scene
        self._active_name = name
        new_scene.state = SceneState.ACTIVE
        DebugLogger.section(f"Active Scene: {name}")

        new_scene.on_enter()
        self.input_manager.set_context(new_scene.input_context)

    # ===========================================================
    # Event, Update, Draw Delegation
    # ===========================================================

    def handle_event(self, event):
        if self._active_scene:
            self._active_scene.handle_event(event)

    def update(self, dt: float):
        if self._active_scene and self._active_scene.state is SceneState.ACTIVE:
            self._active_scene.update(dt)

    def draw(self, draw_manager):
        if self._active_scene:
            self._active_scene.draw(draw_manager)
