"""
base_scene.py
-------------
Abstract base class for all scenes.

Provides:
- Lifecycle hooks (load, enter, exit)
- Service locator access
- Abstract methods for update, draw, handle_event
"""

from abc import ABC, abstractmethod

from birddash.scenes.scene_state import SceneState


class BaseScene(ABC):
    """
    Base class for all scenes.

    Attributes:
        state: Current lifecycle state
        input_context: Input context for this scene ("gameplay" or "ui")
        services: ServiceLocator for accessing managers and systems
    """

    def __init__(self, services):
        """
        Initialize scene with service locator.

        Args:
            services: ServiceLocator instance for dependency injection
        """
        self.services = services
        self.state = SceneState.INACTIVE
        self.input_context = "ui"

        self.input_manager = services.input_manager
        self.draw_manager = services.draw_manager

    @property
    def screen_size(self):
        """(width, height) of the game surface."""
        return self.services.display.get_size()

    # ===========================================================
    # Lifecycle Hooks (Override in subclasses)
    # ===========================================================

    def on_load(self, **scene_data):
        """Called once when scene is first created."""
        pass

    def on_enter(self):
        """Called when scene becomes active."""
        pass

    def on_exit(self):
        """Called before transitioning to another scene."""
        pass

    # ===========================================================
    # Abstract Methods (Must implement in subclasses)
    # ===========================================================

    @abstractmethod
    def update(self, dt: float):
        """
        Update scene logic.

        Args:
            dt: Delta time in seconds
        """
        pass

    @abstractmethod
    def draw(self, draw_manager):
        """
        Render the scene.

        Args:
            draw_manager: DrawManager instance for queuing draws
        """
        pass

    @abstractmethod
    def handle_event(self, event):
        """
        Handle input events.

        Args:
            event: pygame event object
        """
        pass
