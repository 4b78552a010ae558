"""
service_locator.py
------------------
Centralized access to core game services and systems.
Provides dependency injection for scenes and managers.
"""

from typing import Any


# ===========================================================
# Service Locator
# ===========================================================

class ServiceLocator:
    """Container for core game services with scene-local and global registries."""

    __slots__ = (
        "scene_manager",
        "display",
        "input_manager",
        "draw_manager",
        "_global_systems",
        "_entities",
    )

    def __init__(self, scene_manager):
        """
        Initialize with the owning scene manager.

        Args:
            scene_manager: The SceneManager instance
        """
        self.scene_manager = scene_manager
        self.display = None
        self.input_manager = None
        self.draw_manager = None
        self._global_systems = {}
        self._entities = {}

    def register_managers(self, display=None, input_mgr=None, draw=None):
        """
        Register core managers.

        Args:
            display: pygame display surface
            input_mgr: InputManager instance
            draw: DrawManager instance
        """
        if display is not None:
            self.display = display
        if input_mgr is not None:
            self.input_manager = input_mgr
        if draw is not None:
            self.draw_manager = draw

    # ===========================================================
    # Entity Access (Scene-Local)
    # ===========================================================

    def register_entity(self, key: str, entity: Any) -> None:
        """Register a gameplay entity. Cleared on scene transition."""
        self._entities[key] = entity

    def get_entity(self, key: str, default: Any = None) -> Any:
        return self._entities.get(key, default)

    @property
    def player(self) -> Any:
        """Quick access to player entity."""
        return self._entities.get("player")

    # ===========================================================
    # Global System Access
    # ===========================================================

    def register_global(self, name: str, system: Any) -> None:
        """
        Register a system that persists across scenes.

        Args:
            name: System identifier
            system: System instance
        """
        self._global_systems[name] = system

    def get_global(self, name: str, default: Any = None) -> Any:
        """
        Get a global system by name.

        Args:
            name: System identifier
            default: Value if not found

        Returns:
            System instance or default
        """
        return self._global_systems.get(name, default)

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def clear_entities(self) -> None:
        """Clear all scene-local entities. Called on scene exit."""
        self._entities.clear()

    def transition_to(self, scene_name: str, **scene_data) -> None:
        """Convenience method for scene transitions."""
        self.scene_manager.set_scene(scene_name, **scene_data)
