"""
input_manager.py
----------------
Unified input system with context-aware action queries.

Provides:
- Context-based input handling (gameplay, ui, system)
- Edge detection (pressed, held, released)
- Pointer (mouse/touch) taps folded into the action table
"""

import pygame

from birddash.core.debug.debug_logger import DebugLogger


# ===========================================================
# Default Key Bindings
# ===========================================================

DEFAULT_KEY_BINDINGS = {
    "gameplay": {
        "move_left": [pygame.K_LEFT, pygame.K_a],
        "move_right": [pygame.K_RIGHT, pygame.K_d],
        "move_down": [pygame.K_DOWN, pygame.K_s],
        "fly": [pygame.K_SPACE, pygame.K_UP, pygame.K_w],
        "dash": [pygame.K_LSHIFT, pygame.K_RSHIFT],
    },
    "ui": {
        "confirm": [pygame.K_RETURN, pygame.K_SPACE],
        "back": [pygame.K_ESCAPE],
    },
    "system": {
        "toggle_debug": [pygame.K_F3],
        "toggle_mute": [pygame.K_m],
        "quit": [pygame.K_ESCAPE],
    },
}


class InputManager:
    """
    Unified input system with context-aware action queries.

    Usage:
        if input_manager.action_pressed("fly"):      # Rising edge
            player.fly()

        if input_manager.action_held("move_left"):   # Continuous
            player.move_left()
    """

    # ===========================================================
    # Initialization
    # ===========================================================

    def __init__(self, key_bindings=None):
        """
        Initialize input system.

        Args:
            key_bindings: Custom key bindings dict (uses DEFAULT_KEY_BINDINGS if None)
        """
        DebugLogger.init_entry("InputManager")

        self.key_bindings = key_bindings or DEFAULT_KEY_BINDINGS
        self.context = "gameplay"
        self._pointer_pressed = False
        self._pointer_pos = (0, 0)

        self._init_lookup_tables()
        self._init_action_registry()

    def _init_lookup_tables(self):
        """Build per-context action → keys tables."""
        self._action_to_keys_cache = {
            context_name: {action: tuple(keys) for action, keys in actions.items()}
            for context_name, actions in self.key_bindings.items()
        }
        self._active_action_to_keys = self._action_to_keys_cache[self.context]

    def _init_action_registry(self):
        """Initialize state tracking for all non-system actions."""
        self._actions = {}
        for context_name, actions in self.key_bindings.items():
            if context_name == "system":
                continue
            for action_name in actions:
                self._actions[action_name] = {
                    "pressed": False,
                    "held": False,
                    "released": False,
                    "prev_held": False,
                }

    # ===========================================================
    # Context Management
    # ===========================================================

    def set_context(self, name: str):
        """
        Switch input context. Edge states are cleared to prevent false presses.

        Args:
            name: Context name ("gameplay", "ui")
        """
        if name not in self.key_bindings:
            DebugLogger.warn(f"Unknown context: {name}", category="input")
            return

        self.context = name
        self._active_action_to_keys = self._action_to_keys_cache[name]
        for state in self._actions.values():
            state["pressed"] = False
            state["released"] = False
        DebugLogger.state(f"Context switched to [{name.upper()}]", category="input")

    # ===========================================================
    # Public API: Action Queries
    # ===========================================================

    def action_pressed(self, action: str) -> bool:
        """Check if action was just pressed this frame (rising edge)."""
        state = self._actions.get(action)
        return state["pressed"] if state else False

    def action_held(self, action: str) -> bool:
        """Check if action is currently held down."""
        state = self._actions.get(action)
        return state["held"] if state else False

    def action_released(self, action: str) -> bool:
        state = self._actions.get(action)
        return state["released"] if state else False

    def pointer_pressed(self) -> bool:
        """True on the frame a mouse button / touch went down."""
        return self._pointer_pressed

    @property
    def pointer_pos(self) -> tuple:
        return self._pointer_pos

    # ===========================================================
    # Frame Update
    # ===========================================================

    def handle_event(self, event):
        """Record pointer taps. Call for every pygame event."""
        if event.type == pygame.MOUSEBUTTONDOWN:
            self._pointer_pressed = True
            self._pointer_pos = event.pos
        elif event.type == pygame.FINGERDOWN:
            self._pointer_pressed = True

    def update(self, keys=None):
        """
        Poll keyboard state and run edge detection. Call once per tick.

        Args:
            keys: Optional key-state sequence (defaults to pygame.key.get_pressed())
        """
        if keys is None:
            keys = pygame.key.get_pressed()

        for action in self._active_action_to_keys:
            self._update_action_state(action, keys)

    def end_frame(self):
        """Clear one-shot pointer state after the scene consumed it."""
        self._pointer_pressed = False

    def _update_action_state(self, action: str, keys):
        """
        Update action state with edge detection.

        - pressed: False → True (rising edge)
        - released: True → False (falling edge)
        - held: current state
        """
        state = self._actions[action]
        current_held = self._is_action_down(action, keys)
        prev_held = state["prev_held"]

        state["pressed"] = current_held and not prev_held
        state["released"] = not current_held and prev_held
        state["held"] = current_held
        state["prev_held"] = current_held

    # ===========================================================
    # System Input (Global Hotkeys)
    # ===========================================================

    def is_system_key(self, action: str, event) -> bool:
        """Check whether a KEYDOWN event matches a system binding."""
        if event.type != pygame.KEYDOWN:
            return False
        return event.key in self.key_bindings.get("system", {}).get(action, ())

    # ===========================================================
    # Internal Helpers
    # ===========================================================

    def _is_action_down(self, action: str, keys) -> bool:
        """Check if any key bound to action is currently pressed."""
        for key in self._active_action_to_keys.get(action, ()):
            if keys[key]:
                return True
        return False
