"""
event_manager.py
----------------
Event-driven system for decoupled game component communication.
Lets managers, power-ups and the HUD react to gameplay without direct
references to each other.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from birddash.core.debug.debug_logger import DebugLogger


# ===========================================================
# Event Definitions
# ===========================================================

@dataclass(frozen=True)
class BaseEvent:
    """Base class for all events."""
    pass


@dataclass(frozen=True)
class ItemCollectedEvent(BaseEvent):
    """Dispatched when the player (or companion) collects a bean or power-up."""
    item_type: str
    category: str            # "collectible" or "power_up"
    points: int
    position: tuple
    effects: list = field(default_factory=list)
    by_companion: bool = False


@dataclass(frozen=True)
class ObstacleHitEvent(BaseEvent):
    """Dispatched when the player overlaps an obstacle."""
    obstacle_type: str
    position: tuple
    blocked: bool


@dataclass(frozen=True)
class PlayerDamagedEvent(BaseEvent):
    """Dispatched after the player loses health."""
    health: int
    max_health: int


@dataclass(frozen=True)
class PlayerHealedEvent(BaseEvent):
    """Dispatched after the player regains health."""
    health: int
    max_health: int


@dataclass(frozen=True)
class PowerUpActivatedEvent(BaseEvent):
    """Dispatched when a power-up starts or is refreshed."""
    power_up: str
    duration_ms: float
    refreshed: bool = False


@dataclass(frozen=True)
class PowerUpExpiredEvent(BaseEvent):
    """Dispatched once when a power-up deactivates."""
    power_up: str


@dataclass(frozen=True)
class ScreenShakeEvent(BaseEvent):
    """Dispatched to trigger screen shake effect."""
    intensity: float = 8.0
    duration: float = 0.3


@dataclass(frozen=True)
class FloatingTextEvent(BaseEvent):
    """Dispatched to show a short popup (e.g. '+40', 'BLOCKED!')."""
    text: str
    position: tuple
    color: tuple = (255, 255, 255)


@dataclass(frozen=True)
class GameOverEvent(BaseEvent):
    """Dispatched when the run ends."""
    summary: dict


# ===========================================================
# Event Manager
# ===========================================================

class EventManager:
    """Central event dispatcher using pub-sub pattern."""

    def __init__(self):
        self._subscribers: Dict[Type[BaseEvent], List[Callable]] = {}
        DebugLogger.init("EventManager initialized", category="event_manager")

    # ===========================================================
    # Subscription
    # ===========================================================

    def subscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        """
        Register a callback for an event type.

        Args:
            event_type: Event class to listen for
            callback: Function to call when event fires
        """
        subscribers = self._subscribers.setdefault(event_type, [])
        if callback in subscribers:
            return

        subscribers.append(callback)
        callback_name = getattr(callback, '__name__', repr(callback))
        DebugLogger.system(
            f"Subscribed '{callback_name}' to '{event_type.__name__}'",
            category="event_manager"
        )

    def unsubscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        """Remove a callback from an event type."""
        if event_type in self._subscribers and callback in self._subscribers[event_type]:
            self._subscribers[event_type].remove(callback)

    def unsubscribe_all(self, callback: Callable) -> None:
        """Remove a callback from all event types."""
        for subscribers in self._subscribers.values():
            if callback in subscribers:
                subscribers.remove(callback)

    # ===========================================================
    # Dispatch
    # ===========================================================

    def dispatch(self, event: BaseEvent) -> None:
        """
        Send event to all registered callbacks.

        A failing callback is logged and the remaining callbacks still run.

        Args:
            event: Event instance to dispatch
        """
        for callback in list(self._subscribers.get(type(event), ())):
            try:
                callback(event)
            except Exception as e:
                callback_name = getattr(callback, '__name__', repr(callback))
                DebugLogger.warn(f"Error in event callback {callback_name}: {e}")

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def clear_all(self) -> None:
        """Remove all subscribers. Call on scene exit."""
        self._subscribers.clear()

    def get_subscriber_count(self, event_type: Type[BaseEvent] = None) -> int:
        """
        Get count of subscribers.

        Args:
            event_type: Specific event type, or None for total

        Returns:
            Number of subscribers
        """
        if event_type:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subs) for subs in self._subscribers.values())


# ===========================================================
# Singleton Access
# ===========================================================

_EVENTS = None


def get_events() -> EventManager:
    """Get or create the event manager singleton."""
    global _EVENTS
    if _EVENTS is None:
        _EVENTS = EventManager()
    return _EVENTS


def reset_events() -> None:
    """Reset the singleton. Call on full game restart."""
    global _EVENTS
    _EVENTS = None
