"""
Core services exports.

Provides the event bus, configuration loading, input and scene services.
"""

from birddash.core.services.config_manager import load_config
from birddash.core.services.event_manager import (
    get_events,
    reset_events,
    BaseEvent,
    ItemCollectedEvent,
    ObstacleHitEvent,
    PlayerDamagedEvent,
    PlayerHealedEvent,
    PowerUpActivatedEvent,
    PowerUpExpiredEvent,
    ScreenShakeEvent,
    FloatingTextEvent,
    GameOverEvent,
)
from birddash.core.services.service_locator import ServiceLocator
from birddash.core.services.input_manager import InputManager

__all__ = [
    # Config
    'load_config',
    # Events
    'get_events',
    'reset_events',
    'BaseEvent',
    'ItemCollectedEvent',
    'ObstacleHitEvent',
    'PlayerDamagedEvent',
    'PlayerHealedEvent',
    'PowerUpActivatedEvent',
    'PowerUpExpiredEvent',
    'ScreenShakeEvent',
    'FloatingTextEvent',
    'GameOverEvent',
    # Services
    'ServiceLocator',
    'InputManager',
]
