"""
conftest.py
-----------
Shared pytest configuration and fixtures for BirdDash tests.

Contains:
- Headless pygame setup (dummy SDL video/audio drivers)
- Fresh event bus per test
- Game-side fixtures (state, sizing, player)
- Backend fixtures (settings, temporary SQLite app, TestClient)
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import random

import pytest
from unittest.mock import MagicMock

from birddash.core.services.event_manager import reset_events, get_events


# ===========================================================
# Game Fixtures
# ===========================================================

@pytest.fixture(autouse=True)
def fresh_events():
    """Every test gets its own event bus."""
    reset_events()
    yield get_events()
    reset_events()


@pytest.fixture
def game_state():
    from birddash.core.runtime.game_state import GameState
    return GameState()


@pytest.fixture
def sizing():
    from birddash.graphics.element_sizing import ElementSizing
    return ElementSizing(480, 854)


@pytest.fixture
def player():
    from birddash.entities.player import Player
    return Player(240, 427, (480, 854))


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def mock_draw_manager():
    """Mock for DrawManager with the queue methods used by game code."""
    draw_manager = MagicMock()
    draw_manager.queue_draw = MagicMock()
    draw_manager.queue_shape = MagicMock()
    draw_manager.queue_text = MagicMock()
    return draw_manager


# ===========================================================
# Backend Fixtures
# ===========================================================

@pytest.fixture
def server_settings(tmp_path, monkeypatch):
    """Settings pointing at a throwaway SQLite file, protections off."""
    from birddash.server.config import Settings, reset_settings

    monkeypatch.setenv("BIRDDASH_ENV", "test")
    monkeypatch.setenv("DATABASE_TYPE", "sqlite")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQLITE_FILENAME", str(tmp_path / "birddash_test.db"))
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "0")
    monkeypatch.setenv("ENABLE_CSRF", "0")
    monkeypatch.delenv("STATIC_DIR", raising=False)
    reset_settings()
    yield Settings()
    reset_settings()


@pytest.fixture
def fast_hashing(monkeypatch):
    """Low bcrypt cost so auth tests stay quick."""
    from birddash.server import security
    from birddash.server.routes import auth

    real_hash = security.hash_password
    monkeypatch.setattr(auth, "hash_password", lambda password: real_hash(password, rounds=4))


@pytest.fixture
def app(server_settings, fast_hashing):
    from birddash.server.app import create_app

    application = create_app(server_settings)
    yield application
    application.state.database.dispose()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)


# ===========================================================
# Pytest Configuration
# ===========================================================

def pytest_configure(config):
    """Custom pytest configuration."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "server: marks backend tests")


def pytest_collection_modifyitems(config, items):
    """Tag tests by location."""
    for item in items:
        if item.nodeid.replace("\\", "/").startswith("tests/server/"):
            item.add_marker(pytest.mark.server)
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
