"""Leaderboard and account backend (FastAPI)."""

from birddash.server.app import create_app
from birddash.server.config import Settings, get_settings, reset_settings

__all__ = ["create_app", "Settings", "get_settings", "reset_settings"]
