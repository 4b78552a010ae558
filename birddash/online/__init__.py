"""
Online exports.

Provides the leaderboard API client used by the game over screen.
"""

from birddash.online.api_client import ApiClient, ApiError, OfflineStore

__all__ = [
    'ApiClient',
    'ApiError',
    'OfflineStore',
]
