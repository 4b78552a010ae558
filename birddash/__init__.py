"""
BirdDash
--------
Side-scrolling café arcade game with a leaderboard backend.
"""

__version__ = "1.0.0"
