"""
session_stats.py
----------------
Tracks statistics across runs within one play session.
Separated from the per-run GameState so restarts keep the best score.
"""


# ===========================================================
# Session Stats
# ===========================================================

class SessionStats:
    """Container for cross-run statistics. Survives restarts."""

    def __init__(self):
        self.best_score = 0
        self.games_played = 0
        self.total_score = 0
        self.total_time_played = 0
        self.best_combo = 0
        self.last_rank = None

    def record_run(self, summary: dict):
        """
        Fold a finished run into the session totals.

        Args:
            summary: GameState.summary() output
        """
        score = summary.get("score", 0)
        self.games_played += 1
        self.total_score += score
        self.total_time_played += summary.get("time_played", 0)
        if score > self.best_score:
            self.best_score = score
        if summary.get("max_combo", 0) > self.best_combo:
            self.best_combo = summary["max_combo"]

    @property
    def average_score(self) -> int:
        if self.games_played == 0:
            return 0
        return round(self.total_score / self.games_played)

    def reset(self):
        """Reset everything including best score."""
        self.__init__()


# ===========================================================
# Singleton Access
# ===========================================================

_SESSION_STATS = None


def get_session_stats() -> SessionStats:
    """Get or create the session stats singleton."""
    global _SESSION_STATS
    if _SESSION_STATS is None:
        _SESSION_STATS = SessionStats()
    return _SESSION_STATS


def reset_session_stats() -> None:
    """Reset the singleton. Call on full game restart."""
    global _SESSION_STATS
    _SESSION_STATS = None
