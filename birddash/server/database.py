"""
database.py
-----------
SQLAlchemy models and session handling for the leaderboard backend.

Tables: users, leaderboard_entries, game_sessions, user_achievements.
SQLite is the default; PostgreSQL is used when DATABASE_TYPE or
DATABASE_URL says so.
"""

import os
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint, create_engine, text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from birddash.core.debug.debug_logger import DebugLogger


Base = declarative_base()


# ===========================================================
# Models
# ===========================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True)
    password_hash = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
    is_guest = Column(Boolean, default=False)
    guest_id = Column(String(100), unique=True)
    total_games_played = Column(Integer, default=0)
    total_score = Column(Integer, default=0)
    best_score = Column(Integer, default=0)
    total_time_played = Column(Integer, default=0)
    favorite_collectible = Column(String(50))
    achievements = Column(Text, default="[]")

    __table_args__ = (
        Index("idx_users_username", "username"),
    )


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    username = Column(String(50), nullable=False)
    score = Column(Integer, nullable=False)
    time_played = Column(Integer, nullable=False)
    collectibles_collected = Column(Integer, default=0)
    power_ups_collected = Column(Integer, default=0)
    distance_traveled = Column(Integer, default=0)
    max_combo = Column(Integer, default=0)
    game_date = Column(DateTime, default=datetime.utcnow)
    is_guest = Column(Boolean, default=False)

    __table_args__ = (
        Index("idx_leaderboard_score", score.desc()),
        Index("idx_leaderboard_date", game_date.desc()),
        Index("idx_leaderboard_username", "username"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "score": self.score,
            "time_played": self.time_played,
            "collectibles_collected": self.collectibles_collected,
            "power_ups_collected": self.power_ups_collected,
            "distance_traveled": self.distance_traveled,
            "max_combo": self.max_combo,
            "game_date": _iso(self.game_date),
            "is_guest": bool(self.is_guest),
        }


class GameSession(Base):
    __tablename__ = "game_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    session_start = Column(DateTime, default=datetime.utcnow)
    session_end = Column(DateTime)
    final_score = Column(Integer)
    time_played = Column(Integer)
    collectibles_collected = Column(Integer, default=0)
    power_ups_collected = Column(Integer, default=0)
    distance_traveled = Column(Integer, default=0)
    max_combo = Column(Integer, default=0)
    cause_of_death = Column(String(100))
    is_guest = Column(Boolean, default=False)

    __table_args__ = (
        Index("idx_sessions_user", "user_id"),
    )


class UserAchievement(Base):
    __tablename__ = "user_achievements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    achievement_id = Column(String(50), nullable=False)
    unlocked_at = Column(DateTime, default=datetime.utcnow)
    progress = Column(Integer, default=100)

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
        Index("idx_achievements_user", "user_id"),
    )

    def to_dict(self):
        return {
            "achievement_id": self.achievement_id,
            "unlocked_at": _iso(self.unlocked_at),
            "progress": self.progress,
        }


def _iso(value):
    return value.isoformat() if value is not None else None


# ===========================================================
# Engine / Session
# ===========================================================

class Database:
    """Engine plus session factory for one connection URL."""

    def __init__(self, url: str):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            path = url.replace("sqlite:///", "", 1)
            if path and path != ":memory:":
                os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        self.engine = create_engine(url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)
        self.ready = False

    @property
    def kind(self) -> str:
        return "sqlite" if self.url.startswith("sqlite") else "postgresql"

    def init_db(self):
        """Create every table that does not exist yet."""
        Base.metadata.create_all(bind=self.engine)
        self.ready = True
        DebugLogger.init_entry("Database", self.kind.upper())
        DebugLogger.init_sub(f"Tables: {', '.join(sorted(Base.metadata.tables))}")

    def session(self):
        return self.SessionLocal()

    def health_check(self) -> dict:
        """
        Run a trivial query.

        Returns:
            dict: ``status`` is "healthy" or "unhealthy"
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            DebugLogger.fail(f"Database health check failed: {e}", category="database")
            return {"status": "unhealthy", "type": self.kind, "error": str(e)}
        return {"status": "healthy", "type": self.kind}

    def dispose(self):
        self.engine.dispose()
        self.ready = False
