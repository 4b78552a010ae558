"""
users.py
--------
User profiles, post-game stat aggregation and achievements.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import IntegrityError

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.database import LeaderboardEntry, User, UserAchievement
from birddash.server.dependencies import get_db
from birddash.server.routes.leaderboard import rank_of
from birddash.server.schemas import GameComplete


router = APIRouter(prefix="/api/users", tags=["users"])


# ===========================================================
# Achievements
# ===========================================================

ACHIEVEMENTS = {
    "first_game": {
        "name": "First Flight", "description": "Play your first game", "icon": "🐦",
        "check": lambda g: g["total_games"] == 1,
    },
    "score_1000": {
        "name": "Coffee Connoisseur", "description": "Score 1000 points", "icon": "☕",
        "check": lambda g: g["score"] >= 1000,
    },
    "score_5000": {
        "name": "Barista Master", "description": "Score 5000 points", "icon": "👨‍🍳",
        "check": lambda g: g["score"] >= 5000,
    },
    "games_10": {
        "name": "Regular Customer", "description": "Play 10 games", "icon": "🎮",
        "check": lambda g: g["total_games"] >= 10,
    },
    "games_50": {
        "name": "Coffee Addict", "description": "Play 50 games", "icon": "🏆",
        "check": lambda g: g["total_games"] >= 50,
    },
    "collector_100": {
        "name": "Collector", "description": "Collect 100 items in one game", "icon": "📦",
        "check": lambda g: g["collectibles_collected"] >= 100,
    },
    "distance_10000": {
        "name": "Long Distance Flyer", "description": "Travel 10,000 units", "icon": "✈️",
        "check": lambda g: g["distance_traveled"] >= 10000,
    },
}


def achievement_meta(achievement_id):
    meta = ACHIEVEMENTS.get(achievement_id, {})
    return {k: v for k, v in meta.items() if k != "check"}


def check_achievements(db, user_id, game_data):
    """
    Unlock every achievement whose condition holds. Already-unlocked
    achievements are left alone.

    Returns:
        list[str]: IDs unlocked by this call
    """
    owned = {row.achievement_id for row in
             db.query(UserAchievement.achievement_id).filter(UserAchievement.user_id == user_id)}
    unlocked = []
    for achievement_id, meta in ACHIEVEMENTS.items():
        if achievement_id in owned or not meta["check"](game_data):
            continue
        db.add(UserAchievement(user_id=user_id, achievement_id=achievement_id))
        try:
            db.commit()
        except IntegrityError:
            # Unlocked concurrently
            db.rollback()
            continue
        unlocked.append(achievement_id)
        DebugLogger.action(f"User {user_id} unlocked achievement: {meta['name']}", category="server")
    return unlocked


def _get_user(db, username):
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _achievements_for(db, user_id):
    return (db.query(UserAchievement)
            .filter(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.unlocked_at.desc())
            .all())


# ===========================================================
# Routes
# ===========================================================

@router.get("/{username}")
def get_profile(username: str = Path(min_length=1, max_length=50), db=Depends(get_db)):
    user = _get_user(db, username)

    recent = (db.query(LeaderboardEntry)
              .filter(LeaderboardEntry.username == username)
              .order_by(LeaderboardEntry.game_date.desc())
              .limit(10).all())
    recent_games = [dict(row.to_dict(), rank=rank_of(db, row.score)) for row in recent]

    games = user.total_games_played or 0
    total_score = user.total_score or 0
    return {
        "user": {
            "username": user.username,
            "created_at": user.created_at.isoformat() if user.created_at else None,
            "is_guest": bool(user.is_guest),
            "stats": {
                "total_games_played": games,
                "total_score": total_score,
                "best_score": user.best_score or 0,
                "total_time_played": user.total_time_played or 0,
                "favorite_collectible": user.favorite_collectible,
                "average_score": round(total_score / games) if games > 0 else 0,
            },
        },
        "recent_games": recent_games,
        "achievements": [a.to_dict() for a in _achievements_for(db, user.id)],
    }


@router.post("/{username}/game-complete")
def game_complete(body: GameComplete, username: str = Path(min_length=1, max_length=50),
                  db=Depends(get_db)):
    user = _get_user(db, username)

    user.total_games_played = (user.total_games_played or 0) + 1
    user.total_score = (user.total_score or 0) + body.score
    user.best_score = max(user.best_score or 0, body.score)
    user.total_time_played = (user.total_time_played or 0) + body.time_played
    user.updated_at = datetime.utcnow()
    db.commit()

    new_achievements = check_achievements(db, user.id, {
        "score": body.score,
        "total_games": user.total_games_played,
        "best_score": user.best_score,
        "collectibles_collected": body.collectibles_collected,
        "distance_traveled": body.distance_traveled,
    })

    return {
        "message": "User stats updated successfully",
        "stats": {
            "total_games_played": user.total_games_played,
            "total_score": user.total_score,
            "best_score": user.best_score,
            "total_time_played": user.total_time_played,
            "average_score": round(user.total_score / user.total_games_played),
        },
        "new_achievements": new_achievements,
    }


@router.get("/{username}/achievements")
def get_achievements(username: str = Path(min_length=1, max_length=50), db=Depends(get_db)):
    user = _get_user(db, username)
    achievements = [
        dict(row.to_dict(), **achievement_meta(row.achievement_id), id=row.achievement_id)
        for row in _achievements_for(db, user.id)
    ]
    return {
        "username": username,
        "achievements": achievements,
        "total_achievements": len(achievements),
    }
