"""
leaderboard.py
--------------
Leaderboard reads, score submission and aggregate statistics.

Rank of a score is 1 + the number of entries with a strictly greater
score, so tied scores share a rank.
"""

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.database import LeaderboardEntry
from birddash.server.dependencies import get_db, score_limit
from birddash.server.schemas import ScoreSubmission


router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


def rank_of(db, score: int) -> int:
    higher = db.query(func.count(LeaderboardEntry.id)).filter(LeaderboardEntry.score > score).scalar()
    return (higher or 0) + 1


def timeframe_start(timeframe: str, now=None):
    """Earliest game_date included by a timeframe, or None for "all"."""
    now = now or datetime.utcnow()
    if timeframe == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == "week":
        return now - timedelta(days=7)
    if timeframe == "month":
        return now - timedelta(days=30)
    return None


@router.get("")
def get_leaderboard(limit: int = Query(50, ge=1, le=100),
                    offset: int = Query(0, ge=0),
                    timeframe: str = Query("all", pattern="^(all|today|week|month)$"),
                    db=Depends(get_db)):
    query = db.query(LeaderboardEntry)
    since = timeframe_start(timeframe)
    if since is not None:
        query = query.filter(LeaderboardEntry.game_date >= since)

    total = query.count()
    rows = (query.order_by(LeaderboardEntry.score.desc(), LeaderboardEntry.game_date.asc())
            .offset(offset).limit(limit).all())

    return {
        "leaderboard": [dict(row.to_dict(), rank=offset + i + 1) for i, row in enumerate(rows)],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
        "timeframe": timeframe,
    }


@router.post("/submit", status_code=201, dependencies=[Depends(score_limit)])
def submit_score(body: ScoreSubmission, db=Depends(get_db)):
    entry = LeaderboardEntry(
        user_id=body.user_id,
        username=body.username,
        score=body.score,
        time_played=body.time_played,
        collectibles_collected=body.collectibles_collected,
        power_ups_collected=body.power_ups_collected,
        distance_traveled=body.distance_traveled,
        max_combo=body.max_combo,
        is_guest=body.is_guest,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    rank = rank_of(db, entry.score)
    DebugLogger.action(f"Score {entry.score} by '{entry.username}' ranked #{rank}", category="server")
    return {
        "message": "Score submitted successfully",
        "entry_id": entry.id,
        "rank": rank,
        "score": entry.score,
        "username": entry.username,
    }


@router.get("/user/{username}")
def get_user_scores(username: str, limit: int = Query(10, ge=1, le=50), db=Depends(get_db)):
    rows = (db.query(LeaderboardEntry)
            .filter(LeaderboardEntry.username == username)
            .order_by(LeaderboardEntry.score.desc())
            .limit(limit).all())
    scores = [dict(row.to_dict(), rank=rank_of(db, row.score)) for row in rows]
    return {"username": username, "scores": scores, "total_games": len(scores)}


@router.get("/stats")
def get_stats(db=Depends(get_db)):
    total_games, total_players, highest, average, total_time = db.query(
        func.count(LeaderboardEntry.id),
        func.count(func.distinct(LeaderboardEntry.username)),
        func.max(LeaderboardEntry.score),
        func.avg(LeaderboardEntry.score),
        func.sum(LeaderboardEntry.time_played),
    ).one()
    today_games = (db.query(func.count(LeaderboardEntry.id))
                   .filter(LeaderboardEntry.game_date >= timeframe_start("today"))
                   .scalar())

    return {
        "statistics": {
            "totalGames": total_games or 0,
            "totalPlayers": total_players or 0,
            "highestScore": highest or 0,
            "averageScore": round(average) if average is not None else 0,
            "totalTimePlayed": total_time or 0,
            "todayGames": today_games or 0,
        },
        "generated_at": datetime.utcnow().isoformat() + "Z",
    }
