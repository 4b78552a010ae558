"""
test_user_routes.py
-------------------
Profiles, game-complete aggregation and achievements.
"""

import pytest

from birddash.server.database import User
from birddash.server.routes.users import ACHIEVEMENTS, achievement_meta


@pytest.fixture
def guest(client):
    return client.post("/api/auth/guest", json={"username": "Finch"}).json()["user"]


def complete(client, username="Finch", score=100, time_played=30, **extra):
    body = {"score": score, "time_played": time_played}
    body.update(extra)
    return client.post(f"/api/users/{username}/game-complete", json=body)


class TestProfile:

    def test_unknown_user(self, client):
        response = client.get("/api/users/ghost")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_new_profile_has_zeroed_stats(self, client, guest):
        data = client.get("/api/users/Finch").json()
        stats = data["user"]["stats"]
        assert data["user"]["is_guest"] is True
        assert stats["total_games_played"] == 0
        assert stats["average_score"] == 0
        assert data["recent_games"] == []
        assert data["achievements"] == []

    def test_user_row_starts_with_empty_achievement_list(self, app, client, guest):
        db = app.state.database.session()
        try:
            assert db.query(User).filter(User.username == "Finch").one().achievements == "[]"
        finally:
            db.close()

    def test_recent_games_carry_ranks(self, client, guest):
        client.post("/api/leaderboard/submit", json={"username": "Finch", "score": 50, "time_played": 5})
        client.post("/api/leaderboard/submit", json={"username": "Robin", "score": 80, "time_played": 5})

        recent = client.get("/api/users/Finch").json()["recent_games"]
        assert [(g["score"], g["rank"]) for g in recent] == [(50, 2)]


class TestGameComplete:

    def test_stats_accumulate(self, client, guest):
        complete(client, score=100, time_played=30)
        data = complete(client, score=300, time_played=20).json()

        assert data["stats"] == {
            "total_games_played": 2,
            "total_score": 400,
            "best_score": 300,
            "total_time_played": 50,
            "average_score": 200,
        }

    def test_first_game_unlocks_once(self, client, guest):
        assert complete(client).json()["new_achievements"] == ["first_game"]
        assert complete(client).json()["new_achievements"] == []

    def test_score_and_collection_achievements(self, client, guest):
        unlocked = complete(client, score=5200, collectibles_collected=120, distance_traveled=12000)
        assert set(unlocked.json()["new_achievements"]) == {
            "first_game", "score_1000", "score_5000", "collector_100", "distance_10000",
        }

    def test_unknown_user(self, client):
        assert complete(client, username="ghost").status_code == 404

    def test_negative_values_rejected(self, client, guest):
        assert complete(client, score=-1).status_code == 400


class TestAchievements:

    def test_listing_includes_metadata(self, client, guest):
        complete(client, score=1500)
        data = client.get("/api/users/Finch/achievements").json()

        assert data["total_achievements"] == 2
        by_id = {a["id"]: a for a in data["achievements"]}
        assert by_id["score_1000"]["name"] == "Coffee Connoisseur"
        assert by_id["first_game"]["unlocked_at"] is not None
        assert "check" not in by_id["first_game"]

    def test_profile_lists_unlocked(self, client, guest):
        complete(client)
        achievements = client.get("/api/users/Finch").json()["achievements"]
        assert [a["achievement_id"] for a in achievements] == ["first_game"]

    def test_meta_for_unknown_id_is_empty(self):
        assert achievement_meta("nope") == {}

    def test_every_achievement_has_display_fields(self):
        for meta in ACHIEVEMENTS.values():
            assert {"name", "description", "icon", "check"} <= set(meta)
