"""
test_rate_limit.py
------------------
Sliding-window limiter and its 429 responses.
"""

import pytest
from fastapi.testclient import TestClient

from birddash.server.app import create_app
from birddash.server.rate_limit import RateLimiter


class TestRateLimiter:

    def test_allows_up_to_max_then_blocks(self):
        limiter = RateLimiter(window_ms=1000, max_requests=3)
        assert all(limiter.is_allowed("ip", now=t) for t in (0, 10, 20))
        assert limiter.is_allowed("ip", now=30) is False

    def test_window_slides(self):
        limiter = RateLimiter(window_ms=1000, max_requests=2)
        limiter.is_allowed("ip", now=0)
        limiter.is_allowed("ip", now=500)
        assert limiter.is_allowed("ip", now=999) is False
        assert limiter.is_allowed("ip", now=1000)

    def test_keys_are_independent(self):
        limiter = RateLimiter(window_ms=1000, max_requests=1)
        assert limiter.is_allowed("a", now=0)
        assert limiter.is_allowed("b", now=0)

    def test_retry_after_rounds_up(self):
        limiter = RateLimiter(window_ms=60_000, max_requests=1)
        limiter.is_allowed("ip", now=0)
        assert limiter.retry_after("ip", now=30_500) == 30
        assert limiter.retry_after("unknown", now=0) == 0

    def test_idle_clients_are_forgotten(self):
        limiter = RateLimiter(window_ms=1000, max_requests=5)
        for i in range(100):
            limiter.is_allowed(f"10.0.0.{i}", now=0)
        assert limiter.tracked_keys == 100

        limiter.is_allowed("10.0.1.1", now=1000)
        assert limiter.tracked_keys == 1

    def test_active_clients_survive_sweep(self):
        limiter = RateLimiter(window_ms=1000, max_requests=2)
        limiter.is_allowed("ip", now=0)
        limiter.is_allowed("ip", now=900)
        limiter.is_allowed("other", now=1000)
        assert limiter.is_allowed("ip", now=1001)
        assert limiter.is_allowed("ip", now=1002) is False

    def test_reset(self):
        limiter = RateLimiter(window_ms=1000, max_requests=1)
        limiter.is_allowed("ip", now=0)
        limiter.reset()
        assert limiter.is_allowed("ip", now=1)


@pytest.fixture
def limited_client(server_settings, fast_hashing):
    server_settings.enable_rate_limit = True
    app = create_app(server_settings)
    yield TestClient(app)
    app.state.database.dispose()


class TestRateLimitedRoutes:

    def test_login_attempts_are_capped(self, limited_client):
        body = {"username": "nobody", "password": "Wrong1234"}
        statuses = [limited_client.post("/api/auth/login", json=body).status_code for _ in range(6)]
        assert statuses[:5] == [401] * 5
        assert statuses[5] == 429

    def test_429_carries_retry_after(self, limited_client):
        for _ in range(5):
            limited_client.post("/api/auth/login", json={"username": "x", "password": "y"})
        response = limited_client.post("/api/auth/login", json={"username": "x", "password": "y"})

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        assert response.json()["error"] == "Too many authentication attempts, please try again later"

    def test_score_submissions_are_capped(self, limited_client):
        body = {"username": "Finch", "score": 10, "time_played": 5}
        statuses = [limited_client.post("/api/leaderboard/submit", json=body).status_code
                    for _ in range(11)]
        assert statuses.count(201) == 10
        assert statuses[-1] == 429
