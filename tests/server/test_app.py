"""
test_app.py
-----------
Health probes, error mapping, CSRF enforcement and settings parsing.
"""

import pytest
from fastapi.testclient import TestClient

from birddash.server.app import create_app
from birddash.server.config import Settings, parse_duration


# ===========================================================
# Health
# ===========================================================

class TestHealth:

    def test_api_health_reports_database(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["status"] == "healthy"
        assert data["environment"] == "test"
        assert data["features"] == {"csrf": False, "rateLimit": False, "staticFiles": False}

    def test_api_health_degraded(self, app, client, monkeypatch):
        monkeypatch.setattr(app.state.database, "health_check",
                            lambda: {"status": "unhealthy", "error": "down"})
        response = client.get("/api/health")
        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    @pytest.mark.parametrize("path, body", [("/ping", "pong"), ("/alive", "alive"), ("/ready", "ready")])
    def test_plain_probes(self, client, path, body):
        response = client.get(path)
        assert response.status_code == 200
        assert response.text == body

    def test_not_ready_until_tables_exist(self, app, client):
        app.state.database.ready = False
        response = client.get("/ready")
        assert response.status_code == 503

    def test_root_health(self, client):
        assert client.get("/health").json() == {"status": "OK", "message": "BirdDash server is running"}
        assert client.get("/healthz").json() == {"status": "healthy"}


# ===========================================================
# Error Mapping
# ===========================================================

class TestErrors:

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_unknown_api_route(self, client, method):
        response = getattr(client, method)("/api/espresso")
        assert response.status_code == 404
        assert response.json() == {"error": "API endpoint not found"}

    def test_malformed_json_is_400(self, client):
        response = client.post("/api/auth/guest", content="{oops",
                               headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert "errors" in response.json()


# ===========================================================
# CSRF
# ===========================================================

@pytest.fixture
def csrf_client(server_settings, fast_hashing):
    server_settings.enable_csrf = True
    app = create_app(server_settings)
    yield TestClient(app)
    app.state.database.dispose()


class TestCsrf:

    def test_unsafe_request_without_token_is_forbidden(self, csrf_client):
        response = csrf_client.post("/api/auth/guest", json={"username": "Finch"})
        assert response.status_code == 403
        assert response.json() == {"error": "CSRF token missing or invalid", "code": "CSRF_INVALID"}

    def test_token_from_session_is_accepted(self, csrf_client):
        token = csrf_client.get("/api/csrf-token").json()["csrfToken"]
        response = csrf_client.post("/api/auth/guest", json={"username": "Finch"},
                                    headers={"X-CSRF-Token": token})
        assert response.status_code == 201

    def test_token_is_stable_per_session(self, csrf_client):
        first = csrf_client.get("/api/csrf-token").json()["csrfToken"]
        assert csrf_client.get("/api/csrf-token").json()["csrfToken"] == first

    def test_wrong_token_is_forbidden(self, csrf_client):
        csrf_client.get("/api/csrf-token")
        response = csrf_client.post("/api/auth/guest", json={"username": "Finch"},
                                    headers={"X-CSRF-Token": "forged"})
        assert response.status_code == 403

    def test_safe_methods_skip_the_check(self, csrf_client):
        assert csrf_client.get("/api/leaderboard").status_code == 200


# ===========================================================
# Settings
# ===========================================================

class TestSettings:

    @pytest.mark.parametrize("value, seconds", [
        ("7d", 604800), ("12h", 43200), ("30m", 1800), ("45s", 45), ("3600", 3600), ("2w", 1209600),
    ])
    def test_parse_duration(self, value, seconds):
        assert parse_duration(value) == seconds

    @pytest.mark.parametrize("value", [None, "soon", "d", "1.5h"])
    def test_parse_duration_falls_back(self, value):
        assert parse_duration(value, default=99) == 99

    def test_heroku_style_url_is_normalised(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/birds")
        assert Settings().sqlalchemy_url == "postgresql://u:p@db:5432/birds"

    def test_postgres_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("DATABASE_TYPE", "postgres")
        monkeypatch.setenv("DB_HOST", "db")
        monkeypatch.setenv("DB_PASSWORD", "pw")
        assert Settings().sqlalchemy_url == "postgresql://birddash_user:pw@db:5432/birddash"

    def test_production_defaults(self, monkeypatch):
        monkeypatch.setenv("BIRDDASH_ENV", "production")
        monkeypatch.delenv("ENABLE_CSRF", raising=False)
        settings = Settings()
        assert settings.is_production
        assert settings.enable_csrf is True

    def test_allowed_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.io, https://b.io,")
        assert Settings().allowed_origins == ["https://a.io", "https://b.io"]

    def test_bad_port_falls_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        assert Settings().port == 3000
