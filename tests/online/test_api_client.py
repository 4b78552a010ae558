"""
test_api_client.py
------------------
ApiClient transport, auth state and offline fallback, with a mocked
requests session.
"""

import json

import pytest
import requests
from unittest.mock import MagicMock

from birddash.online.api_client import ApiClient, ApiError, OfflineStore


def make_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def store(tmp_path):
    return OfflineStore(str(tmp_path / "offline_scores.json"))


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session, store):
    api = ApiClient(base_url="http://api.test/api/", enabled=True, session=session, offline_store=store)
    api._csrf_token = "csrf-token"
    return api


# ===========================================================
# Offline Store
# ===========================================================

class TestOfflineStore:

    def test_scores_are_ranked_by_score(self, store):
        store.save_score({"score": 100, "username": "a"})
        result = store.save_score({"score": 300, "username": "b"})
        assert result["rank"] == 1
        assert result["offline"] is True

        board = store.leaderboard()
        assert [row["score"] for row in board["leaderboard"]] == [300, 100]
        assert [row["rank"] for row in board["leaderboard"]] == [1, 2]

    def test_only_top_fifty_are_kept(self, store):
        for score in range(60):
            store.save_score({"score": score})
        scores = store.load()
        assert len(scores) == 50
        assert min(s["score"] for s in scores) == 10

    def test_corrupt_file_reads_as_empty(self, store):
        with open(store.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        assert store.load() == []

    def test_file_is_json_list(self, store):
        store.save_score({"score": 5})
        with open(store.path, encoding="utf-8") as f:
            assert isinstance(json.load(f), list)


# ===========================================================
# Transport
# ===========================================================

class TestRequest:

    def test_builds_url_and_auth_header(self, client, session):
        session.request.return_value = make_response(body={"ok": True})
        client.token = "jwt"

        assert client.request("GET", "/leaderboard") == {"ok": True}

        method, url = session.request.call_args.args
        headers = session.request.call_args.kwargs["headers"]
        assert (method, url) == ("GET", "http://api.test/api/leaderboard")
        assert headers["Authorization"] == "Bearer jwt"
        assert "X-CSRF-Token" not in headers

    def test_unsafe_methods_carry_csrf_header(self, client, session):
        session.request.return_value = make_response(201, {"rank": 1})
        client.request("POST", "/leaderboard/submit", {"score": 1})
        assert session.request.call_args.kwargs["headers"]["X-CSRF-Token"] == "csrf-token"

    def test_csrf_token_fetched_once(self, session, store):
        api = ApiClient(base_url="http://api.test/api", enabled=True, session=session, offline_store=store)
        session.request.side_effect = [
            make_response(body={"csrfToken": "abc"}),
            make_response(body={}),
            make_response(body={}),
        ]
        api.request("POST", "/auth/logout")
        api.request("POST", "/auth/logout")

        urls = [c.args[1] for c in session.request.call_args_list]
        assert urls.count("http://api.test/api/csrf-token") == 1

    def test_error_status_raises_api_error(self, client, session):
        session.request.return_value = make_response(409, {"error": "Username already taken"})
        with pytest.raises(ApiError) as exc:
            client.request("POST", "/auth/guest", {"username": "taken"})
        assert exc.value.status_code == 409
        assert exc.value.message == "Username already taken"


# ===========================================================
# Features
# ===========================================================

class TestFeatures:

    def test_guest_sign_in_stores_token(self, client, session):
        session.request.return_value = make_response(201, {
            "user": {"id": 3, "username": "Finch", "is_guest": True}, "token": "jwt",
        })
        client.create_guest_user("Finch")
        assert client.token == "jwt"
        assert client.is_authenticated

    def test_guest_sign_in_offline(self, client, session):
        session.request.side_effect = requests.ConnectionError("down")
        result = client.create_guest_user("Finch")
        assert result["offline"] is True
        assert client.current_user["username"] == "Finch"
        assert client.token is None

    def test_submit_adds_identity(self, client, session):
        client.current_user = {"id": 9, "username": "Finch", "is_guest": False}
        session.request.return_value = make_response(201, {"rank": 4})

        assert client.submit_score({"score": 500, "time_played": 30})["rank"] == 4
        payload = session.request.call_args.kwargs["json"]
        assert payload["username"] == "Finch"
        assert payload["is_guest"] is False
        assert payload["user_id"] == 9

    def test_submit_falls_back_offline(self, client, session, store):
        session.request.side_effect = requests.ConnectionError("down")
        result = client.submit_score({"score": 500, "username": "Finch"})
        assert result["offline"] is True
        assert store.load()[0]["score"] == 500

    def test_disabled_client_never_touches_network(self, session, store):
        api = ApiClient(enabled=False, session=session, offline_store=store)
        board = api.get_leaderboard()
        assert board["offline"] is True
        session.request.assert_not_called()

    def test_failed_verification_clears_auth(self, client, session):
        client.token = "stale"
        client.current_user = {"id": 1}
        session.request.return_value = make_response(401, {"error": "Invalid or expired token"})

        assert client.verify_token() is None
        assert client.token is None
        assert not client.is_authenticated

    def test_health_reports_offline_on_network_error(self, client, session):
        session.request.side_effect = requests.Timeout("slow")
        assert client.check_health()["status"] == "OFFLINE"

    def test_async_run_returns_future(self, client, session):
        session.request.return_value = make_response(201, {"rank": 2})
        future = client.run_async(client.submit_score, {"score": 10})
        assert future.result(timeout=5)["rank"] == 2
        client.shutdown()


# ===========================================================
# Server Errors
# ===========================================================

class TestServerErrors:

    @pytest.mark.parametrize("status", [429, 403, 500])
    def test_rejected_submit_is_kept_offline(self, client, session, store, status):
        session.request.return_value = make_response(status, {"error": "nope"})
        result = client.submit_score({"score": 750, "username": "Finch"})
        assert result["offline"] is True
        assert store.load()[0]["score"] == 750

    def test_failing_leaderboard_serves_local_board(self, client, session, store):
        store.save_score({"score": 40, "username": "Robin"})
        session.request.return_value = make_response(500, {"error": "Database error"})
        board = client.get_leaderboard()
        assert board["offline"] is True
        assert board["leaderboard"][0]["username"] == "Robin"

    def test_other_calls_still_raise(self, client, session):
        session.request.return_value = make_response(404, {"error": "User not found"})
        with pytest.raises(ApiError):
            client.get_user_profile("ghost")


# ===========================================================
# Session & End of Run
# ===========================================================

class TestConnect:

    def test_unhealthy_backend_goes_offline(self, client, session):
        session.request.return_value = make_response(503, {"status": "degraded"})
        assert client.connect("Finch") is False
        assert client.enabled is False

    def test_healthy_backend_signs_in_guest(self, client, session):
        session.request.side_effect = [
            make_response(body={"status": "healthy"}),
            make_response(201, {"user": {"id": 3, "username": "Finch", "is_guest": True}, "token": "jwt"}),
        ]
        assert client.connect("Finch") is True
        assert client.token == "jwt"

    def test_stored_token_is_verified_instead(self, client, session):
        client.token = "jwt"
        session.request.side_effect = [
            make_response(body={"status": "healthy"}),
            make_response(body={"valid": True, "user": {"id": 3, "username": "Finch"}}),
        ]
        assert client.connect("Finch") is True
        assert [c.args[1] for c in session.request.call_args_list][-1].endswith("/auth/verify")

    def test_taken_guest_name_stays_online(self, client, session):
        session.request.side_effect = [
            make_response(body={"status": "healthy"}),
            make_response(409, {"error": "Username already taken"}),
        ]
        assert client.connect("Finch") is True
        assert not client.is_authenticated

    def test_disabled_client_skips_probe(self, session, store):
        api = ApiClient(enabled=False, session=session, offline_store=store)
        assert api.connect("Finch") is False
        session.request.assert_not_called()


class TestRecordRun:

    def test_online_run_updates_stats_and_fetches_board(self, client, session):
        client.current_user = {"id": 3, "username": "Finch", "is_guest": True}
        session.request.side_effect = [
            make_response(201, {"entry_id": 7, "rank": 1}),
            make_response(body={"message": "User stats updated successfully"}),
            make_response(body={"leaderboard": [{"id": 7, "username": "Finch", "score": 900, "rank": 1}]}),
        ]

        result = client.record_run({"score": 900, "time_played": 40, "username": "Finch"})

        assert result["rank"] == 1
        assert result["leaderboard"][0]["id"] == 7
        urls = [c.args[1] for c in session.request.call_args_list]
        assert urls[1].endswith("/users/Finch/game-complete")
        assert session.request.call_args.kwargs["params"]["limit"] == 20

    def test_anonymous_run_skips_stats(self, client, session):
        session.request.side_effect = [
            make_response(201, {"entry_id": 7, "rank": 3}),
            make_response(body={"leaderboard": []}),
        ]
        client.record_run({"score": 10, "time_played": 2})
        urls = [c.args[1] for c in session.request.call_args_list]
        assert not any("game-complete" in url for url in urls)

    def test_stats_failure_does_not_lose_the_board(self, client, session):
        client.current_user = {"id": 3, "username": "Finch", "is_guest": True}
        session.request.side_effect = [
            make_response(201, {"entry_id": 7, "rank": 2}),
            make_response(401, {"error": "Access token required"}),
            make_response(body={"leaderboard": [{"id": 7, "score": 10}]}),
        ]
        assert client.record_run({"score": 10, "time_played": 2})["leaderboard"][0]["id"] == 7

    def test_server_error_gives_local_board(self, client, session, store):
        session.request.return_value = make_response(500, {"error": "Database error"})
        result = client.record_run({"score": 300, "username": "Finch", "time_played": 9})

        assert result["offline"] is True
        assert result["leaderboard"][0]["id"] == result["entry_id"]
        assert session.request.call_count == 1


# ===========================================================
# Endpoint Paths
# ===========================================================

class TestEndpoints:

    @pytest.mark.parametrize("call, method, path", [
        (lambda c: c.get_user_scores("Night Owl"), "GET", "/leaderboard/user/Night%20Owl"),
        (lambda c: c.get_leaderboard_stats(), "GET", "/leaderboard/stats"),
        (lambda c: c.get_user_profile("Finch"), "GET", "/users/Finch"),
        (lambda c: c.get_user_achievements("Finch"), "GET", "/users/Finch/achievements"),
        (lambda c: c.update_game_stats("Finch", {"score": 5, "time_played": 1}),
         "POST", "/users/Finch/game-complete"),
    ])
    def test_paths(self, client, session, call, method, path):
        session.request.return_value = make_response(body={})
        call(client)
        assert session.request.call_args.args == (method, "http://api.test/api" + path)

    def test_profile_offline_reports_limited_mode(self, client, session):
        session.request.side_effect = requests.ConnectionError("down")
        assert client.get_user_profile("Finch")["offline"] is True
