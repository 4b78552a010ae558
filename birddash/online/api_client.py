"""
api_client.py
-------------
HTTP client for the BirdDash backend, built on ``requests``.

Responsibilities
----------------
- Startup health probe, guest sign-in, token verification and logout
- Leaderboard reads, score submission and the end-of-run report
- User profile, game-complete stats and achievements
- Offline fallback: when the backend is unreachable or rejects a score,
  scores are kept in a local JSON file and the leaderboard is served from it
"""

import json
import os
import time
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import quote

import requests

from birddash.core.debug.debug_logger import DebugLogger


DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT = 5.0
OFFLINE_KEEP = 50
SAFE_METHODS = ("GET", "HEAD", "OPTIONS")
CSRF_HEADER = "X-CSRF-Token"


class ApiError(Exception):
    """The backend answered with an error status."""

    def __init__(self, status_code, message):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


# ===========================================================
# Offline Storage
# ===========================================================

class OfflineStore:
    """Top-50 score list persisted as JSON."""

    def __init__(self, path=None):
        if path is None:
            data_dir = os.getenv("BIRDDASH_DATA_DIR", os.path.join(os.path.expanduser("~"), ".birddash"))
            path = os.path.join(data_dir, "offline_scores.json")
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                scores = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            DebugLogger.warn(f"Offline scores unreadable: {e}", category="online")
            return []
        return scores if isinstance(scores, list) else []

    def save_score(self, score_data):
        """
        Insert a score, keep the best 50 and report its rank.

        Returns:
            dict: Same shape as the submit endpoint's response, plus ``offline``
        """
        now_ms = int(time.time() * 1000)
        scores = self.load()
        entry = dict(score_data, id=now_ms, game_date=time.strftime("%Y-%m-%dT%H:%M:%S"))
        scores.append(entry)
        scores.sort(key=lambda s: s.get("score", 0), reverse=True)
        scores = scores[:OFFLINE_KEEP]

        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(scores, f, indent=2)
        except OSError as e:
            DebugLogger.warn(f"Failed to save score offline: {e}", category="online")
            return {"error": "Failed to save offline", "offline": True}

        rank = next((i + 1 for i, s in enumerate(scores) if s.get("id") == now_ms), len(scores) + 1)
        return {
            "message": "Score saved offline",
            "entry_id": now_ms,
            "rank": rank,
            "score": score_data.get("score", 0),
            "username": score_data.get("username"),
            "offline": True,
        }

    def leaderboard(self, limit=20):
        scores = self.load()
        return {
            "leaderboard": [dict(s, rank=i + 1) for i, s in enumerate(scores[:limit])],
            "pagination": {"total": len(scores), "limit": limit, "offset": 0, "hasMore": False},
            "timeframe": "all",
            "offline": True,
        }


# ===========================================================
# API Client
# ===========================================================

class ApiClient:
    """Thin wrapper over the REST API with offline degradation."""

    def __init__(self, base_url=None, enabled=None, timeout=DEFAULT_TIMEOUT,
                 session=None, offline_store=None):
        """
        Args:
            base_url: API root (defaults to BIRDDASH_API_URL)
            enabled: Whether to talk to the network at all (defaults to BIRDDASH_ONLINE)
            timeout: Per-request timeout in seconds
            session: Optional requests.Session (tests inject a mock)
            offline_store: Optional OfflineStore
        """
        self.base_url = (base_url or os.getenv("BIRDDASH_API_URL", DEFAULT_API_URL)).rstrip("/")
        if enabled is None:
            enabled = os.getenv("BIRDDASH_ONLINE", "0").lower() in ("1", "true", "yes")
        self.enabled = enabled
        self.timeout = timeout
        self.session = session or requests.Session()
        self.offline = offline_store or OfflineStore()
        self.current_user = None
        self.token = None
        self._csrf_token = None
        self._executor = None

        DebugLogger.init_entry("ApiClient", "ONLINE" if enabled else "OFFLINE")
        DebugLogger.init_sub(f"Base URL {self.base_url}")

    # ===========================================================
    # Transport
    # ===========================================================

    def request(self, method, endpoint, payload=None, params=None):
        """
        Perform one JSON request.

        Raises:
            ApiError: Backend replied with a 4xx/5xx status
            requests.RequestException: Network failure
        """
        url = f"{self.base_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if method not in SAFE_METHODS:
            headers[CSRF_HEADER] = self._get_csrf_token()

        DebugLogger.trace(f"{method} {url}", category="online")
        response = self.session.request(
            method, url, json=payload, params=params, headers=headers, timeout=self.timeout
        )

        if response.status_code >= 400:
            try:
                message = response.json().get("error", f"HTTP {response.status_code}")
            except ValueError:
                message = f"HTTP {response.status_code}"
            raise ApiError(response.status_code, message)
        return response.json()

    def _get_csrf_token(self):
        """Fetch the session-bound CSRF token once per session."""
        if self._csrf_token is None:
            self._csrf_token = self.request("GET", "/csrf-token").get("csrfToken", "")
        return self._csrf_token

    def _request_or_offline(self, method, endpoint, payload=None, params=None):
        """
        Request online, degrading to the local store.

        Network failures always degrade. Error statuses (rate limit, CSRF,
        database down) degrade only for calls with a local counterpart,
        so a finished run is never lost.
        """
        if not self.enabled:
            return self._offline_response(method, endpoint, payload, params)
        try:
            return self.request(method, endpoint, payload, params)
        except requests.RequestException as e:
            DebugLogger.warn(f"{endpoint} unreachable ({e}), using offline mode", category="online")
        except ApiError as e:
            if not self._has_offline_copy(method, endpoint):
                raise
            DebugLogger.warn(f"{endpoint} failed ({e.status_code} {e.message}), using offline mode",
                             category="online")
        return self._offline_response(method, endpoint, payload, params)

    @staticmethod
    def _has_offline_copy(method, endpoint):
        return (method, endpoint) in (("POST", "/leaderboard/submit"), ("GET", "/leaderboard"))

    def _offline_response(self, method, endpoint, payload, params):
        if endpoint.startswith("/leaderboard/submit") and method == "POST":
            return self.offline.save_score(payload or {})
        if endpoint == "/leaderboard" and method == "GET":
            return self.offline.leaderboard((params or {}).get("limit", 20))
        return {"error": "Offline mode - limited functionality", "offline": True}

    def run_async(self, fn, *args):
        """Run a client call on the worker thread so the frame loop never blocks on the network."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="birddash-api")
        return self._executor.submit(fn, *args)

    # ===========================================================
    # Session
    # ===========================================================

    def connect(self, username):
        """
        Probe the backend once at startup and sign in.

        An unhealthy backend switches the client to offline mode for the
        rest of the session. A stored token is verified; without one the
        player signs in as a guest.

        Returns:
            bool: True if the client is online
        """
        if not self.enabled:
            return False
        health = self.check_health()
        if health.get("status") != "healthy":
            DebugLogger.warn("Backend unhealthy, leaderboard is local only", category="online")
            self.enabled = False
            return False

        if self.token and self.verify_token():
            return True
        try:
            self.create_guest_user(username)
        except ApiError as e:
            DebugLogger.warn(f"Guest sign-in rejected: {e.message}", category="online")
        return True

    # ===========================================================
    # Authentication
    # ===========================================================

    def create_guest_user(self, username):
        """Sign in as a guest; falls back to a local-only guest identity."""
        try:
            if not self.enabled:
                raise requests.ConnectionError("online mode disabled")
            response = self.request("POST", "/auth/guest", {"username": username})
        except requests.RequestException as e:
            DebugLogger.warn(f"Guest sign-in offline: {e}", category="online")
            self.current_user = {
                "id": int(time.time() * 1000), "username": username,
                "is_guest": True, "offline": True,
            }
            return {"message": "Guest user created (offline mode)", "user": self.current_user, "offline": True}

        self.current_user = response.get("user")
        self.token = response.get("token")
        DebugLogger.state(f"Signed in as guest '{username}'", category="online")
        return response

    def verify_token(self):
        """
        Returns:
            dict | None: The verified user, or None (auth is cleared on failure)
        """
        if not self.enabled:
            return None
        try:
            response = self.request("GET", "/auth/verify")
        except (ApiError, requests.RequestException) as e:
            DebugLogger.action(f"Token verification failed: {e}", category="online")
            self.clear_auth()
            return None
        if response.get("valid"):
            self.current_user = response.get("user")
            return self.current_user
        return None

    def clear_auth(self):
        if self.enabled:
            try:
                self.request("POST", "/auth/logout")
            except (ApiError, requests.RequestException) as e:
                DebugLogger.warn(f"Logout request failed: {e}", category="online")
        self.current_user = None
        self.token = None
        self._csrf_token = None
        self.session.cookies.clear()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    # ===========================================================
    # Leaderboard
    # ===========================================================

    def get_leaderboard(self, limit=20, offset=0, timeframe="all"):
        return self._request_or_offline(
            "GET", "/leaderboard", params={"limit": limit, "offset": offset, "timeframe": timeframe}
        )

    def submit_score(self, score_data):
        """
        Submit a finished run.

        Args:
            score_data: GameState.summary() plus ``username``
        """
        user = self.current_user or {}
        payload = dict(score_data)
        payload.setdefault("username", user.get("username", "Guest"))
        payload["is_guest"] = user.get("is_guest", True)
        if user.get("id") is not None and not user.get("offline"):
            payload["user_id"] = user["id"]
        return self._request_or_offline("POST", "/leaderboard/submit", payload)

    def record_run(self, score_data, limit=20):
        """
        Everything that happens online when a run ends.

        Submits the score, updates the signed-in player's stats and fetches
        the leaderboard to show. Offline results come with the local board.

        Returns:
            dict: The submit response plus ``leaderboard`` (list of rows)
        """
        result = self.submit_score(score_data)

        if result.get("offline"):
            board = self.offline.leaderboard(limit)
        else:
            if self.is_authenticated and not self.current_user.get("offline"):
                username = self.current_user.get("username", score_data.get("username"))
                try:
                    self.update_game_stats(username, score_data)
                except ApiError as e:
                    DebugLogger.warn(f"Stats update failed: {e.message}", category="online")
            board = self.get_leaderboard(limit)

        return dict(result, leaderboard=board.get("leaderboard", []))

    def get_user_scores(self, username, limit=10):
        return self._request_or_offline("GET", f"/leaderboard/user/{quote(username)}", params={"limit": limit})

    def get_leaderboard_stats(self):
        return self._request_or_offline("GET", "/leaderboard/stats")

    # ===========================================================
    # Users
    # ===========================================================

    def get_user_profile(self, username):
        return self._request_or_offline("GET", f"/users/{quote(username)}")

    def update_game_stats(self, username, game_data):
        return self._request_or_offline("POST", f"/users/{quote(username)}/game-complete", game_data)

    def get_user_achievements(self, username):
        return self._request_or_offline("GET", f"/users/{quote(username)}/achievements")

    # ===========================================================
    # Health
    # ===========================================================

    def check_health(self):
        if not self.enabled:
            return {"status": "OFFLINE", "error": "online mode disabled"}
        try:
            return self.request("GET", "/health")
        except (ApiError, requests.RequestException) as e:
            DebugLogger.warn(f"API health check failed: {e}", category="online")
            return {"status": "OFFLINE", "error": str(e)}

    def shutdown(self):
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
