"""
config.py
---------
Backend settings read from environment variables.

Settings are resolved once and cached; tests call reset_settings() after
patching the environment.
"""

import os

from birddash.core.debug.debug_logger import DebugLogger


APP_VERSION = "1.0.0"

DEFAULT_ORIGINS = (
    "http://localhost:8000",
    "http://localhost:8001",
    "http://localhost:3000",
)

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        DebugLogger.warn(f"{name}={value!r} is not an integer, using {default}", category="server")
        return default


def parse_duration(value, default=7 * 86400) -> int:
    """
    Convert a duration such as "7d", "12h", "30m" or "3600" to seconds.

    Args:
        value: Duration string (bare numbers are seconds)
        default: Returned when the value cannot be parsed

    Returns:
        int: Duration in seconds
    """
    if value is None:
        return default
    text = str(value).strip().lower()
    if text.isdigit():
        return int(text)
    number, unit = text[:-1], text[-1:]
    if unit in _DURATION_UNITS and number.isdigit():
        return int(number) * _DURATION_UNITS[unit]
    DebugLogger.warn(f"Unrecognised duration {value!r}, using {default}s", category="server")
    return default


class Settings:
    """Snapshot of the server environment."""

    def __init__(self):
        self.environment = os.getenv("BIRDDASH_ENV", os.getenv("NODE_ENV", "development")).lower()
        self.port = _env_int("PORT", 3000)
        self.version = APP_VERSION

        # Database
        self.database_type = os.getenv("DATABASE_TYPE", "sqlite").lower()
        self.database_url = os.getenv("DATABASE_URL")
        self.sqlite_filename = os.getenv("SQLITE_FILENAME", os.path.join("database", "birddash.db"))
        self.db_host = os.getenv("DB_HOST", "localhost")
        self.db_port = _env_int("DB_PORT", 5432)
        self.db_name = os.getenv("DB_NAME", "birddash")
        self.db_user = os.getenv("DB_USER", "birddash_user")
        self.db_password = os.getenv("DB_PASSWORD", "")

        # Auth
        self.jwt_secret = os.getenv("JWT_SECRET", "fallback-secret-key")
        self.jwt_expires_in = parse_duration(os.getenv("JWT_EXPIRES_IN", "7d"))
        self.session_secret = os.getenv("SESSION_SECRET", "fallback-session-secret")

        # HTTP
        origins = os.getenv("ALLOWED_ORIGINS")
        self.allowed_origins = (
            [o.strip() for o in origins.split(",") if o.strip()] if origins else list(DEFAULT_ORIGINS)
        )
        self.static_dir = os.getenv("STATIC_DIR")

        # Protection
        self.enable_rate_limit = _env_bool("ENABLE_RATE_LIMIT", True)
        self.enable_csrf = _env_bool("ENABLE_CSRF", self.is_production)
        self.rate_limit_window_ms = _env_int("RATE_LIMIT_WINDOW_MS", 15 * 60 * 1000)
        self.rate_limit_max_requests = _env_int("RATE_LIMIT_MAX_REQUESTS", 100)
        self.auth_limit_window_ms = 15 * 60 * 1000
        self.auth_limit_max_requests = 5
        self.score_limit_window_ms = 60 * 1000
        self.score_limit_max_requests = 10

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL for the configured backend."""
        if self.database_url:
            url = self.database_url
            # Heroku/Railway style URLs
            if url.startswith("postgres://"):
                url = "postgresql://" + url[len("postgres://"):]
            return url
        if self.database_type in ("postgres", "postgresql"):
            return (f"postgresql://{self.db_user}:{self.db_password}"
                    f"@{self.db_host}:{self.db_port}/{self.db_name}")
        return f"sqlite:///{self.sqlite_filename}"


_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
        DebugLogger.init_entry("Server Settings", _settings.environment.upper())
        DebugLogger.init_sub(f"Database: {_settings.database_type}")
        DebugLogger.init_sub(f"CSRF {'on' if _settings.enable_csrf else 'off'}, "
                             f"rate limit {'on' if _settings.enable_rate_limit else 'off'}")
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
