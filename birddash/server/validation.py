"""
validation.py
-------------
Input sanitisation and rule-based validators for usernames, emails,
passwords, scores and free-form game stats.

Each validator returns a ValidationResult instead of raising, so callers
can collect every error for a field.
"""

import re
from dataclasses import dataclass, field
from typing import List

from birddash.core.debug.debug_logger import DebugLogger


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
RESERVED_NAMES = ("admin", "root", "system", "null", "undefined")

MAX_SCORE = 1_000_000
SUSPICIOUS_SCORE = 100_000

GAME_STAT_KEYS = frozenset({
    "distance", "collectibles", "powerUpsUsed", "obstacles",
    "playtime", "maxCombo", "deaths", "level",
})

_SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_URL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

_SQL_PATTERNS = (
    re.compile(r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION)\b", re.IGNORECASE),
    re.compile(r"(--|/\*|\*/)"),
    re.compile(r"\b(OR|AND)\b.*=.*", re.IGNORECASE),
    re.compile(r"['\"`;]"),
)


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add(self, message: str):
        self.valid = False
        self.errors.append(message)


# ===========================================================
# Sanitisation
# ===========================================================

def sanitize_input(value):
    """Strip script tags, javascript: URLs and inline event handlers."""
    if not isinstance(value, str):
        return value
    value = _SCRIPT_TAG.sub("", value)
    value = _JS_URL.sub("", value)
    value = _EVENT_HANDLER.sub("", value)
    return value.strip()


def detect_sql_injection(value) -> bool:
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) for pattern in _SQL_PATTERNS)


# ===========================================================
# Field Validators
# ===========================================================

def validate_username(username) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(username, str):
        result.add("Username must be a string")
        return result

    username = username.strip()
    if not 3 <= len(username) <= 30:
        result.add("Username must be 3-30 characters")
    if not USERNAME_PATTERN.match(username):
        result.add("Username can only contain letters, numbers, underscores, and hyphens")
    lowered = username.lower()
    if any(word in lowered for word in RESERVED_NAMES):
        result.add("Username contains inappropriate content")
    return result


def validate_email(email) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
        result.add("Valid email required")
        return result
    if len(email.strip()) > 254:
        result.add("Email too long")
    return result


def validate_password(password) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(password, str):
        result.add("Password must be a string")
        return result

    if not 8 <= len(password) <= 128:
        result.add("Password must be 8-128 characters")
    if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password)
            and re.search(r"\d", password)):
        result.add("Password must contain at least one lowercase letter, "
                   "one uppercase letter, and one number")
    return result


def validate_score(score) -> ValidationResult:
    result = ValidationResult()
    if isinstance(score, bool) or not isinstance(score, int):
        result.add("Score must be an integer")
        return result
    if not 0 <= score <= MAX_SCORE:
        result.add("Score must be between 0 and 1,000,000")
    elif score > SUSPICIOUS_SCORE:
        DebugLogger.warn(f"Suspicious high score submitted: {score}", category="security")
    return result


def validate_game_stats(stats) -> ValidationResult:
    result = ValidationResult()
    if stats is None:
        return result
    if not isinstance(stats, dict):
        result.add("Game stats must be an object")
        return result

    for key, value in stats.items():
        if key not in GAME_STAT_KEYS:
            result.add(f"Invalid game stat key: {key}")
        elif isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            result.add(f"Game stat {key} must be a non-negative number")
    return result
