"""
schemas.py
----------
Request bodies for the REST API (pydantic).

String fields are sanitised before length checks run, and the stricter
account rules delegate to birddash.server.validation.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from birddash.server.validation import (
    sanitize_input, validate_email, validate_game_stats, validate_password, validate_score,
    validate_username,
)


def _clean(value):
    return sanitize_input(value) if isinstance(value, str) else value


def _raise_on(result):
    if not result.valid:
        raise ValueError("; ".join(result.errors))


# ===========================================================
# Auth
# ===========================================================

class GuestRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize_username(cls, value):
        return _clean(value)


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str

    @field_validator("username", mode="before")
    @classmethod
    def sanitize_username(cls, value):
        return _clean(value)

    @field_validator("username")
    @classmethod
    def username_rules(cls, value):
        _raise_on(validate_username(value))
        return value

    @field_validator("email")
    @classmethod
    def email_length(cls, value):
        _raise_on(validate_email(value))
        return value

    @field_validator("password")
    @classmethod
    def password_rules(cls, value):
        _raise_on(validate_password(value))
        return value


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize_username(cls, value):
        return _clean(value)


# ===========================================================
# Leaderboard / Users
# ===========================================================

class ScoreSubmission(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    score: int = Field(ge=0)
    time_played: int = Field(ge=0)
    collectibles_collected: int = Field(0, ge=0)
    power_ups_collected: int = Field(0, ge=0)
    distance_traveled: int = Field(0, ge=0)
    max_combo: int = Field(0, ge=0)
    is_guest: bool = True
    user_id: Optional[int] = None
    game_stats: Optional[dict] = Field(None, alias="gameStats")

    model_config = {"populate_by_name": True}

    @field_validator("username", mode="before")
    @classmethod
    def sanitize_username(cls, value):
        return _clean(value)

    @field_validator("score")
    @classmethod
    def score_range(cls, value):
        _raise_on(validate_score(value))
        return value

    @field_validator("game_stats")
    @classmethod
    def stats_keys(cls, value):
        _raise_on(validate_game_stats(value))
        return value


class GameComplete(BaseModel):
    score: int = Field(ge=0)
    time_played: int = Field(ge=0)
    collectibles_collected: int = Field(0, ge=0)
    distance_traveled: int = Field(0, ge=0)
