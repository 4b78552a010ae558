"""
security.py
-----------
Password hashing (bcrypt) and token handling (PyJWT, HS256).
"""

import secrets
import string
import time
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt


TOKEN_COOKIE = "birddash_token"
JWT_ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12

_BASE36 = string.digits + string.ascii_lowercase


# ===========================================================
# Passwords
# ===========================================================

def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


# ===========================================================
# Tokens
# ===========================================================

def create_token(user, secret: str, expires_in: int) -> str:
    """
    Issue a signed token for a user row.

    Args:
        user: Object with id, username and is_guest
        secret: HMAC secret
        expires_in: Lifetime in seconds
    """
    now = datetime.now(timezone.utc)
    payload = {
        "id": user.id,
        "username": user.username,
        "is_guest": bool(user.is_guest),
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str) -> dict:
    """
    Raises:
        jwt.PyJWTError: Bad signature, malformed or expired token
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])


def set_token_cookie(response, token: str, max_age: int, secure: bool):
    response.set_cookie(
        TOKEN_COOKIE, token,
        max_age=max_age, httponly=True, secure=secure, samesite="lax",
    )


def clear_token_cookie(response, secure: bool):
    response.delete_cookie(TOKEN_COOKIE, httponly=True, secure=secure, samesite="lax")


# ===========================================================
# Guest IDs / CSRF tokens
# ===========================================================

def generate_guest_id(now_ms=None) -> str:
    """``guest_<epoch ms>_<9 random base36 chars>``"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"guest_{now_ms}_{suffix}"


def generate_csrf_token() -> str:
    return secrets.token_hex(32)
