"""
dependencies.py
---------------
FastAPI dependencies shared by the route modules.

State lives on ``app.state`` (settings, database, limiters) so each app
instance built by create_app() is isolated.
"""

import jwt
from fastapi import Depends, HTTPException, Request

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.database import User
from birddash.server.rate_limit import check_limit
from birddash.server.security import TOKEN_COOKIE, decode_token


def get_settings_dep(request: Request):
    return request.app.state.settings


def get_db(request: Request):
    """Yield a session bound to the app's database, closed after the request."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


# ===========================================================
# Rate Limits
# ===========================================================

def general_limit(request: Request):
    if request.app.state.settings.enable_rate_limit:
        check_limit(request.app.state.limiters["general"], request)


def auth_limit(request: Request):
    if request.app.state.settings.enable_rate_limit:
        check_limit(request.app.state.limiters["auth"], request)


def score_limit(request: Request):
    if request.app.state.settings.enable_rate_limit:
        check_limit(request.app.state.limiters["score"], request)


# ===========================================================
# Authentication
# ===========================================================

def extract_token(request: Request):
    """Bearer header first, then the HTTP-only cookie."""
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(TOKEN_COOKIE)


def get_current_user(request: Request, db=Depends(get_db)) -> User:
    """
    Resolve the signed-in user.

    Raises:
        HTTPException: 401 when the token is missing, invalid, expired or
            points at a deleted user
    """
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        payload = decode_token(token, request.app.state.settings.jwt_secret)
    except jwt.PyJWTError as e:
        DebugLogger.action(f"Rejected token: {e}", category="auth")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.get(User, payload.get("id"))
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user
