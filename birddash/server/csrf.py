"""
csrf.py
-------
Double-submit CSRF protection backed by the signed session cookie.

The token lives in ``request.session`` (Starlette SessionMiddleware) and
must be echoed in the ``x-csrf-token`` header on unsafe methods.
"""

import secrets

from fastapi import APIRouter, HTTPException, Request

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.security import generate_csrf_token


SAFE_METHODS = ("GET", "HEAD", "OPTIONS")
SESSION_KEY = "csrf_token"
HEADER_NAME = "x-csrf-token"

router = APIRouter()


def ensure_token(request: Request) -> str:
    token = request.session.get(SESSION_KEY)
    if not token:
        token = generate_csrf_token()
        request.session[SESSION_KEY] = token
    return token


def verify_csrf(request: Request):
    """
    Dependency applied to every API router.

    Raises:
        HTTPException: 403 CSRF_INVALID when the header and session disagree
    """
    if not request.app.state.settings.enable_csrf or request.method in SAFE_METHODS:
        return
    header_token = request.headers.get(HEADER_NAME)
    session_token = request.session.get(SESSION_KEY)
    if not header_token or not session_token or not secrets.compare_digest(header_token, session_token):
        DebugLogger.warn(f"CSRF check failed on {request.method} {request.url.path}", category="security")
        raise HTTPException(
            status_code=403,
            detail={"error": "CSRF token missing or invalid", "code": "CSRF_INVALID"},
        )


@router.get("/api/csrf-token")
def get_csrf_token(request: Request):
    token = ensure_token(request)
    return {"csrfToken": token}
