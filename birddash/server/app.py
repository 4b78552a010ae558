"""
app.py
------
FastAPI application factory for the BirdDash backend.

Responsibilities
----------------
- Wire CORS, signed sessions (CSRF storage) and per-IP rate limiting
- Register the auth, leaderboard, user, health and CSRF routers
- Map validation, token and unexpected errors to JSON responses
- Optionally serve the game client's static files
"""

import os
import time

import jwt
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server import csrf
from birddash.server.config import get_settings
from birddash.server.database import Database
from birddash.server.dependencies import general_limit
from birddash.server.rate_limit import RateLimiter
from birddash.server.routes import auth, health, leaderboard, users


SESSION_MAX_AGE = 24 * 60 * 60


def create_app(settings=None, database=None) -> FastAPI:
    """
    Build a configured application.

    Args:
        settings: Settings instance (defaults to get_settings())
        database: Database instance (defaults to one built from settings)

    Returns:
        FastAPI: App with tables created and routes registered
    """
    settings = settings or get_settings()
    database = database or Database(settings.sqlalchemy_url)

    DebugLogger.section("BirdDash Server")
    app = FastAPI(title="BirdDash API", version=settings.version)

    app.state.settings = settings
    app.state.database = database
    app.state.started_at = time.monotonic()
    app.state.limiters = {
        "general": RateLimiter(settings.rate_limit_window_ms, settings.rate_limit_max_requests,
                               "Too many requests from this IP, please try again later."),
        "auth": RateLimiter(settings.auth_limit_window_ms, settings.auth_limit_max_requests,
                            "Too many authentication attempts, please try again later"),
        "score": RateLimiter(settings.score_limit_window_ms, settings.score_limit_max_requests,
                             "Too many score submissions, please slow down"),
    }

    _add_middleware(app, settings)
    _add_exception_handlers(app, settings)
    _add_routes(app)
    app.state.static_enabled = _mount_static(app, settings)

    database.init_db()
    DebugLogger.init_entry("FastAPI App")
    DebugLogger.init_sub(f"CORS origins: {', '.join(settings.allowed_origins)}")
    return app


# ===========================================================
# Middleware
# ===========================================================

def _add_middleware(app, settings):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-CSRF-Token"],
        expose_headers=["X-CSRF-Token"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.is_production,
    )


# ===========================================================
# Error Handling
# ===========================================================

def _field_name(loc):
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "request"


def _add_exception_handlers(app, settings):

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = [{"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
                  for err in exc.errors()]
        DebugLogger.action(f"Validation failed on {request.url.path}: {len(errors)} error(s)",
                           category="server")
        return JSONResponse({"errors": errors}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(jwt.PyJWTError)
    async def token_error(request: Request, exc: jwt.PyJWTError):
        return JSONResponse({"error": "Invalid token"}, status_code=401)

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        DebugLogger.fail(f"Database error on {request.url.path}: {exc}", category="database")
        return JSONResponse({"error": "Database error"}, status_code=500)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        DebugLogger.fail(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}", category="server")
        body = {"error": "Internal server error"}
        if not settings.is_production:
            body["message"] = str(exc)
        return JSONResponse(body, status_code=500)


# ===========================================================
# Routes
# ===========================================================

def _add_routes(app):
    api_guards = [Depends(general_limit), Depends(csrf.verify_csrf)]

    app.include_router(csrf.router, dependencies=[Depends(general_limit)])
    app.include_router(auth.router, dependencies=api_guards)
    app.include_router(leaderboard.router, dependencies=api_guards)
    app.include_router(users.router, dependencies=api_guards)
    app.include_router(health.router)

    @app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "DELETE"], include_in_schema=False)
    async def api_not_found(path: str):
        return JSONResponse({"error": "API endpoint not found"}, status_code=404)

    DebugLogger.init_sub(f"Routes: {len(app.routes)} registered")


def _mount_static(app, settings) -> bool:
    """Serve the game client directory at / when STATIC_DIR points at one."""
    if not settings.static_dir:
        return False
    if not os.path.isdir(settings.static_dir):
        DebugLogger.warn(f"STATIC_DIR {settings.static_dir!r} does not exist, not serving files",
                         category="server")
        return False
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    DebugLogger.init_sub(f"Static files from {settings.static_dir}")
    return True
