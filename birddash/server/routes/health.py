"""
health.py
---------
Liveness and readiness probes.

/alive and /ping never touch the database; /ready turns 200 once the
tables exist; /api/health reports the database check and returns 503 when
it is degraded.
"""

import time
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse


router = APIRouter(tags=["health"])


@router.get("/api/health")
def api_health(request: Request):
    state = request.app.state
    settings = state.settings
    database = state.database.health_check()
    status = "healthy" if database["status"] == "healthy" else "degraded"

    body = {
        "status": status,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "version": settings.version,
        "environment": settings.environment,
        "port": settings.port,
        "uptime": round(time.monotonic() - state.started_at, 3),
        "database": database,
        "features": {
            "csrf": settings.enable_csrf,
            "rateLimit": settings.enable_rate_limit,
            "staticFiles": state.static_enabled,
        },
    }
    return JSONResponse(body, status_code=200 if status == "healthy" else 503)


@router.get("/health")
def root_health():
    return {"status": "OK", "message": "BirdDash server is running"}


@router.get("/healthz")
def healthz():
    return {"status": "healthy"}


@router.get("/ping", response_class=PlainTextResponse)
def ping():
    return "pong"


@router.get("/alive", response_class=PlainTextResponse)
def alive():
    return "alive"


@router.get("/ready")
def ready(request: Request):
    if request.app.state.database.ready:
        return PlainTextResponse("ready")
    return PlainTextResponse("not ready", status_code=503)
