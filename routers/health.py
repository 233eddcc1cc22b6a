"""
routers/health.py - Service Info and Health Endpoints

- GET /: Service name, version and environment
- GET /health: Database probe with pool statistics and directory size
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

import crud
from database import get_db, get_pool_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/", summary="Service info")
def read_root(request: Request):
    settings = request.app.state.settings
    return {
        "message": "Advocate Directory API is running",
        "version": request.app.version,
        "environment": settings.environment,
        "docs": "/docs",
        "health": "/health"
    }


def _probe_database(db: Session, request: Request) -> Dict[str, Any]:
    """
    Run ``SELECT 1`` and count advocates.

    Raises whatever the session raises; the caller turns it into a 503.
    """
    db.execute(text("SELECT 1"))
    return {
        "status": "healthy",
        "advocates": crud.get_advocate_count(db),
        "pool_stats": get_pool_stats(request.app.state.engine),
    }


@router.get(
    "/health",
    summary="Health check",
    description="Probe the database; 200 when reachable, 503 otherwise"
)
def health_check(request: Request, db: Session = Depends(get_db)):
    started = time.time()

    try:
        database = _probe_database(db, request)
        healthy = True
    except Exception as exc:
        logger.error(f"Health check database failure: {exc}")
        database = {"status": "unhealthy", "error": str(exc)}
        healthy = False

    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": started,
        "latency_ms": round((time.time() - started) * 1000, 2),
        "checks": {"database": database},
    }
    return JSONResponse(content=body, status_code=200 if healthy else 503)
