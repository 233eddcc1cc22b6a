"""
routers - API Router Package

This package contains FastAPI routers that define API endpoints:
- advocates: Advocate list and facet endpoints
- admin: Seeding and reset endpoints
- health: Health check and system status endpoints
"""

from routers.advocates import router as advocates_router
from routers.admin import router as admin_router
from routers.health import router as health_router

__all__ = [
    "advocates_router",
    "admin_router",
    "health_router",
]
