"""
main.py - Advocate Directory API Application

Builds the FastAPI application: database engine, query builder, middleware,
error handlers and routers.

Run with:
    uvicorn main:create_app --factory --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from typing import Optional

# Import local modules
import models
from config import Settings, INTERNAL_SERVER_MSG_ERROR
from database import build_engine, build_session_factory, check_database_health
from routers import advocates_router, admin_router, health_router
from search import AdvocateSearch

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# ==============================================================================
# MIDDLEWARE
# ==============================================================================

async def log_requests(request: Request, call_next):
    """
    Log all incoming requests and their processing time.
    """
    start_time = time.time()

    logger.info(
        f"{request.method} {request.url.path} "
        f"from {request.client.host if request.client else 'unknown'}"
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"completed in {process_time:.3f}s "
        f"with status {response.status_code}"
    )

    response.headers["X-Process-Time"] = str(process_time)

    return response


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    if settings.environment == "development":
        # Permissive CORS for development
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
            max_age=3600,
        )
        logger.info("CORS enabled for development")
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.frontend_url],
            allow_credentials=False,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )
        logger.info(f"CORS enabled for {settings.environment}: {settings.frontend_url}")


# ==============================================================================
# ERROR HANDLERS
# ==============================================================================

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": ...} bodies"""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )


async def runtime_error_handler(request: Request, exc: RuntimeError):
    """Handle runtime errors"""
    logger.error(f"Runtime error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_SERVER_MSG_ERROR}
    )


# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; read from the environment when omitted

    Returns:
        FastAPI: Configured application with tables created
    """
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    engine = build_engine(settings)

    # Create database tables
    models.Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    app = FastAPI(
        title="Advocate Directory API",
        description="Searchable, filterable and paginated directory of advocates",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.advocate_search = AdvocateSearch(settings)

    app.middleware("http")(log_requests)
    _configure_cors(app, settings)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RuntimeError, runtime_error_handler)

    app.include_router(health_router)
    app.include_router(advocates_router)
    app.include_router(admin_router)

    @app.on_event("startup")
    async def startup_event():
        """Verify the database on application startup"""
        logger.info(f"Application starting in {settings.environment} mode")

        if check_database_health(engine):
            logger.info("Database connection verified")
        else:
            logger.warning("Database health check failed")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release pooled connections on shutdown"""
        engine.dispose()
        logger.info("Application shutdown complete")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
