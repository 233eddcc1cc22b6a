"""
database.py - Database Configuration and Connection Management

This module handles all database connectivity for the application using SQLAlchemy ORM.
It provides:
- Database engine creation with connection pooling
- Session management for request-scoped database access
- Health check functionality for monitoring
- Environment-specific configuration (development, production, testing)

Connection Pooling:
    PostgreSQL engines use SQLAlchemy's QueuePool for efficient connection management.
    - Development: 5 connections (smaller pool for debugging)
    - Production: 20 connections + 10 overflow (handles high traffic)
    - Pre-ping enabled: Validates connections before use to avoid stale connections

    SQLite engines (local runs and tests) skip pool tuning. In-memory SQLite
    shares a single connection through StaticPool so every session sees the
    same database.

Usage in FastAPI:
    The application factory stores a session factory on ``app.state``. Use the
    get_db() dependency to get a database session in your route handlers:

    @router.get("/advocates")
    def list_advocates(db: Session = Depends(get_db)):
        return db.query(Advocate).all()

    The session is automatically closed after the request completes.
"""

import logging
from sqlalchemy import create_engine, event, text  # Core SQLAlchemy components
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker  # ORM base class, session factory
from sqlalchemy.pool import QueuePool, StaticPool  # Connection pool implementations
from fastapi import Request

from config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


# ==============================================================================
# ENGINE CONFIGURATION
# ==============================================================================

def build_engine(settings: Settings) -> Engine:
    """
    Create a SQLAlchemy engine configured for the current environment.

    Args:
        settings: Application settings

    Returns:
        Engine: Configured engine with pool event logging attached
    """
    url = settings.database_url

    if settings.is_sqlite:
        in_memory = ":memory:" in url or url.rstrip("/") == "sqlite:"
        pool_options = {"poolclass": StaticPool} if in_memory else {}
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
            **pool_options,
        )
        logger.info(f"SQLite database engine initialized ({'memory' if in_memory else 'file'})")

    elif settings.environment == "production":
        # Production-optimized pool with connection management
        engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=20,  # Maximum persistent connections
            max_overflow=10,  # Maximum overflow connections
            pool_timeout=30,  # Seconds to wait before timing out
            pool_recycle=3600,  # Recycle connections after 1 hour
            pool_pre_ping=True,  # Test connections before using
            echo=False,
            connect_args={
                "connect_timeout": 10,
                "options": "-c statement_timeout=30000"  # 30 second query timeout
            }
        )
        logger.info("Production database engine initialized")

    elif settings.environment == "testing":
        engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=0,
            pool_pre_ping=True,
            echo=True,  # Log all SQL for debugging
        )
        logger.info("Testing database engine initialized")

    else:
        engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=5,
            pool_timeout=30,
            pool_pre_ping=True,
            echo=False,
            connect_args={
                "connect_timeout": 10,
            }
        )
        logger.info("Development database engine initialized")

    _attach_pool_listeners(engine)
    return engine


# ==============================================================================
# CONNECTION EVENT LISTENERS
# ==============================================================================

def _attach_pool_listeners(engine: Engine) -> None:
    """Log connection pool activity at DEBUG level."""

    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        logger.debug("New database connection established")

    @event.listens_for(engine, "checkout")
    def receive_checkout(dbapi_conn, connection_record, connection_proxy):
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine, "checkin")
    def receive_checkin(dbapi_conn, connection_record):
        logger.debug("Connection returned to pool")


# ==============================================================================
# SESSION CONFIGURATION
# ==============================================================================

def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================

def get_db(request: Request):
    """
    Database session dependency for FastAPI.

    Provides a session from the factory the application was built with and
    ensures cleanup even if errors occur during the request.

    Yields:
        Session: Database session that will be automatically closed
    """
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        logger.debug("Session closed")


# ==============================================================================
# HEALTH CHECK
# ==============================================================================

def check_database_health(engine: Engine) -> bool:
    """
    Test database connectivity.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database health check passed")
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


# ==============================================================================
# POOL STATISTICS
# ==============================================================================

def get_pool_stats(engine: Engine) -> dict:
    """
    Get current connection pool statistics.

    Pools without sizing (SQLite) report only their class name.

    Returns:
        dict: Pool statistics including size, connections in use, etc.
    """
    pool = engine.pool
    if not isinstance(pool, QueuePool):
        return {"pool_class": type(pool).__name__}

    return {
        "pool_class": type(pool).__name__,
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
        "total_connections": pool.size() + pool.overflow()
    }
