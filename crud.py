"""
crud.py - Database Operations for Advocates

This module provides the data access layer behind the facet and administrative
endpoints. The list query itself lives in search.py.

Operations Provided:
    READ:
        - get_advocate_count(): Get total advocate count
        - list_cities(): Distinct cities, ascending
        - list_degrees(): Distinct degrees, ascending
        - list_specialties(): Distinct specialties flattened from every record

    CREATE:
        - bulk_create_advocates(): Insert a batch of seed records

    DELETE:
        - clear_advocates(): Delete every advocate and reset the id sequence

Facet Strategies:
    Cities and degrees can be deduplicated either by the store
    (SELECT DISTINCT ... ORDER BY) or in the application (set + sorted).
    Both produce the same list; the routes use the store strategy.

Error Handling:
    - SQLAlchemyError: Logged, session rolled back, re-raised as RuntimeError
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError  # Database exceptions
from sqlalchemy import func, text  # SQL functions, raw statements
from typing import Iterable, List
import models  # SQLAlchemy models
import schemas  # Pydantic schemas
import logging  # Application logging

# ==============================================================================
# LOGGING SETUP
# ==============================================================================

logger = logging.getLogger(__name__)

# ==============================================================================
# CONSTANTS
# ==============================================================================

DATABASE_ERROR_MSG = "Database error occurred"

ADVOCATE_ID_SEQUENCE = "advocates_id_seq"


# ==============================================================================
# COUNT
# ==============================================================================

def get_advocate_count(db: Session) -> int:
    """Get total count of advocates."""
    return db.query(func.count(models.Advocate.id)).scalar() or 0


# ==============================================================================
# FACET FUNCTIONS
# ==============================================================================

def _distinct_in_store(db: Session, column) -> List[str]:
    rows = db.query(column).distinct().order_by(column).all()
    return [value for (value,) in rows]


def _distinct_in_app(db: Session, column) -> List[str]:
    rows = db.query(column).all()
    return sorted({value for (value,) in rows})


def _distinct_values(db: Session, column, dedupe_in_store: bool) -> List[str]:
    try:
        if dedupe_in_store:
            return _distinct_in_store(db, column)
        return _distinct_in_app(db, column)
    except SQLAlchemyError as e:
        logger.error(f"Database error listing distinct {column.key}: {e}")
        raise RuntimeError(DATABASE_ERROR_MSG)


def list_cities(db: Session, dedupe_in_store: bool = True) -> List[str]:
    """
    Get every distinct city in ascending order.

    Args:
        db: Database session
        dedupe_in_store: Use SELECT DISTINCT in the database instead of
            deduplicating in Python

    Returns:
        list: Sorted unique city names
    """
    return _distinct_values(db, models.Advocate.city, dedupe_in_store)


def list_degrees(db: Session, dedupe_in_store: bool = True) -> List[str]:
    """
    Get every distinct degree in ascending order.

    Args:
        db: Database session
        dedupe_in_store: Use SELECT DISTINCT in the database instead of
            deduplicating in Python

    Returns:
        list: Sorted unique degree codes
    """
    return _distinct_values(db, models.Advocate.degree, dedupe_in_store)


def list_specialties(db: Session) -> List[str]:
    """
    Get every specialty used by any advocate.

    The specialties column holds an array per record, so the arrays are
    flattened and deduplicated in Python. Non-list values are skipped.

    Returns:
        list: Sorted unique specialty names
    """
    try:
        rows = db.query(models.Advocate.specialties).all()
    except SQLAlchemyError as e:
        logger.error(f"Database error listing specialties: {e}")
        raise RuntimeError(DATABASE_ERROR_MSG)

    specialties = set()
    for (values,) in rows:
        if isinstance(values, list):
            specialties.update(values)

    return sorted(specialties)


# ==============================================================================
# ADVOCATE CREATION
# ==============================================================================

def bulk_create_advocates(
        db: Session,
        advocates: Iterable[schemas.AdvocateCreate],
        refresh: bool = True
) -> List[models.Advocate]:
    """
    Insert a batch of advocates in one transaction.

    Args:
        db: Database session
        advocates: Seed records
        refresh: Reload ids and timestamps after commit (skip for large seeds)

    Returns:
        list: Created Advocate objects

    Raises:
        ValueError: If a record fails model validation
        RuntimeError: If database error occurs
    """
    try:
        db_advocates = [
            models.Advocate(**advocate.model_dump())
            for advocate in advocates
        ]

        db.add_all(db_advocates)
        db.commit()

        if refresh:
            for db_advocate in db_advocates:
                db.refresh(db_advocate)

        logger.info(f"Inserted {len(db_advocates)} advocates")
        return db_advocates

    except ValueError:
        db.rollback()
        raise

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error inserting advocates: {e}")
        raise RuntimeError(DATABASE_ERROR_MSG)


# ==============================================================================
# ADVOCATE DELETION
# ==============================================================================

def clear_advocates(db: Session) -> int:
    """
    Delete every advocate and restart the id sequence at 1.

    SQLite reuses rowids once the table is empty, so only PostgreSQL needs
    the explicit sequence reset.

    Returns:
        int: Number of advocates deleted

    Raises:
        RuntimeError: If database error occurs
    """
    try:
        deleted_count = db.query(models.Advocate).delete(synchronize_session=False)

        if db.get_bind().dialect.name == "postgresql":
            db.execute(text(f"ALTER SEQUENCE {ADVOCATE_ID_SEQUENCE} RESTART WITH 1"))

        db.commit()

        logger.info(f"Deleted {deleted_count} advocates and reset id sequence")
        return deleted_count

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error clearing advocates: {e}")
        raise RuntimeError("Database error occurred while clearing advocates")
