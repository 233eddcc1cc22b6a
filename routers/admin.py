"""
routers/admin.py - Administrative Data Endpoints

Endpoints for loading and resetting directory data:
- POST /api/clear-db: Delete every advocate and reset the id sequence
- POST /api/seed: Insert the fixed advocate dataset
- POST /api/seed-large: Insert a generated dataset of configurable size
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

import crud
import schemas
from database import get_db
from seed import ADVOCATE_DATA, seed_large_dataset

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


def _failure(message: str, exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"error": message, "details": str(exc) or type(exc).__name__}
    )


async def _read_seed_request(request: Request) -> schemas.SeedLargeRequest:
    """
    Parse the optional seed-large body. A missing or unreadable body counts
    as an empty request.
    """
    body = await request.body()
    if not body:
        return schemas.SeedLargeRequest()

    try:
        payload = json.loads(body)
        return schemas.SeedLargeRequest.model_validate(payload)
    except ValueError as exc:
        logger.warning(f"Ignoring unreadable seed-large body: {exc}")
        return schemas.SeedLargeRequest()


@router.post(
    "/clear-db",
    response_model=schemas.MessageResponse,
    summary="Clear advocates",
    description="Delete all advocate records and restart the id sequence at 1"
)
def clear_db(db: Session = Depends(get_db)):
    try:
        deleted = crud.clear_advocates(db)
    except Exception as exc:
        logger.error(f"Error clearing database: {exc}")
        raise _failure("Failed to clear database", exc)

    logger.info(f"Database cleared ({deleted} advocates removed)")
    return {
        "success": True,
        "message": "All advocate records have been deleted and ID sequence reset",
    }


@router.post(
    "/seed",
    response_model=schemas.SeedResponse,
    summary="Seed fixed dataset",
    description="Insert the fixed set of sample advocates"
)
def seed(db: Session = Depends(get_db)):
    try:
        records = crud.bulk_create_advocates(db, ADVOCATE_DATA)
    except Exception as exc:
        logger.error(f"Error seeding database: {exc}")
        raise _failure("Failed to seed database", exc)

    return {
        "success": True,
        "message": f"Successfully seeded {len(records)} advocate records",
        "advocates": [schemas.Advocate.model_validate(record) for record in records],
    }


@router.post(
    "/seed-large",
    response_model=schemas.SeedLargeResponse,
    summary="Seed generated dataset",
    description="Generate and insert between 1 and 100,000 advocates (default 5,000)"
)
async def seed_large(request: Request, db: Session = Depends(get_db)):
    settings = request.app.state.settings
    seed_request = await _read_seed_request(request)

    # A zero count is rejected rather than replaced by the default
    count = settings.default_seed_count if seed_request.count is None else seed_request.count

    if count < 1 or count > settings.max_seed_count:
        raise HTTPException(
            status_code=400,
            detail=f"Count must be between 1 and {settings.max_seed_count:,}"
        )

    logger.info(f"Starting large dataset seed with {count} records...")

    try:
        inserted = await run_in_threadpool(seed_large_dataset, db, count, settings.seed_batch_size)
    except Exception as exc:
        logger.error(f"Error seeding large dataset: {exc}")
        raise _failure("Failed to seed large dataset", exc)

    return {
        "success": True,
        "message": f"Successfully seeded {count} advocate records",
        "count": inserted,
    }
