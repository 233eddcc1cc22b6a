"""
routers/advocates.py - Advocate Directory Endpoints

Read-only endpoints for browsing advocates:
- GET /api/advocates: Search, filter, sort and paginate advocates
- GET /api/advocates/cities: Distinct cities for the city filter
- GET /api/advocates/degrees: Distinct degrees for the degree filter
- GET /api/advocates/specialties: Distinct specialties for the specialty filter
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

import crud
import schemas
from database import get_db
from search import AdvocateSearch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/advocates", tags=["Advocates"])


def get_advocate_search(request: Request) -> AdvocateSearch:
    """Query builder the application was created with."""
    return request.app.state.advocate_search


@router.get(
    "",
    response_model=schemas.AdvocateList,
    summary="List advocates",
    description="Search, filter, sort and paginate advocates. Malformed parameters fall back to defaults."
)
def list_advocates(
        request: Request,
        page: Optional[str] = Query(None, description="1-based page number"),
        pageSize: Optional[str] = Query(None, description="Rows per page (1-100)"),
        search: Optional[str] = Query(None, description="Matches names, city, degree and specialties"),
        sortBy: Optional[str] = Query(None, description="firstName, lastName, city, degree or yearsOfExperience"),
        sortOrder: Optional[str] = Query(None, description="asc or desc"),
        degrees: List[str] = Query([], description="Degrees to include (repeatable)"),
        cities: List[str] = Query([], description="Cities to include (repeatable)"),
        minExperience: Optional[str] = Query(None, description="Minimum years of experience"),
        maxExperience: Optional[str] = Query(None, description="Maximum years of experience"),
        specialties: List[str] = Query([], description="Specialties to include (repeatable)"),
        db: Session = Depends(get_db),
        advocate_search: AdvocateSearch = Depends(get_advocate_search),
):
    """
    The declared parameters document the endpoint; normalization reads the
    raw query string so repeated values and malformed numbers reach the
    query builder untouched.
    """
    try:
        params = advocate_search.plan(request.query_params)
        return advocate_search.execute(db, params)
    except Exception as exc:
        logger.error(f"Error fetching advocates: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch advocates")


@router.get(
    "/cities",
    response_model=schemas.CityList,
    summary="List cities",
    description="Distinct advocate cities in ascending order"
)
def list_cities(db: Session = Depends(get_db)):
    try:
        return {"cities": crud.list_cities(db)}
    except Exception as exc:
        logger.error(f"Error fetching cities: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch cities")


@router.get(
    "/degrees",
    response_model=schemas.DegreeList,
    summary="List degrees",
    description="Distinct advocate degrees in ascending order"
)
def list_degrees(db: Session = Depends(get_db)):
    try:
        return {"degrees": crud.list_degrees(db)}
    except Exception as exc:
        logger.error(f"Error fetching degrees: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch degrees")


@router.get(
    "/specialties",
    response_model=schemas.SpecialtyList,
    summary="List specialties",
    description="Every specialty held by at least one advocate, deduplicated and sorted"
)
def list_specialties(db: Session = Depends(get_db)):
    try:
        return {"specialties": crud.list_specialties(db)}
    except Exception as exc:
        logger.error(f"Error fetching specialties: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch specialties")
