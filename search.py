"""
search.py - Advocate List Query Builder

This module turns the raw query string of the advocate list endpoint into a
validated query plan and executes it:
- Normalizing untrusted parameters into safe defaults (never rejecting them)
- Building SQL predicates for search, facet filters and experience range
- Mapping the allow-listed sort field onto a concrete column
- Running the count query and the page query and deriving pagination metadata

Consistency:
    The count and the page are two separate statements, not one snapshot.
    A concurrent seed or reset can make them disagree for that one response.
    Directory browsing tolerates this, so no transaction is opened around them.
"""

import enum
import logging
import math
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel
from sqlalchemy import Text, and_, asc, cast, desc, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
import schemas
from config import Settings
from utils.validators import INT64_MAX, clamp, clean_values, parse_int, parse_int64

logger = logging.getLogger(__name__)

DATABASE_ERROR_MSG = "Database error occurred"


# ==============================================================================
# SORTING
# ==============================================================================


class SortField(str, enum.Enum):
    """Columns a client may sort by. Anything else falls back to last name."""
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    CITY = "city"
    DEGREE = "degree"
    YEARS_OF_EXPERIENCE = "yearsOfExperience"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


SORT_COLUMNS = {
    SortField.FIRST_NAME: models.Advocate.first_name,
    SortField.LAST_NAME: models.Advocate.last_name,
    SortField.CITY: models.Advocate.city,
    SortField.DEGREE: models.Advocate.degree,
    SortField.YEARS_OF_EXPERIENCE: models.Advocate.years_of_experience,
}

DEFAULT_SORT_FIELD = SortField.LAST_NAME


# ==============================================================================
# QUERY PLAN
# ==============================================================================


class ListParams(BaseModel):
    """
    Normalized parameters of one list request.

    Attributes:
        page: 1-based page number, always >= 1
        page_size: Rows per page, always within [1, max_page_size]
        search: Free text matched against names, city, degree and specialties
        sort_by: Allow-listed sort field
        sort_order: Sort direction
        degrees: Requested degrees (OR within the list)
        cities: Requested cities (OR within the list)
        specialties: Requested specialties (OR within the list)
        min_experience: Inclusive lower bound on years of experience
        max_experience: Inclusive upper bound on years of experience
    """
    page: int = 1
    page_size: int = 10
    search: str = ""
    sort_by: SortField = DEFAULT_SORT_FIELD
    sort_order: SortOrder = SortOrder.ASC
    degrees: List[str] = []
    cities: List[str] = []
    specialties: List[str] = []
    min_experience: Optional[int] = None
    max_experience: Optional[int] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def _get_one(raw: Mapping[str, Any], key: str) -> Optional[str]:
    values = _get_all(raw, key)
    return values[0] if values else None


def _get_all(raw: Mapping[str, Any], key: str) -> List[str]:
    if hasattr(raw, "getlist"):
        return list(raw.getlist(key))

    value = raw.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def normalize_list_params(raw: Mapping[str, Any], settings: Settings) -> ListParams:
    """
    Validate and normalize raw list parameters.

    Every malformed value is replaced by a safe default:
    - page: absent, non-numeric or < 1 becomes 1; capped so the offset
      fits a signed 64-bit integer
    - pageSize: absent or non-numeric becomes the default, then clamped
    - sortBy: values outside the allow-list become lastName
    - sortOrder: anything other than "desc" (any case) becomes ascending
    - min/maxExperience: non-numeric or out-of-range (64-bit) values are ignored

    Args:
        raw: Query parameters (plain dict or a multi-value mapping with getlist)
        settings: Application settings carrying page size limits

    Returns:
        ListParams: Normalized query plan parameters
    """
    page_size = parse_int(_get_one(raw, "pageSize"))
    if page_size is None:
        page_size = settings.default_page_size
    page_size = clamp(page_size, 1, settings.max_page_size)

    page = parse_int(_get_one(raw, "page"))
    if page is None or page < 1:
        page = 1
    # OFFSET must fit a signed 64-bit integer
    page = min(page, INT64_MAX // page_size + 1)

    sort_by_raw = _get_one(raw, "sortBy")
    try:
        sort_by = SortField(sort_by_raw)
    except ValueError:
        if sort_by_raw is not None:
            logger.debug(f"Ignoring unsupported sort field: {sort_by_raw!r}")
        sort_by = DEFAULT_SORT_FIELD

    sort_order_raw = _get_one(raw, "sortOrder") or ""
    sort_order = SortOrder.DESC if sort_order_raw.lower() == "desc" else SortOrder.ASC

    return ListParams(
        page=page,
        page_size=page_size,
        search=(_get_one(raw, "search") or "").strip(),
        sort_by=sort_by,
        sort_order=sort_order,
        degrees=clean_values(_get_all(raw, "degrees")),
        cities=clean_values(_get_all(raw, "cities")),
        specialties=clean_values(_get_all(raw, "specialties")),
        min_experience=parse_int64(_get_one(raw, "minExperience")),
        max_experience=parse_int64(_get_one(raw, "maxExperience")),
    )


# ==============================================================================
# PREDICATES
# ==============================================================================


LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so ``value`` only matches itself."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _ilike(column, value: str, contains: bool = True):
    """Case-insensitive substring (or, with contains=False, equality) match."""
    pattern = escape_like(value)
    if contains:
        pattern = f"%{pattern}%"
    return column.ilike(pattern, escape=LIKE_ESCAPE)


def _specialties_text():
    """The specialties array rendered as text, for substring matching."""
    return cast(models.Advocate.specialties, Text)


def _full_name():
    return models.Advocate.first_name + " " + models.Advocate.last_name


def build_conditions(params: ListParams) -> list:
    """
    Build one SQL clause per active filter category.

    Clauses are meant to be ANDed together; values inside a category are ORed.
    Client text is matched literally: ``%`` and ``_`` are not wildcards.

    Args:
        params: Normalized list parameters

    Returns:
        list: SQLAlchemy boolean clauses (empty when nothing filters)
    """
    advocate = models.Advocate
    conditions = []

    if params.search:
        conditions.append(or_(
            _ilike(advocate.first_name, params.search),
            _ilike(advocate.last_name, params.search),
            # "Laura Clark" matches neither column alone
            _ilike(_full_name(), params.search),
            _ilike(advocate.city, params.search),
            _ilike(advocate.degree, params.search),
            _ilike(_specialties_text(), params.search),
        ))

    if params.degrees:
        conditions.append(or_(*[
            _ilike(advocate.degree, degree, contains=False) for degree in params.degrees
        ]))

    if params.cities:
        conditions.append(or_(*[_ilike(advocate.city, city) for city in params.cities]))

    if params.min_experience is not None:
        conditions.append(advocate.years_of_experience >= params.min_experience)

    if params.max_experience is not None:
        conditions.append(advocate.years_of_experience <= params.max_experience)

    if params.specialties:
        conditions.append(or_(*[
            _ilike(_specialties_text(), specialty) for specialty in params.specialties
        ]))

    return conditions


def apply_sorting(query, params: ListParams):
    """
    Order by the allow-listed column, then by id so pages never overlap.
    """
    order_func = desc if params.sort_order is SortOrder.DESC else asc
    column = SORT_COLUMNS[params.sort_by]
    return query.order_by(order_func(column), order_func(models.Advocate.id))


def build_pagination(params: ListParams, total_count: int) -> schemas.Pagination:
    """
    Derive pagination metadata from the total count.

    Args:
        params: Normalized list parameters
        total_count: Number of records matching the filters

    Returns:
        schemas.Pagination: Page metadata for the response
    """
    total_pages = math.ceil(total_count / params.page_size)
    return schemas.Pagination(
        page=params.page,
        page_size=params.page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_next_page=params.page < total_pages,
        has_previous_page=params.page > 1,
    )


# ==============================================================================
# QUERY EXECUTION
# ==============================================================================


class AdvocateSearch:
    """
    Query builder for the advocate list endpoint.

    Built once per application with explicit settings, then shared by every
    request. Holds no per-request state.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def plan(self, raw: Mapping[str, Any]) -> ListParams:
        """Normalize raw query parameters into a query plan."""
        return normalize_list_params(raw, self.settings)

    def execute(self, db: Session, params: ListParams) -> schemas.AdvocateList:
        """
        Run the count query and the page query for ``params``.

        Args:
            db: Database session
            params: Normalized list parameters

        Returns:
            schemas.AdvocateList: One page of advocates plus pagination metadata

        Raises:
            RuntimeError: If the database fails; no partial result is returned
        """
        conditions = build_conditions(params)
        where = and_(*conditions) if conditions else None

        logger.debug(f"List parameters: {params.model_dump()}")

        try:
            count_query = db.query(func.count(models.Advocate.id))
            page_query = db.query(models.Advocate)
            if where is not None:
                count_query = count_query.filter(where)
                page_query = page_query.filter(where)

            total_count = count_query.scalar() or 0

            page_query = apply_sorting(page_query, params)
            results = page_query.offset(params.offset).limit(params.page_size).all()

        except SQLAlchemyError as exc:
            logger.error(f"Database error listing advocates: {exc}")
            raise RuntimeError(DATABASE_ERROR_MSG) from exc

        logger.info(
            f"Found {len(results)} advocates (page={params.page}, "
            f"page_size={params.page_size}, total matching: {total_count})"
        )

        return schemas.AdvocateList(
            data=[schemas.Advocate.model_validate(advocate) for advocate in results],
            pagination=build_pagination(params, total_count),
        )

    def list_advocates(self, db: Session, raw: Mapping[str, Any]) -> schemas.AdvocateList:
        """Plan and execute in one step."""
        return self.execute(db, self.plan(raw))
