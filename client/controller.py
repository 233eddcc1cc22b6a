"""
client/controller.py - Advocate List Controller

Client-side state container for the advocate table. It holds the search text,
filter selections, sort state and pagination cursor, and synchronizes them with
the server on four triggers:

    submit_search()  - explicit search; the only trigger allowed before the
                       first search
    toggle_sort()    - sort header activation
    go_to_page() ... - page navigation (first/previous/next/last/explicit)
    set_page_size()  - page size change (jumps back to page 1)

clear_filters() returns to the pre-search empty state without a request.

Stale Responses:
    Transitions are not serialized: a second transition may start while the
    first request is still in flight. Every fetch takes a new generation
    number and a response is applied only if its generation is still the
    latest, so a slow earlier response can never overwrite a newer one.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Tuple

import httpx

import schemas
from client.api import AdvocatesApiClient
from config import DEFAULT_PAGE_SIZE
from search import DEFAULT_SORT_FIELD, SortField, SortOrder

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = frozenset(sort_field.value for sort_field in SortField)

DataFetchCallback = Callable[[List[schemas.Advocate], schemas.Pagination], None]


# ==============================================================================
# STATE
# ==============================================================================


@dataclass(frozen=True)
class SortState:
    """The single active sort column and its direction."""
    column: str = DEFAULT_SORT_FIELD.value
    desc: bool = False

    @property
    def order(self) -> str:
        return SortOrder.DESC.value if self.desc else SortOrder.ASC.value

    def toggled(self, column: str) -> "SortState":
        """
        Next sort state after activating ``column``: a new column sorts
        ascending, the active column flips direction.

        There is no unsorted state and numeric columns do not start
        descending; a typical data-table header cycles asc, desc, none. The
        server always orders by some column, so "none" would only fall back
        to last name.
        """
        if column == self.column:
            return SortState(column=column, desc=not self.desc)
        return SortState(column=column, desc=False)


@dataclass
class Filters:
    """Filter inputs as the user has entered them (not yet submitted)."""
    search_term: str = ""
    degrees: List[str] = field(default_factory=list)
    cities: List[str] = field(default_factory=list)
    specialties: List[str] = field(default_factory=list)
    min_experience: str = ""
    max_experience: str = ""


def _empty_pagination(page_size: int = DEFAULT_PAGE_SIZE) -> schemas.Pagination:
    return schemas.Pagination(
        page=1,
        page_size=page_size,
        total_count=0,
        total_pages=0,
        has_next_page=False,
        has_previous_page=False,
    )


def _toggle_value(values: List[str], value: str) -> List[str]:
    if value in values:
        return [existing for existing in values if existing != value]
    return values + [value]


class Viewport(Protocol):
    """Scroll position holder restored after a sort re-renders the table."""

    def get_scroll_position(self) -> Any:
        ...

    def restore_scroll_position(self, position: Any) -> None:
        ...


# ==============================================================================
# CONTROLLER
# ==============================================================================


class ListController:
    """
    State machine behind the advocate table.

    Args:
        api: Client for the advocate endpoints
        viewport: Optional scroll holder preserved across sort requests
        on_data_fetch: Optional callback run with (rows, pagination) after
            every applied response
        default_page_size: Page size before the first response and after
            clearing filters
    """

    def __init__(
            self,
            api: AdvocatesApiClient,
            viewport: Optional[Viewport] = None,
            on_data_fetch: Optional[DataFetchCallback] = None,
            default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.api = api
        self.viewport = viewport
        self.on_data_fetch = on_data_fetch
        self.default_page_size = default_page_size

        self.filters = Filters()
        self.sorting = SortState()
        self.pagination = _empty_pagination(default_page_size)
        self.rows: List[schemas.Advocate] = []
        self.loading = False
        self.has_searched = False

        self.available_degrees: List[str] = []
        self.available_cities: List[str] = []
        self.available_specialties: List[str] = []

        self._generation = 0

    # ==========================================================================
    # FILTER INPUTS
    # ==========================================================================

    def set_search_term(self, search_term: str) -> None:
        self.filters.search_term = search_term

    def toggle_degree(self, degree: str) -> None:
        self.filters.degrees = _toggle_value(self.filters.degrees, degree)

    def toggle_city(self, city: str) -> None:
        self.filters.cities = _toggle_value(self.filters.cities, city)

    def toggle_specialty(self, specialty: str) -> None:
        self.filters.specialties = _toggle_value(self.filters.specialties, specialty)

    def set_experience_range(self, minimum: str = "", maximum: str = "") -> None:
        self.filters.min_experience = minimum
        self.filters.max_experience = maximum

    # ==========================================================================
    # TRANSITIONS
    # ==========================================================================

    async def submit_search(self) -> bool:
        """
        Run the current filters from page 1.

        Returns:
            bool: True if the response was applied
        """
        self.has_searched = True
        return await self._fetch(page=1, page_size=self.pagination.page_size)

    async def toggle_sort(self, column: str) -> bool:
        """
        Activate a sort header.

        Ignored until a search has run. Keeps the current page and page size
        and restores the viewport scroll position once the sorted page is
        applied.

        Raises:
            ValueError: If the column is not sortable
        """
        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Column '{column}' is not sortable")

        if not self.has_searched:
            logger.debug(f"Ignoring sort on '{column}' before first search")
            return False

        scroll_position = self.viewport.get_scroll_position() if self.viewport else None
        self.sorting = self.sorting.toggled(column)

        def restore_scroll():
            if self.viewport is not None:
                self.viewport.restore_scroll_position(scroll_position)

        return await self._fetch(
            page=self.pagination.page,
            page_size=self.pagination.page_size,
            after_apply=restore_scroll,
        )

    async def go_to_page(self, page: int) -> bool:
        """Fetch ``page`` with everything else unchanged. Ignored before a search."""
        if not self.has_searched:
            return False
        return await self._fetch(page=max(1, page), page_size=self.pagination.page_size)

    async def first_page(self) -> bool:
        return await self.go_to_page(1)

    async def previous_page(self) -> bool:
        if not self.pagination.has_previous_page:
            return False
        return await self.go_to_page(self.pagination.page - 1)

    async def next_page(self) -> bool:
        if not self.pagination.has_next_page:
            return False
        return await self.go_to_page(self.pagination.page + 1)

    async def last_page(self) -> bool:
        return await self.go_to_page(self.pagination.total_pages)

    async def set_page_size(self, page_size: int) -> bool:
        """
        Change the page size. The previous offset is meaningless at a new
        size, so this always fetches page 1. Ignored before a search.
        """
        if not self.has_searched:
            return False
        return await self._fetch(page=1, page_size=page_size)

    def clear_filters(self) -> None:
        """
        Return to the pre-search empty state. Issues no request; a response
        still in flight is discarded when it lands.
        """
        self._generation += 1
        self.filters = Filters()
        self.sorting = SortState()
        self.pagination = _empty_pagination(self.default_page_size)
        self.rows = []
        self.loading = False
        self.has_searched = False

    # ==========================================================================
    # FILTER OPTIONS
    # ==========================================================================

    async def load_filter_options(self) -> None:
        """
        Populate degree, city and specialty options from the facet endpoints.
        A failed facet leaves its option list empty.
        """
        degrees, cities, specialties = await asyncio.gather(
            self._load_facet("degrees", self.api.list_degrees),
            self._load_facet("cities", self.api.list_cities),
            self._load_facet("specialties", self.api.list_specialties),
        )
        self.available_degrees = degrees
        self.available_cities = cities
        self.available_specialties = specialties

    @staticmethod
    async def _load_facet(name: str, loader) -> List[str]:
        try:
            return await loader()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Error fetching {name}: {exc}")
            return []

    # ==========================================================================
    # REQUESTS
    # ==========================================================================

    def build_query_params(self, page: int, page_size: int) -> List[Tuple[str, str]]:
        """
        Serialize the current filters and sort for the list endpoint.

        Empty text inputs are omitted; list filters repeat their key.
        """
        params = [
            ("page", str(page)),
            ("pageSize", str(page_size)),
            ("sortBy", self.sorting.column),
            ("sortOrder", self.sorting.order),
        ]

        if self.filters.search_term:
            params.append(("search", self.filters.search_term))
        if self.filters.min_experience:
            params.append(("minExperience", self.filters.min_experience))
        if self.filters.max_experience:
            params.append(("maxExperience", self.filters.max_experience))

        params.extend(("degrees", degree) for degree in self.filters.degrees)
        params.extend(("cities", city) for city in self.filters.cities)
        params.extend(("specialties", specialty) for specialty in self.filters.specialties)

        return params

    async def _fetch(
            self,
            page: int,
            page_size: int,
            after_apply: Optional[Callable[[], None]] = None,
    ) -> bool:
        """
        Request one page and, if still current, replace rows and pagination.

        Returns:
            bool: True if this response was applied, False if it failed or
            was superseded by a newer request
        """
        self._generation += 1
        generation = self._generation
        self.loading = True

        params = self.build_query_params(page, page_size)

        try:
            result = await self.api.list_advocates(params)
        except (httpx.HTTPError, ValueError) as exc:
            if generation != self._generation:
                logger.debug(f"Discarding failure of superseded request {generation}")
                return False
            logger.error(f"Error fetching advocates: {exc}")
            self.rows = []
            self.loading = False
            return False

        if generation != self._generation:
            logger.debug(f"Discarding stale response {generation} (latest {self._generation})")
            return False

        self.rows = result.data
        self.pagination = result.pagination
        self.loading = False

        if self.on_data_fetch is not None:
            self.on_data_fetch(result.data, result.pagination)

        if after_apply is not None:
            after_apply()

        return True
