"""Tests for the client-side list controller."""

import asyncio
import math

import httpx
import pytest

from client import AdvocatesApiClient, ListController, SortState


TOTAL_COUNT = 25


def _advocate(advocate_id):
    return {
        "id": advocate_id,
        "firstName": "Laura",
        "lastName": f"Clark{advocate_id}",
        "city": "Dallas",
        "degree": "MSW",
        "specialties": ["Bipolar"],
        "yearsOfExperience": 4,
        "phoneNumber": "5550123456",
        "createdAt": "2024-01-15T10:30:00Z",
    }


def _list_payload(page, page_size, total_count=TOTAL_COUNT):
    total_pages = math.ceil(total_count / page_size)
    start = (page - 1) * page_size
    ids = range(start + 1, min(start + page_size, total_count) + 1)
    return {
        "data": [_advocate(advocate_id) for advocate_id in ids],
        "pagination": {
            "page": page,
            "pageSize": page_size,
            "totalCount": total_count,
            "totalPages": total_pages,
            "hasNextPage": page < total_pages,
            "hasPreviousPage": page > 1,
        },
    }


class FakeServer:
    """Records list requests and answers with synthetic pages."""

    def __init__(self):
        self.requests = []
        self.fail = False
        self.gates = {}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/advocates/degrees":
            return httpx.Response(200, json={"degrees": ["MD", "PhD"]})
        if request.url.path == "/api/advocates/cities":
            return httpx.Response(500, json={"error": "Failed to fetch cities"})
        if request.url.path == "/api/advocates/specialties":
            return httpx.Response(200, json={"specialties": ["Bipolar"]})

        self.requests.append(request)
        page = int(request.url.params["page"])
        page_size = int(request.url.params["pageSize"])

        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()

        if self.fail:
            return httpx.Response(500, json={"error": "Failed to fetch advocates"})
        return httpx.Response(200, json=_list_payload(page, page_size))

    @property
    def last_params(self):
        return self.requests[-1].url.params


class FakeViewport:
    def __init__(self, controller=None, position=120):
        self.controller = controller
        self.position = position
        self.restored = []

    def get_scroll_position(self):
        return self.position

    def restore_scroll_position(self, position):
        rows_at_restore = len(self.controller.rows) if self.controller else None
        self.restored.append((position, rows_at_restore))


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
async def api(server):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(server.handler),
        base_url="http://testserver",
    )
    yield AdvocatesApiClient(http_client=http_client)
    await http_client.aclose()


@pytest.fixture
def controller(api):
    return ListController(api)


# ==============================================================================
# GUARDS BEFORE FIRST SEARCH
# ==============================================================================

@pytest.mark.asyncio
async def test_sort_before_search_is_ignored(controller, server):
    assert await controller.toggle_sort("firstName") is False

    assert server.requests == []
    assert controller.sorting == SortState("lastName", desc=False)


@pytest.mark.asyncio
async def test_paging_before_search_is_ignored(controller, server):
    assert await controller.go_to_page(2) is False
    assert await controller.last_page() is False
    assert await controller.set_page_size(50) is False

    assert server.requests == []
    assert controller.pagination.page_size == 10


@pytest.mark.asyncio
async def test_unsortable_column_raises(controller):
    with pytest.raises(ValueError):
        await controller.toggle_sort("phoneNumber")


# ==============================================================================
# SEARCH SUBMIT
# ==============================================================================

@pytest.mark.asyncio
async def test_submit_search_sends_all_filters(controller, server):
    controller.set_search_term("Laura Clark")
    controller.toggle_degree("MD")
    controller.toggle_degree("PhD")
    controller.toggle_city("Dallas")
    controller.toggle_specialty("Bipolar")
    controller.set_experience_range("5", "")

    assert await controller.submit_search() is True

    params = server.last_params
    assert params["page"] == "1"
    assert params["pageSize"] == "10"
    assert params["sortBy"] == "lastName"
    assert params["sortOrder"] == "asc"
    assert params["search"] == "Laura Clark"
    assert params.get_list("degrees") == ["MD", "PhD"]
    assert params.get_list("cities") == ["Dallas"]
    assert params.get_list("specialties") == ["Bipolar"]
    assert params["minExperience"] == "5"
    assert "maxExperience" not in params

    assert controller.has_searched is True
    assert controller.loading is False
    assert len(controller.rows) == 10
    assert controller.pagination.total_pages == 3


@pytest.mark.asyncio
async def test_toggle_filter_value_twice_removes_it(controller):
    controller.toggle_degree("MD")
    controller.toggle_degree("MD")

    assert controller.filters.degrees == []


@pytest.mark.asyncio
async def test_submit_search_resets_to_first_page(controller, server):
    await controller.submit_search()
    await controller.go_to_page(3)
    await controller.submit_search()

    assert server.last_params["page"] == "1"
    assert controller.pagination.page == 1


# ==============================================================================
# SORTING
# ==============================================================================

@pytest.mark.asyncio
async def test_sort_keeps_page_and_restores_scroll(api, server):
    controller = ListController(api)
    viewport = FakeViewport(controller)
    controller.viewport = viewport

    await controller.submit_search()
    await controller.go_to_page(2)

    assert await controller.toggle_sort("yearsOfExperience") is True

    params = server.last_params
    assert params["sortBy"] == "yearsOfExperience"
    assert params["sortOrder"] == "asc"
    assert params["page"] == "2"
    assert viewport.restored == [(120, 10)]


@pytest.mark.asyncio
async def test_sort_same_column_flips_direction(controller, server):
    await controller.submit_search()

    await controller.toggle_sort("lastName")
    assert server.last_params["sortOrder"] == "desc"

    await controller.toggle_sort("lastName")
    assert server.last_params["sortOrder"] == "asc"

    await controller.toggle_sort("city")
    assert controller.sorting == SortState("city", desc=False)


def test_sort_state_has_two_states_for_every_column():
    state = SortState().toggled("yearsOfExperience")
    assert state == SortState("yearsOfExperience", desc=False)

    state = state.toggled("yearsOfExperience")
    assert state == SortState("yearsOfExperience", desc=True)

    assert state.toggled("yearsOfExperience") == SortState("yearsOfExperience", desc=False)


# ==============================================================================
# PAGINATION
# ==============================================================================

@pytest.mark.asyncio
async def test_page_navigation(controller, server):
    await controller.submit_search()

    await controller.next_page()
    assert controller.pagination.page == 2

    await controller.last_page()
    assert controller.pagination.page == 3
    assert len(controller.rows) == 5

    request_count = len(server.requests)
    assert await controller.next_page() is False
    assert len(server.requests) == request_count

    await controller.previous_page()
    assert controller.pagination.page == 2

    await controller.first_page()
    assert controller.pagination.page == 1
    assert await controller.previous_page() is False


@pytest.mark.asyncio
async def test_page_size_change_returns_to_first_page(controller, server):
    await controller.submit_search()
    await controller.go_to_page(3)

    await controller.set_page_size(20)

    assert server.last_params["page"] == "1"
    assert server.last_params["pageSize"] == "20"
    assert controller.pagination.page_size == 20
    assert controller.pagination.total_pages == 2


# ==============================================================================
# CLEAR FILTERS
# ==============================================================================

@pytest.mark.asyncio
async def test_clear_filters_resets_without_request(controller, server):
    controller.set_search_term("Laura")
    controller.toggle_city("Dallas")
    await controller.submit_search()
    await controller.toggle_sort("city")
    await controller.set_page_size(20)
    request_count = len(server.requests)

    controller.clear_filters()

    assert len(server.requests) == request_count
    assert controller.has_searched is False
    assert controller.rows == []
    assert controller.filters.search_term == ""
    assert controller.filters.cities == []
    assert controller.sorting == SortState("lastName", desc=False)
    assert controller.pagination.page == 1
    assert controller.pagination.page_size == 10
    assert controller.pagination.total_count == 0
    assert await controller.toggle_sort("city") is False


# ==============================================================================
# STALE AND FAILED RESPONSES
# ==============================================================================

@pytest.mark.asyncio
async def test_stale_response_is_discarded(controller, server):
    await controller.submit_search()

    server.gates[2] = asyncio.Event()
    slow = asyncio.create_task(controller.go_to_page(2))
    await asyncio.sleep(0)

    assert await controller.go_to_page(3) is True
    server.gates[2].set()

    assert await slow is False
    assert controller.pagination.page == 3
    assert controller.rows[0].id == 21
    assert controller.loading is False


@pytest.mark.asyncio
async def test_in_flight_response_after_clear_is_discarded(controller, server):
    await controller.submit_search()

    server.gates[2] = asyncio.Event()
    pending = asyncio.create_task(controller.go_to_page(2))
    await asyncio.sleep(0)

    controller.clear_filters()
    server.gates[2].set()

    assert await pending is False
    assert controller.rows == []
    assert controller.has_searched is False


@pytest.mark.asyncio
async def test_failed_fetch_clears_rows(controller, server):
    await controller.submit_search()
    assert controller.rows

    server.fail = True
    assert await controller.next_page() is False

    assert controller.rows == []
    assert controller.loading is False


@pytest.mark.asyncio
async def test_on_data_fetch_callback(api):
    received = []
    controller = ListController(
        api, on_data_fetch=lambda rows, pagination: received.append((len(rows), pagination.page))
    )

    await controller.submit_search()

    assert received == [(10, 1)]


# ==============================================================================
# FILTER OPTIONS
# ==============================================================================

@pytest.mark.asyncio
async def test_load_filter_options_tolerates_failed_facet(controller):
    await controller.load_filter_options()

    assert controller.available_degrees == ["MD", "PhD"]
    assert controller.available_cities == []
    assert controller.available_specialties == ["Bipolar"]


# ==============================================================================
# AGAINST THE APPLICATION
# ==============================================================================

@pytest.mark.asyncio
async def test_controller_against_application(app, seeded):
    http_client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    )
    async with AdvocatesApiClient(http_client=http_client) as api:
        controller = ListController(api)

        await controller.load_filter_options()
        assert controller.available_degrees == ["MD", "MSW", "PhD"]

        controller.toggle_degree("MD")
        controller.toggle_degree("PhD")
        assert await controller.submit_search() is True
        assert controller.pagination.total_count == 10

        await controller.toggle_sort("yearsOfExperience")
        await controller.toggle_sort("yearsOfExperience")
        assert controller.rows[0].last_name == "Green"

        await controller.next_page()
        assert controller.pagination.page == 1

        await controller.set_page_size(4)
        await controller.last_page()
        assert controller.pagination.page == 3
        assert len(controller.rows) == 2

    await http_client.aclose()
