"""Tests for list parameter normalization and query execution."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from starlette.datastructures import QueryParams

from search import (
    DATABASE_ERROR_MSG,
    AdvocateSearch,
    ListParams,
    SortField,
    SortOrder,
    build_pagination,
    escape_like,
    normalize_list_params,
)
from utils.validators import INT64_MAX, INT64_MIN


# ==============================================================================
# NORMALIZATION
# ==============================================================================

def test_defaults_when_nothing_is_given(settings):
    params = normalize_list_params({}, settings)

    assert params.page == 1
    assert params.page_size == 10
    assert params.sort_by is SortField.LAST_NAME
    assert params.sort_order is SortOrder.ASC
    assert params.search == ""
    assert params.degrees == []
    assert params.min_experience is None
    assert params.max_experience is None


@pytest.mark.parametrize("raw_page, expected", [("-5", 1), ("0", 1), ("abc", 1), ("3", 3)])
def test_page_is_at_least_one(settings, raw_page, expected):
    assert normalize_list_params({"page": raw_page}, settings).page == expected


@pytest.mark.parametrize("raw_size, expected", [
    ("9999", 100),
    ("0", 1),
    ("-20", 1),
    ("abc", 10),
    ("25", 25),
])
def test_page_size_is_clamped(settings, raw_size, expected):
    assert normalize_list_params({"pageSize": raw_size}, settings).page_size == expected


@pytest.mark.parametrize("raw_sort", ["dropTable", "id", "lastName; DROP TABLE advocates", "specialties"])
def test_unknown_sort_field_falls_back_to_last_name(settings, raw_sort):
    params = normalize_list_params({"sortBy": raw_sort}, settings)
    assert params.sort_by is SortField.LAST_NAME


def test_sort_order_is_case_insensitive(settings):
    assert normalize_list_params({"sortOrder": "DESC"}, settings).sort_order is SortOrder.DESC
    assert normalize_list_params({"sortOrder": "descending"}, settings).sort_order is SortOrder.ASC


def test_non_numeric_experience_is_ignored(settings):
    params = normalize_list_params({"minExperience": "ten", "maxExperience": "20"}, settings)

    assert params.min_experience is None
    assert params.max_experience == 20


@pytest.mark.parametrize("raw_page, page_size", [
    ("99999999999999999999", "10"),
    ("9223372036854775807", "100"),
    ("9223372036854775807", "1"),
])
def test_page_offset_fits_64_bits(settings, raw_page, page_size):
    params = normalize_list_params({"page": raw_page, "pageSize": page_size}, settings)

    assert params.page > 1
    assert params.offset <= INT64_MAX


@pytest.mark.parametrize("raw_value, expected", [
    ("99999999999999999999", None),
    ("-99999999999999999999", None),
    ("9223372036854775807", INT64_MAX),
    ("-9223372036854775808", INT64_MIN),
])
def test_experience_outside_64_bits_is_ignored(settings, raw_value, expected):
    params = normalize_list_params({"minExperience": raw_value, "maxExperience": raw_value}, settings)

    assert params.min_experience == expected
    assert params.max_experience == expected


def test_repeated_parameters_from_query_string(settings):
    raw = QueryParams("degrees=MD&degrees=PhD&cities=&specialties=Bipolar&page=2")
    params = normalize_list_params(raw, settings)

    assert params.degrees == ["MD", "PhD"]
    assert params.cities == []
    assert params.specialties == ["Bipolar"]
    assert params.page == 2
    assert params.offset == 10


# ==============================================================================
# PAGINATION
# ==============================================================================

@pytest.mark.parametrize("page, total, total_pages, has_next, has_previous", [
    (1, 0, 0, False, False),
    (1, 15, 2, True, False),
    (2, 15, 2, False, True),
    (5, 15, 2, False, True),
    (1, 10, 1, False, False),
])
def test_build_pagination(page, total, total_pages, has_next, has_previous):
    pagination = build_pagination(ListParams(page=page, page_size=10), total)

    assert pagination.total_count == total
    assert pagination.total_pages == total_pages
    assert pagination.has_next_page is has_next
    assert pagination.has_previous_page is has_previous


# ==============================================================================
# EXECUTION
# ==============================================================================

@pytest.fixture
def advocate_search(settings):
    return AdvocateSearch(settings)


def _names(result):
    return {f"{advocate.first_name} {advocate.last_name}" for advocate in result.data}


def test_no_filters_returns_everything(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {})

    assert result.pagination.total_count == 15
    assert len(result.data) == 10


def test_full_name_search_matches_concatenated_name(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"search": "Laura Clark"})

    assert _names(result) == {"Laura Clark"}
    assert result.pagination.total_count == 1


def test_search_is_case_insensitive_and_covers_specialties(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"search": "adhd"})

    assert _names(result) == {"Jessica Taylor"}


def test_degree_filter_uses_or_within_category(session, seeded, advocate_search):
    result = advocate_search.list_advocates(
        session, {"degrees": ["MD", "PhD"], "pageSize": "100"}
    )

    assert result.pagination.total_count == 10
    assert {advocate.degree for advocate in result.data} == {"MD", "PhD"}


def test_filters_combine_with_and_across_categories(session, seeded, advocate_search):
    result = advocate_search.list_advocates(
        session, {"degrees": ["md", "PhD"], "minExperience": "10", "pageSize": "100"}
    )

    assert result.pagination.total_count == 6
    assert all(advocate.years_of_experience >= 10 for advocate in result.data)
    assert all(advocate.degree in ("MD", "PhD") for advocate in result.data)


def test_experience_range(session, seeded, advocate_search):
    result = advocate_search.list_advocates(
        session, {"minExperience": "5", "maxExperience": "6", "pageSize": "100"}
    )

    assert _names(result) == {"Alice Johnson", "James King", "David Harris"}


def test_city_filter_is_partial_match(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"cities": ["SAN"], "pageSize": "100"})

    assert {advocate.city for advocate in result.data} == {
        "San Antonio", "San Diego", "San Jose", "San Francisco"
    }


def test_specialty_filter_matches_any_requested(session, seeded, advocate_search):
    result = advocate_search.list_advocates(
        session, {"specialties": ["Bipolar", "Pediatrics"], "pageSize": "100"}
    )

    assert _names(result) == {"John Doe", "Daniel Lewis", "Alice Johnson", "Megan Green"}


def test_unknown_sort_field_sorts_by_last_name(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"sortBy": "dropTable", "pageSize": "100"})

    last_names = [advocate.last_name for advocate in result.data]
    assert last_names == sorted(last_names)
    assert last_names[0] == "Brown"


def test_sort_by_experience_descending(session, seeded, advocate_search):
    result = advocate_search.list_advocates(
        session, {"sortBy": "yearsOfExperience", "sortOrder": "desc", "pageSize": "100"}
    )

    years = [advocate.years_of_experience for advocate in result.data]
    assert years == sorted(years, reverse=True)
    assert result.data[0].last_name == "Green"


@pytest.mark.parametrize("query", [
    {},
    {"degrees": ["MSW"]},
    {"sortBy": "yearsOfExperience"},
    {"sortBy": "degree", "sortOrder": "desc"},
])
def test_pages_partition_the_result_set(session, seeded, advocate_search, query):
    first = advocate_search.list_advocates(session, {**query, "pageSize": "4"})
    total_count = first.pagination.total_count

    seen_ids = []
    for page in range(1, first.pagination.total_pages + 1):
        result = advocate_search.list_advocates(session, {**query, "pageSize": "4", "page": str(page)})
        seen_ids.extend(advocate.id for advocate in result.data)

    assert len(seen_ids) == total_count
    assert len(set(seen_ids)) == total_count


def test_no_match_returns_empty_page(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"search": "zzzz"})

    assert result.data == []
    assert result.pagination.total_count == 0
    assert result.pagination.total_pages == 0
    assert result.pagination.has_next_page is False


def test_page_past_the_end_is_empty(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"page": "99"})

    assert result.data == []
    assert result.pagination.page == 99
    assert result.pagination.has_previous_page is True
    assert result.pagination.has_next_page is False


def test_huge_page_returns_empty_page(session, seeded, advocate_search):
    result = advocate_search.list_advocates(session, {"page": "99999999999999999999"})

    assert result.data == []
    assert result.pagination.total_count == 15
    assert result.pagination.has_next_page is False


# ==============================================================================
# LITERAL MATCHING
# ==============================================================================

@pytest.mark.parametrize("value, expected", [
    ("plain", "plain"),
    ("100%", "100\\%"),
    ("a_b", "a\\_b"),
    ("back\\slash", "back\\\\slash"),
])
def test_escape_like(value, expected):
    assert escape_like(value) == expected


@pytest.mark.parametrize("query", [
    {"search": "_"},
    {"search": "%"},
    {"search": "La_ra"},
    {"degrees": ["M_"]},
    {"degrees": ["%"]},
    {"cities": ["%"]},
    {"specialties": ["_"]},
])
def test_wildcards_in_client_text_match_nothing(session, seeded, advocate_search, query):
    result = advocate_search.list_advocates(session, query)

    assert result.pagination.total_count == 0


def test_degree_match_is_exact_ignoring_case(session, seeded, advocate_search):
    assert advocate_search.list_advocates(session, {"degrees": ["msw"]}).pagination.total_count == 5
    assert advocate_search.list_advocates(session, {"degrees": ["MS"]}).pagination.total_count == 0


# ==============================================================================
# STORE FAILURES
# ==============================================================================

def test_store_failure_raises_runtime_error(session, seeded, advocate_search, monkeypatch):
    def broken_query(self, *entities, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(Session, "query", broken_query)

    with pytest.raises(RuntimeError, match=DATABASE_ERROR_MSG):
        advocate_search.list_advocates(session, {})
