"""Tests for facet queries and bulk operations."""

import crud
import models
from seed.advocates import SPECIALTIES
from seed.generator import generate_advocates


def test_facet_strategies_agree(session, seeded):
    crud.bulk_create_advocates(session, generate_advocates(60), refresh=False)

    assert crud.list_cities(session, dedupe_in_store=True) == crud.list_cities(session, dedupe_in_store=False)
    assert crud.list_degrees(session, dedupe_in_store=True) == crud.list_degrees(session, dedupe_in_store=False)


def test_list_specialties_flattens_and_dedupes(session, seeded):
    assert crud.list_specialties(session) == sorted(SPECIALTIES)


def test_bulk_create_populates_ids(session, seeded):
    assert len(seeded) == 15
    assert len({advocate.id for advocate in seeded}) == 15
    assert session.get(models.Advocate, seeded[0].id).last_name == "Doe"


def test_clear_advocates_returns_deleted_count(session, seeded):
    assert crud.clear_advocates(session) == 15
    assert crud.get_advocate_count(session) == 0
