"""Local sqlite catalog: filtering, ordering and pagination."""

from __future__ import annotations

import sqlite3

from conftest import make_vendor, price_band_catalog

from vendor_discovery.config.settings import settings
from vendor_discovery.models.filter_state import ByField, FilterState, Recommended
from vendor_discovery.query.codec import decode, encode
from vendor_discovery.services.catalog_service import CATALOG_UNAVAILABLE_MESSAGE, LocalCatalog, total_pages_for


def test_total_pages_for():
    assert total_pages_for(0, 12) == 1
    assert total_pages_for(12, 12) == 1
    assert total_pages_for(13, 12) == 2


def test_photography_scenario(seeded_engine):
    state = decode("mainCategory=photography&minPrice=500")
    outcome = seeded_engine.fetch(state)

    assert outcome.ok
    result = outcome.result
    assert len(result.items) == 7
    assert result.total_pages == 1
    assert result.current_page == 1
    assert all(v.starting_price >= 500 for v in result.items)


def test_price_sort_is_monotonic(seeded_engine):
    low = seeded_engine.fetch(decode("sort=price-low&limit=50")).result.items
    high = seeded_engine.fetch(decode("sort=price-high&limit=50")).result.items

    prices = [v.starting_price for v in low]
    assert prices == sorted(prices)
    assert [v.starting_price for v in high] == sorted(prices, reverse=True)


def test_rating_floor(seeded_engine):
    items = seeded_engine.fetch(decode("rating=5&limit=50")).result.items
    assert items
    assert all(v.rating >= 5 for v in items)


def test_page_beyond_total_is_empty_not_error(seeded_engine):
    first = seeded_engine.fetch(decode("limit=5")).result
    assert first.total_pages == 4

    beyond = seeded_engine.fetch(decode(f"limit=5&page={first.total_pages + 1}"))
    assert beyond.ok
    assert beyond.result.is_empty
    assert beyond.result.total_pages == 4


def test_recommended_filters_and_orders_by_rating(engine):
    engine.db.vendors.save_batch([
        make_vendor("a", rating=3.5, recommended=True),
        make_vendor("b", rating=4.9, recommended=True),
        make_vendor("c", rating=5.0, recommended=False),
    ])
    items = engine.fetch(decode("isRecommended=true")).result.items
    assert [v.id for v in items] == ["b", "a"]


def test_default_order_is_latest_first(engine):
    engine.db.vendors.save_batch([
        make_vendor("old", created_at="2024-01-01T00:00:00"),
        make_vendor("new", created_at="2025-06-01T00:00:00"),
    ])
    items = engine.fetch(decode("")).result.items
    assert [v.id for v in items] == ["new", "old"]


def test_facets_match_json_columns(engine):
    engine.db.vendors.save_batch([
        make_vendor("roof", main_category="venues", sub_categories=["rooftops"], occasions=["private-parties"]),
        make_vendor("hall", main_category="venues", sub_categories=["ballrooms"], occasions=["corporate-events"]),
        make_vendor("shj", main_category="venues", sub_categories=["rooftops"], city="sharjah"),
    ])
    catalog = LocalCatalog(engine.db.vendors)

    by_sub = catalog.query(FilterState(sub_category="rooftops"))
    assert sorted(v.id for v in by_sub.data) == ["roof", "shj"]

    by_occasion = catalog.query(FilterState(occasion="corporate-events"))
    assert [v.id for v in by_occasion.data] == ["hall"]

    by_city = catalog.query(FilterState(location="sharjah", sub_category="rooftops"))
    assert [v.id for v in by_city.data] == ["shj"]


def test_search_text_matches_name_and_description(engine):
    engine.db.vendors.save_batch([
        make_vendor("1", name="Golden Lens Studio"),
        make_vendor("2", name="Desert Table"),
    ])
    items = engine.fetch(decode("search=lens")).result.items
    assert [v.business_name for v in items] == ["Golden Lens Studio"]


def test_repository_round_trips_vendor(engine):
    record = make_vendor("x", sub_categories=["a"], coordinates=None)
    assert engine.db.vendors.save(record)

    loaded = engine.db.vendors.get_by_slug("vendor-x")
    assert loaded == record.summary
    assert engine.db.vendors.count() == 1
    assert engine.db.vendors.delete("x")
    assert engine.db.vendors.get_by_id("x") is None


def test_locked_catalog_is_a_fetch_error_not_an_empty_page(seeded_engine, monkeypatch):
    repo = seeded_engine.db.vendors
    repo.max_retries, repo.retry_delay = 1, 0

    def locked_connection():
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(repo, "get_connection", locked_connection)
    outcome = seeded_engine.fetch(decode("mainCategory=photography"))

    assert not outcome.ok
    assert outcome.error.message == CATALOG_UNAVAILABLE_MESSAGE


def test_locked_saved_store_loads_as_empty(seeded_engine, monkeypatch):
    repo = seeded_engine.db.saved_vendors
    repo.max_retries, repo.retry_delay = 1, 0

    def locked_connection():
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(repo, "get_connection", locked_connection)
    assert len(seeded_engine.saved_set(1)) == 0


def test_default_page_size_follows_settings(seeded_engine, monkeypatch):
    monkeypatch.setattr(settings, "default_page_size", 5)

    state = seeded_engine.resolve_state("")
    assert state.filters.page_size == 5
    assert encode(state) == ""

    outcome = seeded_engine.fetch(state)
    assert len(outcome.result.items) == 5
    assert outcome.result.total_pages == 4

    explicit = decode("limit=12")
    assert explicit.filters.page_size == 12
    assert encode(explicit) == "limit=12"
    assert decode(encode(explicit)) == explicit


def test_price_band_and_rating_scenario(engine):
    engine.db.vendors.save_batch(price_band_catalog())

    state = decode("mainCategory=photography&minPrice=500&maxPrice=3000&rating=4")
    result = engine.fetch(state).unwrap()

    assert len(result.items) == 7
    assert result.total_pages == 1
    assert {v.id for v in result.items} == {f"m{i}" for i in range(7)}
    assert all(500 <= v.starting_price <= 3000 and v.rating >= 4 for v in result.items)


def test_search_text_wildcards_match_literally(engine):
    engine.db.vendors.save_batch([
        make_vendor("a", name="50% Off Studio"),
        make_vendor("b", name="Fifty Studio"),
        make_vendor("c", name="Snap_Shot Lens"),
        make_vendor("d", name="SnapXShot Lens"),
    ])

    def ids(query):
        return {v.id for v in engine.fetch(decode(query)).result.items}

    assert ids("search=50%25") == {"a"}
    assert ids("search=snap_shot") == {"c"}
    assert ids("search=studio") == {"a", "b"}
