"""Query string encoding and decoding of the discovery state."""

from __future__ import annotations

import pytest

from vendor_discovery.models.filter_state import (
    ByField,
    DiscoveryState,
    FilterState,
    Recommended,
    ViewMode,
)
from vendor_discovery.query.codec import build_location, decode, encode, to_catalog_params


def test_default_state_encodes_to_empty_query():
    assert encode(DiscoveryState()) == ""
    assert build_location("/vendors", DiscoveryState()) == "/vendors"


def test_encode_omits_defaults_and_keeps_stable_order():
    state = DiscoveryState(
        filters=FilterState(min_price=500, main_category="photography", sort=ByField("price-low")),
    )
    assert encode(state) == "mainCategory=photography&minPrice=500&sort=price-low"


def test_recommended_is_written_as_flag():
    state = DiscoveryState(filters=FilterState(sort=Recommended()))
    query = encode(state)
    assert query == "isRecommended=true"
    assert "sort=" not in query


@pytest.mark.parametrize(
    "state",
    [
        DiscoveryState(),
        DiscoveryState(filters=FilterState(search_text="rose & gold", page=3), view=ViewMode.MAP),
        DiscoveryState(filters=FilterState(location="abu-dhabi", rating_floor=4, occasion="corporate-events")),
        DiscoveryState(filters=FilterState(min_price=250.5, max_price=900, sort=ByField("rating"))),
        DiscoveryState(filters=FilterState(main_category="venues", sub_category="rooftops", sort=Recommended())),
        DiscoveryState(filters=FilterState(page=2, page_size=24)),
    ],
)
def test_round_trip(state):
    assert decode(encode(state)) == state


def test_malformed_values_fall_back_to_defaults():
    state = decode("minPrice=abc&maxPrice=-5&page=-3&limit=zero&rating=9&location=mars&view=grid&foo=bar")
    f = state.filters
    assert f.min_price is None
    assert f.max_price is None
    assert f.page == 1
    assert f.page_size == 12
    assert f.rating_floor is None
    assert f.location is None
    assert state.view == ViewMode.LIST


def test_decode_swaps_inverted_price_range():
    f = decode("minPrice=900&maxPrice=100").filters
    assert (f.min_price, f.max_price) == (100, 900)


def test_field_sort_wins_over_recommended_flag():
    assert decode("sort=price-low&isRecommended=true").filters.sort == ByField("price-low")
    assert decode("isRecommended=true").filters.sort == Recommended()
    assert decode("sort=recommended").filters.sort == Recommended()
    assert decode("sort=cheapest").filters.sort is None


def test_decode_accepts_full_url_and_mapping():
    assert decode("/vendors?search=lens").filters.search_text == "lens"
    assert decode({"rating": "3", "view": "map"}) == DiscoveryState(
        filters=FilterState(rating_floor=3), view=ViewMode.MAP
    )


def test_first_value_wins_for_repeated_keys():
    assert decode("search=one&search=two").filters.search_text == "one"


def test_page_size_is_capped():
    assert decode("limit=500", max_page_size=100).filters.page_size == 100


def test_catalog_params_always_carry_paging():
    params = dict(to_catalog_params(FilterState(sort=Recommended())))
    assert params == {"isRecommended": "true", "page": "1", "limit": "12"}
