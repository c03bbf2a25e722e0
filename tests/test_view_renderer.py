"""Rendering of listing pages, cards, pagination, map and share targets."""

from __future__ import annotations

from conftest import make_vendor

from vendor_discovery.models.filter_state import DiscoveryState, FilterState, ViewMode
from vendor_discovery.models.listing import FetchError, ListingOutcome, ListingResult
from vendor_discovery.models.vendor import Coordinates
from vendor_discovery.models.view_models import ErrorStateView
from vendor_discovery.services.saved_vendor_service import SavedVendorSet
from vendor_discovery.services.share_service import ShareService
from vendor_discovery.services.view_service import ViewRenderer, avatar_color, initials, page_window


def _renderer():
    return ViewRenderer(ShareService("https://example.ae"), default_center=Coordinates(25.2048, 55.2708), zoom=11)


def _outcome(items, page=1, total=1):
    return ListingOutcome.success(ListingResult(items=tuple(items), current_page=page, total_pages=total))


def test_card_labels_and_links():
    vendor = make_vendor("1", name="Golden Lens Studio", price=1500, rating=4.5, city="abu-dhabi").summary
    card = _renderer().card(vendor, is_saved=True)

    assert card.initials == "GL"
    assert card.avatar_color == avatar_color("Golden Lens Studio")
    assert card.rating_label == "4.5/5"
    assert card.price_label == "AED 1500"
    assert card.categories == ["Photography", "Events"]
    assert card.city_label == "Abu Dhabi, UAE"
    assert card.detail_url == "/vendors/vendor-1"
    assert card.compare_url == "/compare?vendors=vendor-1"
    assert card.share.url == "https://example.ae/vendors/vendor-1"
    assert card.share.text == "Check out Golden Lens Studio for your event planning needs!"
    assert card.is_saved


def test_avatar_helpers_are_stable():
    assert initials("") == "?"
    assert initials("solo") == "S"
    assert avatar_color("Golden Lens") == avatar_color("Golden Lens")
    assert avatar_color("") == "#ef4444"


def test_empty_result_renders_explicit_state():
    page = _renderer().render(DiscoveryState(), _outcome([]))
    assert page.is_empty
    assert page.empty_title == "No Matching Vendors"
    assert page.empty_message == "Try adjusting your filters to discover more great vendors."
    assert page.pagination is None


def test_fetch_error_renders_retry_state():
    state = DiscoveryState(filters=FilterState(min_price=500))
    page = _renderer().render(state, ListingOutcome.failure(FetchError("down")))
    assert isinstance(page, ErrorStateView)
    assert page.title == "Something went wrong"
    assert page.retry_url == "/vendors?minPrice=500"


def test_saved_state_is_seeded_into_cards():
    vendors = [make_vendor("1").summary, make_vendor("2").summary]
    page = _renderer().render(DiscoveryState(), _outcome(vendors), SavedVendorSet(["2"]))
    assert [c.is_saved for c in page.cards] == [False, True]


def test_page_window():
    assert page_window(1, 1) == [1]
    assert page_window(1, 3) == [1, 2, 3]
    assert page_window(1, 10) == [1, 2, 3, 4, 5, None, 10]
    assert page_window(6, 20) == [1, None, 4, 5, 6, 7, 8, None, 20]
    assert page_window(10, 10) == [1, None, 6, 7, 8, 9, 10]


def test_pagination_links_are_encoded():
    state = DiscoveryState(filters=FilterState(rating_floor=4, page=2))
    page = _renderer().render(state, _outcome([make_vendor("1").summary], page=2, total=3))

    pagination = page.pagination
    assert [link.label for link in pagination.links] == ["1", "2", "3"]
    assert pagination.links[0].url == "/vendors?rating=4"
    assert pagination.links[1].is_active
    assert pagination.previous_url == "/vendors?rating=4"
    assert pagination.next_url == "/vendors?rating=4&page=3"


def test_map_mode_renders_compact_cards_and_markers():
    vendors = [
        make_vendor("1", coordinates=Coordinates(25.0, 55.0), recommended=True).summary,
        make_vendor("2", coordinates=None).summary,
    ]
    state = DiscoveryState(view=ViewMode.MAP)
    page = _renderer().render(state, _outcome(vendors), session_token="tok")

    assert all(card.compact for card in page.cards)
    assert page.map.has_markers
    assert [m.vendor_id for m in page.map.markers] == ["1"]
    assert page.map.markers[0].fill_color == "#10b981"
    assert (page.map.center_lat, page.map.center_lng) == (25.0, 55.0)
    assert page.session_token == "tok"
    assert page.list_url == "/vendors"
    assert page.map_url == "/vendors?view=map"


def test_map_placeholder_when_nobody_is_located():
    state = DiscoveryState(view=ViewMode.MAP)
    page = _renderer().render(state, _outcome([make_vendor("1", coordinates=None).summary]))

    assert not page.map.has_markers
    assert "No Vendors with Location Data" in page.map.placeholder
    assert (page.map.center_lat, page.map.center_lng) == (25.2048, 55.2708)


def test_list_mode_has_no_map():
    page = _renderer().render(DiscoveryState(), _outcome([make_vendor("1").summary]))
    assert page.map is None
    assert not page.cards[0].compact


def test_share_fallback_and_platform():
    service = ShareService("https://example.ae/")

    fallback = service.share("Desert Table", "desert-table")
    assert not fallback.shared
    assert fallback.fallback_message == (
        "Sharing not supported in this browser. "
        "You can manually share this link: https://example.ae/vendors/desert-table"
    )

    shared = []
    outcome = service.share("Desert Table", "desert-table", platform_share=lambda t: shared.append(t) or True)
    assert outcome.shared
    assert outcome.fallback_message is None
    assert shared[0].title == "Desert Table"
