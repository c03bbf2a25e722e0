"""Map center, located vendors and marker styling."""

from __future__ import annotations

from conftest import make_vendor

from vendor_discovery.gis import locator
from vendor_discovery.models.vendor import Coordinates, VendorSummary, parse_coordinates


def _vendor(vendor_id, coords, recommended=False):
    return make_vendor(vendor_id, coordinates=coords, recommended=recommended).summary


def test_center_of_nothing_is_default():
    assert locator.center([]) == locator.DEFAULT_CENTER
    assert locator.center([_vendor("a", None)]) == Coordinates(25.2048, 55.2708)


def test_center_of_one_vendor_is_its_position():
    v = _vendor("a", Coordinates(24.45, 54.38))
    assert locator.center([v]) == v.coordinates


def test_center_is_arithmetic_mean_of_located_vendors():
    vendors = [
        _vendor("a", Coordinates(24.0, 54.0)),
        _vendor("b", Coordinates(26.0, 56.0)),
        _vendor("c", None),
    ]
    assert locator.center(vendors) == Coordinates(25.0, 55.0)


def test_out_of_range_coordinates_are_not_located():
    vendors = [_vendor("bad", Coordinates(120.0, 55.0)), _vendor("ok", Coordinates(25.0, 55.0))]
    assert [v.id for v in locator.located(vendors)] == ["ok"]


def test_numeric_strings_are_accepted():
    raw = {"_id": "1", "slug": "s", "businessName": "S", "address": {"coordinates": {"lat": "25.1", "lng": "55.2"}}}
    assert VendorSummary.from_dict(raw).coordinates == Coordinates(25.1, 55.2)
    assert parse_coordinates({"lat": "north", "lng": "55"}) is None


def test_markers_distinguish_recommended():
    vendors = [
        _vendor("rec", Coordinates(25.0, 55.0), recommended=True),
        _vendor("std", Coordinates(25.1, 55.1)),
        _vendor("nowhere", None),
    ]
    pins = locator.markers(vendors)
    assert [(m.vendor.id, m.fill, m.border) for m in pins] == [
        ("rec", "#10b981", "#059669"),
        ("std", "#6366f1", "#4f46e5"),
    ]


def test_bounds():
    assert locator.bounds([]) is None
    sw, ne = locator.bounds([_vendor("a", Coordinates(24.0, 56.0)), _vendor("b", Coordinates(25.0, 55.0))])
    assert sw == Coordinates(24.0, 55.0)
    assert ne == Coordinates(25.0, 56.0)
