# gis/locator.py
"""Map geometry for vendor results.

- ``center`` averages the coordinates of located vendors, with a fixed
  fallback point when nobody has coordinates.
- ``located`` keeps only vendors whose coordinates are usable.
- ``marker_style`` differentiates recommended vendors from standard ones.
- ``markers`` pairs every located vendor with its pin.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from vendor_discovery.models.vendor import Coordinates, VendorSummary

# Dubai
DEFAULT_CENTER = Coordinates(25.2048, 55.2708)

# (fill, border)
RECOMMENDED_MARKER = ("#10b981", "#059669")
STANDARD_MARKER = ("#6366f1", "#4f46e5")


def is_valid(coords: Optional[Coordinates]) -> bool:
    """Coordinates exist and lie inside the WGS84 range."""
    if coords is None:
        return False
    return -90.0 <= coords.lat <= 90.0 and -180.0 <= coords.lng <= 180.0


def located(vendors: Iterable[VendorSummary]) -> List[VendorSummary]:
    """Vendors that can be placed on the map, in their original order."""
    return [v for v in vendors if is_valid(v.coordinates)]


def center(
    vendors: Iterable[VendorSummary],
    default: Coordinates = DEFAULT_CENTER,
) -> Coordinates:
    """Arithmetic mean of the located vendors' coordinates.

    Vendors without coordinates do not contribute. If no vendor is located
    the *default* point is returned instead of failing.
    """
    points = [v.coordinates for v in located(vendors)]
    if not points:
        return default

    lat = sum(p.lat for p in points) / len(points)
    lng = sum(p.lng for p in points) / len(points)
    return Coordinates(lat, lng)


def bounds(vendors: Iterable[VendorSummary]) -> Optional[Tuple[Coordinates, Coordinates]]:
    """South-west and north-east corners enclosing all located vendors."""
    points = [v.coordinates for v in located(vendors)]
    if not points:
        return None
    south_west = Coordinates(min(p.lat for p in points), min(p.lng for p in points))
    north_east = Coordinates(max(p.lat for p in points), max(p.lng for p in points))
    return south_west, north_east


def marker_style(vendor: VendorSummary) -> Tuple[str, str]:
    """``(fill, border)`` colours of the vendor's map pin."""
    return RECOMMENDED_MARKER if vendor.is_recommended else STANDARD_MARKER


@dataclass(frozen=True)
class Marker:
    vendor: VendorSummary
    position: Coordinates
    fill: str
    border: str


def markers(vendors: Iterable[VendorSummary]) -> List[Marker]:
    """One pin per located vendor, in result order."""
    result = []
    for vendor in located(vendors):
        fill, border = marker_style(vendor)
        result.append(Marker(vendor, vendor.coordinates, fill, border))
    return result

# End of file
