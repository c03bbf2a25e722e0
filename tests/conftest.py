"""Shared fixtures: temporary sqlite catalogs and vendor factories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pytest

from vendor_discovery.engine import DiscoveryEngine
from vendor_discovery.models.vendor import Coordinates, VendorRecord, VendorSummary


def make_vendor(
    vendor_id: str,
    *,
    name: Optional[str] = None,
    price: float = 1000.0,
    rating: float = 4.0,
    recommended: bool = False,
    main_category: str = "photography",
    sub_categories: Iterable[str] = (),
    occasions: Iterable[str] = (),
    city: Optional[str] = "dubai",
    coordinates: Optional[Coordinates] = Coordinates(25.2, 55.27),
    created_at: str = "2025-01-01T00:00:00",
) -> VendorRecord:
    name = name or f"Vendor {vendor_id}"
    summary = VendorSummary(
        id=vendor_id,
        slug=f"vendor-{vendor_id}",
        business_name=name,
        categories=[main_category.title(), "Events", "Extra"],
        description=f"{name} description",
        rating=rating,
        starting_price=price,
        is_recommended=recommended,
        coordinates=coordinates,
        city=city,
    )
    return VendorRecord(
        summary=summary,
        main_category=main_category,
        sub_categories=list(sub_categories),
        occasions=list(occasions),
        created_at=created_at,
    )


def photography_catalog() -> List[VendorRecord]:
    """20 vendors; exactly 7 are photographers priced from 500 AED up."""
    records = []
    for i in range(7):
        records.append(make_vendor(f"p{i}", price=500 + i * 250, rating=3 + (i % 3), main_category="photography"))
    # Photographers below the price floor
    for i in range(3):
        records.append(make_vendor(f"c{i}", price=100 + i * 50, main_category="photography"))
    for i in range(10):
        records.append(make_vendor(f"o{i}", price=800 + i * 100, main_category="catering"))
    return records


def price_band_catalog() -> List[VendorRecord]:
    """20 photographers; exactly 7 priced 500..3000 AED and rated 4 or higher."""
    records = [
        make_vendor(f"m{i}", price=500 + i * 400, rating=4 + (i % 2) * 0.5)
        for i in range(7)
    ]
    # Rated high enough but outside the price band
    records += [make_vendor(f"lo{i}", price=200 + i * 50, rating=4.5) for i in range(4)]
    records += [make_vendor(f"hi{i}", price=3500 + i * 500, rating=4.8) for i in range(4)]
    # Inside the price band but rated below 4
    records += [make_vendor(f"r{i}", price=1000 + i * 300, rating=3.9 - i * 0.5) for i in range(5)]
    return records


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "vendors.db")


@pytest.fixture()
def engine(db_path: str) -> DiscoveryEngine:
    engine = DiscoveryEngine(db_path=db_path, backend_url="")
    assert engine.init_database()
    return engine


@pytest.fixture()
def seeded_engine(engine: DiscoveryEngine) -> DiscoveryEngine:
    engine.db.vendors.save_batch(photography_catalog())
    return engine
