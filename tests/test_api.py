"""REST-boundary tests for the discovery endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from vendor_discovery.api import app as app_module
from vendor_discovery.engine import DiscoveryEngine


class FailingCatalog:
    def query(self, request):
        raise ConnectionError("catalog offline")


@pytest.fixture()
def client(seeded_engine: DiscoveryEngine, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(app_module, "engine_instance", seeded_engine)
    with TestClient(app_module.app) as test_client:
        yield test_client


@pytest.fixture()
def failing_client(db_path: str, monkeypatch: pytest.MonkeyPatch):
    engine = DiscoveryEngine(db_path=db_path, backend_url="", catalog=FailingCatalog())
    monkeypatch.setattr(app_module, "engine_instance", engine)
    with TestClient(app_module.app) as test_client:
        yield test_client


def test_listing_json(client):
    response = client.get("/api/vendors", params={"mainCategory": "photography", "minPrice": "500"})
    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "mainCategory=photography&minPrice=500"
    assert len(body["result"]["items"]) == 7
    assert body["result"]["total_pages"] == 1
    assert len(body["page"]["cards"]) == 7
    assert body["page"]["pagination"] is None


def test_listing_json_reports_fetch_error(failing_client):
    response = failing_client.get("/api/vendors")
    assert response.status_code == 502
    assert "catalog offline" in response.json()["detail"]


def test_listing_page_html(client):
    response = client.get("/vendors", params={"mainCategory": "photography", "minPrice": "500"})
    assert response.status_code == 200
    assert response.text.count('class="vendor-card') == 7


def test_listing_page_shows_retry_state(failing_client):
    response = failing_client.get("/vendors", params={"rating": "4"})
    assert response.status_code == 200
    assert "Something went wrong" in response.text
    assert 'href="/vendors?rating=4"' in response.text


def test_category_page_is_recommended_only(client):
    response = client.get("/categories/photography")
    assert response.status_code == 200
    # none of the seeded vendors is recommended
    assert "No Matching Vendors" in response.text


def test_map_page_and_center(client):
    response = client.get("/api/vendors", params={"view": "map", "mainCategory": "catering"})
    page = response.json()["page"]
    assert page["view"] == "map"
    assert page["session_token"]
    assert page["map"]["markers"]

    center = client.get("/api/map/center", params={"mainCategory": "catering"}).json()
    assert center["center"] == pytest.approx({"lat": 25.2, "lng": 55.27})
    assert center["zoom"] == 11
    assert center["located"] == 10


def test_apply_filters(client):
    response = client.post("/api/filters/apply", json={
        "controls": {"minPrice": "900", "maxPrice": "100", "sort": "recommended"},
        "query": "view=map&page=3",
    })
    assert response.json() == {
        "url": "/vendors?minPrice=100&maxPrice=900&isRecommended=true&view=map",
        "path": "/vendors",
        "query": "minPrice=100&maxPrice=900&isRecommended=true&view=map",
        "scroll": False,
    }


def test_select_facet(client):
    first = client.post("/api/filters/select", json={"query": "page=2", "facet": "rating_floor", "value": 4})
    assert first.json()["url"] == "/vendors?rating=4"

    second = client.post("/api/filters/select", json={"query": "rating=4", "facet": "rating_floor", "value": 4})
    assert second.json()["url"] == "/vendors"

    bad = client.post("/api/filters/select", json={"facet": "colour", "value": "red"})
    assert bad.status_code == 400


def test_view_and_page(client):
    view = client.post("/api/filters/view", json={"query": "rating=4", "view": "map"})
    assert view.json()["url"] == "/vendors?rating=4&view=map"

    page = client.post("/api/filters/page", json={"query": "rating=4", "page": 2, "total_pages": 3})
    assert page.json()["url"] == "/vendors?rating=4&page=2"
    assert page.json()["scroll"] is True

    ignored = client.post("/api/filters/page", json={"page": 9, "total_pages": 3})
    assert ignored.json() == {"status": "ignored"}


def test_saved_vendor_toggle(client):
    anonymous = client.post("/api/saved-vendors/toggle", json={"vendor_id": "p0"})
    assert anonymous.json()["redirect_to"] == "/auth/login"

    saved = client.post("/api/saved-vendors/toggle", json={"vendor_id": "p0", "user_id": 1})
    assert saved.json()["saved"] is True
    assert client.get("/api/saved-vendors", params={"user_id": 1}).json() == {"saved": ["p0"]}

    listing = client.get("/api/vendors", params={"user_id": 1, "mainCategory": "photography", "minPrice": "500"})
    cards = {c["vendor_id"]: c["is_saved"] for c in listing.json()["page"]["cards"]}
    assert cards["p0"] is True

    removed = client.post("/api/saved-vendors/toggle", json={"vendor_id": "p0", "user_id": 1})
    assert removed.json()["saved"] is False


def test_share(client):
    response = client.get("/api/vendors/vendor-p0/share")
    body = response.json()
    assert body["url"].endswith("/vendors/vendor-p0")
    assert body["shared"] is False
    assert body["url"] in body["fallback_message"]

    assert client.get("/api/vendors/missing/share").status_code == 404


def test_discovery_session_hover_and_click(client):
    session = client.post("/api/discovery/sessions", json={"query": "mainCategory=photography&minPrice=500"}).json()
    token = session["token"]

    hovered = client.post(f"/api/discovery/{token}/hover", json={"vendor_id": "p1"}).json()
    assert hovered["open_popup"] == "p1"

    switched = client.post(f"/api/discovery/{token}/hover", json={"vendor_id": "p2"}).json()
    assert switched["open_popup"] == "p2"

    left = client.post(f"/api/discovery/{token}/hover", json={"vendor_id": None}).json()
    assert left["open_popup"] is None

    clicked = client.post(f"/api/discovery/{token}/markers/p3/click").json()
    assert clicked["open_popup"] == "p3"

    assert client.delete(f"/api/discovery/{token}").status_code == 200
    assert client.post(f"/api/discovery/{token}/hover", json={"vendor_id": "p1"}).status_code == 404
