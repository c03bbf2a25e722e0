"""
Коллабораторы каталога вендоров.

- LocalCatalog: каталог в локальной SQLite (VendorRepository)
- HttpCatalogClient: удалённый бэкенд, GET {BACKEND_URL}/vendors/active
"""
import math
import sqlite3
from typing import Optional, Protocol

import requests
from requests.exceptions import JSONDecodeError

from vendor_discovery.config.settings import settings
from vendor_discovery.models.filter_state import FilterState
from vendor_discovery.models.listing import CatalogResponse
from vendor_discovery.models.vendor import VendorSummary
from vendor_discovery.query.codec import to_catalog_params
from vendor_discovery.repositories import VendorRepository
from vendor_discovery.utils.logger import get_logger

CATALOG_UNAVAILABLE_MESSAGE = "Vendor catalog is temporarily unavailable."


class CatalogQuery(Protocol):
    """Контракт каталога: (ListingRequest) -> {data, total_pages, error?}."""

    def query(self, request: FilterState) -> CatalogResponse: ...


def total_pages_for(total: int, page_size: int) -> int:
    """Число страниц; пустая выдача — одна (пустая) страница."""
    if total <= 0:
        return 1
    return math.ceil(total / page_size)


class LocalCatalog:
    """
    Каталог поверх VendorRepository.
    Фильтры, сортировка и пагинация выполняются в SQL.
    """

    def __init__(self, repository: VendorRepository):
        self.repository = repository
        self.logger = get_logger("LocalCatalog")

    def query(self, request: FilterState) -> CatalogResponse:
        try:
            vendors, total = self.repository.search(request)
        except sqlite3.Error as e:
            self.logger.error(f"Local catalog query failed: {e}")
            return CatalogResponse(error=CATALOG_UNAVAILABLE_MESSAGE)

        pages = total_pages_for(total, request.page_size)
        self.logger.debug(
            f"Local catalog: {total} matches, page {request.page}/{pages}, {len(vendors)} on page"
        )
        return CatalogResponse(data=vendors, total_pages=pages)


class HttpCatalogClient:
    """
    Клиент удалённого каталога.
    Ошибки сети и HTTP не поднимаются, а возвращаются в CatalogResponse.error.
    """

    ENDPOINT = "/vendors/active"

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        retries: int = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.backend_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.catalog_timeout_s
        self.retries = retries if retries is not None else settings.catalog_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.logger = get_logger("HttpCatalogClient")

    def query(self, request: FilterState) -> CatalogResponse:
        url = f"{self.base_url}{self.ENDPOINT}"
        params = to_catalog_params(request)

        last_error = "Failed to fetch vendor list."
        for attempt in range(self.retries + 1):
            try:
                resp = self.session.get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
                payload = resp.json()
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else "?"
                last_error = f"Catalog responded with HTTP {status}"
                self.logger.error(f"[catalog] HTTP {status}: {e}")
                if e.response is not None and e.response.status_code < 500:
                    break
            except JSONDecodeError:
                last_error = "Catalog returned invalid JSON"
                self.logger.error("[catalog] Invalid JSON response")
                break
            except requests.exceptions.RequestException as e:
                last_error = f"Catalog request failed: {e}"
                self.logger.error(f"[catalog] Request failed (attempt {attempt + 1}): {e}")
            else:
                return self._parse(payload, request)

        return CatalogResponse(error=last_error)

    def _parse(self, payload: dict, request: FilterState) -> CatalogResponse:
        """{data: [...], pagination: {totalPages}} -> CatalogResponse."""
        if payload.get("success") is False:
            return CatalogResponse(error=payload.get("message") or payload.get("error") or "Catalog error")

        items = []
        for raw in payload.get("data") or []:
            try:
                items.append(VendorSummary.from_dict(raw))
            except (TypeError, ValueError) as e:
                self.logger.debug(f"[catalog] Skipping item: {e}")

        pagination = payload.get("pagination") or {}
        total_pages = pagination.get("totalPages")
        if total_pages is None:
            total_pages = total_pages_for(pagination.get("totalVendors", len(items)), request.page_size)

        self.logger.info(f"[catalog] Fetched {len(items)} vendors")
        return CatalogResponse(data=items, total_pages=max(1, int(total_pages)))
