# query/codec.py
"""
Кодирование состояния фильтров и режима отображения в query string и обратно.

Публичное API:
- encode(state) -> str
- decode(query) -> DiscoveryState
- to_catalog_params(filters) -> list[tuple[str, str]]

Закон: decode(encode(s)) == s для любого нормализованного s.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

from vendor_discovery.models.filter_state import (
    DEFAULT_PAGE,
    default_page_size,
    ByField,
    DiscoveryState,
    FilterState,
    Recommended,
    ViewMode,
    sort_from_key,
)
from .normalize import (
    format_number,
    normalize_bool,
    normalize_int,
    normalize_non_negative,
    normalize_rating,
    normalize_text,
)

# Порядок параметров на проводе (стабильный, но при разборе не важен)
PARAM_ORDER = (
    "search",
    "location",
    "mainCategory",
    "subCategory",
    "minPrice",
    "maxPrice",
    "rating",
    "sort",
    "occasion",
    "isRecommended",
    "page",
    "limit",
    "view",
)

QueryInput = Union[str, Mapping[str, str], Iterable[tuple]]


def _filter_pairs(filters: FilterState, include_defaults: bool) -> list[tuple[str, str]]:
    """Пары key/value для фильтров. Значения по умолчанию опускаются."""
    pairs: list[tuple[str, str]] = []

    if filters.search_text:
        pairs.append(("search", filters.search_text))
    if filters.location:
        pairs.append(("location", filters.location))
    if filters.main_category:
        pairs.append(("mainCategory", filters.main_category))
    if filters.sub_category:
        pairs.append(("subCategory", filters.sub_category))
    if filters.min_price is not None:
        pairs.append(("minPrice", format_number(filters.min_price)))
    if filters.max_price is not None:
        pairs.append(("maxPrice", format_number(filters.max_price)))
    if filters.rating_floor is not None:
        pairs.append(("rating", str(filters.rating_floor)))
    # sort=recommended и isRecommended=true: альтернативные формы, пишем только вторую
    if isinstance(filters.sort, ByField):
        pairs.append(("sort", filters.sort.key))
    if filters.occasion:
        pairs.append(("occasion", filters.occasion))
    if isinstance(filters.sort, Recommended):
        pairs.append(("isRecommended", "true"))
    if include_defaults or filters.page != DEFAULT_PAGE:
        pairs.append(("page", str(filters.page)))
    if include_defaults or filters.page_size != default_page_size():
        pairs.append(("limit", str(filters.page_size)))

    return pairs


def encode(state: Union[DiscoveryState, FilterState]) -> str:
    """
    Кодирует состояние в query string (без ведущего '?').

    Поля, равные значениям по умолчанию (пустая строка, page=1, view=list,
    limit = размер страницы по умолчанию), опускаются, чтобы URL оставался минимальным.
    """
    if isinstance(state, FilterState):
        state = DiscoveryState(filters=state)

    pairs = _filter_pairs(state.filters, include_defaults=False)
    if state.view != ViewMode.LIST:
        pairs.append(("view", state.view.value))
    return urlencode(pairs)


def to_catalog_params(filters: FilterState) -> list[tuple[str, str]]:
    """Параметры для удалённого каталога: page и limit передаются всегда."""
    return _filter_pairs(filters, include_defaults=True)


def _as_mapping(query: QueryInput) -> dict[str, str]:
    """Первое значение каждого ключа (как URLSearchParams.get)."""
    if isinstance(query, str):
        query = query.strip()
        if "?" in query:
            query = query.split("?", 1)[1]
        pairs = parse_qsl(query, keep_blank_values=True)
    elif isinstance(query, Mapping):
        pairs = list(query.items())
    else:
        pairs = list(query)

    result: dict[str, str] = {}
    for key, value in pairs:
        if key not in result:
            result[key] = value
    return result


def decode(query: QueryInput, max_page_size: Optional[int] = None) -> DiscoveryState:
    """
    Разбирает query string (или mapping) в DiscoveryState.

    - неизвестные ключи игнорируются;
    - некорректные minPrice / maxPrice / page / limit -> значения по умолчанию;
    - page ограничивается снизу единицей;
    - isRecommended=true без другой сортировки -> Recommended().
    """
    params = _as_mapping(query)

    sort = sort_from_key(params.get("sort"))
    if sort is None and normalize_bool(params.get("isRecommended")):
        sort = Recommended()

    page = normalize_int(params.get("page"))
    page_size = normalize_int(params.get("limit"))

    filters = FilterState(
        search_text=normalize_text(params.get("search")),
        location=normalize_text(params.get("location")),
        main_category=normalize_text(params.get("mainCategory")),
        sub_category=normalize_text(params.get("subCategory")),
        min_price=normalize_non_negative(params.get("minPrice")),
        max_price=normalize_non_negative(params.get("maxPrice")),
        rating_floor=normalize_rating(params.get("rating")),
        occasion=normalize_text(params.get("occasion")),
        sort=sort,
        page=page if page is not None and page >= DEFAULT_PAGE else DEFAULT_PAGE,
        page_size=page_size if page_size is not None and page_size > 0 else default_page_size(),
    ).normalized(max_page_size=max_page_size)

    view = ViewMode.MAP if normalize_text(params.get("view")) == ViewMode.MAP.value else ViewMode.LIST
    return DiscoveryState(filters=filters, view=view)


def build_location(path: str, state: Union[DiscoveryState, FilterState]) -> str:
    """Путь + закодированное состояние: '/vendors?minPrice=500'."""
    query = encode(state)
    return f"{path}?{query}" if query else path
