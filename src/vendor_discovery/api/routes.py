"""
API роуты выдачи вендоров.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from vendor_discovery.config.settings import settings
from vendor_discovery.engine import category_base
from vendor_discovery.gis import locator
from vendor_discovery.models.filter_state import LOCATIONS, OCCASIONS, ViewMode, occasion_label
from vendor_discovery.models.vendor import Coordinates
from vendor_discovery.models.view_models import ErrorStateView
from vendor_discovery.query.codec import encode

router = APIRouter()

AUTH_COOKIE = "auth_token"

# Шаблоны
base_dir = Path(__file__).parent.parent
templates = Jinja2Templates(directory=str(base_dir / "web" / "templates"))


# Pydantic models
class ApplyFiltersRequest(BaseModel):
    controls: Dict[str, Any] = {}
    query: str = ""                 # Текущее состояние (view и limit сохраняются)
    path: str = "/vendors"
    category: Optional[str] = None


class SelectFacetRequest(BaseModel):
    query: str = ""
    facet: str
    value: Optional[Any] = None
    path: str = "/vendors"
    category: Optional[str] = None


class SetViewRequest(BaseModel):
    query: str = ""
    view: ViewMode
    path: str = "/vendors"


class GoToPageRequest(BaseModel):
    query: str = ""
    page: int
    total_pages: int
    path: str = "/vendors"


class ToggleSavedRequest(BaseModel):
    vendor_id: str
    user_id: Optional[int] = None


class OpenSessionRequest(BaseModel):
    query: str = ""
    category: Optional[str] = None


class HoverRequest(BaseModel):
    vendor_id: Optional[str] = None     # None = курсор ушёл с карточки


def _base_for(category: Optional[str]):
    return category_base(category) if category else None


def _auth_token(request: Request) -> Optional[str]:
    """Токен зрителя для бэкенда избранного: "Authorization: Bearer ..." или cookie auth_token."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(AUTH_COOKIE) or None


def _render_listing(request: Request, base=None, path: str = "/vendors"):
    from .app import get_engine
    engine = get_engine()

    user_id = request.query_params.get("user_id")
    user_id = int(user_id) if user_id and user_id.isdigit() else None

    state, outcome, page = engine.render_page(
        str(request.query_params), user_id=user_id, base=base, path=path, auth_token=_auth_token(request)
    )
    context = {
        "state": state,
        "page": page,
        "is_error": isinstance(page, ErrorStateView),
        "locations": LOCATIONS,
        "occasions": [(slug, occasion_label(slug)) for slug in OCCASIONS],
        "path": path,
    }
    return templates.TemplateResponse(request, "vendors.html", context)


# ==========================================
# HTML PAGES
# ==========================================

@router.get("/vendors")
def read_vendors(request: Request):
    """Страница каталога вендоров."""
    return _render_listing(request)


@router.get("/categories/{category}")
def read_category(request: Request, category: str):
    """Страница категории: категория зафиксирована, только рекомендованные."""
    return _render_listing(request, base=category_base(category), path=f"/categories/{category}")


# ==========================================
# LISTING API
# ==========================================

@router.get("/api/vendors")
def get_vendors(request: Request, user_id: Optional[int] = None, category: Optional[str] = None):
    """JSON-выдача: состояние, результат и view-модель страницы."""
    from .app import get_engine
    engine = get_engine()

    path = f"/categories/{category}" if category else "/vendors"
    state, outcome, page = engine.render_page(
        str(request.query_params), user_id=user_id, base=_base_for(category), path=path,
        auth_token=_auth_token(request),
    )
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=outcome.error.message)

    return {
        "query": encode(state),
        "view": state.view.value,
        "result": outcome.result.to_dict(),
        "page": page.to_dict(),
    }


@router.get("/api/map/center")
def get_map_center(request: Request, category: Optional[str] = None):
    """Центр и границы карты для текущей страницы выдачи."""
    from .app import get_engine
    engine = get_engine()

    state = engine.resolve_state(str(request.query_params), _base_for(category))
    outcome = engine.fetch(state)
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=outcome.error.message)

    vendors = outcome.result.items
    middle = locator.center(vendors, default=Coordinates(*settings.default_center))
    box = locator.bounds(vendors)
    return {
        "center": middle.to_dict(),
        "zoom": settings.map_zoom,
        "bounds": [box[0].to_dict(), box[1].to_dict()] if box else None,
        "located": len(locator.located(vendors)),
    }


# ==========================================
# FILTERS API
# ==========================================

@router.post("/api/filters/apply")
def apply_filters(req: ApplyFiltersRequest):
    """Собирает фильтры из значений контролов и возвращает новый адрес."""
    from .app import get_engine
    engine = get_engine()

    current = engine.resolve_state(req.query)
    composer = engine.composer(path=req.path, base=_base_for(req.category))
    return composer.apply(req.controls, current).to_dict()


@router.post("/api/filters/select")
def select_facet(req: SelectFacetRequest):
    """Выбор "таблетки" фасета (повторный выбор снимает его)."""
    from .app import get_engine
    engine = get_engine()

    base = _base_for(req.category)
    state = engine.resolve_state(req.query, base)
    composer = engine.composer(path=req.path, base=base)
    try:
        return composer.select(state, req.facet, req.value).to_dict()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/filters/view")
def set_view(req: SetViewRequest):
    """Переключение список / карта."""
    from .app import get_engine
    engine = get_engine()

    state = engine.resolve_state(req.query)
    return engine.composer(path=req.path).set_view(state, req.view).to_dict()


@router.post("/api/filters/page")
def go_to_page(req: GoToPageRequest):
    """Переход на страницу; вне диапазона — ничего не происходит."""
    from .app import get_engine
    engine = get_engine()

    state = engine.resolve_state(req.query)
    location = engine.composer(path=req.path).go_to_page(state, req.page, req.total_pages)
    if location is None:
        return {"status": "ignored"}
    return location.to_dict()


# ==========================================
# SAVED VENDORS API
# ==========================================

@router.get("/api/saved-vendors")
def get_saved_vendors(request: Request, user_id: Optional[int] = None):
    """Сохранённые вендоры пользователя."""
    from .app import get_engine
    engine = get_engine()
    return {"saved": engine.saved_set(user_id, _auth_token(request)).snapshot()}


@router.post("/api/saved-vendors/toggle")
def toggle_saved_vendor(request: Request, req: ToggleSavedRequest):
    """Переключает "сохранён" для вендора."""
    from .app import get_engine
    engine = get_engine()
    return engine.toggle_saved(req.user_id, req.vendor_id, auth_token=_auth_token(request)).to_dict()


@router.get("/api/vendors/{slug}/share")
def share_vendor(slug: str, name: Optional[str] = None):
    """Данные для "Поделиться" (без платформенного share — ссылка для копирования)."""
    from .app import get_engine
    engine = get_engine()

    if name is None:
        vendor = engine.db.vendors.get_by_slug(slug)
        if vendor is None:
            raise HTTPException(status_code=404, detail=f"Vendor not found: {slug}")
        name = vendor.business_name

    return engine.share.share(name, slug).to_dict()


# ==========================================
# CROSS-VIEW SYNC API
# ==========================================

@router.post("/api/discovery/sessions")
def open_session(req: OpenSessionRequest):
    """Открывает канал синхронизации для текущей страницы выдачи."""
    from .app import get_engine
    engine = get_engine()

    state = engine.resolve_state(req.query, _base_for(req.category))
    outcome = engine.fetch(state)
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=outcome.error.message)

    marker_ids = [v.id for v in locator.located(outcome.result.items)]
    return engine.sync.open_session(marker_ids).to_dict()


@router.delete("/api/discovery/{token}")
def close_session(token: str):
    from .app import get_engine
    engine = get_engine()
    if not engine.sync.close_session(token):
        raise HTTPException(status_code=404, detail="Unknown session")
    return {"status": "ok"}


@router.post("/api/discovery/{token}/hover")
def hover_card(token: str, req: HoverRequest):
    """Наведение на карточку (vendor_id) или уход с неё (vendor_id=null)."""
    from .app import get_engine
    engine = get_engine()

    session = engine.sync.get(token)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session")

    if req.vendor_id is None:
        session.publisher.leave()
    else:
        session.publisher.enter(req.vendor_id)
    return session.to_dict()


@router.post("/api/discovery/{token}/markers/{vendor_id}/click")
def click_marker(token: str, vendor_id: str):
    """Клик по маркеру переключает его попап."""
    from .app import get_engine
    engine = get_engine()

    session = engine.sync.get(token)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session")

    session.popups.marker_click(vendor_id)
    return session.to_dict()
