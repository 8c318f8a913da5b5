"""Public API routes: what guests see after scanning a menu QR code. No auth."""

from typing import Callable, Optional

import structlog
from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import RedirectResponse

from qrbites.application.services import public_service
from qrbites.core.pagination import MAX_SQL_INT
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.infrastructure.cache import CacheBackend, get_cache
from qrbites.interfaces.deps import get_menu_item_repository, get_menu_repository, get_restaurant_repository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/public", tags=["Public"])
redirect_router = APIRouter(tags=["Public"])


def _cache_key(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def cached_response(request: Request, cache: CacheBackend, build: Callable[[], dict]) -> dict:
    """Serve from the cache when possible; otherwise build and store the response."""
    key = _cache_key(request)
    hit = cache.get(key)
    if hit is not None:
        logger.debug("Cache hit", key=key)
        return {**hit, "cached": True}

    body = {"success": True, "data": build()}
    cache.set(key, body)
    return body


@router.get("/menus/{menu_id}", dependencies=[Depends(rate_limit("public_menu"))])
def get_public_menu(
    request: Request,
    menu_id: int = Path(..., le=MAX_SQL_INT),
    menus: MenuRepository = Depends(get_menu_repository),
    items: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    """Active menu with its available items grouped by category."""
    return cached_response(request, cache, lambda: public_service.get_public_menu(menus, items, menu_id))


@router.get("/menus/{menu_id}/items", dependencies=[Depends(rate_limit("public_menu"))])
def get_public_menu_items(
    request: Request,
    menu_id: int = Path(..., le=MAX_SQL_INT),
    menus: MenuRepository = Depends(get_menu_repository),
    items: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    """Paginated available items. Filters: category, search."""
    return cached_response(
        request, cache,
        lambda: public_service.get_public_menu_items(menus, items, menu_id, request.query_params),
    )


@router.get("/restaurants/{restaurant_id}", dependencies=[Depends(rate_limit("public_restaurant"))])
def get_public_restaurant(
    request: Request,
    restaurant_id: int = Path(..., le=MAX_SQL_INT),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    menus: MenuRepository = Depends(get_menu_repository),
    cache: CacheBackend = Depends(get_cache),
):
    return cached_response(
        request, cache,
        lambda: public_service.get_public_restaurant(restaurants, menus, restaurant_id),
    )


@redirect_router.get("/r/{menu_id}", dependencies=[Depends(rate_limit("qr_scan"))])
def scan_menu(
    menu_id: int = Path(..., le=MAX_SQL_INT),
    restaurant: Optional[str] = None,
    menus: MenuRepository = Depends(get_menu_repository),
):
    """Target of every printed QR code; sends the guest on to the frontend menu page."""
    return RedirectResponse(public_service.menu_redirect_url(menus, menu_id, restaurant), status_code=302)
