"""Public service: read-only menu and restaurant views for guests scanning a QR code."""

from typing import Any, Dict, List, Mapping
from urllib.parse import urlencode

import structlog
from sqlalchemy import or_

from qrbites.config import get_settings
from qrbites.core.exceptions import NotFoundError
from qrbites.core.pagination import QueryPolicy, escape_like
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.domain.schemas.public import (
    PublicMenu,
    PublicMenuDetail,
    PublicMenuItem,
    PublicMenuLink,
    PublicRestaurant,
)

logger = structlog.get_logger(__name__)

UNCATEGORIZED = "Uncategorized"

PUBLIC_ITEMS_POLICY = QueryPolicy(
    exact_match=("category",),
    allowed_sort_fields=("name", "category", "price"),
    default_sort_by="category",
    default_order="asc",
    default_limit=20,
    max_limit=50,
)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def get_public_menu(menus: MenuRepository, items: MenuItemRepository, menu_id: int) -> dict:
    """Active menu with its available items grouped by category."""
    menu = menus.get_active(menu_id)
    if not menu:
        raise NotFoundError("Menu not found")

    available = items.available_for_menu(menu.id)
    categories = items.categories_for_menu(menu.id)

    items_by_category: Dict[str, List[MenuItem]] = {category: [] for category in categories}
    uncategorized = []
    for item in available:
        if item.category:
            items_by_category[item.category].append(item)
        else:
            uncategorized.append(item)
    if uncategorized:
        items_by_category[UNCATEGORIZED] = uncategorized
        categories = categories + [UNCATEGORIZED]

    detail = PublicMenuDetail(
        menu=PublicMenu.model_validate(menu),
        categories=categories,
        items_by_category={
            category: [PublicMenuItem.model_validate(item) for item in grouped]
            for category, grouped in items_by_category.items()
        },
        total_items=len(available),
    )
    logger.debug("Public menu assembled", menu_id=menu.id, total_items=len(available))
    return _dump(detail)


def get_public_menu_items(menus: MenuRepository, items: MenuItemRepository, menu_id: int,
                          params: Mapping[str, Any]) -> dict:
    """Paginated available items of an active menu, plus the category list for filters."""
    if not menus.get_active(menu_id):
        raise NotFoundError("Menu not found")

    criteria = [MenuItem.menu_id == menu_id, MenuItem.is_available.is_(True)]
    search = params.get("search")
    if search:
        pattern = f"%{escape_like(str(search))}%"
        criteria.append(or_(
            MenuItem.name.ilike(pattern, escape="\\"),
            MenuItem.description.ilike(pattern, escape="\\"),
        ))

    page = items.find_page(params, PUBLIC_ITEMS_POLICY, *criteria)
    return {
        "items": [_dump(PublicMenuItem.model_validate(item)) for item in page.items],
        "pagination": {
            "page": page.page,
            "limit": page.limit,
            "total": page.total,
            "pages": page.pages,
            "hasNextPage": page.has_next_page,
            "hasPrevPage": page.has_prev_page,
        },
        "categories": items.categories_for_menu(menu_id),
    }


def get_public_restaurant(restaurants: RestaurantRepository, menus: MenuRepository, restaurant_id: int) -> dict:
    restaurant = restaurants.get_active(restaurant_id)
    if not restaurant:
        raise NotFoundError("Restaurant not found")

    public = PublicRestaurant(
        id=restaurant.id,
        name=restaurant.name,
        description=restaurant.description,
        logo_url=restaurant.logo_url,
        contact=restaurant.contact,
        location=restaurant.location,
        hours=restaurant.hours or [],
        menus=[PublicMenuLink.model_validate(menu) for menu in menus.active_for_restaurant(restaurant.id)],
    )
    return _dump(public)


def menu_redirect_url(menus: MenuRepository, menu_id: int, restaurant_id: Any = None) -> str:
    """Frontend page a scanned QR code lands on."""
    menu = menus.get_active(menu_id)
    if not menu:
        raise NotFoundError("Menu not found")

    target_restaurant = restaurant_id or menu.restaurant_id
    frontend_url = get_settings().FRONTEND_URL.rstrip("/")
    logger.info("QR code scanned", menu_id=menu.id, restaurant_id=target_restaurant)
    return f"{frontend_url}/view/menu/{menu.id}?{urlencode({'restaurant': target_restaurant})}"
