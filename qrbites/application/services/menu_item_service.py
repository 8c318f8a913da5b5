"""Menu item service: CRUD for the items of a menu."""

from typing import Any, Iterable, Mapping, Optional

import structlog
from sqlalchemy import select

from qrbites.core.pagination import Page, QueryPolicy
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.models.user import User
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.domain.schemas.menu_item import MenuItemCreate, MenuItemUpdate
from qrbites.infrastructure.cache import CacheBackend, invalidate_public_routes

logger = structlog.get_logger(__name__)

MENU_ITEM_POLICY = QueryPolicy(
    exact_match=("menuId", "category"),
    regex_match=("name",),
    allowed_sort_fields=("name", "category", "price", "createdAt", "updatedAt"),
)


def list_menu_items(repo: MenuItemRepository, params: Mapping[str, Any], user: User,
                    owned_ids: Optional[Iterable[int]]) -> Page[MenuItem]:
    criteria = []
    if not user.is_admin:
        owned_menus = select(Menu.id).where(Menu.restaurant_id.in_(list(owned_ids or [])))
        criteria.append(MenuItem.menu_id.in_(owned_menus))
    return repo.find_page(params, MENU_ITEM_POLICY, *criteria)


def create_menu_item(repo: MenuItemRepository, cache: CacheBackend, user: User,
                     payload: MenuItemCreate, image_url: Optional[str] = None) -> MenuItem:
    data = payload.model_dump()
    data["image_url"] = image_url
    item = repo.create(data)
    invalidate_public_routes(cache)
    logger.info("Menu item created", menu_item_id=item.id, menu_id=item.menu_id, user_id=user.id)
    return item


def update_menu_item(repo: MenuItemRepository, cache: CacheBackend, user: User, item: MenuItem,
                     payload: MenuItemUpdate, image_url: Optional[str] = None) -> MenuItem:
    data = payload.model_dump(exclude_unset=True)
    if image_url:
        data["image_url"] = image_url
    item = repo.update(item, data)
    invalidate_public_routes(cache)
    logger.info("Menu item updated", menu_item_id=item.id, user_id=user.id)
    return item


def delete_menu_item(repo: MenuItemRepository, cache: CacheBackend, user: User, item: MenuItem) -> None:
    item_id = item.id
    repo.delete(item)
    invalidate_public_routes(cache)
    logger.info("Menu item deleted", menu_item_id=item_id, user_id=user.id)


def set_image(repo: MenuItemRepository, cache: CacheBackend, user: User, item: MenuItem,
              image_url: str) -> MenuItem:
    item = repo.update(item, {"image_url": image_url})
    invalidate_public_routes(cache)
    logger.info("Menu item image updated", menu_item_id=item.id, user_id=user.id)
    return item
