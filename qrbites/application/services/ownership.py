"""
Ownership checks for restaurant-scoped resources.

Each resolver walks one entity type up its ownership chain
(MenuItem -> Menu -> Restaurant) and reports the owning restaurant id;
``authorize`` is the single guard every route goes through.
"""

from typing import Any, Iterable, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from qrbites.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from qrbites.core.pagination import MAX_SQL_INT
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User

logger = structlog.get_logger(__name__)


class OwnershipResolver:
    """Resolve a resource id to (resource, owning restaurant id)."""
    model: Any = None
    label: str = ""

    def resolve(self, db: Session, resource_id: int) -> Tuple[Optional[Any], Optional[int]]:
        raise NotImplementedError

    @property
    def messages(self) -> dict:
        return {
            "required": f"{self.label} ID is required",
            "not_found": f"{self.label} not found",
            "forbidden": f"Not authorized to access this {self.label.lower()}",
        }


class RestaurantOwnership(OwnershipResolver):
    model = Restaurant
    label = "Restaurant"

    def resolve(self, db, resource_id):
        restaurant = db.get(Restaurant, resource_id)
        return restaurant, restaurant.id if restaurant else None


class MenuOwnership(OwnershipResolver):
    model = Menu
    label = "Menu"

    def resolve(self, db, resource_id):
        menu = db.get(Menu, resource_id)
        return menu, menu.restaurant_id if menu else None


class MenuItemOwnership(OwnershipResolver):
    model = MenuItem
    label = "Menu item"

    def resolve(self, db, resource_id):
        item = db.get(MenuItem, resource_id)
        if item is None:
            return None, None
        return item, item.menu.restaurant_id


def _parse_id(resolver: OwnershipResolver, resource_id: Any) -> int:
    # ints or digit strings only; 1.5, "1.5" and true are not ids
    try:
        parsed = int(str(resource_id))
    except ValueError:
        parsed = None
    if parsed is None or abs(parsed) > MAX_SQL_INT:
        raise BadRequestError(f"Invalid {resolver.label.lower()} ID format")
    return parsed


def authorize(db: Session, resolver: OwnershipResolver, resource_id: Any, user: User,
              owned_restaurant_ids: Iterable[int]) -> Any:
    """
    Load a resource and check the user may touch it.

    Order is fixed: missing id (400), missing resource (404), then the
    ownership compare (403). Admins skip only the compare.
    """
    messages = resolver.messages
    if resource_id in (None, ""):
        raise BadRequestError(messages["required"])
    resource_id = _parse_id(resolver, resource_id)

    resource, restaurant_id = resolver.resolve(db, resource_id)
    if resource is None:
        raise NotFoundError(messages["not_found"])

    if user.is_admin:
        return resource

    if restaurant_id not in set(owned_restaurant_ids):
        logger.warning(
            "Ownership check failed",
            user_id=user.id,
            resource=resolver.label,
            resource_id=resource_id,
        )
        raise ForbiddenError(messages["forbidden"])
    return resource
