"""Restaurant service: CRUD for restaurants owned by a user."""

from typing import Any, Iterable, Mapping, Optional

import structlog

from qrbites.core.exceptions import ForbiddenError
from qrbites.core.pagination import Page, QueryPolicy
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.domain.schemas.restaurant import RestaurantCreate, RestaurantUpdate
from qrbites.infrastructure.cache import CacheBackend, invalidate_public_routes

logger = structlog.get_logger(__name__)

RESTAURANT_POLICY = QueryPolicy(
    exact_match=("isActive",),
    regex_match=("name",),
    allowed_sort_fields=("name", "createdAt", "updatedAt"),
)


def _json(model) -> Any:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def list_restaurants(repo: RestaurantRepository, params: Mapping[str, Any], user: User,
                     owned_ids: Optional[Iterable[int]]) -> Page[Restaurant]:
    criteria = []
    if not user.is_admin:
        criteria.append(Restaurant.id.in_(list(owned_ids or [])))
    return repo.find_page(params, RESTAURANT_POLICY, *criteria)


def create_restaurant(repo: RestaurantRepository, cache: CacheBackend, user: User,
                      payload: RestaurantCreate, logo_url: Optional[str] = None) -> Restaurant:
    data = {
        "user_id": user.id,
        "name": payload.name,
        "description": payload.description,
        "location": _json(payload.location),
        "contact": _json(payload.contact),
        "hours": [_json(entry) for entry in payload.hours],
        "logo_url": logo_url or (str(payload.logo_url) if payload.logo_url else None),
        "is_active": payload.is_active,
    }
    restaurant = repo.create(data)
    invalidate_public_routes(cache)
    logger.info("Restaurant created", restaurant_id=restaurant.id, user_id=user.id)
    return restaurant


def update_restaurant(repo: RestaurantRepository, cache: CacheBackend, user: User,
                      restaurant: Restaurant, payload: RestaurantUpdate,
                      logo_url: Optional[str] = None) -> Restaurant:
    fields = payload.model_fields_set
    data = payload.model_dump(include=fields & {"name", "description", "is_active"})

    # Nested objects merge into what is stored
    if "location" in fields and payload.location is not None:
        data["location"] = {**(restaurant.location or {}), **_json(payload.location)}
    if "contact" in fields and payload.contact is not None:
        data["contact"] = {**(restaurant.contact or {}), **_json(payload.contact)}
    if "hours" in fields and payload.hours is not None:
        data["hours"] = [_json(entry) for entry in payload.hours]
    if "logo_url" in fields:
        data["logo_url"] = str(payload.logo_url) if payload.logo_url else None
    if logo_url:
        data["logo_url"] = logo_url

    restaurant = repo.update(restaurant, data)
    invalidate_public_routes(cache)
    logger.info("Restaurant updated", restaurant_id=restaurant.id, user_id=user.id)
    return restaurant


def delete_restaurant(repo: RestaurantRepository, cache: CacheBackend, user: User,
                      restaurant: Restaurant) -> None:
    """Delete a restaurant together with its menus and their items."""
    restaurant_id = restaurant.id
    repo.delete(restaurant)
    invalidate_public_routes(cache)
    logger.info("Restaurant deleted", restaurant_id=restaurant_id, user_id=user.id)


def set_logo(repo: RestaurantRepository, cache: CacheBackend, user: User,
             restaurant: Restaurant, logo_url: str) -> Restaurant:
    restaurant = repo.update(restaurant, {"logo_url": logo_url})
    invalidate_public_routes(cache)
    logger.info("Restaurant logo updated", restaurant_id=restaurant.id, user_id=user.id)
    return restaurant


def ensure_owned(user: User, owned_ids: Optional[Iterable[int]], restaurant_id: int) -> None:
    """Reject a non-admin filtering by a restaurant they do not own."""
    if user.is_admin:
        return
    if restaurant_id not in set(owned_ids or []):
        raise ForbiddenError("Not authorized to access this restaurant")
