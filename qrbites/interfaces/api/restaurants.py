"""Restaurant API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from qrbites.application.services import restaurant_service
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.domain.schemas.common import ApiResponse, PaginatedResponse, paginated
from qrbites.domain.schemas.restaurant import LogoRead, RestaurantCreate, RestaurantRead, RestaurantUpdate
from qrbites.infrastructure.cache import CacheBackend, get_cache
from qrbites.interfaces.api.deps import add_user_restaurants, check_restaurant_ownership, get_current_user
from qrbites.interfaces.api.uploads import StagedUpload, upload_single, validate_and_upload
from qrbites.interfaces.deps import get_restaurant_repository

router = APIRouter(prefix="/api/restaurants", tags=["Restaurants"], dependencies=[Depends(rate_limit("api"))])


@router.get("", response_model=PaginatedResponse[RestaurantRead])
def list_restaurants(
    request: Request,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
):
    """List restaurants. Non-admins only see their own."""
    page = restaurant_service.list_restaurants(repo, request.query_params, user, owned)
    return paginated(page, RestaurantRead)


@router.post("", response_model=ApiResponse[RestaurantRead], status_code=status.HTTP_201_CREATED)
def create_restaurant(
    user: User = Depends(get_current_user),
    staged: StagedUpload[RestaurantCreate] = Depends(validate_and_upload(RestaurantCreate, "restaurant", "logo")),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    cache: CacheBackend = Depends(get_cache),
):
    """Create a restaurant; accepts JSON or multipart with an optional ``logo`` file."""
    restaurant = restaurant_service.create_restaurant(repo, cache, user, staged.payload, staged.url)
    return {"success": True, "data": RestaurantRead.model_validate(restaurant)}


@router.get("/{id}", response_model=ApiResponse[RestaurantRead])
def get_restaurant(restaurant: Restaurant = Depends(check_restaurant_ownership)):
    return {"success": True, "data": RestaurantRead.model_validate(restaurant)}


@router.put("/{id}", response_model=ApiResponse[RestaurantRead])
def update_restaurant(
    restaurant: Restaurant = Depends(check_restaurant_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload[RestaurantUpdate] = Depends(validate_and_upload(RestaurantUpdate, "restaurant", "logo")),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    cache: CacheBackend = Depends(get_cache),
):
    updated = restaurant_service.update_restaurant(repo, cache, user, restaurant, staged.payload, staged.url)
    return {"success": True, "data": RestaurantRead.model_validate(updated)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant: Restaurant = Depends(check_restaurant_ownership),
    user: User = Depends(get_current_user),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    cache: CacheBackend = Depends(get_cache),
):
    restaurant_service.delete_restaurant(repo, cache, user, restaurant)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{id}/logo", response_model=ApiResponse[LogoRead])
def upload_logo(
    restaurant: Restaurant = Depends(check_restaurant_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload = Depends(upload_single("restaurant", "logo")),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    cache: CacheBackend = Depends(get_cache),
):
    restaurant = restaurant_service.set_logo(repo, cache, user, restaurant, staged.url)
    return {"success": True, "data": LogoRead(logo_url=restaurant.logo_url)}
