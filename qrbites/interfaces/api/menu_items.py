"""Menu item API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from qrbites.application.services import menu_item_service
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.models.user import User
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.domain.schemas.common import ApiResponse, PaginatedResponse, paginated
from qrbites.domain.schemas.menu_item import MenuItemCreate, MenuItemImageRead, MenuItemRead, MenuItemUpdate
from qrbites.infrastructure.cache import CacheBackend, get_cache
from qrbites.interfaces.api.deps import (
    add_user_restaurants,
    check_menu_item_ownership,
    check_menu_ownership_for_creation,
    get_current_user,
)
from qrbites.interfaces.api.uploads import StagedUpload, upload_single, validate_and_upload
from qrbites.interfaces.deps import get_menu_item_repository

router = APIRouter(prefix="/api/menu-items", tags=["Menu items"], dependencies=[Depends(rate_limit("api"))])


@router.get("", response_model=PaginatedResponse[MenuItemRead])
def list_menu_items(
    request: Request,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    repo: MenuItemRepository = Depends(get_menu_item_repository),
):
    page = menu_item_service.list_menu_items(repo, request.query_params, user, owned)
    return paginated(page, MenuItemRead)


@router.post("", response_model=ApiResponse[MenuItemRead], status_code=status.HTTP_201_CREATED)
def create_menu_item(
    menu: Menu = Depends(check_menu_ownership_for_creation),
    user: User = Depends(get_current_user),
    staged: StagedUpload[MenuItemCreate] = Depends(validate_and_upload(MenuItemCreate, "menuItem", "image")),
    repo: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    item = menu_item_service.create_menu_item(repo, cache, user, staged.payload, staged.url)
    return {"success": True, "data": MenuItemRead.model_validate(item)}


@router.get("/{id}", response_model=ApiResponse[MenuItemRead])
def get_menu_item(item: MenuItem = Depends(check_menu_item_ownership)):
    return {"success": True, "data": MenuItemRead.model_validate(item)}


@router.put("/{id}", response_model=ApiResponse[MenuItemRead])
def update_menu_item(
    item: MenuItem = Depends(check_menu_item_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload[MenuItemUpdate] = Depends(validate_and_upload(MenuItemUpdate, "menuItem", "image")),
    repo: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    updated = menu_item_service.update_menu_item(repo, cache, user, item, staged.payload, staged.url)
    return {"success": True, "data": MenuItemRead.model_validate(updated)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item: MenuItem = Depends(check_menu_item_ownership),
    user: User = Depends(get_current_user),
    repo: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    menu_item_service.delete_menu_item(repo, cache, user, item)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{id}/image", response_model=ApiResponse[MenuItemImageRead])
def upload_menu_item_image(
    item: MenuItem = Depends(check_menu_item_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload = Depends(upload_single("menuItem", "image")),
    repo: MenuItemRepository = Depends(get_menu_item_repository),
    cache: CacheBackend = Depends(get_cache),
):
    item = menu_item_service.set_image(repo, cache, user, item, staged.url)
    return {"success": True, "data": MenuItemImageRead(image_url=item.image_url)}
