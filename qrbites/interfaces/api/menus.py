"""Menu API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from qrbites.application.services import menu_service
from qrbites.core.exceptions import NotFoundError
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.domain.schemas.common import ApiResponse, PaginatedResponse, paginated
from qrbites.domain.schemas.menu import MenuCreate, MenuDetail, MenuImageRead, MenuRead, MenuUpdate, QrCodeRead
from qrbites.infrastructure.cache import CacheBackend, get_cache
from qrbites.infrastructure.cloudinary_api import CloudinaryClient, get_storage
from qrbites.interfaces.api.deps import (
    add_user_restaurants,
    check_menu_ownership,
    check_restaurant_ownership_for_creation,
    get_current_user,
)
from qrbites.interfaces.api.uploads import StagedUpload, upload_single, validate_and_upload
from qrbites.interfaces.deps import get_menu_repository

router = APIRouter(prefix="/api/menus", tags=["Menus"], dependencies=[Depends(rate_limit("api"))])


@router.get("", response_model=PaginatedResponse[MenuRead])
def list_menus(
    request: Request,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    repo: MenuRepository = Depends(get_menu_repository),
):
    """List menus. Filters: restaurantId, name."""
    return paginated(menu_service.list_menus(repo, request.query_params, user, owned), MenuRead)


@router.post("", response_model=ApiResponse[MenuRead], status_code=status.HTTP_201_CREATED)
async def create_menu(
    restaurant: Restaurant = Depends(check_restaurant_ownership_for_creation),
    user: User = Depends(get_current_user),
    staged: StagedUpload[MenuCreate] = Depends(validate_and_upload(MenuCreate, "menu", "images", multiple=True)),
    repo: MenuRepository = Depends(get_menu_repository),
    storage: CloudinaryClient = Depends(get_storage),
    cache: CacheBackend = Depends(get_cache),
):
    """
    Create a menu and its QR code.

    If the QR code cannot be generated the menu is removed again and the
    uploaded images are deleted.
    """
    menu = await menu_service.create_menu(repo, storage, cache, user, staged.payload, staged.urls)
    return {"success": True, "data": MenuRead.model_validate(menu)}


@router.get("/{id}", response_model=ApiResponse[MenuDetail])
def get_menu(
    menu: Menu = Depends(check_menu_ownership),
    repo: MenuRepository = Depends(get_menu_repository),
):
    detail = repo.get_with_items(menu.id)
    if detail is None:
        raise NotFoundError("Menu not found")
    return {"success": True, "data": MenuDetail.model_validate(detail)}


@router.put("/{id}", response_model=ApiResponse[MenuRead])
def update_menu(
    menu: Menu = Depends(check_menu_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload[MenuUpdate] = Depends(validate_and_upload(MenuUpdate, "menu", "images", multiple=True)),
    repo: MenuRepository = Depends(get_menu_repository),
    cache: CacheBackend = Depends(get_cache),
):
    updated = menu_service.update_menu(repo, cache, user, menu, staged.payload, staged.urls)
    return {"success": True, "data": MenuRead.model_validate(updated)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu(
    menu: Menu = Depends(check_menu_ownership),
    user: User = Depends(get_current_user),
    repo: MenuRepository = Depends(get_menu_repository),
    cache: CacheBackend = Depends(get_cache),
):
    menu_service.delete_menu(repo, cache, user, menu)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{id}/image", response_model=ApiResponse[MenuImageRead])
def upload_menu_image(
    menu: Menu = Depends(check_menu_ownership),
    user: User = Depends(get_current_user),
    staged: StagedUpload = Depends(upload_single("menu", "image")),
    repo: MenuRepository = Depends(get_menu_repository),
    cache: CacheBackend = Depends(get_cache),
):
    menu = menu_service.set_image(repo, cache, user, menu, staged.url)
    return {"success": True, "data": MenuImageRead(image_url=menu.image_url)}


@router.post("/{id}/qrcode", response_model=ApiResponse[QrCodeRead])
async def regenerate_qr_code(
    menu: Menu = Depends(check_menu_ownership),
    user: User = Depends(get_current_user),
    repo: MenuRepository = Depends(get_menu_repository),
    storage: CloudinaryClient = Depends(get_storage),
    cache: CacheBackend = Depends(get_cache),
):
    result = await menu_service.regenerate_qr_code(repo, storage, cache, user, menu)
    return {"success": True, "data": QrCodeRead.model_validate(result)}
