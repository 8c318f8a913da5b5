"""User API routes: admin management and own-account actions."""

from fastapi import APIRouter, Depends, Path, Request, Response, status

from qrbites.application.services import user_service
from qrbites.core.pagination import MAX_SQL_INT
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.models.user import User
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.domain.schemas.auth import UserCreate, UserRead, UserUpdate
from qrbites.domain.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, paginated
from qrbites.interfaces.api.deps import get_current_user, require_admin
from qrbites.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"], dependencies=[Depends(rate_limit("api"))])


@router.get("", response_model=PaginatedResponse[UserRead])
def list_users(
    request: Request,
    admin: User = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository),
):
    """List users (admin). Filters: role, isActive, search."""
    return paginated(user_service.list_users(users, admin, request.query_params), UserRead)


@router.post("", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    admin: User = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository),
):
    user = user_service.create_user(users, admin, body)
    return {"success": True, "data": UserRead.model_validate(user)}


@router.delete("/account", response_model=MessageResponse)
def deactivate_account(user: User = Depends(get_current_user), users: UserRepository = Depends(get_user_repository)):
    user_service.deactivate_account(users, user)
    return MessageResponse(message="Account deactivated successfully")


@router.get("/{id}", response_model=ApiResponse[UserRead])
def get_user(
    id: int = Path(..., le=MAX_SQL_INT),
    user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    return {"success": True, "data": UserRead.model_validate(user_service.get_user(users, user, id))}


@router.put("/{id}", response_model=ApiResponse[UserRead])
def update_user(
    body: UserUpdate,
    id: int = Path(..., le=MAX_SQL_INT),
    user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    updated = user_service.update_user(users, user, id, body)
    return {"success": True, "data": UserRead.model_validate(updated)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    id: int = Path(..., le=MAX_SQL_INT),
    admin: User = Depends(require_admin),
    users: UserRepository = Depends(get_user_repository),
):
    user_service.delete_user(users, admin, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
