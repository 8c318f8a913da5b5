"""User service: admin user management and self-service profile changes."""

from typing import Any, Mapping

import structlog

from qrbites.application.services.auth_service import create_user as create_local_user
from qrbites.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from qrbites.core.pagination import Page, QueryPolicy
from qrbites.domain.models.user import User
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.domain.schemas.auth import UserCreate, UserUpdate

logger = structlog.get_logger(__name__)

USER_POLICY = QueryPolicy(
    exact_match=("role", "isActive"),
    allowed_sort_fields=("name", "email", "role", "createdAt", "updatedAt"),
)


def list_users(users: UserRepository, admin: User, params: Mapping[str, Any]) -> Page[User]:
    page = users.search_page(params, USER_POLICY)
    logger.info("Users listed", admin_id=admin.id, count=len(page.items))
    return page


def create_user(users: UserRepository, admin: User, payload: UserCreate) -> User:
    user = create_local_user(users, payload.email, payload.password, payload.name, payload.role)
    logger.info("User created by admin", user_id=user.id, admin_id=admin.id)
    return user


def get_user(users: UserRepository, current: User, user_id: int) -> User:
    if not current.is_admin and current.id != user_id:
        raise ForbiddenError("Not authorized to access this user profile")

    user = users.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def update_user(users: UserRepository, current: User, user_id: int, payload: UserUpdate) -> User:
    if not current.is_admin and current.id != user_id:
        raise ForbiddenError("Not authorized to update this user profile")

    fields = payload.model_fields_set
    if not current.is_admin and fields & {"role", "is_active"}:
        raise ForbiddenError("Not authorized to update role or account status")

    user = users.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    if payload.email and payload.email != user.email:
        existing = users.get_by_email(payload.email)
        if existing and existing.id != user.id:
            raise ConflictError("Email already exists")

    user = users.update(user, payload)
    logger.info("User updated", user_id=user.id, updated_by=current.id)
    return user


def delete_user(users: UserRepository, admin: User, user_id: int) -> None:
    if admin.id == user_id:
        raise BadRequestError("Cannot delete your own admin account")

    user = users.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    users.delete(user)
    logger.info("User deleted", user_id=user_id, admin_id=admin.id)


def deactivate_account(users: UserRepository, user: User) -> None:
    users.update(user, {"is_active": False})
    logger.info("Account deactivated", user_id=user.id)
