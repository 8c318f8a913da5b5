"""FastAPI dependencies: JWT auth, role checks and resource ownership."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from qrbites.application.services.auth_service import decode_access_token
from qrbites.application.services.ownership import (
    MenuItemOwnership,
    MenuOwnership,
    RestaurantOwnership,
    authorize,
)
from qrbites.application.services.upload_service import IncomingFile
from qrbites.core.exceptions import BadRequestError, ForbiddenError, UnauthorizedError
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.infrastructure.database import get_db
from qrbites.interfaces.deps import get_restaurant_repository

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def _load_user(db: Session, token: str) -> User:
    payload = decode_access_token(token)
    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token payload") from None

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User account is disabled")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract and validate the current user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authorized, no token")
    return _load_user(db, credentials.credentials)


def optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """The current user when a valid token is sent, otherwise None."""
    if credentials is None:
        return None
    try:
        return _load_user(db, credentials.credentials)
    except UnauthorizedError as e:
        logger.debug("Optional auth failed", error=e.message)
        return None


def restrict_to(*roles: str):
    """Require one of the given roles."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning("Restricted route access denied", user_id=user.id, role=user.role)
            raise ForbiddenError("Not authorized to access this route")
        return user

    return dependency


require_admin = restrict_to("admin")


def add_user_restaurants(
    user: User = Depends(get_current_user),
    repo: RestaurantRepository = Depends(get_restaurant_repository),
) -> Optional[List[int]]:
    """IDs of the caller's restaurants; None for admins, who are not filtered."""
    if user.is_admin:
        return None
    return repo.ids_for_owner(user.id)


@dataclass
class RequestPayload:
    """Body fields and uploaded files of a JSON or multipart request."""
    fields: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, List[IncomingFile]] = field(default_factory=dict)

    def files_for(self, field_name: str) -> List[IncomingFile]:
        return self.files.get(field_name, [])


def _decode_form_value(value: str) -> Any:
    # Nested objects and arrays arrive JSON-encoded inside multipart forms
    stripped = value.strip()
    if stripped[:1] in ("{", "["):
        try:
            return json.loads(stripped)
        except ValueError:
            return value
    return value


async def get_request_payload(request: Request) -> RequestPayload:
    """Parse the body once per request, whatever its encoding."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        payload = RequestPayload()
        form = await request.form()
        for key in form.keys():
            values = form.getlist(key)
            uploads = [value for value in values if isinstance(value, UploadFile)]
            plain = [_decode_form_value(value) for value in values if not isinstance(value, UploadFile)]
            if uploads:
                payload.files[key] = [
                    IncomingFile(
                        filename=upload.filename or "",
                        content_type=upload.content_type or "",
                        content=await upload.read(),
                    )
                    for upload in uploads
                    if upload.filename
                ]
            if plain:
                payload.fields[key] = plain[0] if len(plain) == 1 else plain
        return payload

    body = await request.body()
    if not body.strip():
        return RequestPayload()
    try:
        data = json.loads(body)
    except ValueError:
        raise BadRequestError("Invalid JSON body") from None
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return RequestPayload(fields=data)


def check_restaurant_ownership(
    id: str,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    db: Session = Depends(get_db),
) -> Restaurant:
    return authorize(db, RestaurantOwnership(), id, user, owned or [])


def check_menu_ownership(
    id: str,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    db: Session = Depends(get_db),
) -> Menu:
    return authorize(db, MenuOwnership(), id, user, owned or [])


def check_menu_item_ownership(
    id: str,
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    db: Session = Depends(get_db),
) -> MenuItem:
    return authorize(db, MenuItemOwnership(), id, user, owned or [])


def check_restaurant_ownership_for_creation(
    payload: RequestPayload = Depends(get_request_payload),
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    db: Session = Depends(get_db),
) -> Restaurant:
    """Parent restaurant named by ``restaurantId`` in the body."""
    return authorize(db, RestaurantOwnership(), payload.fields.get("restaurantId"), user, owned or [])


def check_menu_ownership_for_creation(
    payload: RequestPayload = Depends(get_request_payload),
    user: User = Depends(get_current_user),
    owned: Optional[List[int]] = Depends(add_user_restaurants),
    db: Session = Depends(get_db),
) -> Menu:
    """Parent menu named by ``menuId`` in the body."""
    return authorize(db, MenuOwnership(), payload.fields.get("menuId"), user, owned or [])
