"""Auth API routes: register, login, profile, password and Google sign-in."""

from urllib.parse import urlencode

import structlog
from authlib.integrations.base_client import OAuthError
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from qrbites.application.services import auth_service, oauth_service
from qrbites.config import get_settings
from qrbites.core.exceptions import UnauthorizedError
from qrbites.core.rate_limit import rate_limit
from qrbites.domain.models.user import AUTH_PROVIDER_GOOGLE, User
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.domain.schemas.auth import AuthData, ChangePasswordRequest, LoginRequest, RegisterRequest, UserRead
from qrbites.domain.schemas.common import ApiResponse, MessageResponse
from qrbites.interfaces.api.deps import get_current_user
from qrbites.interfaces.deps import get_user_repository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("register"))],
)
def register(body: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    return {"success": True, "data": auth_service.register(users, body)}


@router.post("/login", response_model=ApiResponse[AuthData], dependencies=[Depends(rate_limit("auth"))])
def login(body: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    return {"success": True, "data": auth_service.login(users, body)}


@router.get("/me", response_model=ApiResponse[UserRead])
def get_me(user: User = Depends(get_current_user)):
    return {"success": True, "data": UserRead.model_validate(user)}


@router.put("/password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    auth_service.change_password(users, user, body)
    return MessageResponse(message="Password updated successfully")


@router.get("/google", dependencies=[Depends(rate_limit("auth"))])
async def google_login(request: Request):
    """Redirect to Google's consent screen."""
    client = oauth_service.google_client()
    redirect_uri = str(request.url_for("google_callback"))
    return await client.authorize_redirect(request, redirect_uri)


@router.get("/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    format: str = "redirect",
    users: UserRepository = Depends(get_user_repository),
):
    """Finish Google sign-in; redirect to the frontend with a token, or JSON with ?format=json."""
    client = oauth_service.google_client()
    frontend_url = get_settings().FRONTEND_URL.rstrip("/")
    try:
        token = await client.authorize_access_token(request)
    except OAuthError as e:
        logger.warning("Google OAuth failed", error=e.error)
        if format == "json":
            raise UnauthorizedError("Google authentication failed") from None
        return RedirectResponse(f"{frontend_url}/login?error=google_auth_failed", status_code=302)

    profile = token.get("userinfo") or {}
    user = oauth_service.find_or_create_oauth_user(users, AUTH_PROVIDER_GOOGLE, dict(profile), token)
    data = auth_service.auth_payload(oauth_service.ensure_active(user))

    if format == "json":
        return {"success": True, "data": data.model_dump(by_alias=True)}
    return RedirectResponse(f"{frontend_url}/auth/callback?{urlencode({'token': data.token})}", status_code=302)
