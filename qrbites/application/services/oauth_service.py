"""OAuth service: Google sign-in with auto-linking by email."""

from typing import Optional

import structlog
from authlib.integrations.starlette_client import OAuth

from qrbites.config import get_settings
from qrbites.core.encryption import encrypt
from qrbites.core.exceptions import BadRequestError, UnauthorizedError
from qrbites.domain.models.user import ROLE_USER, User
from qrbites.domain.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"

_oauth: Optional[OAuth] = None


def get_oauth() -> OAuth:
    """Authlib registry; Google is registered only when credentials are configured."""
    global _oauth
    if _oauth is None:
        settings = get_settings()
        _oauth = OAuth()
        if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET:
            _oauth.register(
                name="google",
                client_id=settings.GOOGLE_CLIENT_ID,
                client_secret=settings.GOOGLE_CLIENT_SECRET,
                server_metadata_url=GOOGLE_METADATA_URL,
                client_kwargs={"scope": "openid email profile"},
            )
    return _oauth


def google_client():
    client = get_oauth().create_client("google")
    if client is None:
        raise BadRequestError("Google OAuth is not configured")
    return client


def _save_credential(users: UserRepository, user: User, provider: str, provider_id: str,
                     email: str, profile: dict, tokens: dict) -> None:
    users.add_credential(
        user,
        provider=provider,
        provider_id=provider_id,
        email=email,
        display_name=profile.get("name"),
        profile_picture=profile.get("picture"),
        access_token=encrypt(tokens.get("access_token")),
        refresh_token=encrypt(tokens.get("refresh_token")),
    )


def find_or_create_oauth_user(users: UserRepository, provider: str, profile: dict, tokens: dict) -> User:
    """
    Resolve an OAuth profile to a user.

    A known credential logs its user in. Otherwise a user with the same
    email gets the credential linked. Otherwise a new account is created.
    """
    email = (profile.get("email") or "").strip().lower()
    if not email:
        raise BadRequestError("Email is required from OAuth provider")
    provider_id = str(profile.get("sub") or profile.get("id") or "")
    if not provider_id:
        raise BadRequestError("OAuth profile has no subject identifier")

    credential = users.get_credential(provider, provider_id)
    if credential:
        logger.info("Existing OAuth user logged in", provider=provider, user_id=credential.user_id)
        return credential.user

    existing = users.get_by_email(email)
    if existing:
        _save_credential(users, existing, provider, provider_id, email, profile, tokens)
        logger.info("Linked OAuth identity to existing user", provider=provider, user_id=existing.id)
        return existing

    user = users.create({
        "email": email,
        "name": (profile.get("name") or "")[:50] or None,
        "auth_provider": provider,
        "role": ROLE_USER,
        "is_active": True,
    })
    _save_credential(users, user, provider, provider_id, email, profile, tokens)
    logger.info("New OAuth user created", provider=provider, user_id=user.id)
    return user


def ensure_active(user: User) -> User:
    if not user.is_active:
        raise UnauthorizedError("Account is disabled")
    return user
