"""Auth service: JWT token management, password hashing, register and login."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

import structlog
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from qrbites.config import get_settings
from qrbites.core.exceptions import BadRequestError, ConflictError, UnauthorizedError
from qrbites.domain.models.user import AUTH_PROVIDER_LOCAL, ROLE_USER, User
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.domain.schemas.auth import AuthData, ChangePasswordRequest, LoginRequest, RegisterRequest

logger = structlog.get_logger(__name__)


@lru_cache
def _pwd_context() -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=get_settings().BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return _pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return _pwd_context().verify(plain_password, hashed_password)


def create_access_token(user: User) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + settings.jwt_expires_delta
    to_encode = {"sub": str(user.id), "role": user.role, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode a bearer token. Expired and invalid tokens raise distinct 401s."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired") from None
    except JWTError:
        raise UnauthorizedError("Invalid token") from None


def auth_payload(user: User) -> AuthData:
    return AuthData(
        id=user.id,
        email=user.email,
        name=user.name,
        display_name=user.display_name,
        role=user.role,
        token=create_access_token(user),
    )


def create_user(users: UserRepository, email: str, password: str, name: Optional[str] = None,
                role: str = ROLE_USER) -> User:
    if users.get_by_email(email):
        raise ConflictError("User already exists")
    return users.create({
        "email": email.strip().lower(),
        "password_hash": hash_password(password),
        "name": name,
        "role": role,
        "auth_provider": AUTH_PROVIDER_LOCAL,
    })


def register(users: UserRepository, payload: RegisterRequest) -> AuthData:
    user = create_user(users, payload.email, payload.password, payload.name)
    logger.info("User registered", user_id=user.id, email=user.email)
    return auth_payload(user)


def login(users: UserRepository, payload: LoginRequest) -> AuthData:
    user = users.get_by_email(payload.email)
    if not user:
        raise UnauthorizedError("Invalid credentials")
    if not user.password_hash:
        raise BadRequestError(
            f"This account uses {user.auth_provider} authentication. "
            f"Please sign in with {user.auth_provider.capitalize()}."
        )
    if not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login attempt", email=payload.email)
        raise UnauthorizedError("Invalid credentials")
    if not user.is_active:
        raise UnauthorizedError("Account is disabled")

    logger.info("User logged in", user_id=user.id)
    return auth_payload(user)


def change_password(users: UserRepository, user: User, payload: ChangePasswordRequest) -> None:
    if not user.password_hash:
        raise BadRequestError("Password change is not available for social login accounts")
    if not verify_password(payload.current_password, user.password_hash):
        raise BadRequestError("Current password is incorrect")
    users.update(user, {"password_hash": hash_password(payload.new_password)})
    logger.info("Password changed", user_id=user.id)
