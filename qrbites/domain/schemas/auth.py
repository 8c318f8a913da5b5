"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from qrbites.domain.schemas.common import CamelModel


def _normalize_email(value: str) -> str:
    return value.strip().lower() if isinstance(value, str) else value


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    name: Optional[str] = None
    confirm_password: Optional[str] = None

    _email = field_validator("email", mode="before")(_normalize_email)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return value

    @field_validator("name")
    @classmethod
    def name_length(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not 2 <= len(value) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    _email = field_validator("email", mode="before")(_normalize_email)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def new_password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("New password must be at least 6 characters long")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password != self.new_password:
            raise ValueError("Passwords do not match")
        return self


class UserCreate(RegisterRequest):
    """Admin-side user creation."""
    role: Literal["user", "admin"] = "user"


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    role: Optional[Literal["user", "admin"]] = None
    is_active: Optional[bool] = None

    _email = field_validator("email", mode="before")(_normalize_email)

    @field_validator("name")
    @classmethod
    def name_length(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not 2 <= len(value) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return value


class UserRead(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    display_name: str
    role: str
    auth_provider: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthData(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    display_name: str
    role: str
    token: str
