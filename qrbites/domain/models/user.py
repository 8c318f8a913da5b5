"""User domain model: maps to the 'users' table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from qrbites.infrastructure.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"

AUTH_PROVIDER_LOCAL = "local"
AUTH_PROVIDER_GOOGLE = "google"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # empty for OAuth-only accounts
    name = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_USER, index=True)
    auth_provider = Column(String(20), nullable=False, default=AUTH_PROVIDER_LOCAL)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    restaurants = relationship(
        "Restaurant", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )
    credentials = relationship(
        "FederatedCredential", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def display_name(self) -> str:
        return self.name or "Anonymous User"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self):
        return f"<User {self.email}>"
