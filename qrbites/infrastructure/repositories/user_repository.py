"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import or_

from qrbites.core.pagination import Page, QueryPolicy, escape_like
from qrbites.domain.models.federated_credential import FederatedCredential
from qrbites.domain.models.user import User
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def search_page(self, params: Mapping[str, Any], policy: QueryPolicy) -> Page[User]:
        criteria = []
        search = params.get("search")
        if search:
            pattern = f"%{escape_like(str(search))}%"
            criteria.append(or_(
                User.email.ilike(pattern, escape="\\"),
                User.name.ilike(pattern, escape="\\"),
            ))
        return self.find_page(params, policy, *criteria)

    def get_credential(self, provider: str, provider_id: str) -> Optional[FederatedCredential]:
        return (
            self.db.query(FederatedCredential)
            .filter(FederatedCredential.provider == provider, FederatedCredential.provider_id == provider_id)
            .first()
        )

    def add_credential(self, user: User, **fields: Any) -> FederatedCredential:
        credential = FederatedCredential(user=user, **fields)
        self.db.add(credential)
        self.db.commit()
        self.db.refresh(credential)
        return credential
