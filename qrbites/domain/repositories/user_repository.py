"""
User Repository Interface.
"""

from typing import Any, Mapping, Optional

from qrbites.core.pagination import Page, QueryPolicy
from qrbites.domain.models.federated_credential import FederatedCredential
from qrbites.domain.models.user import User
from qrbites.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def search_page(self, params: Mapping[str, Any], policy: QueryPolicy) -> Page[User]:
        """Paginated listing with a free-text search over email and name."""
        ...

    def get_credential(self, provider: str, provider_id: str) -> Optional[FederatedCredential]:
        ...

    def add_credential(self, user: User, **fields: Any) -> FederatedCredential:
        ...
