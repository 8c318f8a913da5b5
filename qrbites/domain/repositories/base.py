"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, Mapping, Optional, Protocol, TypeVar

from qrbites.core.pagination import Page, QueryPolicy

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def find_page(self, params: Mapping[str, Any], policy: QueryPolicy, *criteria: Any) -> Page[T]:
        """Filter, sort and paginate following a query policy."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity."""
        ...

    def delete(self, db_obj: T) -> None:
        """Delete an entity and everything it owns."""
        ...
