"""Shared pydantic building blocks: camelCase wire format and response envelopes."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class PaginatedResponse(CamelModel, Generic[T]):
    success: bool = True
    data: List[T]
    page: int
    limit: int
    total: int
    pages: int
    has_next_page: bool = False
    has_prev_page: bool = False


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[dict] = None


def paginated(page, schema):
    """Wrap a pagination Page in the list envelope, items serialized with schema."""
    return PaginatedResponse[schema](
        data=[schema.model_validate(item) for item in page.items],
        page=page.page,
        limit=page.limit,
        total=page.total,
        pages=page.pages,
        has_next_page=page.has_next_page,
        has_prev_page=page.has_prev_page,
    )
