"""
Pagination and query-filter helpers.
Turns raw query-string parameters into SQLAlchemy criteria, an order clause
and a page window, following a per-endpoint QueryPolicy.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Sequence, TypeVar

import structlog
from pydantic.alias_generators import to_snake
from sqlalchemy.orm import Query

from qrbites.core.exceptions import BadRequestError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# largest OFFSET or integer filter value a 64-bit database column accepts
MAX_SQL_INT = 2 ** 63 - 1


@dataclass(frozen=True)
class QueryPolicy:
    """Which query params may filter or sort an endpoint, and its page defaults."""
    exact_match: Sequence[str] = ()
    regex_match: Sequence[str] = ()
    allowed_sort_fields: Sequence[str] = ()
    default_sort_by: str = "createdAt"
    default_order: str = "desc"
    default_limit: int = 10
    max_limit: int = 100


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    limit: int
    total: int
    extra: dict = field(default_factory=dict)

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_pagination_params(params: Mapping[str, Any], policy: QueryPolicy = QueryPolicy()) -> PageParams:
    """
    page >= 1, 1 <= limit <= policy.max_limit. Garbage falls back to defaults.

    Pages past the largest representable offset are clamped to it; they are
    empty anyway.
    """
    limit = _to_int(params.get("limit"), policy.default_limit) or policy.default_limit
    limit = min(max(1, limit), policy.max_limit)
    page = max(1, _to_int(params.get("page"), 1))
    page = min(page, MAX_SQL_INT // limit)
    return PageParams(page=page, limit=limit)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards; pair with ``escape="\\\\"``."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(model, param: str):
    return getattr(model, to_snake(param), None)


def _coerce(column, param: str, value: Any) -> Any:
    """Cast a query-string value to the column type; bad ids are a 400."""
    python_type = column.type.python_type
    if python_type is bool:
        return str(value).lower() in ("true", "1", "yes")
    if python_type in (int, float):
        try:
            coerced = python_type(value)
        except (TypeError, ValueError):
            raise BadRequestError(f"Invalid {param} format") from None
        if python_type is int and abs(coerced) > MAX_SQL_INT:
            raise BadRequestError(f"Invalid {param} format")
        return coerced
    return value


def build_query_filters(model, params: Mapping[str, Any], policy: QueryPolicy) -> list:
    """
    Build SQLAlchemy criteria from query params.

    exact_match params become equality clauses when present and non-empty,
    regex_match params become case-insensitive substring matches, anything
    else in the query string is ignored.
    """
    criteria = []

    for param in policy.exact_match:
        value = params.get(param)
        column = _column(model, param)
        if value is None or value == "" or column is None:
            continue
        criteria.append(column == _coerce(column, param, value))

    for param in policy.regex_match:
        value = params.get(param)
        column = _column(model, param)
        if not value or column is None:
            continue
        criteria.append(column.ilike(f"%{escape_like(str(value))}%", escape="\\"))

    return criteria


def build_sort(model, params: Mapping[str, Any], policy: QueryPolicy) -> list:
    """Order clauses for the requested sortBy/order, or the policy default."""
    sort_by = params.get("sortBy") or policy.default_sort_by
    order = str(params.get("order") or policy.default_order).lower()

    if policy.allowed_sort_fields and sort_by not in policy.allowed_sort_fields:
        logger.warning("Invalid sort field, using default", sort_by=sort_by, default=policy.default_sort_by)
        sort_by, order = policy.default_sort_by, policy.default_order.lower()

    column = _column(model, sort_by)
    if column is None:
        column = _column(model, policy.default_sort_by)
    descending = order == "desc"
    # id breaks ties between rows written within the same timestamp tick
    return [
        column.desc() if descending else column.asc(),
        model.id.desc() if descending else model.id.asc(),
    ]


def paginate(query: Query, model, params: Mapping[str, Any], policy: QueryPolicy) -> Page:
    page_params = parse_pagination_params(params, policy)
    total = query.order_by(None).count()
    items = (
        query.order_by(*build_sort(model, params, policy))
        .offset(page_params.offset)
        .limit(page_params.limit)
        .all()
    )
    return Page(items=items, page=page_params.page, limit=page_params.limit, total=total)
