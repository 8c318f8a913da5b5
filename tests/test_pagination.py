"""Query filter, sort and page-window helpers."""

import pytest

from qrbites.core.exceptions import BadRequestError
from qrbites.core.pagination import (
    Page,
    QueryPolicy,
    build_query_filters,
    MAX_SQL_INT,
    build_sort,
    escape_like,
    parse_pagination_params,
)
from qrbites.domain.models.menu_item import MenuItem

POLICY = QueryPolicy(
    exact_match=("menuId", "isAvailable"),
    regex_match=("name",),
    allowed_sort_fields=("name", "price", "createdAt"),
)


@pytest.mark.parametrize(
    "params, expected",
    [
        ({}, (1, 10)),
        ({"page": "3", "limit": "25"}, (3, 25)),
        ({"page": "0", "limit": "0"}, (1, 10)),
        ({"page": "-4", "limit": "-5"}, (1, 1)),
        ({"page": "abc", "limit": "xyz"}, (1, 10)),
        ({"limit": "1000"}, (1, 100)),
        ({"page": "9" * 25, "limit": "10"}, (MAX_SQL_INT // 10, 10)),
    ],
)
def test_parse_pagination_params(params, expected) -> None:
    page_params = parse_pagination_params(params, POLICY)
    assert (page_params.page, page_params.limit) == expected


def test_offset() -> None:
    assert parse_pagination_params({"page": "3", "limit": "20"}).offset == 40


def test_page_metadata() -> None:
    page = Page(items=[], page=2, limit=10, total=25)
    assert page.pages == 3
    assert page.has_next_page is True
    assert page.has_prev_page is True

    last = Page(items=[], page=3, limit=10, total=25)
    assert last.has_next_page is False

    empty = Page(items=[], page=1, limit=10, total=0)
    assert (empty.pages, empty.has_next_page, empty.has_prev_page) == (0, False, False)


def test_filters_only_use_whitelisted_params() -> None:
    criteria = build_query_filters(
        MenuItem, {"menuId": "7", "name": "pizza", "category": "ignored"}, POLICY
    )

    by_column = {criterion.left.key: criterion.right.value for criterion in criteria}
    assert by_column == {"menu_id": 7, "name": "%pizza%"}


def test_empty_filter_values_are_skipped() -> None:
    assert build_query_filters(MenuItem, {"menuId": "", "name": ""}, POLICY) == []


def test_regex_filter_escapes_wildcards() -> None:
    (criterion,) = build_query_filters(MenuItem, {"name": "100%_off"}, POLICY)
    assert criterion.right.value == "%100\\%\\_off%"


def test_invalid_numeric_filter_is_a_bad_request() -> None:
    with pytest.raises(BadRequestError) as exc_info:
        build_query_filters(MenuItem, {"menuId": "seven"}, POLICY)
    assert exc_info.value.message == "Invalid menuId format"


def test_sort_by_allowed_field() -> None:
    primary, tie_break = build_sort(MenuItem, {"sortBy": "price", "order": "asc"}, POLICY)
    assert str(primary) == "menu_items.price ASC"
    assert str(tie_break) == "menu_items.id ASC"


def test_unknown_sort_field_falls_back_to_default() -> None:
    primary, _ = build_sort(MenuItem, {"sortBy": "password", "order": "asc"}, POLICY)
    assert str(primary) == "menu_items.created_at DESC"


def test_list_endpoint_clamps_limit(client, make_admin) -> None:
    admin = make_admin()

    body = client.get("/api/users", params={"limit": 1000, "page": 0}, headers=admin["headers"]).json()

    assert body["limit"] == 100
    assert body["page"] == 1


def test_list_endpoint_ignores_unknown_sort(client, make_admin) -> None:
    admin = make_admin()

    response = client.get("/api/users", params={"sortBy": "passwordHash"}, headers=admin["headers"])

    assert response.status_code == 200


def test_out_of_range_integer_filter_is_a_bad_request() -> None:
    with pytest.raises(BadRequestError) as exc_info:
        build_query_filters(MenuItem, {"menuId": "9" * 25}, POLICY)
    assert exc_info.value.message == "Invalid menuId format"


def test_escape_like() -> None:
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_list_endpoint_handles_huge_page(client, register, create_restaurant) -> None:
    owner = register()
    create_restaurant(owner["headers"])

    response = client.get("/api/restaurants", params={"page": "9" * 25}, headers=owner["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["total"] == 1
    assert body["page"] == MAX_SQL_INT // 10
