"""Public-route response cache."""

from qrbites.infrastructure.cache import InMemoryCache, invalidate_public_routes


def test_invalidate_prefix_only_drops_matching_keys() -> None:
    cache = InMemoryCache()
    cache.set("/api/public/menus/1", {"data": 1})
    cache.set("/api/public/menus/1/items?page=2", {"data": 2})
    cache.set("/api/public/restaurants/1", {"data": 3})

    assert cache.invalidate_prefix("/api/public/menus/") == 2
    assert cache.get("/api/public/menus/1") is None
    assert cache.get("/api/public/restaurants/1") == {"data": 3}


def test_invalidate_public_routes_clears_both_prefixes() -> None:
    cache = InMemoryCache()
    cache.set("/api/public/menus/1", {})
    cache.set("/api/public/restaurants/1", {})
    cache.set("/api/other", {})

    invalidate_public_routes(cache)

    assert cache.get("/api/public/menus/1") is None
    assert cache.get("/api/public/restaurants/1") is None
    assert cache.get("/api/other") == {}
