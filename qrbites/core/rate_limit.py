"""
Per-route-group rate limiting.
Moving-window counters from the `limits` package, keyed by client IP.
"""

from typing import Dict

import structlog
from fastapi import Request
from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from qrbites.config import get_settings
from qrbites.core.exceptions import TooManyRequestsError

logger = structlog.get_logger(__name__)

_storage = MemoryStorage()
_limiter = MovingWindowRateLimiter(_storage)

GROUP_MESSAGES = {
    "api": "Too many requests, please try again later",
    "auth": "Too many authentication attempts, please try again later",
    "register": "Too many accounts created from this IP, please try again later",
    "public_menu": "Too many menu requests, please try again later",
    "public_restaurant": "Too many restaurant requests, please try again later",
    "qr_scan": "Too many QR code scans, please try again later",
}


def _group_limits() -> Dict[str, RateLimitItem]:
    settings = get_settings()
    return {
        "api": parse(settings.RATE_LIMIT_API),
        "auth": parse(settings.RATE_LIMIT_AUTH),
        "register": parse(settings.RATE_LIMIT_REGISTER),
        "public_menu": parse(settings.RATE_LIMIT_PUBLIC_MENU),
        "public_restaurant": parse(settings.RATE_LIMIT_PUBLIC_RESTAURANT),
        "qr_scan": parse(settings.RATE_LIMIT_QR_SCAN),
    }


def client_key(request: Request) -> str:
    """Client IP, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def hit(group: str, key: str) -> None:
    """Count one request for key in group; raise 429 when over the limit."""
    item = _group_limits()[group]
    if _limiter.hit(item, group, key):
        return

    reset_at, _ = _limiter.get_window_stats(item, group, key)
    logger.warning("Rate limit exceeded", group=group, key=key)
    raise TooManyRequestsError(
        GROUP_MESSAGES[group],
        {"retryAfter": item.get_expiry(), "resetAt": int(reset_at)},
    )


def rate_limit(group: str):
    """FastAPI dependency factory enforcing a named limit group."""

    def dependency(request: Request) -> None:
        if not get_settings().RATE_LIMIT_ENABLED:
            return
        hit(group, client_key(request))

    dependency.__name__ = f"rate_limit_{group}"
    return dependency


def reset_key(group: str, key: str) -> None:
    """Forget every hit recorded for one key in one group."""
    _limiter.clear(_group_limits()[group], group, key)


def reset_rate_limits() -> None:
    _storage.reset()
