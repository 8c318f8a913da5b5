"""
HTTP middleware stack: request id, access log, CORS and the session cookie
Authlib needs during the Google sign-in round trip.
"""

import time

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.sessions import SessionMiddleware

from qrbites.config import get_settings
from qrbites.core.rate_limit import client_key

logger = structlog.get_logger(__name__)

# Orchestrator probes hit these every few seconds
QUIET_PATHS = frozenset({"/health/live", "/health/ready"})


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request; the level follows the response status."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
            client_ip=client_key(request),
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error while serving request", process_time_ms=_elapsed_ms(started))
            raise
        finally:
            structlog.contextvars.unbind_contextvars("method", "path", "client_ip")

        elapsed = _elapsed_ms(started)
        response.headers["X-Response-Time"] = f"{elapsed}ms"

        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        elif request.url.path in QUIET_PATHS:
            log = logger.debug
        else:
            log = logger.info
        log(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=elapsed,
        )
        return response


def setup_middleware(app) -> None:
    """Register middleware. Starlette runs the last one added first."""
    settings = get_settings()

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )
    # Outermost so every log line downstream carries the request id
    app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
