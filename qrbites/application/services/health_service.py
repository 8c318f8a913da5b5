"""Health checks: database reachability, uptime and process information."""

import os
import platform
import sys
import time
from datetime import datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qrbites.config import get_settings
from qrbites.infrastructure.database import ping

logger = structlog.get_logger(__name__)

APP_VERSION = "1.0.0"
_started_at = time.monotonic()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_uptime() -> int:
    return int(time.monotonic() - _started_at)


def get_system_info() -> dict:
    try:
        load_average = list(os.getloadavg())
    except (AttributeError, OSError):
        load_average = [0.0, 0.0, 0.0]

    memory_mb = None
    try:
        import resource

        # ru_maxrss is KiB on Linux, bytes on macOS
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        memory_mb = round(max_rss / (1024 * 1024 if sys.platform == "darwin" else 1024))
    except ImportError:
        pass

    return {
        "pythonVersion": platform.python_version(),
        "platform": sys.platform,
        "arch": platform.machine(),
        "pid": os.getpid(),
        "memory": {"maxRssMb": memory_mb},
        "cpu": {"loadAverage": load_average, "count": os.cpu_count()},
    }


def check_database(db: Session) -> dict:
    started = time.perf_counter()
    try:
        ping(db)
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        return {
            "status": "unhealthy",
            "message": "Database health check failed",
            "error": str(e),
            "timestamp": _now(),
        }
    return {
        "status": "healthy",
        "responseTimeMs": round((time.perf_counter() - started) * 1000, 2),
        "timestamp": _now(),
    }


def check_application(db: Session) -> dict:
    database = check_database(db)
    return {
        "status": "healthy" if database["status"] == "healthy" else "unhealthy",
        "timestamp": _now(),
        "uptime": get_uptime(),
        "environment": get_settings().ENVIRONMENT,
        "version": APP_VERSION,
        "services": {"database": database},
        "system": get_system_info(),
    }


def get_detailed_health(db: Session) -> dict:
    health = check_application(db)
    bind = db.get_bind()
    health["services"]["database"]["connectionInfo"] = {
        "dialect": bind.dialect.name,
        "driver": bind.dialect.driver,
        "database": bind.url.database,
    }
    return health


def get_simple_health(db: Session) -> dict:
    database = check_database(db)
    return {"status": "ok" if database["status"] == "healthy" else "error", "timestamp": _now()}


def get_readiness(db: Session) -> dict:
    ready = check_database(db)["status"] == "healthy"
    return {"ready": ready, "timestamp": _now(), "checks": {"database": ready}}


def get_liveness() -> dict:
    return {"alive": True, "timestamp": _now(), "uptime": get_uptime()}
