"""Health check routes for load balancers and orchestration probes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from qrbites.application.services import health_service
from qrbites.infrastructure.database import get_db

router = APIRouter(prefix="/health", tags=["Health"])


def _status_response(body: dict, healthy: bool) -> JSONResponse:
    return JSONResponse(status_code=200 if healthy else 503, content=body)


@router.get("")
def health(db: Session = Depends(get_db)):
    """Overall health; 503 when the database is unreachable."""
    body = health_service.check_application(db)
    return _status_response(body, body["status"] == "healthy")


@router.get("/detailed")
def detailed_health(db: Session = Depends(get_db)):
    body = health_service.get_detailed_health(db)
    return _status_response(body, body["status"] == "healthy")


@router.get("/simple")
def simple_health(db: Session = Depends(get_db)):
    body = health_service.get_simple_health(db)
    return _status_response(body, body["status"] == "ok")


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    body = health_service.get_readiness(db)
    return _status_response(body, body["ready"])


@router.get("/live")
def liveness():
    return health_service.get_liveness()


@router.get("/system")
def system_info():
    return {"success": True, "data": health_service.get_system_info()}
