"""Health check routes"""

from fastapi import APIRouter, Depends
import logging
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.dependencies import get_db
from api.responses import HealthResponse
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("schoolmeals.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a database round trip"""
    try:
        db.execute(text("SELECT 1"))
        status = "ok"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        status = "degraded"
    return HealthResponse(status=status, service=settings.app_name, version=settings.app_version)
