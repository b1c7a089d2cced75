"""
Core / utility endpoints that live outside the RBAC routers.

Routes exposed:
    GET  /              – welcome message
    GET  /health        – liveness probe, including a database round trip
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import text

from app.config import settings
from app.core.logging_config import get_logger
from app.database.session import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Core"])


@router.get("/")
async def root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "unavailable", "message": "Database unreachable"},
        )
    return {"status": "ok", "message": "I Am Alive!!"}
