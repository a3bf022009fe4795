from fastapi import APIRouter, Depends, status
from sqlmodel import Session, text
from loguru import logger

from app.core.exceptions import ServiceUnavailableError
from app.core.responses import ApiResponse
from app.db.core import get_session

router = APIRouter()


@router.get("/", response_model=ApiResponse[dict], status_code=status.HTTP_200_OK)
def index():
    return ApiResponse.ok({"status": "API is running"}, "Health check passed")


@router.get("/readiness", response_model=ApiResponse[dict], status_code=status.HTTP_200_OK)
def readiness_check(session: Session = Depends(get_session)):
    try:
        session.exec(text("SELECT 1"))
    except Exception:
        logger.exception("Database readiness check failed")
        raise ServiceUnavailableError("Database not ready")

    return ApiResponse.ok({"status": "ready", "database": "online"}, "Service is ready")
