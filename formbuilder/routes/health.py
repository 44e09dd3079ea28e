"""Health check endpoint for monitoring and deployment verification."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from formbuilder.config import get_settings
from formbuilder.models.database import get_db
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> dict:
    """Report service health.

    The database must answer a trivial query; webhook verification status
    is reported for information only.

    Raises:
        HTTPException: 503 if the database is unreachable

    Example response:
        {
            "status": "healthy",
            "database": "connected",
            "webhookSecret": "configured"
        }
    """
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail="Service unavailable - database connection failed"
        )

    settings = get_settings()
    return {
        "status": "healthy",
        "database": "connected",
        "webhookSecret": "configured" if settings.webhook_secret else "disabled",
    }
