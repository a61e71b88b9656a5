from fastapi import APIRouter
from typing import Dict
from app.db.session import database

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Dict with service status and whether the database handle is connected
    """
    return {
        "status": "healthy",
        "database": "connected" if database.is_connected else "disconnected",
    }
