"""
Health check routes for the web service
"""

from datetime import datetime, timezone
from fastapi import APIRouter

from app.config import settings
from app.utils.supabase_client import supabase_client

router = APIRouter()


@router.get("/health")
async def health_check():
    """Service health check"""
    return {
        "service": "web-service",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "backend": "configured" if supabase_client.is_available() else "not_configured",
        "version": settings.app_version
    }
