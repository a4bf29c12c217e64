"""
Health Router
Liveness and dependency checks for container orchestration.
"""

from fastapi import APIRouter
from sqlalchemy import text

from app.config import settings

router = APIRouter()


@router.get("")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "service": "flippi-backend",
        "version": "0.1.0"
    }


@router.get("/db")
async def database_health():
    """Database connectivity check."""
    from app.database import AsyncSessionLocal

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.fetchone()
        return {
            "status": "healthy",
            "database": "connected",
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e)
        }


@router.get("/redis")
async def redis_health():
    """Redis connectivity check."""
    import redis.asyncio as redis_async

    try:
        r = redis_async.from_url(settings.redis_url)
        await r.ping()
        await r.aclose()
        return {
            "status": "healthy",
            "redis": "connected"
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "redis": "disconnected",
            "error": str(e)
        }
