"""
Health routes — liveness probe and rate limiter snapshot.
Version: 1.0.0
"""
from fastapi import APIRouter

from stock_sync.utils.rate_limiter import get_keycrm_rate_limiter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/rate-limiter")
async def rate_limiter_status():
    """Current KeyCRM rate limit window."""
    return get_keycrm_rate_limiter().get_status()
