"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health_check():
    """Report that the API process is up."""
    return {
        "success": True,
        "message": "JharkhandYatra API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
