"""
Health router for the txfeed API.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..dependencies.feed import get_feed
from ..utils.feed_coordinator import FeedCoordinator

router = APIRouter(
    tags=["Health"]
)

@router.get("/health")
async def get_health(feed: FeedCoordinator = Depends(get_feed)) -> Dict[str, Any]:
    """Liveness plus the live feed availability decided at startup"""
    return {"status": "ok", "feedAvailability": feed.availability.value}

@router.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint.
    """
    return {"message": "txfeed transaction stream. Connect a WebSocket to / or /ws for live updates."}
