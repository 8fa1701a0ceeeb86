"""
Transactions router - read-only views of the rolling ledger and statistics
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..dependencies.feed import get_feed
from ..utils.feed_coordinator import FeedCoordinator

router = APIRouter(
    tags=["Transactions"],
    responses={404: {"description": "Not found"}},
)

@router.get("/transactions", response_model=Dict[str, Any])
async def get_transactions(feed: FeedCoordinator = Depends(get_feed)) -> Dict[str, Any]:
    """
    Retrieve the most recent transactions with the current statistics.

    Returns a JSON object containing:

    - **transactions**: Newest transactions first, at most the configured snapshot size (20)
    - **stats**: Total transaction count, per-minute buckets and last update time
    """
    transactions = feed.recent_transactions()
    stats = feed.current_stats()
    return {
        "transactions": [tx.to_dict() for tx in transactions],
        "stats": stats.to_dict()
    }

@router.get("/stats", response_model=Dict[str, Any])
async def get_stats(feed: FeedCoordinator = Depends(get_feed)) -> Dict[str, Any]:
    """
    Retrieve the current statistics: **totalCount**, **perMinute** and **lastUpdated**.
    """
    return feed.current_stats().to_dict()
