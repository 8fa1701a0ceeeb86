"""
WebSocket router - real-time push of feed updates.
"""
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..dependencies.feed import get_feed
from ..utils.feed_coordinator import FeedCoordinator

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/")
@router.websocket("/ws")
async def feed_socket(websocket: WebSocket, feed: FeedCoordinator = Depends(get_feed)):
    """
    Push one init message on connect, then every ingested transaction.
    Inbound messages are read only to notice the client going away.
    """
    await websocket.accept()
    try:
        await feed.subscribe(websocket)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"[WS] Error: {str(e)}")
    finally:
        feed.unsubscribe(websocket)
