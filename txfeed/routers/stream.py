"""
Stream router - subscribe/publish passthroughs to the live chain stream.
Both endpoints answer 503 unless the live feed came up at startup.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..dependencies.feed import require_live_feed
from ..utils.feed_error import FeedUnavailableError
from ..utils.stream_client import StreamClient

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Stream"],
    responses={503: {"description": "Live feed not initialized"}},
)

class StreamSubscribeRequest(BaseModel):
    stream_id: Optional[str] = Field(None, alias="streamId", description="Stream to subscribe to")

class StreamPublishRequest(BaseModel):
    data: Any = Field(None, description="Payload to publish")

@router.post("/subscribe")
async def subscribe_stream(
    body: StreamSubscribeRequest,
    stream_client: StreamClient = Depends(require_live_feed)
) -> Dict[str, Any]:
    """Subscribe to a live stream by id."""
    try:
        return await stream_client.subscribe(body.stream_id)
    except FeedUnavailableError:
        raise
    except Exception as e:
        logger.error(f"Error subscribing to stream: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})

@router.post("/publish")
async def publish_stream(
    body: StreamPublishRequest,
    stream_client: StreamClient = Depends(require_live_feed)
) -> Dict[str, Any]:
    """Publish a payload to the live stream."""
    try:
        return await stream_client.publish(body.data)
    except FeedUnavailableError:
        raise
    except Exception as e:
        logger.error(f"Error publishing to stream: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})
