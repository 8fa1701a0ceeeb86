"""
Feed dependencies module.
Provides the application's shared feed instances to routes.
"""
from fastapi import Depends, Request
from starlette.requests import HTTPConnection

from ..utils.feed_coordinator import FeedCoordinator
from ..utils.feed_error import FeedUnavailableError
from ..utils.stream_client import StreamClient

def get_feed(connection: HTTPConnection) -> FeedCoordinator:
    """
    Get the coordinator created by the application factory.
    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.feed

def get_stream_client(request: Request) -> StreamClient:
    """Get the live stream client created by the application factory."""
    return request.app.state.stream_client

async def require_live_feed(
    feed: FeedCoordinator = Depends(get_feed),
    stream_client: StreamClient = Depends(get_stream_client)
) -> StreamClient:
    """
    Dependency for endpoints that need the live feed.

    Raises:
        FeedUnavailableError: When the startup connection attempt did not succeed
    """
    if not feed.availability.is_ready:
        raise FeedUnavailableError("Live feed not initialized")
    return stream_client
