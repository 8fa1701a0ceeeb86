"""
FastAPI application main module.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from txfeed.config import Config
from txfeed.routers.health import router as health_router
from txfeed.routers.stream import router as stream_router
from txfeed.routers.transactions import router as transactions_router
from txfeed.routers.ws import router as ws_router
from txfeed.tasks.mock_stream import start_mock_stream
from txfeed.utils.feed_coordinator import FeedCoordinator
from txfeed.utils.feed_error import FeedUnavailableError
from txfeed.utils.logging_config import quiet_noisy_loggers, setup_logging
from txfeed.utils.mock_source import EventSource
from txfeed.utils.stream_client import StreamClient

logger = logging.getLogger('txfeed')


def create_app(config: Optional[Config] = None,
               mock_source: Optional[EventSource] = None,
               stream_client: Optional[StreamClient] = None) -> FastAPI:
    """
    Build the application and the feed state it owns.

    Args:
        config: Settings, read from the environment when omitted
        mock_source: Event source for the scheduled stream, random mock data when omitted
        stream_client: Live stream client, built from ``config`` when omitted

    Returns:
        FastAPI: Application with ``state.feed``, ``state.stream_client`` and ``state.scheduler`` set
    """
    config = config or Config.from_env()

    # Configure logging
    setup_logging('txfeed', log_level=config.log_level, log_dir=config.log_dir)
    quiet_noisy_loggers()

    feed = FeedCoordinator.from_config(config)
    stream_client = stream_client or StreamClient.from_config(config)

    # Create a scheduler for background tasks
    scheduler = AsyncIOScheduler()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for FastAPI app.
        Handles startup and shutdown events.
        """
        logger.info("Starting up application...")
        try:
            # One attempt; a failure leaves the feed Unavailable until restart
            availability = await stream_client.initialize()
            feed.set_availability(availability)
            logger.info(f"Live feed availability: {availability.value}")

            if config.mock_stream_enabled:
                start_mock_stream(scheduler, feed, mock_source, config.mock_interval_seconds)
                scheduler.start()
                logger.info("Scheduled background tasks started")
            else:
                logger.info("Mock data stream disabled")

            yield
        finally:
            if scheduler.running:
                scheduler.shutdown(wait=False)
                logger.info("Background task scheduler shutdown")
            await feed.close()
            await stream_client.close()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        debug=config.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.config = config
    app.state.feed = feed
    app.state.stream_client = stream_client
    app.state.scheduler = scheduler

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Add Prometheus metrics
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(FeedUnavailableError)
    async def feed_unavailable_handler(request: Request, exc: FeedUnavailableError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"error": str(exc)})

    app.include_router(health_router)
    app.include_router(transactions_router, prefix="/api")
    app.include_router(stream_router, prefix="/api/stream")
    app.include_router(ws_router)

    return app


app = create_app()
