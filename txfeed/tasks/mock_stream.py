"""
Scheduled task that feeds synthetic transactions into the ingestion pipeline.

It runs whether or not the live feed is available; both share one pipeline.
"""
import logging
from typing import Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from txfeed.constants.feed import MOCK_STREAM_INTERVAL, MOCK_STREAM_JOB_ID
from txfeed.utils.feed_coordinator import FeedCoordinator
from txfeed.utils.mock_source import EventSource, MockTransactionSource

# Configure logging
logger = logging.getLogger(__name__)


async def emit_transaction(feed: FeedCoordinator, source: EventSource) -> None:
    """Pull one transaction from the source and ingest it."""
    try:
        record = source.next_transaction()
        delivered = await feed.add_transaction(record, source=source.name)
        logger.debug(f"Ingested {record.tx_hash} from {source.name}, delivered to {delivered} subscribers")
    except Exception as e:
        # Ingestion has no caller; keep the interval firing
        logger.error(f"Error in {source.name} transaction stream: {str(e)}")
        logger.exception(e)


def start_mock_stream(scheduler: AsyncIOScheduler,
                      feed: FeedCoordinator,
                      source: Optional[EventSource] = None,
                      interval_seconds: float = MOCK_STREAM_INTERVAL) -> Job:
    """
    Schedule the synthetic transaction stream.

    Args:
        scheduler: Scheduler the job is added to
        feed: Coordinator that receives the transactions
        source: Event source, a fresh MockTransactionSource by default
        interval_seconds: Seconds between transactions

    Returns:
        Job: The scheduled job
    """
    source = source or MockTransactionSource()
    logger.info(f"Starting mock data stream ({interval_seconds:g}-second interval)")

    return scheduler.add_job(
        emit_transaction,
        trigger=IntervalTrigger(seconds=interval_seconds),
        args=[feed, source],
        id=MOCK_STREAM_JOB_ID,
        name="Mock Transaction Stream",
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )
