"""
Feed coordinator: owns the ledger, statistics, subscriber hub and feed status.

One instance per application, stored on ``app.state.feed`` and handed to
routes through ``txfeed.dependencies.feed``.
"""
import asyncio
import logging
from typing import List, Optional

from txfeed.config import Config
from txfeed.constants.feed import SNAPSHOT_TRANSACTIONS
from txfeed.utils.broadcast_hub import BroadcastHub
from txfeed.utils.metrics import FEED_AVAILABILITY, TRANSACTIONS_INGESTED
from txfeed.utils.models.feed_status import FeedAvailability
from txfeed.utils.models.messages import InitMessage, TransactionUpdate
from txfeed.utils.models.statistics import StatisticsAggregator, StatisticsState
from txfeed.utils.models.transaction import TransactionRecord
from txfeed.utils.transaction_ledger import TransactionLedger

logger = logging.getLogger(__name__)

class FeedCoordinator:
    """
    Runs the ingestion pipeline and answers state queries.

    ``add_transaction`` updates the ledger, then the statistics, then queues the
    combined update for every subscriber, all while holding one lock. Nothing
    under the lock awaits a socket; sends happen on each subscriber's own
    writer task. Subscribing takes the same lock, so a new subscriber's
    snapshot always sits between two whole ingestions and precedes every
    update queued after it.
    """

    def __init__(self,
                 ledger: Optional[TransactionLedger] = None,
                 statistics: Optional[StatisticsAggregator] = None,
                 hub: Optional[BroadcastHub] = None,
                 snapshot_size: int = SNAPSHOT_TRANSACTIONS):
        self.ledger = ledger or TransactionLedger()
        self.statistics = statistics or StatisticsAggregator()
        self.hub = hub or BroadcastHub()
        self.snapshot_size = snapshot_size
        self._availability = FeedAvailability.NOT_CONFIGURED
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: Config) -> 'FeedCoordinator':
        """Build a coordinator sized by the given configuration."""
        return cls(
            ledger=TransactionLedger(capacity=config.ledger_capacity),
            statistics=StatisticsAggregator(
                max_buckets=config.stats_window_minutes,
                timezone=config.feed_timezone
            ),
            hub=BroadcastHub(
                queue_size=config.subscriber_queue_size,
                send_timeout=config.send_timeout
            ),
            snapshot_size=config.snapshot_size
        )

    @property
    def availability(self) -> FeedAvailability:
        return self._availability

    def set_availability(self, availability: FeedAvailability) -> None:
        """Record the outcome of the live feed startup attempt."""
        self._availability = availability
        FEED_AVAILABILITY.info({'state': availability.value})

    async def add_transaction(self, record: TransactionRecord, source: str = "mock") -> int:
        """
        Ingest one transaction and push it to subscribers.

        Args:
            record: Transaction to ingest
            source: Event source name, used for metrics

        Returns:
            int: Number of subscribers the update was queued for
        """
        async with self._lock:
            self.ledger.ingest(record)
            self.statistics.record(record.timestamp)
            TRANSACTIONS_INGESTED.labels(source=source).inc()
            update = TransactionUpdate(transaction=record, stats=self.statistics.snapshot())
            return self.hub.broadcast(update)

    def recent_transactions(self, limit: Optional[int] = None) -> List[TransactionRecord]:
        """Newest transactions, ``snapshot_size`` of them by default."""
        return self.ledger.snapshot(self.snapshot_size if limit is None else limit)

    def current_stats(self) -> StatisticsState:
        return self.statistics.snapshot()

    def init_message(self) -> InitMessage:
        """Point-in-time snapshot for a new subscriber."""
        return InitMessage(transactions=self.recent_transactions(), stats=self.current_stats())

    async def subscribe(self, channel) -> None:
        """Register a subscriber and queue its init snapshot."""
        async with self._lock:
            self.hub.subscribe(channel, self.init_message())

    def unsubscribe(self, channel) -> None:
        self.hub.unsubscribe(channel)

    async def close(self) -> None:
        """Stop every subscriber writer."""
        await self.hub.close()
