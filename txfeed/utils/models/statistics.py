"""
Models for tracking transaction throughput statistics.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

import pytz

from txfeed.config import Constants
from txfeed.constants.feed import BUCKET_LABEL_FORMAT, MAX_STATS_BUCKETS

logger = logging.getLogger(__name__)

@dataclass
class StatsBucket:
    """Transaction count for one minute, keyed by minute-epoch"""
    minute: int
    count: int = 0
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert bucket to dictionary format"""
        return {
            'minute': self.minute,
            'count': self.count,
            'time': self.label
        }

@dataclass
class StatisticsState:
    """Point-in-time view of the aggregated statistics"""
    total_count: int = 0
    buckets: List[StatsBucket] = field(default_factory=list)
    last_updated: int = 0  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary format"""
        return {
            'totalCount': self.total_count,
            'perMinute': [bucket.to_dict() for bucket in self.buckets],
            'lastUpdated': self.last_updated
        }

class StatisticsAggregator:
    """Maintains a lifetime transaction total and a sliding window of per-minute counts.

    Buckets are only ever compared against the newest one: an event in a later
    minute starts a new bucket at the end, anything else increments the newest
    bucket. Older history is never rewritten, so late events land in the
    current bucket instead of the past.

    Example::

        stats = StatisticsAggregator()
        stats.record(1_700_000_005_000)
        stats.record(1_700_000_050_000)
        stats.snapshot().to_dict()
    """

    def __init__(self, max_buckets: int = MAX_STATS_BUCKETS,
                 timezone: str = 'UTC',
                 clock: Optional[Callable[[], float]] = None):
        if max_buckets < 1:
            raise ValueError(f"max_buckets must be at least 1, got {max_buckets}")
        self.max_buckets = max_buckets
        self.timezone = pytz.timezone(timezone)
        self._clock = clock or time.time
        self._buckets: Deque[StatsBucket] = deque(maxlen=max_buckets)
        self._total_count = 0
        self._last_updated = self._now_ms()

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def last_updated(self) -> int:
        return self._last_updated

    def __len__(self) -> int:
        return len(self._buckets)

    def record(self, timestamp_ms: int) -> StatsBucket:
        """
        Count one transaction in the bucket for its minute.

        Args:
            timestamp_ms: Transaction timestamp in epoch milliseconds

        Returns:
            StatsBucket: The bucket that absorbed the event
        """
        bucket_key = timestamp_ms // Constants.MS_PER_MINUTE

        if not self._buckets or bucket_key > self._buckets[-1].minute:
            # deque(maxlen) drops from the front once the window is full
            self._buckets.append(StatsBucket(minute=bucket_key, count=1, label=self._label()))
            logger.debug(f"Opened stats bucket for minute {bucket_key} ({len(self._buckets)} retained)")
        else:
            self._buckets[-1].count += 1

        self._total_count += 1
        self._last_updated = self._now_ms()
        return self._buckets[-1]

    def snapshot(self) -> StatisticsState:
        """Return an independent copy of the current statistics."""
        return StatisticsState(
            total_count=self._total_count,
            buckets=[StatsBucket(b.minute, b.count, b.label) for b in self._buckets],
            last_updated=self._last_updated
        )

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _label(self) -> str:
        return datetime.fromtimestamp(self._clock(), self.timezone).strftime(BUCKET_LABEL_FORMAT)
