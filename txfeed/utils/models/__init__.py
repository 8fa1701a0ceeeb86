"""
Data models for the transaction feed.
These models provide type-safe interfaces for the feed state and its messages.
"""

from .transaction import TransactionRecord
from .statistics import StatsBucket, StatisticsState, StatisticsAggregator
from .messages import InitMessage, TransactionUpdate
from .feed_status import FeedAvailability

__all__ = [
    'TransactionRecord',
    'StatsBucket',
    'StatisticsState',
    'StatisticsAggregator',
    'InitMessage',
    'TransactionUpdate',
    'FeedAvailability'
]
