"""
Bounded, newest-first buffer of recent transactions.
"""
import logging
from collections import deque
from typing import Deque, List, Optional

from txfeed.constants.feed import MAX_LEDGER_TRANSACTIONS
from txfeed.utils.models.transaction import TransactionRecord

logger = logging.getLogger(__name__)

class TransactionLedger:
    """
    Keeps the most recent transactions, newest first.

    Once ``capacity`` records are held, each new record evicts the oldest one.
    Snapshots are plain lists detached from the buffer.
    """

    def __init__(self, capacity: int = MAX_LEDGER_TRANSACTIONS):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._records: Deque[TransactionRecord] = deque(maxlen=capacity)

    def ingest(self, record: TransactionRecord) -> None:
        """Prepend a record, dropping the oldest one when full."""
        self._records.appendleft(record)

    def snapshot(self, limit: Optional[int] = None) -> List[TransactionRecord]:
        """
        Return up to ``limit`` of the newest records.

        Args:
            limit: Number of records to return, all retained records when None

        Returns:
            List[TransactionRecord]: Newest first, independent of later ingestion
        """
        if limit is None or limit >= len(self._records):
            return list(self._records)
        if limit <= 0:
            return []
        return [self._records[i] for i in range(limit)]

    def latest(self) -> Optional[TransactionRecord]:
        """Return the most recently ingested record, if any."""
        return self._records[0] if self._records else None

    def __len__(self) -> int:
        return len(self._records)
