"""
Push messages sent to WebSocket subscribers.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from txfeed.constants.feed import MESSAGE_TYPE_INIT, MESSAGE_TYPE_TRANSACTION
from txfeed.utils.models.statistics import StatisticsState
from txfeed.utils.models.transaction import TransactionRecord

@dataclass(frozen=True)
class InitMessage:
    """First message on a new subscription: recent transactions plus current stats."""
    transactions: List[TransactionRecord] = field(default_factory=list)
    stats: StatisticsState = field(default_factory=StatisticsState)
    type: str = field(default=MESSAGE_TYPE_INIT, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'transactions': [tx.to_dict() for tx in self.transactions],
            'stats': self.stats.to_dict()
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

@dataclass(frozen=True)
class TransactionUpdate:
    """Sent to every subscriber for each ingested transaction."""
    transaction: TransactionRecord
    stats: StatisticsState
    type: str = field(default=MESSAGE_TYPE_TRANSACTION, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'transaction': self.transaction.to_dict(),
            'stats': self.stats.to_dict()
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
