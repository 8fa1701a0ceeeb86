"""
Model for representing a chain transaction as carried by the feed.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

VALUE_QUANTUM = Decimal('0.0001')
GAS_PRICE_QUANTUM = Decimal('0.01')

@dataclass(frozen=True)
class TransactionRecord:
    """A single transaction event. Never mutated once created."""
    tx_hash: str
    sender: str
    recipient: str
    value: Decimal
    timestamp: int  # epoch milliseconds
    block_number: int
    gas_price: Decimal

    def __post_init__(self):
        if self.block_number < 0:
            raise ValueError(f"block_number must be non-negative, got {self.block_number}")
        if self.timestamp < 0:
            raise ValueError(f"timestamp must be non-negative, got {self.timestamp}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionRecord':
        """Build a record from its wire form."""
        return cls(
            tx_hash=data['txHash'],
            sender=data['from'],
            recipient=data['to'],
            value=Decimal(str(data['value'])),
            timestamp=int(data['timestamp']),
            block_number=int(data['blockNumber']),
            gas_price=Decimal(str(data['gasPrice'])),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to its wire form."""
        return {
            'txHash': self.tx_hash,
            'from': self.sender,
            'to': self.recipient,
            'value': str(self.value),
            'timestamp': self.timestamp,
            'blockNumber': self.block_number,
            'gasPrice': str(self.gas_price),
        }
