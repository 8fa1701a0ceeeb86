"""
Event sources that produce transaction records for the ingestion pipeline.
"""
import random
import time
from abc import ABC, abstractmethod
from decimal import ROUND_DOWN, Decimal
from typing import Callable, List, Optional, Sequence

from txfeed.config import Constants
from txfeed.utils.models.transaction import GAS_PRICE_QUANTUM, VALUE_QUANTUM, TransactionRecord

MOCK_ADDRESSES: List[str] = [
    "0x742d35Cc6634C0532925a3b844Bc9e7595f42bE",
    "0x8ba1f109551bD432803012645Ac136ddd64DBA72",
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812e339D9B73b0245adC552C719d1",
    "0x3C44CdDdB6a900c6671B36BeE7e0650407AeC868",
]

MAX_MOCK_VALUE = 100
MAX_MOCK_GAS_PRICE = 100
MAX_MOCK_BLOCK_NUMBER = 1_000_000

class EventSource(ABC):
    """Something that can produce the next transaction for the feed."""

    name: str = "source"

    @abstractmethod
    def next_transaction(self) -> TransactionRecord:
        """Produce one transaction record."""

class MockTransactionSource(EventSource):
    """
    Synthetic transactions between a fixed set of addresses.

    Pass a seeded ``random.Random`` and a fixed clock to get a reproducible
    sequence.
    """

    name = "mock"

    def __init__(self,
                 addresses: Sequence[str] = MOCK_ADDRESSES,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        if not addresses:
            raise ValueError("at least one address is required")
        self.addresses = list(addresses)
        self._rng = rng or random.Random()
        self._clock = clock or time.time

    def next_transaction(self) -> TransactionRecord:
        return TransactionRecord(
            tx_hash=self._random_hash(),
            sender=self._rng.choice(self.addresses),
            recipient=self._rng.choice(self.addresses),
            value=self._random_amount(MAX_MOCK_VALUE, VALUE_QUANTUM),
            timestamp=int(self._clock() * 1000),
            block_number=self._rng.randrange(MAX_MOCK_BLOCK_NUMBER),
            gas_price=self._random_amount(MAX_MOCK_GAS_PRICE, GAS_PRICE_QUANTUM),
        )

    def _random_hash(self) -> str:
        return "0x" + "".join(self._rng.choice("0123456789abcdef") for _ in range(Constants.TX_HASH_HEX_LENGTH))

    def _random_amount(self, upper: int, quantum: Decimal) -> Decimal:
        # Quantize truncates so the amount stays below ``upper``
        amount = Decimal(str(self._rng.random() * upper))
        return amount.quantize(quantum, rounding=ROUND_DOWN)
