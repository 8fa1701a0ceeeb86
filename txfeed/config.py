"""
Configuration module for the txfeed server.
Contains environment variables and other configuration settings.
"""
import os
from dataclasses import dataclass, field, replace
from dotenv import load_dotenv
from typing import List, Optional

from txfeed.constants.feed import (
    MAX_LEDGER_TRANSACTIONS,
    MAX_STATS_BUCKETS,
    MAX_SUBSCRIBER_QUEUE,
    MOCK_STREAM_INTERVAL,
    SEND_TIMEOUT_SECONDS,
    SNAPSHOT_TRANSACTIONS,
)

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


# Server
HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '3001'))

# Live chain endpoint (both must be present for the live feed to be attempted)
RPC_URL = os.getenv('RPC_URL') or None
PRIVATE_KEY = os.getenv('PRIVATE_KEY') or None
RPC_TIMEOUT = float(os.getenv('RPC_TIMEOUT', '10.0'))  # seconds
# Expected chain id; when set, a mismatching endpoint is treated as unavailable
CHAIN_ID = int(os.getenv('CHAIN_ID')) if os.getenv('CHAIN_ID') else None

# Mock stream
MOCK_STREAM_ENABLED = _env_bool('MOCK_STREAM_ENABLED', 'true')
MOCK_INTERVAL_SECONDS = float(os.getenv('MOCK_INTERVAL_SECONDS', str(MOCK_STREAM_INTERVAL)))

# Retained windows
LEDGER_CAPACITY = int(os.getenv('LEDGER_CAPACITY', str(MAX_LEDGER_TRANSACTIONS)))
STATS_WINDOW_MINUTES = int(os.getenv('STATS_WINDOW_MINUTES', str(MAX_STATS_BUCKETS)))
SNAPSHOT_SIZE = int(os.getenv('SNAPSHOT_SIZE', str(SNAPSHOT_TRANSACTIONS)))

# Subscriber back-pressure
SUBSCRIBER_QUEUE_SIZE = int(os.getenv('SUBSCRIBER_QUEUE_SIZE', str(MAX_SUBSCRIBER_QUEUE)))
SEND_TIMEOUT = float(os.getenv('SEND_TIMEOUT', str(SEND_TIMEOUT_SECONDS)))  # seconds

# Bucket labels are rendered in this timezone
FEED_TIMEZONE = os.getenv('FEED_TIMEZONE', 'UTC')

# HTTP
CORS_ORIGINS = _env_list('CORS_ORIGINS', '*')

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_DIR = os.getenv('LOG_DIR', 'logs')


class Constants:
    """
    Constants used throughout the application.
    """
    # Somnia testnet chain id
    SOMNIA_TESTNET_CHAIN_ID = 50312

    # Private keys are 32 bytes, hex encoded
    PRIVATE_KEY_HEX_LENGTH = 64

    # Transaction hashes are 32 bytes, hex encoded
    TX_HASH_HEX_LENGTH = 64

    MS_PER_MINUTE = 60_000


@dataclass
class Config:
    """
    Configuration class for application settings.

    Defaults come from the environment; tests build instances with
    ``Config.from_env().with_overrides(...)``.
    """
    debug: bool = field(default_factory=lambda: _env_bool('DEBUG', 'false'))
    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    # API Settings
    api_version: str = "1.0.0"
    api_title: str = "txfeed API"
    api_description: str = "Real-time blockchain transaction feed with rolling statistics"

    host: str = HOST
    port: int = PORT

    rpc_url: Optional[str] = RPC_URL
    private_key: Optional[str] = PRIVATE_KEY
    rpc_timeout: float = RPC_TIMEOUT
    chain_id: Optional[int] = CHAIN_ID

    mock_stream_enabled: bool = MOCK_STREAM_ENABLED
    mock_interval_seconds: float = MOCK_INTERVAL_SECONDS

    ledger_capacity: int = LEDGER_CAPACITY
    stats_window_minutes: int = STATS_WINDOW_MINUTES
    snapshot_size: int = SNAPSHOT_SIZE
    subscriber_queue_size: int = SUBSCRIBER_QUEUE_SIZE
    send_timeout: float = SEND_TIMEOUT
    feed_timezone: str = FEED_TIMEZONE

    cors_origins: List[str] = field(default_factory=lambda: list(CORS_ORIGINS))

    log_level: str = LOG_LEVEL
    log_dir: str = LOG_DIR

    @classmethod
    def from_env(cls) -> 'Config':
        """Build a configuration from the current process environment."""
        return cls(
            host=os.getenv('HOST', HOST),
            port=int(os.getenv('PORT', str(PORT))),
            rpc_url=os.getenv('RPC_URL') or None,
            private_key=os.getenv('PRIVATE_KEY') or None,
            rpc_timeout=float(os.getenv('RPC_TIMEOUT', str(RPC_TIMEOUT))),
            chain_id=int(os.getenv('CHAIN_ID')) if os.getenv('CHAIN_ID') else None,
            mock_stream_enabled=_env_bool('MOCK_STREAM_ENABLED', str(MOCK_STREAM_ENABLED)),
            mock_interval_seconds=float(os.getenv('MOCK_INTERVAL_SECONDS', str(MOCK_INTERVAL_SECONDS))),
            ledger_capacity=int(os.getenv('LEDGER_CAPACITY', str(LEDGER_CAPACITY))),
            stats_window_minutes=int(os.getenv('STATS_WINDOW_MINUTES', str(STATS_WINDOW_MINUTES))),
            snapshot_size=int(os.getenv('SNAPSHOT_SIZE', str(SNAPSHOT_SIZE))),
            subscriber_queue_size=int(os.getenv('SUBSCRIBER_QUEUE_SIZE', str(SUBSCRIBER_QUEUE_SIZE))),
            send_timeout=float(os.getenv('SEND_TIMEOUT', str(SEND_TIMEOUT))),
            feed_timezone=os.getenv('FEED_TIMEZONE', FEED_TIMEZONE),
            cors_origins=_env_list('CORS_ORIGINS', ','.join(CORS_ORIGINS)),
            log_level=os.getenv('LOG_LEVEL', LOG_LEVEL).upper(),
            log_dir=os.getenv('LOG_DIR', LOG_DIR),
        )

    def with_overrides(self, **changes) -> 'Config':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def live_feed_configured(self) -> bool:
        return bool(self.rpc_url and self.private_key)
