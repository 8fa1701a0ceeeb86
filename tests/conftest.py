"""
Pytest configuration file for the feed tests.
"""

import os
import sys

# Keep test runs off the log directory and the background mock stream
os.environ["LOG_DIR"] = ""
os.environ["MOCK_STREAM_ENABLED"] = "false"
os.environ.pop("RPC_URL", None)
os.environ.pop("PRIVATE_KEY", None)

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from txfeed.config import Config
from txfeed.utils.feed_coordinator import FeedCoordinator
from txfeed.utils.models.statistics import StatisticsAggregator
from tests.feed_fakes import FixedClock, make_record

# Register the asyncio marker
def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as running with asyncio")

@pytest.fixture
def clock():
    """A clock pinned to 2023-11-14 22:13:20 UTC."""
    return FixedClock(1_700_000_000.0)

@pytest.fixture
def config() -> Config:
    return Config.from_env().with_overrides(
        rpc_url=None,
        private_key=None,
        mock_stream_enabled=False,
        log_dir="",
        cors_origins=["*"],
    )

@pytest.fixture
def feed(clock) -> FeedCoordinator:
    return FeedCoordinator(statistics=StatisticsAggregator(clock=clock))

@pytest.fixture
def record_factory():
    """Build records with sequential hashes and block numbers."""
    return make_record
