"""
Tests for the ingestion pipeline and query facade.
"""

import asyncio

import pytest

from txfeed.utils.broadcast_hub import BroadcastHub
from txfeed.utils.feed_coordinator import FeedCoordinator
from txfeed.utils.models.feed_status import FeedAvailability
from txfeed.utils.models.statistics import StatisticsAggregator
from tests.feed_fakes import FakeChannel, StalledChannel, make_record


@pytest.mark.asyncio
async def test_add_transaction_updates_ledger_stats_and_subscribers(feed):
    channel = FakeChannel()
    await feed.subscribe(channel)

    delivered = await feed.add_transaction(make_record(1, timestamp=5_000))
    await feed.hub.flush()

    assert delivered == 1
    assert feed.ledger.latest() == make_record(1, timestamp=5_000)
    assert feed.current_stats().total_count == 1

    update = channel.messages[-1]
    assert update["type"] == "transaction"
    assert update["transaction"]["txHash"] == make_record(1).tx_hash
    assert update["stats"]["totalCount"] == 1
    assert update["stats"]["perMinute"][0]["count"] == 1


@pytest.mark.asyncio
async def test_every_update_carries_matching_stats(feed):
    channel = FakeChannel()
    await feed.subscribe(channel)

    for n in range(1, 26):
        await feed.add_transaction(make_record(n, timestamp=n * 10_000))
    await feed.hub.flush()

    updates = channel.messages[1:]
    assert len(updates) == 25
    for n, update in enumerate(updates, start=1):
        assert update["transaction"]["blockNumber"] == n
        assert update["stats"]["totalCount"] == n
        assert sum(b["count"] for b in update["stats"]["perMinute"]) == n


@pytest.mark.asyncio
@pytest.mark.parametrize("ingested", [0, 5, 20, 45])
async def test_late_subscriber_gets_point_in_time_snapshot(feed, ingested):
    for n in range(1, ingested + 1):
        await feed.add_transaction(make_record(n))

    channel = FakeChannel()
    await feed.subscribe(channel)
    await feed.hub.flush()

    init = channel.messages[0]
    assert init["type"] == "init"
    assert len(init["transactions"]) == min(ingested, 20)
    assert init["stats"]["totalCount"] == ingested
    if ingested:
        assert init["transactions"][0]["blockNumber"] == ingested


@pytest.mark.asyncio
async def test_concurrent_ingestion_keeps_ledger_and_stats_consistent(feed):
    await asyncio.gather(*(feed.add_transaction(make_record(n)) for n in range(1, 151)))

    assert len(feed.ledger) == 100
    assert feed.current_stats().total_count == 150


@pytest.mark.asyncio
async def test_unsubscribed_channel_stops_receiving(feed):
    channel = FakeChannel()
    await feed.subscribe(channel)
    await feed.hub.flush()
    feed.unsubscribe(channel)

    await feed.add_transaction(make_record(1))

    assert [m["type"] for m in channel.messages] == ["init"]


def test_recent_transactions_defaults_to_snapshot_size(feed):
    for n in range(1, 31):
        feed.ledger.ingest(make_record(n))

    assert len(feed.recent_transactions()) == 20
    assert len(feed.recent_transactions(limit=5)) == 5


def test_availability_starts_not_configured(feed):
    assert feed.availability is FeedAvailability.NOT_CONFIGURED

    feed.set_availability(FeedAvailability.READY)
    assert feed.availability.is_ready


def test_from_config_sizes_windows(config):
    feed = FeedCoordinator.from_config(config.with_overrides(
        ledger_capacity=10, stats_window_minutes=5, snapshot_size=3
    ))

    assert feed.ledger.capacity == 10
    assert feed.statistics.max_buckets == 5
    assert feed.snapshot_size == 3


@pytest.mark.asyncio
async def test_stalled_subscriber_does_not_hold_up_ingestion_or_new_subscribers(clock):
    feed = FeedCoordinator(
        statistics=StatisticsAggregator(clock=clock),
        hub=BroadcastHub(send_timeout=0.05),
    )
    stalled = StalledChannel(stall_after=1)
    healthy = FakeChannel()
    await feed.subscribe(stalled)
    await feed.subscribe(healthy)

    await asyncio.wait_for(feed.add_transaction(make_record(1)), timeout=1)
    await asyncio.wait_for(feed.add_transaction(make_record(2)), timeout=1)
    newcomer = FakeChannel()
    await asyncio.wait_for(feed.subscribe(newcomer), timeout=1)
    await asyncio.wait_for(feed.hub.flush(), timeout=2)

    assert len(feed.ledger) == 2
    assert [m["type"] for m in healthy.messages] == ["init", "transaction", "transaction"]
    assert newcomer.messages[0]["type"] == "init"
    assert newcomer.messages[0]["stats"]["totalCount"] == 2
    assert stalled in feed.hub
    await feed.close()


def test_from_config_sizes_subscriber_queues(config):
    feed = FeedCoordinator.from_config(config.with_overrides(subscriber_queue_size=7, send_timeout=0.5))

    assert feed.hub.queue_size == 7
    assert feed.hub.send_timeout == 0.5
