"""
Prometheus metrics for the transaction feed.
Served at /metrics through prometheus_client's ASGI app.
"""
from prometheus_client import Counter, Gauge, Info

TRANSACTIONS_INGESTED = Counter(
    'txfeed_transactions_ingested_total',
    'Transactions accepted by the ingestion pipeline',
    ['source'],
)

BROADCAST_MESSAGES = Counter(
    'txfeed_broadcast_messages_total',
    'Messages delivered to subscribers',
    ['type'],
)

BROADCAST_SEND_FAILURES = Counter(
    'txfeed_broadcast_send_failures_total',
    'Subscriber sends that raised and were skipped',
)

BROADCAST_DROPPED = Counter(
    'txfeed_broadcast_dropped_total',
    'Updates dropped because a subscriber queue was full',
)

ACTIVE_SUBSCRIBERS = Gauge(
    'txfeed_active_subscribers',
    'WebSocket subscribers currently registered with the broadcast hub',
)

FEED_AVAILABILITY = Info(
    'txfeed_live_feed',
    'Live chain feed availability determined at startup',
)
