"""
Feed window and wire constants.
These values bound the in-memory state the server keeps between restarts.
"""

# Retained windows
MAX_LEDGER_TRANSACTIONS = 100  # newest-first transaction buffer
MAX_STATS_BUCKETS = 60  # one bucket per minute, one hour of history
SNAPSHOT_TRANSACTIONS = 20  # transactions in init messages and /api/transactions

# Per-subscriber outbound queue; updates beyond this are dropped for that subscriber
MAX_SUBSCRIBER_QUEUE = 100
SEND_TIMEOUT_SECONDS = 5.0
# Mock stream cadence (in seconds)
MOCK_STREAM_INTERVAL = 2.0
MOCK_STREAM_JOB_ID = "mock_transaction_stream"

# Push message types
MESSAGE_TYPE_INIT = "init"
MESSAGE_TYPE_TRANSACTION = "transaction"

# Bucket label format, e.g. "03:04:05 PM"
BUCKET_LABEL_FORMAT = "%I:%M:%S %p"
