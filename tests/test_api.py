"""
Tests for the HTTP and WebSocket surface of the feed server.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from txfeed.main import create_app
from txfeed.utils.models.transaction import TransactionRecord
from txfeed.utils.stream_client import StreamClient
from tests.feed_fakes import make_record


def ready_stream_client() -> StreamClient:
    """Stream client whose RPC endpoint answers the chain id probe."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0xc488"})

    return StreamClient(
        rpc_url="https://rpc.example.test",
        private_key="ab" * 32,
        transport=httpx.MockTransport(handler),
    )


def unreachable_stream_client() -> StreamClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="down")

    return StreamClient(
        rpc_url="https://rpc.example.test",
        private_key="ab" * 32,
        transport=httpx.MockTransport(handler),
    )


def ingest(app, count: int) -> None:
    """Fill the ledger and statistics without going through the event loop."""
    feed = app.state.feed
    for n in range(1, count + 1):
        record = make_record(n, timestamp=1_700_000_000_000 + n * 1_000)
        feed.ledger.ingest(record)
        feed.statistics.record(record.timestamp)


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health_reports_not_configured(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "feedAvailability": "NotConfigured"}

    def test_root_banner(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "message" in response.json()

    def test_metrics_exposed(self, client):
        response = client.get("/metrics/")
        assert response.status_code == 200
        assert "txfeed_active_subscribers" in response.text


class TestQueries:
    def test_empty_feed(self, client):
        body = client.get("/api/transactions").json()
        assert body["transactions"] == []
        assert body["stats"]["totalCount"] == 0
        assert body["stats"]["perMinute"] == []
        assert isinstance(body["stats"]["lastUpdated"], int)

    def test_transactions_snapshot_is_capped(self, app, client):
        ingest(app, 30)

        body = client.get("/api/transactions").json()

        assert len(body["transactions"]) == 20
        assert body["transactions"][0]["blockNumber"] == 30
        assert body["stats"]["totalCount"] == 30

        newest = TransactionRecord.from_dict(body["transactions"][0])
        assert newest == app.state.feed.ledger.latest()

    def test_transaction_wire_format(self, app, client):
        ingest(app, 1)

        tx = client.get("/api/transactions").json()["transactions"][0]

        assert set(tx) == {"txHash", "from", "to", "value", "timestamp", "blockNumber", "gasPrice"}
        assert tx["value"] == "1.2500"
        assert tx["gasPrice"] == "21.00"
        assert tx["timestamp"] == 1_700_000_001_000

    def test_stats(self, app, client):
        ingest(app, 3)

        stats = client.get("/api/stats").json()

        assert stats["totalCount"] == 3
        assert sum(bucket["count"] for bucket in stats["perMinute"]) == 3
        assert set(stats["perMinute"][0]) == {"minute", "count", "time"}


class TestStreamEndpoints:
    @pytest.mark.parametrize("path, payload", [
        ("/api/stream/subscribe", {"streamId": "blocks"}),
        ("/api/stream/publish", {"data": {"hello": "world"}}),
    ])
    def test_unavailable_when_not_configured(self, client, path, payload):
        response = client.post(path, json=payload)
        assert response.status_code == 503
        assert response.json() == {"error": "Live feed not initialized"}

    def test_unavailable_when_startup_probe_failed(self, config):
        app = create_app(config, stream_client=unreachable_stream_client())
        with TestClient(app) as client:
            assert client.get("/health").json()["feedAvailability"] == "Unavailable"
            response = client.post("/api/stream/subscribe", json={"streamId": "blocks"})

        assert response.status_code == 503

    def test_ready_feed_accepts_calls(self, config):
        app = create_app(config, stream_client=ready_stream_client())
        with TestClient(app) as client:
            assert client.get("/health").json()["feedAvailability"] == "Ready"

            subscribed = client.post("/api/stream/subscribe", json={"streamId": "blocks"})
            published = client.post("/api/stream/publish", json={"data": [1, 2, 3]})

        assert subscribed.status_code == 200
        assert subscribed.json() == {"message": "Subscribed to stream", "streamId": "blocks"}
        assert published.status_code == 200
        assert published.json() == {"message": "Data published to stream"}

    def test_unexpected_error_is_500(self, config):
        app = create_app(config, stream_client=ready_stream_client())
        failing = AsyncMock(side_effect=RuntimeError("stream endpoint rejected the request"))
        with patch.object(StreamClient, "subscribe", failing), TestClient(app) as client:
            response = client.post("/api/stream/subscribe", json={"streamId": "blocks"})

        assert response.status_code == 500
        assert response.json() == {"error": "stream endpoint rejected the request"}
        failing.assert_awaited_once_with("blocks")


class TestWebSocket:
    @pytest.mark.parametrize("path", ["/", "/ws"])
    def test_init_message_on_connect(self, app, client, path):
        ingest(app, 25)

        with client.websocket_connect(path) as websocket:
            init = websocket.receive_json()

        assert init["type"] == "init"
        assert len(init["transactions"]) == 20
        assert init["transactions"][0]["blockNumber"] == 25
        assert init["stats"]["totalCount"] == 25

    def test_live_update_after_init(self, app, client):
        feed = app.state.feed

        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            delivered = client.portal.call(feed.add_transaction, make_record(9))
            update = websocket.receive_json()

        assert delivered == 1
        assert update["type"] == "transaction"
        assert update["transaction"]["blockNumber"] == 9
        assert update["stats"]["totalCount"] == 1
