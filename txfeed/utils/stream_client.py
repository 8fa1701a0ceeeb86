"""
Client for the live chain stream endpoint.

The live feed is optional. Without an RPC URL and signing key the server runs
on mock data alone; with them, one connection attempt at startup decides
whether the stream endpoints are usable for the rest of the process lifetime.
"""
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from txfeed.config import Config, Constants, RPC_TIMEOUT
from txfeed.utils.feed_error import (
    FeedConnectionError,
    FeedError,
    FeedUnavailableError,
    InvalidCredentialsError,
)
from txfeed.utils.models.feed_status import FeedAvailability

# Configure logging
logger = logging.getLogger(__name__)

_PRIVATE_KEY_PATTERN = re.compile(r'^(0x)?[0-9a-fA-F]{%d}$' % Constants.PRIVATE_KEY_HEX_LENGTH)

def normalize_private_key(private_key: str) -> str:
    """
    Validate a hex-encoded signing key.

    Args:
        private_key: 32-byte key as hex, with or without a 0x prefix

    Returns:
        str: Lower-case key with a 0x prefix

    Raises:
        InvalidCredentialsError: If the key is not 32 bytes of hex
    """
    key = private_key.strip()
    if not _PRIVATE_KEY_PATTERN.match(key):
        raise InvalidCredentialsError("PRIVATE_KEY must be 32 bytes of hex")
    if not key.startswith('0x'):
        key = '0x' + key
    return key.lower()

class StreamClient:
    """
    Connects to the chain RPC endpoint and serves stream subscribe/publish calls.
    """

    def __init__(self,
                 rpc_url: Optional[str],
                 private_key: Optional[str],
                 timeout: float = RPC_TIMEOUT,
                 expected_chain_id: Optional[int] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.rpc_url = rpc_url
        self._private_key = private_key
        self.timeout = timeout
        self.expected_chain_id = expected_chain_id
        self.chain_id: Optional[int] = None
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    @classmethod
    def from_config(cls, config: Config) -> 'StreamClient':
        return cls(
            rpc_url=config.rpc_url,
            private_key=config.private_key,
            timeout=config.rpc_timeout,
            expected_chain_id=config.chain_id
        )

    @property
    def configured(self) -> bool:
        return bool(self.rpc_url and self._private_key)

    @property
    def connected(self) -> bool:
        """True while the HTTP session opened by a successful startup attempt is held."""
        return self._client is not None

    async def initialize(self) -> FeedAvailability:
        """
        Make the one startup connection attempt.

        The result is handed to ``FeedCoordinator.set_availability``, which
        keeps it for the lifetime of the process.

        Returns:
            FeedAvailability: NotConfigured, Unavailable or Ready
        """
        if not self.configured:
            logger.info("Live feed not configured. Using mock data only.")
            return FeedAvailability.NOT_CONFIGURED

        try:
            normalize_private_key(self._private_key)
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
            chain_id_hex = await self._rpc_call('eth_chainId')
            self.chain_id = int(chain_id_hex, 16)

            if self.expected_chain_id is not None and self.chain_id != self.expected_chain_id:
                raise FeedConnectionError(
                    f"RPC endpoint reports chain {self.chain_id}, expected {self.expected_chain_id}"
                )

            logger.info(f"[SUCCESS] Live feed initialized (chain id {self.chain_id})")
            return FeedAvailability.READY
        except (FeedError, TypeError, ValueError) as e:
            logger.error(f"Failed to initialize live feed: {str(e)}")
            await self.close()
            return FeedAvailability.UNAVAILABLE

    def _require_connection(self) -> None:
        if not self.connected:
            raise FeedUnavailableError("Live feed not initialized")

    async def subscribe(self, stream_id: Optional[str]) -> Dict[str, Any]:
        """Acknowledge a stream subscription."""
        self._require_connection()
        logger.info(f"Subscribed to stream {stream_id}")
        return {"message": "Subscribed to stream", "streamId": stream_id}

    async def publish(self, data: Any) -> Dict[str, Any]:
        """Acknowledge a publish request."""
        self._require_connection()
        logger.info("Data published to stream")
        return {"message": "Data published to stream"}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _rpc_call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or []
        }

        try:
            response = await self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise FeedConnectionError(
                f"{method} failed: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise FeedConnectionError(f"{method} failed: {str(e)}") from e
        except ValueError as e:
            raise FeedConnectionError(f"{method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise FeedConnectionError(f"{method} returned an unexpected payload")
        if data.get("error"):
            error = data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise FeedConnectionError(f"{method} returned error: {message}")
        if "result" not in data:
            raise FeedConnectionError(f"{method} returned no result")

        return data["result"]
