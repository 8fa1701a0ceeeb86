"""
Broadcast hub: fans feed updates out to WebSocket subscribers.

Each subscriber gets a bounded outbound queue drained by its own writer task,
so enqueueing never waits on a socket. A slow or stalled subscriber only
fills its own queue; further updates for it are dropped and counted.
"""
import asyncio
import logging
from typing import Dict, Optional, Tuple, Union

from starlette.websockets import WebSocket, WebSocketState

from txfeed.constants.feed import MAX_SUBSCRIBER_QUEUE, SEND_TIMEOUT_SECONDS
from txfeed.utils.metrics import (
    ACTIVE_SUBSCRIBERS,
    BROADCAST_DROPPED,
    BROADCAST_MESSAGES,
    BROADCAST_SEND_FAILURES,
)
from txfeed.utils.models.messages import InitMessage, TransactionUpdate

logger = logging.getLogger(__name__)

FeedMessage = Union[InitMessage, TransactionUpdate]
QueuedMessage = Tuple[str, str]  # (message type, serialized message)

def is_open(channel: WebSocket) -> bool:
    """True while both sides of the socket still consider it connected."""
    return (channel.client_state == WebSocketState.CONNECTED
            and channel.application_state == WebSocketState.CONNECTED)

class Subscription:
    """Outbound queue and writer task for one channel."""

    def __init__(self, channel: WebSocket, queue_size: int):
        self.channel = channel
        self.queue: "asyncio.Queue[QueuedMessage]" = asyncio.Queue(maxsize=queue_size)
        self.task: Optional[asyncio.Task] = None
        self.dropped = 0

class BroadcastHub:
    """
    Holds the subscribed channels and pushes messages to them.

    A message is serialized once per broadcast and put on every open
    subscriber's queue without awaiting. Sends that raise or exceed
    ``send_timeout`` are counted and skipped; the subscriber stays registered
    until the connection handler calls ``unsubscribe`` on close or error.
    """

    def __init__(self, queue_size: int = MAX_SUBSCRIBER_QUEUE,
                 send_timeout: Optional[float] = SEND_TIMEOUT_SECONDS):
        if queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {queue_size}")
        self.queue_size = queue_size
        self.send_timeout = send_timeout
        self._subscriptions: Dict[WebSocket, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, channel: WebSocket) -> bool:
        return channel in self._subscriptions

    def dropped(self, channel: WebSocket) -> int:
        """Updates dropped for a channel because its queue was full."""
        subscription = self._subscriptions.get(channel)
        return subscription.dropped if subscription else 0

    def subscribe(self, channel: WebSocket, init_message: InitMessage) -> None:
        """
        Register a channel and queue the initial snapshot as its first message.

        Must be called from a running event loop; it starts the channel's
        writer task.

        Args:
            channel: Accepted WebSocket connection
            init_message: Snapshot taken at subscription time
        """
        if channel in self._subscriptions:
            return

        subscription = Subscription(channel, self.queue_size)
        subscription.queue.put_nowait((init_message.type, init_message.to_json()))
        subscription.task = asyncio.create_task(self._drain(subscription))
        self._subscriptions[channel] = subscription

        ACTIVE_SUBSCRIBERS.set(len(self._subscriptions))
        logger.info(f"[WS] Client connected ({len(self._subscriptions)} subscribers)")

    def unsubscribe(self, channel: WebSocket) -> None:
        """Remove a channel and stop its writer. Unknown channels are ignored."""
        subscription = self._subscriptions.pop(channel, None)
        if subscription is None:
            return
        if subscription.task is not None:
            subscription.task.cancel()
        ACTIVE_SUBSCRIBERS.set(len(self._subscriptions))
        logger.info(f"[WS] Client disconnected ({len(self._subscriptions)} subscribers)")

    def broadcast(self, event: FeedMessage) -> int:
        """
        Queue an event for every open subscriber.

        Args:
            event: Message to deliver

        Returns:
            int: Number of subscribers the message was queued for
        """
        message = event.to_json()
        queued = 0
        for subscription in list(self._subscriptions.values()):
            if not is_open(subscription.channel):
                continue
            try:
                subscription.queue.put_nowait((event.type, message))
            except asyncio.QueueFull:
                subscription.dropped += 1
                BROADCAST_DROPPED.inc()
                logger.warning(f"[WS] Subscriber queue full, dropped {event.type} message")
                continue
            queued += 1
        return queued

    async def flush(self, channel: Optional[WebSocket] = None) -> None:
        """Wait until queued messages have been sent or given up on.

        Covers every subscriber, or only ``channel`` when given.
        """
        if channel is not None:
            subscriptions = [self._subscriptions[channel]] if channel in self._subscriptions else []
        else:
            subscriptions = list(self._subscriptions.values())
        await asyncio.gather(*(s.queue.join() for s in subscriptions))

    async def close(self) -> None:
        """Stop all writer tasks and forget every subscriber."""
        tasks = [s.task for s in self._subscriptions.values() if s.task is not None]
        self._subscriptions.clear()
        ACTIVE_SUBSCRIBERS.set(0)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _drain(self, subscription: Subscription) -> None:
        while True:
            message_type, message = await subscription.queue.get()
            try:
                if is_open(subscription.channel):
                    await self._send(subscription.channel, message_type, message)
            finally:
                subscription.queue.task_done()

    async def _send(self, channel: WebSocket, message_type: str, message: str) -> bool:
        try:
            await asyncio.wait_for(channel.send_text(message), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            BROADCAST_SEND_FAILURES.inc()
            logger.warning(f"[WS] Send timed out after {self.send_timeout}s, skipping message")
            return False
        except Exception as e:
            BROADCAST_SEND_FAILURES.inc()
            logger.warning(f"[WS] Send failed, skipping message: {str(e)}")
            return False
        BROADCAST_MESSAGES.labels(type=message_type).inc()
        return True
