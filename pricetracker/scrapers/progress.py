"""Broadcast channel for batch progress events.

Any number of listeners can subscribe. Each published event is delivered
to every listener registered at that moment, in publish order. A
listener that fails or has gone away is dropped without disturbing the
others or the batch that is publishing.
"""

import asyncio
import threading
from typing import AsyncIterator, List, Optional, Protocol

import structlog

from pricetracker.config import settings
from pricetracker.schemas.progress import ConnectedEvent, _EventBase

logger = structlog.get_logger(__name__)


class ProgressListener(Protocol):
    """Anything that can receive progress events."""

    def send(self, event: _EventBase) -> None:
        ...


class ListenerClosed(Exception):
    """Raised by a listener whose consumer has gone away."""


class QueueListener:
    """Listener backed by an asyncio queue, consumed with ``stream()``.

    ``send`` never blocks: a consumer that falls more than ``maxsize``
    events behind is treated as gone.
    """

    _CLOSE = object()

    def __init__(self, maxsize: Optional[int] = None):
        if maxsize is None:
            maxsize = settings.PROGRESS_QUEUE_SIZE
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: _EventBase) -> None:
        if self._closed:
            raise ListenerClosed("listener is closed")
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._closed = True
            raise ListenerClosed("listener queue is full")

    def close(self) -> None:
        """Stop the listener; ``stream()`` ends after the queued events."""
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(self._CLOSE)
        except asyncio.QueueFull:
            pass  # stream() also stops once the queue drains and closed is set

    async def stream(self) -> AsyncIterator[_EventBase]:
        """Yield events until the listener is closed."""
        while True:
            if self._closed and self._queue.empty():
                return
            item = await self._queue.get()
            if item is self._CLOSE:
                return
            yield item


class ProgressChannel:
    """Thread-safe registry of progress listeners."""

    def __init__(self, queue_size: Optional[int] = None):
        self._queue_size = queue_size
        self._listeners: List[ProgressListener] = []
        self._lock = threading.Lock()
        self.logger = logger.bind(component="progress_channel")

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: Optional[ProgressListener] = None) -> ProgressListener:
        """Register a listener and send it a ``connected`` acknowledgment.

        Args:
            listener: Listener to register; a new QueueListener when omitted

        Returns:
            The registered listener
        """
        if listener is None:
            listener = QueueListener(self._queue_size)
        with self._lock:
            self._listeners.append(listener)
        self.logger.info("listener_subscribed", listeners=self.listener_count)
        self._deliver(listener, ConnectedEvent())
        return listener

    def unsubscribe(self, listener: ProgressListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
        self.logger.info("listener_unsubscribed", listeners=self.listener_count)

    def publish(self, event: _EventBase) -> None:
        """Deliver an event to every current listener."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            self._deliver(listener, event)

    def _deliver(self, listener: ProgressListener, event: _EventBase) -> None:
        try:
            listener.send(event)
        except Exception as e:
            self.logger.warning(
                "progress_listener_failed",
                event_type=getattr(event, "type", None),
                error=str(e),
            )
            self.unsubscribe(listener)
