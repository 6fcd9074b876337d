"""
In-memory event bus.

Maps event-type names to an ordered list of handlers and delivers each
published event to every handler currently subscribed to its type.

Delivery contract (DeliveryMode.AWAIT, the default):
- handlers run sequentially, in subscription order; each one completes
  before the next starts
- ``publish`` returns only after every handler has completed or failed
- a failing handler is logged and does not stop its siblings or the
  publisher (unless ``strict=True``, see below)

DeliveryMode.BACKGROUND keeps the same per-event ordering but runs the
delivery in a tracked task, so ``publish`` returns immediately. Pending
deliveries are awaited by ``drain()`` and ``close()``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections import defaultdict
from enum import Enum
from typing import Optional

from rbac_audit.domain.errors import EventBusClosedError, HandlerExecutionError
from rbac_audit.domain.events import DomainEvent
from rbac_audit.ports.event_bus import EventHandler

logger = logging.getLogger(__name__)


class DeliveryMode(str, Enum):
    AWAIT = "await"
    BACKGROUND = "background"


def _handler_name(handler: EventHandler) -> str:
    name = getattr(handler, "__qualname__", None)
    if name is None:
        name = type(handler).__qualname__
    return name


def _same_handler(a: EventHandler, b: EventHandler) -> bool:
    # Bound methods are re-created on each attribute access; compare by equality.
    return a is b or a == b


class InMemoryEventBus:
    """
    Process-wide publish/subscribe registry for domain events.

    The subscription table is guarded by a lock. ``publish`` iterates a
    snapshot taken under that lock, so subscribing or unsubscribing
    while a publish is in flight never corrupts the iteration; the
    change takes effect from the next publish.

    Args:
        delivery: AWAIT (publish resolves after all handlers) or BACKGROUND
        strict: Raise the first HandlerExecutionError once every handler
            has been attempted
        deduplicate: Ignore a subscription of a handler already
            subscribed to the same type
    """

    def __init__(
        self,
        delivery: DeliveryMode = DeliveryMode.AWAIT,
        strict: bool = False,
        deduplicate: bool = False,
    ) -> None:
        self.delivery = DeliveryMode(delivery)
        self.strict = strict
        self.deduplicate = deduplicate
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._pending: set[asyncio.Task] = set()
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        self._closed = False
        logger.debug(f"Event bus started (delivery={self.delivery.value})")

    async def close(self) -> None:
        """Stop accepting events and wait for background deliveries."""
        self._closed = True
        await self.drain()
        logger.debug("Event bus closed")

    async def drain(self) -> None:
        """Wait for every pending background delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Append ``handler`` to the ordered list for ``event_type``."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._lock:
            handlers = self._handlers[event_type]
            if self.deduplicate and any(_same_handler(h, handler) for h in handlers):
                logger.debug(
                    f"Handler {_handler_name(handler)} already subscribed to {event_type}"
                )
                return
            handlers.append(handler)
            count = len(handlers)
        logger.debug(
            f"Handler {_handler_name(handler)} subscribed to {event_type} "
            f"({count} handlers)"
        )

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove every occurrence of ``handler`` from ``event_type`` only."""
        with self._lock:
            handlers = self._handlers.get(event_type)
            if not handlers:
                return
            remaining = [h for h in handlers if not _same_handler(h, handler)]
            if len(remaining) == len(handlers):
                return
            if remaining:
                self._handlers[event_type] = remaining
            else:
                del self._handlers[event_type]
        logger.debug(f"Handler {_handler_name(handler)} unsubscribed from {event_type}")

    def handler_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))

    def event_types(self) -> list[str]:
        """Event types with at least one subscribed handler."""
        with self._lock:
            return [t for t, hs in self._handlers.items() if hs]

    def clear(self, event_type: Optional[str] = None) -> None:
        """Remove all handlers, or only those of ``event_type``."""
        with self._lock:
            if event_type is None:
                self._handlers.clear()
            else:
                self._handlers.pop(event_type, None)
        logger.debug(f"Listeners cleared for {event_type or 'all events'}")

    def _snapshot(self, event_type: str) -> tuple[EventHandler, ...]:
        with self._lock:
            return tuple(self._handlers.get(event_type, ()))

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish ``event`` to all handlers subscribed to its type.

        Raises:
            EventBusClosedError: If the bus has been closed
            HandlerExecutionError: In strict mode, if any handler failed
        """
        if self._closed:
            raise EventBusClosedError()

        handlers = self._snapshot(event.event_type)
        if not handlers:
            logger.debug(
                f"Event {event.event_type} published but no listeners",
                extra={"eventId": event.event_id},
            )
            return

        if self.delivery == DeliveryMode.BACKGROUND:
            task = asyncio.get_running_loop().create_task(
                self._deliver(event, handlers)
            )
            self._pending.add(task)
            task.add_done_callback(self._on_background_done)
            return

        await self._deliver(event, handlers)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background delivery failed: {exc}")

    async def _deliver(
        self, event: DomainEvent, handlers: tuple[EventHandler, ...]
    ) -> None:
        failures: list[HandlerExecutionError] = []

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                failure = HandlerExecutionError(
                    event.event_type, event.event_id, _handler_name(handler), e
                )
                logger.error(
                    f"Error processing event {event.event_type} "
                    f"in {failure.handler_name}: {e}",
                    exc_info=True,
                    extra={"eventId": event.event_id, "eventType": event.event_type},
                )
                failures.append(failure)

        logger.debug(
            f"Event {event.event_type} published to {len(handlers)} handlers",
            extra={"eventId": event.event_id, "failed": len(failures)},
        )

        if self.strict and failures:
            first = failures[0]
            first.failures = failures
            raise first
