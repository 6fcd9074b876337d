"""
Event Bus Port.

Publish/subscribe contract exposed to any domain module that wants to
emit or react to domain events.
"""

from typing import Any, Awaitable, Callable, Protocol, Union

from rbac_audit.domain.events import DomainEvent


EventHandler = Callable[[DomainEvent], Union[Awaitable[Any], Any]]


class EventBusPort(Protocol):
    """In-process publish/subscribe registry for domain events."""

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Append ``handler`` to the ordered list for ``event_type``."""
        ...

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove ``handler`` from ``event_type``; unknown handlers are ignored."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every handler subscribed to its type."""
        ...
