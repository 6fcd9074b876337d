"""
Tests for the in-memory event bus.
"""

import asyncio
import logging

import pytest
from unittest.mock import AsyncMock, Mock

from rbac_audit.domain.errors import EventBusClosedError, HandlerExecutionError
from rbac_audit.domain.events import DomainEvent
from rbac_audit.infrastructure.adapters.event_bus import DeliveryMode, InMemoryEventBus


@pytest.fixture
def bus():
    return InMemoryEventBus()


def created(entity_id="u2"):
    return DomainEvent("user.created", {"entity_id": entity_id}, performed_by="u1")


# -----------------------------------------------------------------------------
# Delivery
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_publish_delivers_to_subscribers(bus):
    handler = AsyncMock()
    bus.subscribe("user.created", handler)
    event = created()

    await bus.publish(event)

    handler.assert_awaited_once_with(event)


@pytest.mark.asyncio
async def test_publish_runs_handlers_sequentially_in_order(bus):
    log = []

    async def first(event):
        log.append("h1 start")
        await asyncio.sleep(0.01)
        log.append("h1 end")

    async def second(event):
        log.append("h2 start")

    bus.subscribe("user.created", first)
    bus.subscribe("user.created", second)

    await bus.publish(created())
    await bus.publish(created())

    assert log == ["h1 start", "h1 end", "h2 start"] * 2


@pytest.mark.asyncio
async def test_publish_supports_sync_handlers(bus):
    handler = Mock()
    bus.subscribe("user.created", handler)

    await bus.publish(created())

    handler.assert_called_once()


@pytest.mark.asyncio
async def test_publish_only_reaches_matching_type(bus):
    handler = AsyncMock()
    bus.subscribe("user.deleted", handler)

    await bus.publish(created())

    handler.assert_not_awaited()


@pytest.mark.asyncio
async def test_publish_without_subscribers_is_noop(bus):
    await bus.publish(created())


# -----------------------------------------------------------------------------
# Failure isolation
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_siblings(bus, caplog):
    failing = AsyncMock(side_effect=RuntimeError("db down"))
    sibling = AsyncMock()
    bus.subscribe("user.created", failing)
    bus.subscribe("user.created", sibling)

    with caplog.at_level(logging.ERROR):
        await bus.publish(created())

    sibling.assert_awaited_once()
    assert "db down" in caplog.text


@pytest.mark.asyncio
async def test_strict_mode_raises_after_all_handlers():
    bus = InMemoryEventBus(strict=True)
    first = AsyncMock(side_effect=RuntimeError("first"))
    second = Mock(side_effect=ValueError("second"))
    third = AsyncMock()
    bus.subscribe("user.created", first)
    bus.subscribe("user.created", second)
    bus.subscribe("user.created", third)

    with pytest.raises(HandlerExecutionError) as exc:
        await bus.publish(created())

    third.assert_awaited_once()
    assert isinstance(exc.value.cause, RuntimeError)
    assert [type(f.cause) for f in exc.value.failures] == [RuntimeError, ValueError]


# -----------------------------------------------------------------------------
# Subscriptions
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_unsubscribe_affects_only_one_type(bus):
    handler = AsyncMock()
    bus.subscribe("user.created", handler)
    bus.subscribe("user.deleted", handler)

    bus.unsubscribe("user.created", handler)
    await bus.publish(created())
    await bus.publish(DomainEvent("user.deleted", {"entity_id": "u2"}, performed_by="u1"))

    assert handler.await_count == 1
    assert handler.await_args.args[0].event_type == "user.deleted"
    assert bus.event_types() == ["user.deleted"]


def test_unsubscribe_unknown_handler_is_noop(bus):
    bus.unsubscribe("user.created", Mock())
    assert bus.handler_count("user.created") == 0


@pytest.mark.asyncio
async def test_duplicate_subscriptions_run_twice(bus):
    handler = AsyncMock()
    bus.subscribe("user.created", handler)
    bus.subscribe("user.created", handler)

    await bus.publish(created())

    assert handler.await_count == 2


def test_unsubscribe_removes_every_occurrence(bus):
    handler = Mock()
    bus.subscribe("user.created", handler)
    bus.subscribe("user.created", handler)

    bus.unsubscribe("user.created", handler)

    assert bus.handler_count("user.created") == 0


def test_deduplicate_ignores_repeated_subscription():
    bus = InMemoryEventBus(deduplicate=True)

    class Listener:
        async def on_event(self, event):
            pass

    listener = Listener()
    bus.subscribe("user.created", listener.on_event)
    bus.subscribe("user.created", listener.on_event)

    assert bus.handler_count("user.created") == 1


def test_subscribe_rejects_non_callable(bus):
    with pytest.raises(TypeError):
        bus.subscribe("user.created", "not a handler")


@pytest.mark.asyncio
async def test_subscribe_during_publish_applies_to_next_publish(bus):
    late = AsyncMock()

    async def subscriber(event):
        bus.subscribe("user.created", late)

    bus.subscribe("user.created", subscriber)

    await bus.publish(created())
    late.assert_not_awaited()

    await bus.publish(created())
    late.assert_awaited_once()


def test_clear(bus):
    bus.subscribe("user.created", Mock())
    bus.subscribe("user.deleted", Mock())

    bus.clear("user.created")
    assert bus.event_types() == ["user.deleted"]

    bus.clear()
    assert bus.event_types() == []


# -----------------------------------------------------------------------------
# Background delivery and lifecycle
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_background_delivery_returns_before_handlers():
    bus = InMemoryEventBus(delivery=DeliveryMode.BACKGROUND)
    gate = asyncio.Event()
    done = []

    async def slow(event):
        await gate.wait()
        done.append(event.event_id)

    bus.subscribe("user.created", slow)
    event = created()

    await bus.publish(event)
    assert done == []

    gate.set()
    await bus.drain()
    assert done == [event.event_id]


@pytest.mark.asyncio
async def test_close_waits_for_background_and_rejects_publish():
    bus = InMemoryEventBus(delivery=DeliveryMode.BACKGROUND)
    handler = AsyncMock()
    bus.subscribe("user.created", handler)

    await bus.start()
    await bus.publish(created())
    await bus.close()

    handler.assert_awaited_once()
    assert bus.is_closed
    with pytest.raises(EventBusClosedError):
        await bus.publish(created())


@pytest.mark.asyncio
async def test_unsubscribe_during_publish_applies_to_next_publish(bus):
    later = AsyncMock()

    async def unsubscriber(event):
        bus.unsubscribe("user.created", later)

    bus.subscribe("user.created", unsubscriber)
    bus.subscribe("user.created", later)

    # The in-flight publish still delivers to its snapshot
    await bus.publish(created())
    later.assert_awaited_once()

    await bus.publish(created())
    later.assert_awaited_once()
    assert bus.handler_count("user.created") == 1
