"""
Tests for the in-memory audit log repository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from rbac_audit.domain.audit import AuditAction, AuditRecord
from rbac_audit.infrastructure.adapters.audit_repository import InMemoryAuditLogRepository


@pytest.fixture
def repo():
    return InMemoryAuditLogRepository()


def record(actor="u1", action=AuditAction.CREATE, entity="user", entity_id="u2", **kwargs):
    return AuditRecord(actor, action, entity, entity_id, **kwargs)


@pytest.mark.asyncio
async def test_save_and_get(repo):
    saved = await repo.save(record())

    assert await repo.get(saved.record_id) == saved
    assert await repo.get("missing") is None
    assert len(repo) == 1


@pytest.mark.asyncio
async def test_save_rejects_duplicate_id(repo):
    first = await repo.save(record())

    with pytest.raises(ValueError):
        await repo.save(first)


@pytest.mark.asyncio
async def test_list_newest_first_with_pagination(repo):
    for i in range(5):
        await repo.save(record(entity_id=f"u{i}"))

    page, total = await repo.list(limit=2, offset=1)

    assert total == 5
    assert [r.entity_id for r in page] == ["u3", "u2"]


@pytest.mark.asyncio
async def test_find_by_entity_actor_and_action(repo):
    await repo.save(record(actor="u1", entity="document", entity_id="d1"))
    await repo.save(record(actor="u2", action=AuditAction.DELETE, entity="document", entity_id="d1"))
    await repo.save(record(actor="u1", entity="area", entity_id="a1"))

    by_entity, total = await repo.find_by_entity("document", "d1")
    assert total == 2
    assert [r.actor_id for r in by_entity] == ["u2", "u1"]

    by_actor, total = await repo.find_by_actor("u1")
    assert total == 2

    by_action, total = await repo.find_by_action(AuditAction.DELETE)
    assert total == 1
    assert by_action[0].actor_id == "u2"


@pytest.mark.asyncio
async def test_list_by_time_window(repo):
    now = datetime.now(timezone.utc)
    await repo.save(record(entity_id="old", timestamp=now - timedelta(days=2)))
    await repo.save(record(entity_id="new", timestamp=now))

    recent, total = await repo.list(since=now - timedelta(hours=1))
    assert total == 1
    assert recent[0].entity_id == "new"

    older, _ = await repo.list(until=now - timedelta(days=1))
    assert [r.entity_id for r in older] == ["old"]


@pytest.mark.asyncio
async def test_clear(repo):
    await repo.save(record())
    repo.clear()
    assert len(repo) == 0
