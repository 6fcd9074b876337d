"""
In-memory audit log repository.

Intended for testing, demos, and development.
For production, implement AuditLogPort on a persistent backend.
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from rbac_audit.domain.audit import AuditAction, AuditRecord
from rbac_audit.ports.audit_log import AuditLogPort


class InMemoryAuditLogRepository(AuditLogPort):
    """
    In-memory implementation of AuditLogPort.

    Records are append-only and kept in insertion order.
    Query methods return ``(records, total)`` with newest first.
    """

    def __init__(self):
        self._records: Dict[str, AuditRecord] = {}
        self._lock = asyncio.Lock()

    async def save(self, record: AuditRecord) -> AuditRecord:
        """Append a record. Saving an existing record ID is rejected."""
        async with self._lock:
            if record.record_id in self._records:
                raise ValueError(f"Audit record {record.record_id} already exists")
            self._records[record.record_id] = record
        return record

    async def get(self, record_id: str) -> Optional[AuditRecord]:
        """Get a record by ID."""
        return self._records.get(record_id)

    async def list(
        self,
        actor_id: Optional[str] = None,
        action: Optional[AuditAction] = None,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[AuditRecord], int]:
        """List records matching every given filter."""
        records = [
            r
            for r in reversed(list(self._records.values()))
            if (actor_id is None or r.actor_id == actor_id)
            and (action is None or r.action == action)
            and (entity is None or r.entity == entity)
            and (entity_id is None or r.entity_id == entity_id)
            and (since is None or r.timestamp >= since)
            and (until is None or r.timestamp <= until)
        ]
        total = len(records)
        end = None if limit is None else offset + limit
        return records[offset:end], total

    async def find_by_entity(
        self, entity: str, entity_id: str, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[AuditRecord], int]:
        return await self.list(entity=entity, entity_id=entity_id, limit=limit, offset=offset)

    async def find_by_actor(
        self, actor_id: str, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[AuditRecord], int]:
        return await self.list(actor_id=actor_id, limit=limit, offset=offset)

    async def find_by_action(
        self, action: AuditAction, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[AuditRecord], int]:
        return await self.list(action=action, limit=limit, offset=offset)

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()
