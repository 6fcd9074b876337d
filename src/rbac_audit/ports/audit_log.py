"""
Audit Log Port.

Persistence contract for audit records. The core only builds records
from events; the storage schema belongs to the implementation.
"""

from typing import Optional, Protocol

from rbac_audit.domain.audit import AuditRecord


class AuditLogPort(Protocol):
    """Append-only store for audit records."""

    async def save(self, record: AuditRecord) -> AuditRecord:
        """Persist a record and return it."""
        ...

    async def get(self, record_id: str) -> Optional[AuditRecord]:
        """Get a record by ID."""
        ...
