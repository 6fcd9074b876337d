"""
Audit trail records.

An AuditRecord is the durable trace of a security- or business-relevant
action. Records are built from domain events by the audit event handler
and handed to an AuditLogPort for storage; they are never modified.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping


class AuditAction(str, Enum):
    """Kinds of action recorded in the audit trail."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UPLOAD = "upload"
    DOWNLOAD = "download"
    VIEW = "view"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    LOGIN = "login"
    LOGOUT = "logout"
    REFRESH_TOKEN = "refresh_token"
    CHANGE_PASSWORD = "change_password"


# Past-tense event suffixes -> audited action.
EVENT_ACTIONS: Dict[str, AuditAction] = {
    "created": AuditAction.CREATE,
    "updated": AuditAction.UPDATE,
    "deleted": AuditAction.DELETE,
    "uploaded": AuditAction.UPLOAD,
    "downloaded": AuditAction.DOWNLOAD,
    "viewed": AuditAction.VIEW,
    "activated": AuditAction.ACTIVATE,
    "deactivated": AuditAction.DEACTIVATE,
    "password_changed": AuditAction.CHANGE_PASSWORD,
    "token_refreshed": AuditAction.REFRESH_TOKEN,
}


class AuditEntity(str, Enum):
    """Entities whose lifecycle events are audited by default."""

    USER = "user"
    COLLABORATOR = "collaborator"
    DOCUMENT = "document"
    MINUTE = "minute"
    AREA = "area"
    ADSCRIPCION = "adscripcion"
    PUESTO = "puesto"
    DOCUMENT_TYPE = "document_type"


@dataclass(frozen=True)
class AuditRecord:
    """Structured audit entry: who did what to which entity, and when."""

    actor_id: str
    action: AuditAction
    entity: str
    entity_id: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Mapping[str, Any] = field(default_factory=dict)
    record_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.actor_id or not self.actor_id.strip():
            raise ValueError("actor_id is required")
        if not self.entity:
            raise ValueError("entity is required")
        if not self.entity_id or not str(self.entity_id).strip():
            raise ValueError("entity_id is required")
        object.__setattr__(self, "action", AuditAction(self.action))
        object.__setattr__(self, "actor_id", self.actor_id.strip())
        object.__setattr__(self, "entity_id", str(self.entity_id).strip())
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "actorId": self.actor_id,
            "action": self.action.value,
            "entity": self.entity,
            "entityId": self.entity_id,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }
