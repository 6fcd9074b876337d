"""Application layer: event handlers reacting to domain events."""

from rbac_audit.application.event_handlers import (
    AuditLogEventHandler,
    register_audit_handlers,
    default_audited_event_types,
)

__all__ = [
    "AuditLogEventHandler",
    "register_audit_handlers",
    "default_audited_event_types",
]
