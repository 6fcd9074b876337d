"""Ports (interfaces) to external collaborators."""

from rbac_audit.ports.token_verifier import TokenVerifierPort
from rbac_audit.ports.event_bus import EventBusPort, EventHandler
from rbac_audit.ports.audit_log import AuditLogPort

__all__ = [
    "TokenVerifierPort",
    "EventBusPort",
    "EventHandler",
    "AuditLogPort",
]
