"""Infrastructure adapters implementing the ports."""

from rbac_audit.infrastructure.adapters.event_bus import InMemoryEventBus, DeliveryMode
from rbac_audit.infrastructure.adapters.jwt_verifier import JoseTokenVerifier, JwtConfig
from rbac_audit.infrastructure.adapters.audit_repository import InMemoryAuditLogRepository

__all__ = [
    "InMemoryEventBus",
    "DeliveryMode",
    "JoseTokenVerifier",
    "JwtConfig",
    "InMemoryAuditLogRepository",
]
