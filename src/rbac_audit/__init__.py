"""
rbac-audit: Bearer token authentication, role-based authorization and
an audited domain event bus.
"""

__version__ = "0.1.0"

# Core identity exports
from rbac_audit.identity import Identity
from rbac_audit.context import RequestContext

# Domain exports
from rbac_audit.domain import (
    AuthDomainError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    Token,
    AllowedRoles,
    DomainEvent,
    AuditAction,
    AuditRecord,
)

# Middleware exports
from rbac_audit.middleware import (
    Authenticator,
    Authorizer,
    AuthorizationConfig,
    OutcomeKind,
    Pipeline,
    PipelineOutcome,
    authorize,
)

# Events and audit
from rbac_audit.infrastructure.adapters import (
    InMemoryEventBus,
    DeliveryMode,
    JoseTokenVerifier,
    JwtConfig,
    InMemoryAuditLogRepository,
)
from rbac_audit.application import AuditLogEventHandler, register_audit_handlers
from rbac_audit.config import AuthSettings, configure_logging

__all__ = [
    # Version
    "__version__",
    # Identity
    "Identity",
    "RequestContext",
    # Domain
    "AuthDomainError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "Token",
    "AllowedRoles",
    "DomainEvent",
    "AuditAction",
    "AuditRecord",
    # Middleware
    "Authenticator",
    "Authorizer",
    "AuthorizationConfig",
    "OutcomeKind",
    "Pipeline",
    "PipelineOutcome",
    "authorize",
    # Events and audit
    "InMemoryEventBus",
    "DeliveryMode",
    "JoseTokenVerifier",
    "JwtConfig",
    "InMemoryAuditLogRepository",
    "AuditLogEventHandler",
    "register_audit_handlers",
    # Configuration
    "AuthSettings",
    "configure_logging",
]
