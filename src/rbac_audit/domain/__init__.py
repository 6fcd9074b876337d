"""Domain layer: errors, value objects, events and audit records."""

from rbac_audit.domain.errors import (
    AuthDomainError,
    AuthenticationError,
    TokenMissingError,
    InvalidTokenFormatError,
    InvalidTokenError,
    TokenExpiredError,
    AuthorizationError,
    ConfigurationError,
    VerificationInfrastructureError,
    EventBusError,
    HandlerExecutionError,
    EventBusClosedError,
)
from rbac_audit.domain.value_objects import Token, AllowedRoles
from rbac_audit.domain.events import (
    DomainEvent,
    USER_LOGGED_IN,
    USER_LOGGED_OUT,
    entity_changed,
    event_name,
    user_logged_in,
    user_logged_out,
)
from rbac_audit.domain.audit import AuditAction, AuditEntity, AuditRecord

__all__ = [
    # Errors
    "AuthDomainError",
    "AuthenticationError",
    "TokenMissingError",
    "InvalidTokenFormatError",
    "InvalidTokenError",
    "TokenExpiredError",
    "AuthorizationError",
    "ConfigurationError",
    "VerificationInfrastructureError",
    "EventBusError",
    "HandlerExecutionError",
    "EventBusClosedError",
    # Value objects
    "Token",
    "AllowedRoles",
    # Events
    "DomainEvent",
    "USER_LOGGED_IN",
    "USER_LOGGED_OUT",
    "entity_changed",
    "event_name",
    "user_logged_in",
    "user_logged_out",
    # Audit
    "AuditAction",
    "AuditEntity",
    "AuditRecord",
]
