"""
Domain errors for request authentication, authorization and event delivery.

These errors provide a consistent interface for reporting failures
across the middleware stages, the token verifier and the event bus.
Each error carries a stable ``code`` and the HTTP ``status_code``
used when it reaches the web layer.
"""

from typing import Optional, Any, Sequence


class AuthDomainError(Exception):
    """Base class for all auth domain errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "AUTH_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_response_body(self) -> dict[str, Any]:
        """Public JSON body: message, code and any client-facing details."""
        return {"error": self.message, "code": self.code, **self.details}


# ═══════════════════════════════════════════════════════════════
# AUTHENTICATION (401)
# ═══════════════════════════════════════════════════════════════


class AuthenticationError(AuthDomainError):
    """Raised when authentication fails (absent, invalid or expired token)."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "UNAUTHORIZED",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class TokenMissingError(AuthenticationError):
    """Raised when the request carries no Authorization header."""

    def __init__(
        self,
        message: str = "Authentication token required",
        code: str = "AUTH_TOKEN_REQUIRED",
    ):
        super().__init__(message, code)


class InvalidTokenFormatError(AuthenticationError):
    """Raised when the header or the token itself is syntactically malformed."""

    def __init__(
        self,
        message: str = "Invalid token format. Use: Bearer {token}",
        code: str = "INVALID_TOKEN_FORMAT",
    ):
        super().__init__(message, code)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is rejected by the verifier (signature, claims)."""

    def __init__(
        self,
        message: str = "Invalid token",
        code: str = "INVALID_TOKEN",
    ):
        super().__init__(message, code)


class TokenExpiredError(AuthenticationError):
    """Raised when a token's expiry has passed."""

    def __init__(
        self,
        message: str = "Token expired",
        code: str = "TOKEN_EXPIRED",
    ):
        super().__init__(message, code)


# ═══════════════════════════════════════════════════════════════
# AUTHORIZATION (403)
# ═══════════════════════════════════════════════════════════════


class AuthorizationError(AuthDomainError):
    """Raised when a user is authenticated but lacks a permitted role."""

    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to access this resource",
        required_roles: Optional[Sequence[str]] = None,
        user_role: Optional[str] = None,
        code: str = "FORBIDDEN",
    ):
        details = {
            "requiredRoles": list(required_roles) if required_roles is not None else None,
            "userRole": user_role,
        }
        # Filter None values
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, code, details)
        self.required_roles = tuple(required_roles or ())
        self.user_role = user_role


# ═══════════════════════════════════════════════════════════════
# DEFECTS AND INFRASTRUCTURE (500)
# ═══════════════════════════════════════════════════════════════


class ConfigurationError(AuthDomainError):
    """Raised when the authorizer runs without a preceding authenticator."""

    status_code = 500

    def __init__(
        self,
        message: str = "Configuration error: authorize requires authenticate",
        code: str = "MIDDLEWARE_CONFIG_ERROR",
    ):
        super().__init__(message, code)


class VerificationInfrastructureError(AuthDomainError):
    """Raised when the token verifier faults for reasons unrelated to validity."""

    status_code = 500

    def __init__(
        self,
        message: str = "Internal authentication error",
        code: str = "INTERNAL_AUTH_ERROR",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, code)
        self.cause = cause


# ═══════════════════════════════════════════════════════════════
# EVENT DELIVERY
# ═══════════════════════════════════════════════════════════════


class EventBusError(AuthDomainError):
    """Base class for event bus failures."""

    def __init__(
        self,
        message: str,
        code: str = "EVENT_BUS_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class HandlerExecutionError(EventBusError):
    """
    Raised (or logged) when a subscribed handler faults during publish.

    In strict mode the bus raises the first failure after delivery has been
    attempted to every handler; the remaining ones are kept in ``failures``.
    """

    def __init__(
        self,
        event_type: str,
        event_id: str,
        handler_name: str,
        cause: BaseException,
    ):
        super().__init__(
            f"Handler {handler_name} failed for event {event_type}: {cause}",
            "HANDLER_EXECUTION_ERROR",
            {"eventType": event_type, "eventId": event_id, "handler": handler_name},
        )
        self.event_type = event_type
        self.event_id = event_id
        self.handler_name = handler_name
        self.cause = cause
        self.failures: list["HandlerExecutionError"] = [self]


class EventBusClosedError(EventBusError):
    """Raised when publishing on a bus that has been shut down."""

    def __init__(self, message: str = "Event bus is closed"):
        super().__init__(message, "EVENT_BUS_CLOSED")
