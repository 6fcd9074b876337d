"""Authentication and role-based authorization middleware."""

from rbac_audit.middleware.results import OutcomeKind, PipelineOutcome
from rbac_audit.middleware.authentication import Authenticator, extract_bearer_token
from rbac_audit.middleware.authorization import (
    Authorizer,
    AuthorizationConfig,
    # Convenience functions
    authorize,
)
from rbac_audit.middleware.pipeline import Pipeline, Stage

__all__ = [
    "OutcomeKind",
    "PipelineOutcome",
    "Authenticator",
    "extract_bearer_token",
    "Authorizer",
    "AuthorizationConfig",
    # Convenience functions
    "authorize",
    "Pipeline",
    "Stage",
]
