"""
Pipeline outcome types.

Every middleware stage returns a PipelineOutcome instead of raising,
so callers can match on ``kind`` and tell a credential problem apart
from a misconfigured pipeline or an infrastructure fault.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rbac_audit.context import RequestContext
from rbac_audit.domain.errors import (
    AuthDomainError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    VerificationInfrastructureError,
)


class OutcomeKind(str, Enum):
    """Result of running a stage (or a whole pipeline)."""

    PROCEED = "proceed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    MISCONFIGURED = "misconfigured"
    INTERNAL_ERROR = "internal_error"
    ABORTED = "aborted"


_STATUS = {
    OutcomeKind.PROCEED: 200,
    OutcomeKind.UNAUTHENTICATED: 401,
    OutcomeKind.FORBIDDEN: 403,
    OutcomeKind.MISCONFIGURED: 500,
    OutcomeKind.INTERNAL_ERROR: 500,
    # Client closed request; nothing is sent back.
    OutcomeKind.ABORTED: 499,
}


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Outcome of a middleware stage.

    Use factory methods to create instances. ``context`` is the context
    to hand to the next stage; ``error`` is set for every kind except
    PROCEED and ABORTED.
    """

    kind: OutcomeKind
    context: RequestContext
    error: Optional[AuthDomainError] = None

    @classmethod
    def proceed(cls, context: RequestContext) -> "PipelineOutcome":
        return cls(OutcomeKind.PROCEED, context)

    @classmethod
    def unauthenticated(
        cls, context: RequestContext, error: AuthenticationError
    ) -> "PipelineOutcome":
        return cls(OutcomeKind.UNAUTHENTICATED, context, error)

    @classmethod
    def forbidden(
        cls, context: RequestContext, error: AuthorizationError
    ) -> "PipelineOutcome":
        return cls(OutcomeKind.FORBIDDEN, context, error)

    @classmethod
    def misconfigured(
        cls, context: RequestContext, error: Optional[ConfigurationError] = None
    ) -> "PipelineOutcome":
        return cls(OutcomeKind.MISCONFIGURED, context, error or ConfigurationError())

    @classmethod
    def internal_error(
        cls, context: RequestContext, error: VerificationInfrastructureError
    ) -> "PipelineOutcome":
        return cls(OutcomeKind.INTERNAL_ERROR, context, error)

    @classmethod
    def aborted(cls, context: RequestContext) -> "PipelineOutcome":
        return cls(OutcomeKind.ABORTED, context)

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.PROCEED

    @property
    def status_code(self) -> int:
        return _STATUS[self.kind]

    def to_response_body(self) -> Optional[dict[str, Any]]:
        """JSON body for a terminal outcome, or None when nothing is sent."""
        if self.error is None:
            return None
        return self.error.to_response_body()
