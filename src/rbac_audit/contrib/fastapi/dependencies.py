from typing import Callable, Optional
import logging

from fastapi import Request, Depends
from dependency_injector.wiring import inject, Provide

from rbac_audit.context import RequestContext
from rbac_audit.contrib.dependency_injector import AuthAuditContainer
from rbac_audit.identity import Identity
from rbac_audit.infrastructure.adapters.event_bus import InMemoryEventBus
from rbac_audit.middleware.authentication import Authenticator
from rbac_audit.middleware.authorization import authorize

logger = logging.getLogger(__name__)

AUTH_CONTEXT_ATTR = "auth_context"


def build_request_context(request: Request) -> RequestContext:
    """Snapshot the transport metadata of a FastAPI request."""
    return RequestContext(
        path=request.url.path,
        method=request.method,
        headers=dict(request.headers),
        client_host=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_request_context(request: Request) -> RequestContext:
    """
    Context produced by the authenticator for this request.

    Falls back to an unauthenticated context when neither the middleware
    nor the ``authenticate`` dependency has run.
    """
    ctx = getattr(request.state, AUTH_CONTEXT_ATTR, None)
    if ctx is None:
        ctx = build_request_context(request)
    return ctx


@inject
async def authenticate(
    request: Request,
    authenticator: Authenticator = Depends(Provide[AuthAuditContainer.authenticator]),
) -> RequestContext:
    """
    Dependency that authenticates the request by bearer token.

    Reuses the context attached by AuthenticationMiddleware when present.

    Raises:
        AuthenticationError: Mapped to 401 by the exception handlers
        VerificationInfrastructureError: Mapped to 500
    """
    ctx = getattr(request.state, AUTH_CONTEXT_ATTR, None)
    if ctx is not None and ctx.is_authenticated:
        return ctx

    outcome = await authenticator(build_request_context(request))
    if not outcome.is_success:
        raise outcome.error

    setattr(request.state, AUTH_CONTEXT_ATTR, outcome.context)
    return outcome.context


def require_roles(*roles: str) -> Callable:
    """
    Factory for dependency that requires one of ``roles``.

    Must run after ``authenticate`` (or behind AuthenticationMiddleware):

        @app.get(
            "/admin",
            dependencies=[Depends(authenticate), Depends(require_roles("admin"))],
        )

    Without a preceding authenticator the request fails with 500
    MIDDLEWARE_CONFIG_ERROR instead of 403.
    """
    authorizer = authorize(*roles)

    async def dependency(request: Request) -> Identity:
        outcome = await authorizer(get_request_context(request))
        if not outcome.is_success:
            raise outcome.error
        return outcome.context.identity

    return dependency


def get_identity(request: Request) -> Optional[Identity]:
    """Verified identity of the request, or None."""
    return get_request_context(request).identity


@inject
async def get_event_bus(
    bus: InMemoryEventBus = Depends(Provide[AuthAuditContainer.event_bus]),
) -> InMemoryEventBus:
    """Dependency that returns the application's event bus."""
    return bus
