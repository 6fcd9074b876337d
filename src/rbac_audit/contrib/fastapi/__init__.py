"""
FastAPI integration for rbac-audit.

Provides dependencies, middleware, and exception handlers for bearer
token authentication, role-based authorization and audited events in
FastAPI applications.
"""

import inspect
import logging
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI

from rbac_audit.application.event_handlers import register_audit_handlers
from rbac_audit.contrib.dependency_injector import AuthAuditContainer
from .dependencies import (
    authenticate,
    require_roles,
    get_request_context,
    get_identity,
    get_event_bus,
    build_request_context,
)
from .middleware import AuthenticationMiddleware
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


def setup_auth(
    app: FastAPI,
    container: AuthAuditContainer,
    use_middleware: bool = False,
    audited_events: Optional[Iterable[str]] = None,
) -> None:
    """
    Wire ``container`` into ``app``.

    - wires the FastAPI dependency modules to the container
    - registers the domain error handlers
    - optionally installs AuthenticationMiddleware for non-public paths
    - ties the event bus lifecycle to the app lifespan: resources are
      initialized and the audit handler subscribed on startup, and
      resources are shut down on exit

    Args:
        app: The FastAPI application instance
        container: Configured AuthAuditContainer
        use_middleware: Authenticate every non-public request up front
        audited_events: Event names to audit (default: full catalog)
    """
    container.wire()
    app.state.container = container
    register_exception_handlers(app)

    if use_middleware:
        app.add_middleware(
            AuthenticationMiddleware,
            authenticator=container.authenticator(),
            public_paths=list(container.config.auth.public_paths() or []),
        )

    app_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(app_):
        await _resolve(container.init_resources())
        bus = await _resolve(container.event_bus())
        register_audit_handlers(bus, container.audit_handler(), audited_events)
        app_.state.event_bus = bus
        logger.info("Auth and audit services started")
        try:
            async with app_lifespan(app_) as state:
                yield state
        finally:
            await _resolve(container.shutdown_resources())
            logger.info("Auth and audit services stopped")

    app.router.lifespan_context = lifespan


__all__ = [
    "authenticate",
    "require_roles",
    "get_request_context",
    "get_identity",
    "get_event_bus",
    "build_request_context",
    "AuthenticationMiddleware",
    "register_exception_handlers",
    "setup_auth",
]
