"""
Fixtures for the FastAPI integration tests.
"""

import pytest
from dependency_injector import providers
from fastapi import Depends, FastAPI

from rbac_audit.context import RequestContext
from rbac_audit.contrib.dependency_injector import AuthAuditContainer
from rbac_audit.contrib.fastapi import (
    authenticate,
    get_event_bus,
    get_identity,
    require_roles,
    setup_auth,
)
from rbac_audit.domain.events import entity_changed
from rbac_audit.identity import Identity


@pytest.fixture
def container(mock_verifier, jwt_secret):
    container = AuthAuditContainer()
    container.config.from_dict({"jwt": {"secret": jwt_secret}})
    container.token_verifier.override(providers.Object(mock_verifier))
    yield container
    container.unwire()


@pytest.fixture
def create_app(container):
    """Factory for an app with public, authenticated and role-protected routes."""

    def factory(use_middleware=False):
        app = FastAPI()
        setup_auth(app, container, use_middleware=use_middleware)

        @app.get("/health")
        def health():
            return {"status": "ok"}

        @app.get("/me")
        async def me(ctx: RequestContext = Depends(authenticate)):
            return {"id": ctx.identity.id, "username": ctx.identity.username}

        @app.get(
            "/reports",
            dependencies=[Depends(authenticate)],
        )
        async def reports(identity: Identity = Depends(require_roles("admin", "manager"))):
            return {"role": identity.role}

        @app.get("/unguarded-reports")
        async def unguarded(identity: Identity = Depends(require_roles("admin"))):
            return {"role": identity.role}

        @app.get("/whoami")
        async def whoami(identity=Depends(get_identity)):
            return {"username": identity.username if identity else None}

        @app.post("/users/{user_id}")
        async def create_user(
            user_id: str,
            ctx: RequestContext = Depends(authenticate),
            bus=Depends(get_event_bus),
        ):
            await bus.publish(entity_changed("user", "created", user_id, ctx.identity.id))
            return {"created": user_id}

        return app

    return factory
