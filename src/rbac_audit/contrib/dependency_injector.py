"""
Dependency Injector integration for rbac-audit.

Provides an IoC Container with pre-configured authentication and audit
services. Host applications can extend this container or use it directly.

Usage:
    from rbac_audit.contrib.dependency_injector import AuthAuditContainer

    class AppContainer(AuthAuditContainer):
        # Persist the audit trail in the application's database
        audit_log_repository = providers.Singleton(SQLAuditLogRepository, ...)
"""

from typing import AsyncIterator

from dependency_injector import containers, providers

from rbac_audit.application.event_handlers import AuditLogEventHandler
from rbac_audit.config import AuthSettings
from rbac_audit.infrastructure.adapters.audit_repository import (
    InMemoryAuditLogRepository,
)
from rbac_audit.infrastructure.adapters.event_bus import DeliveryMode, InMemoryEventBus
from rbac_audit.infrastructure.adapters.jwt_verifier import JoseTokenVerifier, JwtConfig
from rbac_audit.middleware.authentication import Authenticator


async def init_event_bus(
    delivery: str = DeliveryMode.AWAIT.value,
    strict: bool = False,
    deduplicate: bool = False,
) -> AsyncIterator[InMemoryEventBus]:
    """Resource initializer: start the bus, then close it on shutdown."""
    bus = InMemoryEventBus(
        delivery=DeliveryMode(delivery),
        strict=bool(strict),
        deduplicate=bool(deduplicate),
    )
    await bus.start()
    try:
        yield bus
    finally:
        await bus.close()


_DEFAULTS = {
    "jwt": {
        "algorithms": ["HS256"],
        "audience": None,
        "issuer": None,
        "leeway": 0,
        "id_claim": "userId",
        "username_claim": "username",
        "role_claim": "role",
    },
    "event_bus": {
        "delivery": DeliveryMode.AWAIT.value,
        "strict": False,
        "deduplicate": False,
    },
    "auth": {
        "scheme": "Bearer",
        "public_paths": ["/health"],
    },
}


class AuthAuditContainer(containers.DeclarativeContainer):
    """
    IoC Container for authentication and audit services.

    External dependencies (can be overridden by host app):
    - token_verifier: TokenVerifierPort implementation (default: JoseTokenVerifier)
    - audit_log_repository: AuditLogPort implementation
      (default: InMemoryAuditLogRepository)

    Config requirements (under config.jwt.*):
    - secret: HMAC secret or PEM public key
    - algorithms, audience, issuer, leeway: optional
    - id_claim, username_claim, role_claim: claim mapping

    Config (under config.event_bus.*):
    - delivery: "await" or "background"
    - strict, deduplicate: booleans

    The event bus is a Resource: it is started by ``init_resources()``
    and closed by ``shutdown_resources()``.

    Usage:
        container = AuthAuditContainer.from_settings(AuthSettings.from_env())
        await container.init_resources()
        bus = await container.event_bus()
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "rbac_audit.contrib.fastapi.dependencies",
            "rbac_audit.contrib.fastapi.middleware",
        ]
    )

    config = providers.Configuration(default=_DEFAULTS)

    # ═══════════════════════════════════════════════════════════════
    # AUTHENTICATION
    # ═══════════════════════════════════════════════════════════════

    token_verifier = providers.Singleton(
        JoseTokenVerifier,
        config=providers.Factory(
            JwtConfig,
            secret=config.jwt.secret,
            algorithms=config.jwt.algorithms,
            audience=config.jwt.audience,
            issuer=config.jwt.issuer,
            leeway=config.jwt.leeway,
            id_claim=config.jwt.id_claim,
            username_claim=config.jwt.username_claim,
            role_claim=config.jwt.role_claim,
        ),
    )

    authenticator = providers.Singleton(
        Authenticator,
        verifier=token_verifier,
        scheme=config.auth.scheme,
    )

    # ═══════════════════════════════════════════════════════════════
    # EVENTS AND AUDIT
    # ═══════════════════════════════════════════════════════════════

    event_bus = providers.Resource(
        init_event_bus,
        delivery=config.event_bus.delivery,
        strict=config.event_bus.strict,
        deduplicate=config.event_bus.deduplicate,
    )

    audit_log_repository = providers.Singleton(InMemoryAuditLogRepository)

    audit_handler = providers.Singleton(
        AuditLogEventHandler,
        repository=audit_log_repository,
    )

    @classmethod
    def from_settings(
        cls, settings: AuthSettings, **overrides
    ) -> "AuthAuditContainer":
        """Create a container configured from validated settings."""
        container = cls(**overrides)
        container.config.from_dict(settings.as_dict())
        return container

