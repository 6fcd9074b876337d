"""
Role-based authorization stage.

Checks the identity attached by the Authenticator against a set of
allowed roles declared when the route is set up.

IMPORTANT: this stage must run AFTER the Authenticator in the same
request. Running it without an identity is a pipeline defect and is
reported as MISCONFIGURED, never as FORBIDDEN.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from rbac_audit.context import RequestContext
from rbac_audit.domain.errors import AuthorizationError, ConfigurationError
from rbac_audit.domain.value_objects import AllowedRoles
from rbac_audit.middleware.results import PipelineOutcome


logger = logging.getLogger("rbac_audit.middleware")


@dataclass(frozen=True)
class AuthorizationConfig:
    """
    Configuration for Authorizer.

    Attributes:
        allowed_roles: Roles permitted on the route (e.g., ["admin", "manager"])
    """

    allowed_roles: AllowedRoles


class Authorizer:
    """
    Middleware stage that enforces role membership.

    Example usage:
    ```python
    pipeline = Pipeline(
        Authenticator(verifier),
        Authorizer(AuthorizationConfig(AllowedRoles.of(["admin", "manager"]))),
    )
    ```
    """

    def __init__(self, config: Union[AuthorizationConfig, AllowedRoles, Iterable[str]]):
        if isinstance(config, AuthorizationConfig):
            self.config = config
        elif isinstance(config, AllowedRoles):
            self.config = AuthorizationConfig(config)
        else:
            self.config = AuthorizationConfig(AllowedRoles.of(config))

    @property
    def allowed_roles(self) -> AllowedRoles:
        return self.config.allowed_roles

    async def __call__(self, ctx: RequestContext) -> PipelineOutcome:
        identity = ctx.identity

        if identity is None:
            logger.error(
                f"authorize used without authenticate on {ctx.method} {ctx.path}",
                extra={"path": ctx.path, "method": ctx.method},
            )
            return PipelineOutcome.misconfigured(ctx, ConfigurationError())

        allowed = self.config.allowed_roles

        if identity.role not in allowed:
            logger.warning(
                f"Unauthorized access attempt by {identity.username} "
                f"(role={identity.role}, allowed={allowed.as_list()}) "
                f"on {ctx.method} {ctx.path}",
                extra={
                    **identity.to_log_fields(),
                    "allowedRoles": allowed.as_list(),
                    **ctx.request_metadata(),
                },
            )
            return PipelineOutcome.forbidden(
                ctx,
                AuthorizationError(
                    required_roles=allowed.as_list(),
                    user_role=identity.role,
                ),
            )

        logger.debug(
            f"Access granted to {identity.username} ({identity.role}) "
            f"on {ctx.method} {ctx.path}",
            extra={**identity.to_log_fields(), "path": ctx.path, "method": ctx.method},
        )
        return PipelineOutcome.proceed(ctx)


# =============================================================================
# Convenience Functions
# =============================================================================


def authorize(*roles: str) -> Authorizer:
    """
    Convenience function to create an Authorizer.

    Example:
    ```python
    from rbac_audit.middleware import authorize

    admin_only = authorize("admin")
    staff = authorize("admin", "manager")
    ```

    Raises:
        ValueError: If no role is given
    """
    return Authorizer(AuthorizationConfig(AllowedRoles(tuple(roles))))
