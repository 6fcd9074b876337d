"""
Authentication stage.

Extracts the bearer token from the ``Authorization`` header, verifies
it through the TokenVerifierPort and, on success, returns a context
carrying the verified Identity.

Outcomes:
- no header / wrong scheme / malformed token  -> UNAUTHENTICATED, verifier not called
- verifier rejects the token                   -> UNAUTHENTICATED
- verifier faults for any other reason         -> INTERNAL_ERROR
- token accepted                               -> PROCEED with identity attached
"""

import logging

from rbac_audit.context import RequestContext
from rbac_audit.domain.errors import (
    AuthenticationError,
    InvalidTokenFormatError,
    TokenMissingError,
    TokenExpiredError,
    InvalidTokenError,
    VerificationInfrastructureError,
)
from rbac_audit.domain.value_objects import Token
from rbac_audit.identity import Identity
from rbac_audit.middleware.results import PipelineOutcome
from rbac_audit.ports.token_verifier import TokenVerifierPort


logger = logging.getLogger("rbac_audit.middleware")


def extract_bearer_token(authorization: str, scheme: str = "Bearer") -> Token:
    """
    Parse an ``Authorization`` header value of the form ``Bearer <token>``.

    Raises:
        InvalidTokenFormatError: If the scheme or the token is malformed
    """
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != scheme:
        raise InvalidTokenFormatError()
    return Token(parts[1])


class Authenticator:
    """
    Middleware stage that authenticates a request by bearer token.

    Example usage:
    ```python
    authenticator = Authenticator(JoseTokenVerifier(JwtConfig(secret=...)))
    outcome = await authenticator(ctx)
    if outcome.is_success:
        identity = outcome.context.identity
    ```
    """

    def __init__(self, verifier: TokenVerifierPort, scheme: str = "Bearer"):
        self.verifier = verifier
        self.scheme = scheme

    async def __call__(self, ctx: RequestContext) -> PipelineOutcome:
        meta = ctx.request_metadata()
        logger.debug(f"Authenticating request {ctx.method} {ctx.path}", extra=meta)

        authorization = ctx.header("authorization")
        if not authorization:
            logger.debug(
                f"Request without Authorization header: {ctx.method} {ctx.path}",
                extra=meta,
            )
            return PipelineOutcome.unauthenticated(ctx, TokenMissingError())

        try:
            token = extract_bearer_token(authorization, self.scheme)
        except InvalidTokenFormatError as e:
            logger.debug(
                f"Malformed Authorization header on {ctx.method} {ctx.path}: {e.message}",
                extra=meta,
            )
            # Always answer with the generic format message.
            return PipelineOutcome.unauthenticated(ctx, InvalidTokenFormatError())

        try:
            identity = await self.verifier.verify(token)
        except TokenExpiredError as e:
            logger.warning(
                f"Access attempt with expired token on {ctx.method} {ctx.path}: {e.message}",
                extra=meta,
            )
            return PipelineOutcome.unauthenticated(ctx, TokenExpiredError())
        except AuthenticationError as e:
            logger.warning(
                f"Access attempt with invalid token on {ctx.method} {ctx.path}: {e.message}",
                extra=meta,
            )
            return PipelineOutcome.unauthenticated(ctx, InvalidTokenError())
        except Exception as e:
            logger.error(
                f"Unexpected error in authentication middleware on {ctx.method} {ctx.path}",
                exc_info=True,
                extra=meta,
            )
            return PipelineOutcome.internal_error(
                ctx, VerificationInfrastructureError(cause=e)
            )

        if not isinstance(identity, Identity):
            logger.error(
                f"Token verifier returned {type(identity).__name__} instead of an Identity "
                f"on {ctx.method} {ctx.path}",
                extra=meta,
            )
            return PipelineOutcome.internal_error(ctx, VerificationInfrastructureError())

        logger.debug(
            f"Token verified for {identity.username} ({identity.role}) "
            f"on {ctx.method} {ctx.path}",
            extra={**meta, **identity.to_log_fields()},
        )
        return PipelineOutcome.proceed(ctx.with_identity(identity))
