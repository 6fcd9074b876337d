"""
Token Verifier Port.

Defines the interface the Authenticator uses to check a bearer token's
signature and expiry and obtain the caller's identity. The core depends
only on this contract, never on a particular signing scheme.
"""

from typing import Protocol

from rbac_audit.domain.value_objects import Token
from rbac_audit.identity import Identity


class TokenVerifierPort(Protocol):
    """
    Port for verifying access tokens issued by a trusted issuer.

    Implementations signal a *rejected* token with the domain errors
    below. Any other exception is treated by the Authenticator as an
    infrastructure fault, not as a credential problem.
    """

    async def verify(self, token: Token) -> Identity:
        """
        Verify a token and return the identity it carries.

        Args:
            token: Syntactically valid bearer token

        Returns:
            Identity built from the verified claims

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the signature or claims are invalid
        """
        ...
