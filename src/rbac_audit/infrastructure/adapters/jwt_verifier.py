"""
JWT Token Verifier Adapter.

Implements TokenVerifierPort for symmetric or asymmetric JWTs issued
by a trusted issuer. Uses python-jose for signature, expiry, audience
and issuer validation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jose import jwt, JWTError, ExpiredSignatureError

from rbac_audit.domain.errors import InvalidTokenError, TokenExpiredError
from rbac_audit.domain.value_objects import Token
from rbac_audit.identity import Identity
from rbac_audit.ports.token_verifier import TokenVerifierPort


@dataclass
class JwtConfig:
    """Configuration for the JWT verifier."""

    secret: str  # HMAC secret or PEM public key
    algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    audience: Optional[str] = None
    issuer: Optional[str] = None
    leeway: int = 0  # seconds

    # Claim mapping - customize for your issuer
    id_claim: str = "userId"
    username_claim: str = "username"
    role_claim: str = "role"


class JoseTokenVerifier(TokenVerifierPort):
    """
    python-jose implementation of TokenVerifierPort.

    Example usage:
        verifier = JoseTokenVerifier(JwtConfig(secret=settings.jwt_secret))
        identity = await verifier.verify(Token(raw))
    """

    def __init__(self, config: JwtConfig):
        self.config = config

    async def verify(self, token: Token) -> Identity:
        """
        Decode and validate a JWT access token.

        Raises:
            TokenExpiredError: If the exp claim has passed
            InvalidTokenError: If the signature, audience, issuer or
                identity claims are invalid
        """
        payload = self._decode(token.value)
        try:
            return Identity.from_claims(
                payload,
                id_claim=self.config.id_claim,
                username_claim=self.config.username_claim,
                role_claim=self.config.role_claim,
            )
        except (KeyError, TypeError) as e:
            raise InvalidTokenError(f"Malformed claims: {e}")

    def _decode(self, raw: str) -> Dict[str, Any]:
        options = {
            "verify_signature": True,
            "verify_exp": True,
            "verify_aud": self.config.audience is not None,
            "verify_iss": self.config.issuer is not None,
            "leeway": self.config.leeway,
        }
        try:
            return jwt.decode(
                raw,
                self.config.secret,
                algorithms=self.config.algorithms,
                audience=self.config.audience,
                issuer=self.config.issuer,
                options=options,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError(str(e))
        except JWTError as e:
            # Includes JWTClaimsError (audience, issuer, iat/nbf).
            raise InvalidTokenError(str(e))
