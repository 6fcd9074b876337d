"""
Identity of an authenticated caller.

An Identity is produced only by the Authenticator after the token
verifier has accepted a bearer token, and lives for a single request.
It is never persisted by this library.
"""

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Identity:
    """Verified, request-scoped representation of the caller."""

    id: str
    username: str
    role: str

    @classmethod
    def from_claims(
        cls,
        claims: Mapping[str, Any],
        id_claim: str = "userId",
        username_claim: str = "username",
        role_claim: str = "role",
    ) -> "Identity":
        """
        Build an Identity from verified token claims.

        Raises:
            KeyError: If a claim is absent
            TypeError: If a claim is not a non-empty string
        """
        values = {}
        for field_name, claim in (
            ("id", id_claim),
            ("username", username_claim),
            ("role", role_claim),
        ):
            value = claims[claim]
            if not isinstance(value, str) or not value:
                raise TypeError(f"Claim '{claim}' must be a non-empty string")
            values[field_name] = value
        return cls(**values)

    def to_log_fields(self) -> dict[str, str]:
        return {"userId": self.id, "username": self.username, "role": self.role}
