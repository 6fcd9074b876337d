"""
Domain value objects for authentication and authorization.

Value objects are immutable and have no identity; they are defined
only by their attributes. Validation happens at construction, so an
instance that exists is always well-formed.
"""

from dataclasses import dataclass, field
from typing import Iterable

from rbac_audit.domain.errors import InvalidTokenFormatError


# ═══════════════════════════════════════════════════════════════
# BEARER TOKEN
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Token:
    """
    JWT-style bearer token.

    Must be non-empty and made of exactly three dot-separated segments
    (header.payload.signature). Only the syntax is checked here; the
    signature and claims are the token verifier's concern.
    """

    value: str

    SEGMENTS = 3

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidTokenFormatError("Token cannot be empty")
        if len(self.value.split(".")) != self.SEGMENTS:
            raise InvalidTokenFormatError(
                "Invalid JWT format: token must have three parts separated by dots"
            )

    def __str__(self) -> str:
        return self.value

    def preview(self, length: int = 20) -> str:
        """Truncated form of the token, safe for log lines."""
        return self.value[:length] + "..."


# ═══════════════════════════════════════════════════════════════
# ROLE SET
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AllowedRoles:
    """
    Non-empty set of roles permitted on a protected route.

    The order in which roles were declared is kept for error responses;
    membership is a plain set-containment test.
    """

    roles: tuple[str, ...]
    _lookup: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.roles, str):
            raise TypeError("roles must be a sequence of role names, not a single string")
        ordered = tuple(dict.fromkeys(self.roles))
        if not ordered:
            raise ValueError("AllowedRoles requires at least one role")
        if any(not isinstance(r, str) or not r for r in ordered):
            raise ValueError("Roles must be non-empty strings")
        object.__setattr__(self, "roles", ordered)
        object.__setattr__(self, "_lookup", frozenset(ordered))

    @classmethod
    def of(cls, roles: Iterable[str]) -> "AllowedRoles":
        if isinstance(roles, str):
            roles = [roles]
        return cls(tuple(roles))

    def __contains__(self, role: object) -> bool:
        return role in self._lookup

    def __iter__(self):
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.roles)

    def as_list(self) -> list[str]:
        return list(self.roles)
