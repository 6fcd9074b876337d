"""
Request context threaded through the middleware pipeline.

The context is an immutable value. Each stage receives the context
produced by the stage before it and returns a new one when it needs
to add information (``with_identity``). Nothing is stored in globals
or context variables, so concurrent requests never observe each
other's identity.
"""

import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Optional

from rbac_audit.identity import Identity


DisconnectProbe = Callable[[], Awaitable[bool]]


@dataclass(frozen=True)
class RequestContext:
    """
    Request-scoped context containing transport metadata and identity.

    ``identity`` is None until the Authenticator has verified a token.
    ``is_disconnected`` lets the pipeline stop invoking stages once the
    client has gone away.
    """

    path: str
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    client_host: Optional[str] = None
    user_agent: Optional[str] = None
    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    identity: Optional[Identity] = None
    is_disconnected: Optional[DisconnectProbe] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self):
        # Header names are case-insensitive; store lower-cased and read-only.
        normalized = {k.lower(): v for k, v in dict(self.headers).items()}
        object.__setattr__(self, "headers", MappingProxyType(normalized))

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def with_identity(self, identity: Identity) -> "RequestContext":
        """Return a copy of this context carrying ``identity``."""
        return replace(self, identity=identity)

    def request_metadata(self) -> dict:
        """Requester metadata used in security log lines."""
        return {
            "path": self.path,
            "method": self.method,
            "ip": self.client_host,
            "userAgent": self.user_agent,
            "correlationId": self.correlation_id,
        }
