"""
Domain events.

Domain events represent facts that have happened in the domain.
They are immutable records: created by business operations, read by
subscribers, never mutated after publication.

Event names follow two conventions:

- ``<entity>.<action>`` for entity lifecycle changes (``user.created``,
  ``document.downloaded``); built with ``entity_changed``.
- ``auth.user.<action>`` for session events (``auth.user.logged_in``).
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class DomainEvent:
    """Immutable record of something that happened in the domain."""

    event_type: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    performed_by: Optional[str] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    version: int = 1

    def __post_init__(self):
        if not self.event_type:
            raise ValueError("event_type is required")
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @property
    def type(self) -> str:
        return self.event_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "payload": dict(self.payload),
            "performed_by": self.performed_by,
            "occurred_at": self.occurred_at.isoformat(),
            "event_id": self.event_id,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        occurred_at = data.get("occurred_at")
        if isinstance(occurred_at, str):
            occurred_at = datetime.fromisoformat(occurred_at)
        kwargs = {}
        if occurred_at is not None:
            kwargs["occurred_at"] = occurred_at
        if data.get("event_id"):
            kwargs["event_id"] = data["event_id"]
        return cls(
            event_type=data["event_type"],
            payload=data.get("payload", {}),
            performed_by=data.get("performed_by"),
            version=data.get("version", 1),
            **kwargs,
        )


# ═══════════════════════════════════════════════════════════════
# EVENT CATALOG
# ═══════════════════════════════════════════════════════════════

USER_LOGGED_IN = "auth.user.logged_in"
USER_LOGGED_OUT = "auth.user.logged_out"


def event_name(entity: str, action: str) -> str:
    """Name of the lifecycle event for ``entity`` undergoing ``action``."""
    return f"{entity}.{action}"


def entity_changed(
    entity: str,
    action: str,
    entity_id: str,
    performed_by: Optional[str],
    **metadata: Any,
) -> DomainEvent:
    """
    Build an ``<entity>.<action>`` event.

    Example:
        event = entity_changed("user", "created", user.id, identity.id,
                               username=user.username)
    """
    payload: Dict[str, Any] = {"entity_id": entity_id}
    if metadata:
        payload["metadata"] = metadata
    return DomainEvent(
        event_type=event_name(entity, action),
        payload=payload,
        performed_by=performed_by,
    )


def user_logged_in(
    user_id: str,
    username: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> DomainEvent:
    """Raised when a user starts a session successfully."""
    payload: Dict[str, Any] = {"user_id": user_id, "username": username}
    if ip_address is not None:
        payload["ip_address"] = ip_address
    if user_agent is not None:
        payload["user_agent"] = user_agent
    return DomainEvent(USER_LOGGED_IN, payload, performed_by=user_id)


def user_logged_out(
    user_id: str,
    username: str,
    revoked_all_tokens: bool = False,
) -> DomainEvent:
    """Raised when a user ends a session (logout)."""
    return DomainEvent(
        USER_LOGGED_OUT,
        {
            "user_id": user_id,
            "username": username,
            "revoked_all_tokens": revoked_all_tokens,
        },
        performed_by=user_id,
    )
