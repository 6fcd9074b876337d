"""
Event handlers that turn domain events into audit records.

The handler is subscribed on the event bus for every audited event type
and persists one AuditRecord per event through the AuditLogPort. Events
without an actor, or with an unknown shape, are not audited.
"""

import logging
from typing import Iterable, Optional

from rbac_audit.domain.audit import (
    AuditAction,
    AuditEntity,
    AuditRecord,
    EVENT_ACTIONS,
)
from rbac_audit.domain.events import (
    DomainEvent,
    USER_LOGGED_IN,
    USER_LOGGED_OUT,
    event_name,
)
from rbac_audit.ports.audit_log import AuditLogPort
from rbac_audit.ports.event_bus import EventBusPort


logger = logging.getLogger("rbac_audit.event_handlers")


# Default lifecycle actions audited per entity.
_ENTITY_ACTIONS = {
    AuditEntity.USER: (
        "created", "updated", "deleted", "activated", "deactivated", "password_changed",
    ),
    AuditEntity.COLLABORATOR: (
        "created", "updated", "deleted", "activated", "deactivated",
    ),
    AuditEntity.DOCUMENT: ("uploaded", "created", "updated", "deleted", "downloaded"),
    AuditEntity.MINUTE: ("uploaded", "created", "updated", "deleted", "downloaded"),
    AuditEntity.AREA: ("created", "updated", "deleted", "activated", "deactivated"),
    AuditEntity.ADSCRIPCION: ("created", "updated", "deleted", "activated", "deactivated"),
    AuditEntity.PUESTO: ("created", "updated", "deleted", "activated", "deactivated"),
    AuditEntity.DOCUMENT_TYPE: (
        "created", "updated", "deleted", "activated", "deactivated",
    ),
}


def default_audited_event_types() -> list[str]:
    """Every event name the audit handler subscribes to by default."""
    names = [
        event_name(entity.value, action)
        for entity, actions in _ENTITY_ACTIONS.items()
        for action in actions
    ]
    names += [USER_LOGGED_IN, USER_LOGGED_OUT]
    return names


class AuditLogEventHandler:
    """
    Event handler that writes the audit trail.

    Register it on the bus for each audited event type:

        bus.subscribe("user.created", handler.handle)

    Or use the convenience function:

        register_audit_handlers(bus, handler)

    Persistence errors are not swallowed here; the event bus isolates
    them so the business operation that published the event never fails.
    """

    def __init__(self, repository: AuditLogPort):
        self.repository = repository

    def map_event(self, event: DomainEvent) -> Optional[AuditRecord]:
        """
        Map a domain event to an audit record.

        Returns None if the event should not be audited.
        """
        payload = event.payload

        if event.event_type in (USER_LOGGED_IN, USER_LOGGED_OUT):
            user_id = payload.get("user_id") or event.performed_by
            if not user_id:
                return None
            if event.event_type == USER_LOGGED_IN:
                action = AuditAction.LOGIN
                metadata = {
                    "username": payload.get("username"),
                    "ipAddress": payload.get("ip_address"),
                    "userAgent": payload.get("user_agent"),
                }
            else:
                action = AuditAction.LOGOUT
                metadata = {
                    "username": payload.get("username"),
                    "revokedAllTokens": payload.get("revoked_all_tokens", False),
                }
            return AuditRecord(
                actor_id=user_id,
                action=action,
                entity=AuditEntity.USER.value,
                entity_id=user_id,
                timestamp=event.occurred_at,
                metadata={k: v for k, v in metadata.items() if v is not None},
            )

        entity, _, suffix = event.event_type.rpartition(".")
        action = EVENT_ACTIONS.get(suffix)
        entity_id = payload.get("entity_id")
        if not entity or action is None or not entity_id or not event.performed_by:
            return None

        metadata = dict(payload.get("metadata") or {})
        metadata["eventId"] = event.event_id
        return AuditRecord(
            actor_id=event.performed_by,
            action=action,
            entity=entity,
            entity_id=str(entity_id),
            timestamp=event.occurred_at,
            metadata=metadata,
        )

    async def handle(self, event: DomainEvent) -> None:
        """Handle a domain event by persisting its audit record."""
        record = self.map_event(event)
        if record is None:
            logger.debug(f"Event {event.event_type} not audited", extra={"eventId": event.event_id})
            return

        await self.repository.save(record)

        logger.debug(
            f"Audit record created from {event.event_type}: "
            f"{record.action.value} {record.entity}/{record.entity_id}",
            extra={"eventId": event.event_id, "recordId": record.record_id},
        )


def register_audit_handlers(
    bus: EventBusPort,
    handler: AuditLogEventHandler,
    event_types: Optional[Iterable[str]] = None,
) -> int:
    """
    Subscribe the audit handler to every audited event type.

    Args:
        bus: Event bus to subscribe on
        handler: Audit handler instance
        event_types: Event names to audit; defaults to
            ``default_audited_event_types()``

    Returns:
        Number of event types subscribed
    """
    types = list(event_types) if event_types is not None else default_audited_event_types()
    for event_type in types:
        bus.subscribe(event_type, handler.handle)

    logger.info(f"Registered audit handler for {len(types)} event types")
    return len(types)


__all__ = [
    "AuditLogEventHandler",
    "register_audit_handlers",
    "default_audited_event_types",
]
