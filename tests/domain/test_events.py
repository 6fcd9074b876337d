"""
Tests for Domain Events.
"""

from datetime import datetime

import pytest

from rbac_audit.domain.events import (
    DomainEvent,
    USER_LOGGED_IN,
    USER_LOGGED_OUT,
    entity_changed,
    event_name,
    user_logged_in,
    user_logged_out,
)


def test_domain_event_defaults():
    event = DomainEvent("user.created", {"entity_id": "u1"})
    assert event.type == "user.created"
    assert event.payload["entity_id"] == "u1"
    assert event.performed_by is None
    assert event.version == 1
    assert event.event_id
    assert event.occurred_at.tzinfo is not None


def test_domain_event_is_immutable():
    event = DomainEvent("user.created", {"entity_id": "u1"})
    with pytest.raises(AttributeError):
        event.event_type = "user.deleted"
    with pytest.raises(TypeError):
        event.payload["entity_id"] = "u2"


def test_domain_event_copies_payload():
    payload = {"entity_id": "u1"}
    event = DomainEvent("user.created", payload)
    payload["entity_id"] = "changed"
    assert event.payload["entity_id"] == "u1"


def test_domain_event_requires_type():
    with pytest.raises(ValueError):
        DomainEvent("")


def test_domain_event_dict_roundtrip():
    event = DomainEvent("document.uploaded", {"entity_id": "d1"}, performed_by="u1")
    restored = DomainEvent.from_dict(event.to_dict())
    assert restored == event
    assert isinstance(restored.occurred_at, datetime)


def test_event_name():
    assert event_name("document_type", "created") == "document_type.created"


def test_entity_changed_with_metadata():
    event = entity_changed("user", "created", "u2", "u1", username="carol")
    assert event.event_type == "user.created"
    assert event.performed_by == "u1"
    assert event.payload["entity_id"] == "u2"
    assert event.payload["metadata"] == {"username": "carol"}


def test_entity_changed_without_metadata():
    event = entity_changed("area", "deleted", "a1", "u1")
    assert "metadata" not in event.payload


def test_user_logged_in():
    event = user_logged_in("u1", "alice", ip_address="10.0.0.1", user_agent="curl")
    assert event.event_type == USER_LOGGED_IN == "auth.user.logged_in"
    assert event.performed_by == "u1"
    assert dict(event.payload) == {
        "user_id": "u1",
        "username": "alice",
        "ip_address": "10.0.0.1",
        "user_agent": "curl",
    }


def test_user_logged_out():
    event = user_logged_out("u1", "alice", revoked_all_tokens=True)
    assert event.event_type == USER_LOGGED_OUT
    assert event.payload["revoked_all_tokens"] is True
