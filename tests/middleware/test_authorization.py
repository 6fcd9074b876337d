"""
Tests for the Authorization stage.
"""

import logging

import pytest

from rbac_audit.domain.value_objects import AllowedRoles
from rbac_audit.identity import Identity
from rbac_audit.middleware.authorization import (
    Authorizer,
    AuthorizationConfig,
    authorize,
)
from rbac_audit.middleware.results import OutcomeKind


@pytest.mark.asyncio
async def test_authorizer_allows_listed_role(make_context):
    manager = Identity(id="u3", username="maria", role="manager")
    ctx = make_context(identity=manager)

    outcome = await authorize("admin", "manager")(ctx)

    assert outcome.kind == OutcomeKind.PROCEED
    assert outcome.context is ctx


@pytest.mark.asyncio
async def test_authorizer_forbids_other_role(make_context, viewer_identity, caplog):
    with caplog.at_level(logging.WARNING, logger="rbac_audit.middleware"):
        outcome = await authorize("admin", "manager")(make_context(identity=viewer_identity))

    assert outcome.kind == OutcomeKind.FORBIDDEN
    assert outcome.status_code == 403
    assert outcome.to_response_body() == {
        "error": "You do not have permission to access this resource",
        "code": "FORBIDDEN",
        "requiredRoles": ["admin", "manager"],
        "userRole": "viewer",
    }
    assert "bob" in caplog.text


@pytest.mark.asyncio
async def test_authorizer_without_identity_is_misconfigured(make_context):
    outcome = await authorize("admin")(make_context())

    assert outcome.kind == OutcomeKind.MISCONFIGURED
    assert outcome.status_code == 500
    assert outcome.error.code == "MIDDLEWARE_CONFIG_ERROR"


@pytest.mark.asyncio
async def test_authorizer_role_match_is_case_sensitive(make_context):
    admin_upper = Identity(id="u1", username="alice", role="Admin")

    outcome = await authorize("admin")(make_context(identity=admin_upper))

    assert outcome.kind == OutcomeKind.FORBIDDEN


def test_authorizer_accepts_config_forms():
    roles = AllowedRoles(("admin",))
    assert Authorizer(AuthorizationConfig(roles)).allowed_roles == roles
    assert Authorizer(roles).allowed_roles == roles
    assert Authorizer(["admin"]).allowed_roles == roles


def test_authorize_requires_roles():
    with pytest.raises(ValueError):
        authorize()
