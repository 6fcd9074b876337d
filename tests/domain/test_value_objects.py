"""
Tests for Domain Value Objects.
"""

import pytest

from rbac_audit.domain.errors import InvalidTokenFormatError
from rbac_audit.domain.value_objects import Token, AllowedRoles


# -----------------------------------------------------------------------------
# Token
# -----------------------------------------------------------------------------


def test_token_accepts_three_segments():
    token = Token("eyJhbGciOiJIUzI1NiJ9.e30.xyz")
    assert str(token) == "eyJhbGciOiJIUzI1NiJ9.e30.xyz"
    assert token.value == "eyJhbGciOiJIUzI1NiJ9.e30.xyz"


def test_token_rejects_single_segment():
    with pytest.raises(InvalidTokenFormatError) as exc:
        Token("abc")
    assert "three parts" in exc.value.message


@pytest.mark.parametrize("value", ["a.b", "a.b.c.d", ""])
def test_token_rejects_wrong_segment_count(value):
    with pytest.raises(InvalidTokenFormatError):
        Token(value)


def test_token_rejects_blank():
    with pytest.raises(InvalidTokenFormatError) as exc:
        Token("   ")
    assert exc.value.message == "Token cannot be empty"


def test_token_is_immutable():
    token = Token("a.b.c")
    with pytest.raises(AttributeError):
        token.value = "x.y.z"


def test_token_equality_and_preview():
    assert Token("a.b.c") == Token("a.b.c")
    assert Token("aaaaaaaaaa.bbbbbbbbbb.cccc").preview(5) == "aaaaa..."


# -----------------------------------------------------------------------------
# AllowedRoles
# -----------------------------------------------------------------------------


def test_allowed_roles_membership():
    roles = AllowedRoles(("admin", "manager"))
    assert "admin" in roles
    assert "manager" in roles
    assert "viewer" not in roles
    assert len(roles) == 2


def test_allowed_roles_deduplicates_keeping_order():
    roles = AllowedRoles(("manager", "admin", "manager"))
    assert roles.as_list() == ["manager", "admin"]


def test_allowed_roles_requires_a_role():
    with pytest.raises(ValueError):
        AllowedRoles(())


def test_allowed_roles_rejects_empty_names():
    with pytest.raises(ValueError):
        AllowedRoles(("admin", ""))


def test_allowed_roles_of_single_string():
    assert AllowedRoles.of("admin").as_list() == ["admin"]
    assert list(AllowedRoles.of(["a", "b"])) == ["a", "b"]


def test_allowed_roles_rejects_bare_string():
    with pytest.raises(TypeError):
        AllowedRoles("admin")
