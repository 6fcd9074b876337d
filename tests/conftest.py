"""
Pytest configuration for rbac-audit tests.
"""

import time

import pytest
from unittest.mock import AsyncMock, MagicMock
from jose import jwt

from rbac_audit.context import RequestContext
from rbac_audit.identity import Identity
from rbac_audit.ports.token_verifier import TokenVerifierPort

JWT_SECRET = "test-secret-that-is-at-least-32-characters"
VALID_TOKEN = "eyJhbGciOiJIUzI1NiJ9.e30.xyz"


@pytest.fixture
def admin_identity():
    """Fixture providing an authenticated admin identity."""
    return Identity(id="user-1", username="alice", role="admin")


@pytest.fixture
def viewer_identity():
    """Fixture providing an authenticated viewer identity."""
    return Identity(id="user-2", username="bob", role="viewer")


@pytest.fixture
def make_context():
    """Factory for request contexts with an optional Authorization header."""

    def factory(authorization=None, identity=None, path="/api/documents", method="GET"):
        headers = {"User-Agent": "pytest"}
        if authorization is not None:
            headers["Authorization"] = authorization
        return RequestContext(
            path=path,
            method=method,
            headers=headers,
            client_host="127.0.0.1",
            user_agent="pytest",
            identity=identity,
        )

    return factory


@pytest.fixture
def make_jwt():
    """Factory for signed HS256 tokens carrying the standard claims."""

    def factory(secret=JWT_SECRET, expires_in=3600, **claims):
        payload = {
            "userId": "user-1",
            "username": "alice",
            "role": "admin",
            "exp": int(time.time()) + expires_in,
        }
        payload.update(claims)
        payload = {k: v for k, v in payload.items() if v is not None}
        return jwt.encode(payload, secret, algorithm="HS256")

    return factory


# -----------------------------------------------------------------------------
# MOCKS
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_verifier(admin_identity):
    mock = MagicMock(spec=TokenVerifierPort)
    mock.verify = AsyncMock(return_value=admin_identity)
    return mock


@pytest.fixture
def jwt_secret():
    return JWT_SECRET
