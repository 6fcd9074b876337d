from typing import Optional, List
import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from dependency_injector.wiring import inject, Provide

from rbac_audit.contrib.dependency_injector import AuthAuditContainer
from rbac_audit.middleware.authentication import Authenticator
from .dependencies import AUTH_CONTEXT_ATTR, build_request_context

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Authenticates every non-public request before it reaches a route.

    On success the verified context is stored on
    ``request.state.auth_context`` for ``require_roles`` and
    ``get_request_context``. On failure the error body is returned
    directly and the route never runs.
    """

    @inject
    def __init__(
        self,
        app,
        authenticator: Optional[Authenticator] = Provide[
            AuthAuditContainer.authenticator
        ],
        public_paths: Optional[List[str]] = None,
    ):
        super().__init__(app)
        if not isinstance(authenticator, Authenticator):
            raise ValueError(
                "Authenticator is required for AuthenticationMiddleware; "
                "pass one or wire AuthAuditContainer"
            )
        self.authenticator = authenticator
        self.public_paths = public_paths if public_paths is not None else ["/health"]

    def _is_public(self, path: str) -> bool:
        for p in self.public_paths:
            prefix = p.rstrip("/")
            # Match whole path segments only: "/health" covers "/health/live", not "/healthcare".
            if path == p or (prefix and (path == prefix or path.startswith(prefix + "/"))):
                return True
        return False

    async def dispatch(self, request: Request, call_next) -> Response:
        if self._is_public(request.url.path):
            return await call_next(request)

        outcome = await self.authenticator(build_request_context(request))
        if not outcome.is_success:
            headers = {"WWW-Authenticate": "Bearer"} if outcome.status_code == 401 else None
            return JSONResponse(
                status_code=outcome.status_code,
                content=outcome.to_response_body(),
                headers=headers,
            )

        setattr(request.state, AUTH_CONTEXT_ATTR, outcome.context)
        return await call_next(request)
