"""
Exception handlers for FastAPI.

Maps domain errors to JSON responses carrying the error's own status
code and body, so a specific code is never masked by a generic 500.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from rbac_audit.domain.errors import (
    AuthDomainError,
    AuthenticationError,
    AuthorizationError,
    HandlerExecutionError,
)

logger = logging.getLogger(__name__)


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    """Handle AuthenticationError (401)."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=exc.to_response_body(),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def authorization_error_handler(request: Request, exc: AuthorizationError):
    """Handle AuthorizationError (403)."""
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=exc.to_response_body(),
    )


async def handler_execution_error_handler(request: Request, exc: HandlerExecutionError):
    """Handle a strict-mode handler failure that reached the route (500)."""
    logger.error(f"Unhandled event handler failure on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Event handler failed", "code": exc.code},
    )


async def domain_error_handler(request: Request, exc: AuthDomainError):
    """Handle any other AuthDomainError with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response_body(),
    )


def register_exception_handlers(app):
    """
    Register uniform exception handlers for the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(HandlerExecutionError, handler_execution_error_handler)
    app.add_exception_handler(AuthDomainError, domain_error_handler)
