"""
Contrib modules for framework and library integrations.

Available integrations:
- dependency_injector: AuthAuditContainer for DI
- fastapi: Dependencies, middleware and exception handlers for FastAPI
"""
