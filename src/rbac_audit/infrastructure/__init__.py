"""Infrastructure layer for rbac-audit."""
