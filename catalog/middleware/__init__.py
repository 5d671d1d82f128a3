"""Middleware module for the catalog API."""

from catalog.middleware.auth import (
    PROTECTED_ROUTES,
    BearerAuthMiddleware,
    ProtectedRoute,
    get_authenticated_subject,
)
from catalog.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "PROTECTED_ROUTES",
    "BearerAuthMiddleware",
    "ProtectedRoute",
    "RequestLoggingMiddleware",
    "get_authenticated_subject",
]
