"""Bearer token authorization middleware.

Routes listed in the protected-route table must carry a valid JWT in
``Authorization: Bearer <token>``. Every other route passes through untouched.

For a protected route the request ends in one of four outcomes:

- ``NOT_REQUIRED``: route is not in the table, request is forwarded.
- ``REQUIRED_BUT_MISSING``: no Authorization header.
- ``REQUIRED_AND_INVALID``: malformed header, or the token failed verification.
- ``REQUIRED_AND_VALID``: subject is attached to the request and it is forwarded.

Both failure outcomes produce the same 401 body so clients cannot tell a
missing token from an expired or forged one. The real reason is only logged.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from catalog.api.errors import UnauthorizedError, error_response
from catalog.services.tokens import InvalidTokenError, TokenExpiredError, TokenService

logger = logging.getLogger(__name__)

# Attribute on request.state holding the verified subject id
_SUBJECT_STATE_KEY = "_catalog_auth_subject_id"


@dataclass(frozen=True)
class ProtectedRoute:
    """A method + exact path combination that requires a bearer token."""

    method: str
    path: str

    def matches(self, method: str, path: str) -> bool:
        return self.method == method.upper() and self.path == path


PROTECTED_ROUTES: tuple[ProtectedRoute, ...] = (ProtectedRoute("GET", "/protected"),)


class AuthOutcome(str, Enum):
    NOT_REQUIRED = "not_required"
    REQUIRED_BUT_MISSING = "required_but_missing"
    REQUIRED_AND_INVALID = "required_and_invalid"
    REQUIRED_AND_VALID = "required_and_valid"


@dataclass(frozen=True)
class AuthDecision:
    outcome: AuthOutcome
    subject: int | None = None
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome in (AuthOutcome.NOT_REQUIRED, AuthOutcome.REQUIRED_AND_VALID)


def requires_authorization(
    method: str, path: str, routes: Iterable[ProtectedRoute] = PROTECTED_ROUTES
) -> bool:
    """Check whether a method + path combination needs a bearer token."""
    return any(route.matches(method, path) for route in routes)


def parse_bearer_token(auth_header: str) -> str | None:
    """Extract the token from ``Bearer <token>``.

    The scheme is matched case-insensitively. Returns None unless the header
    is exactly a scheme, one space and a single non-empty token.
    """
    scheme, sep, token = auth_header.partition(" ")
    if not sep or scheme.lower() != "bearer":
        return None
    if not token or any(c.isspace() for c in token):
        return None
    return token


def authorize_request(
    request: Request,
    token_service: TokenService,
    routes: Iterable[ProtectedRoute] = PROTECTED_ROUTES,
) -> AuthDecision:
    """Decide whether a request may proceed and who it belongs to."""
    if not requires_authorization(request.method, request.url.path, routes):
        return AuthDecision(AuthOutcome.NOT_REQUIRED)

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return AuthDecision(AuthOutcome.REQUIRED_BUT_MISSING, reason="missing header")

    token = parse_bearer_token(auth_header)
    if token is None:
        return AuthDecision(AuthOutcome.REQUIRED_AND_INVALID, reason="malformed header")

    try:
        subject = token_service.verify_token(token)
    except TokenExpiredError:
        return AuthDecision(AuthOutcome.REQUIRED_AND_INVALID, reason="expired token")
    except InvalidTokenError as e:
        return AuthDecision(AuthOutcome.REQUIRED_AND_INVALID, reason=str(e))

    return AuthDecision(AuthOutcome.REQUIRED_AND_VALID, subject=subject)


def set_authenticated_subject(request: Request, subject: int) -> None:
    setattr(request.state, _SUBJECT_STATE_KEY, subject)


def get_authenticated_subject(request: Request) -> int:
    """Return the subject attached by ``BearerAuthMiddleware``.

    Usable as a FastAPI dependency on protected routes. Raises
    UnauthorizedError if the middleware did not authenticate this request.
    """
    subject = getattr(request.state, _SUBJECT_STATE_KEY, None)
    if subject is None:
        raise UnauthorizedError()
    return subject


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Middleware that enforces bearer authentication on protected routes."""

    def __init__(
        self,
        app: ASGIApp,
        token_service: TokenService,
        protected_routes: Iterable[ProtectedRoute] = PROTECTED_ROUTES,
    ):
        super().__init__(app)
        self.token_service = token_service
        self.protected_routes = tuple(protected_routes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        decision = authorize_request(request, self.token_service, self.protected_routes)

        if not decision.allowed:
            logger.warning(
                f"Unauthorized request for {request.method} {request.url.path}"
                f" ({decision.reason})",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "outcome": decision.outcome.value,
                },
            )
            return error_response(
                status.HTTP_401_UNAUTHORIZED,
                UnauthorizedError.message,
                UnauthorizedError.headers,
            )

        if decision.subject is not None:
            set_authenticated_subject(request, decision.subject)

        return await call_next(request)
