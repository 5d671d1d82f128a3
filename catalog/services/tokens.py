"""Token service for issuing and verifying JWT bearer tokens."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError

from catalog.core.config import HMAC_ALGORITHMS

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(hours=24)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenError(Exception):
    """Base token error."""

    pass


class TokenSigningError(TokenError):
    """Token could not be signed."""

    pass


class InvalidTokenError(TokenError):
    """Token failed verification."""

    pass


class TokenExpiredError(InvalidTokenError):
    """Token is past its expiry time."""

    pass


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued together."""

    access: str
    refresh: str
    expires_in: int


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies HMAC-signed JWTs carrying an integer subject.

    The secret is fixed for the lifetime of the service. ``clock`` returns the
    current aware UTC datetime and is only replaced in tests.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported token algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    def issue_token(self, subject: int, ttl: timedelta) -> str:
        """Sign a token for ``subject`` valid for ``ttl`` from now."""
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")

        now = self._clock()
        payload = {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        try:
            token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (PyJWTError, TypeError, ValueError) as e:
            raise TokenSigningError(f"Failed to sign token: {e}") from e
        # PyJWT 2.x returns str; older type stubs may declare bytes
        return str(token)

    def issue_access_token(self, subject: int) -> str:
        """Create a short-lived access token."""
        return self.issue_token(subject, self.access_ttl)

    def issue_refresh_token(self, subject: int) -> str:
        """Create a long-lived refresh token."""
        return self.issue_token(subject, self.refresh_ttl)

    def issue_token_pair(self, subject: int) -> TokenPair:
        return TokenPair(
            access=self.issue_access_token(subject),
            refresh=self.issue_refresh_token(subject),
            expires_in=int(self.access_ttl.total_seconds()),
        )

    def verify_token(self, token: str) -> int:
        """Verify a token and return its subject.

        Only HMAC algorithms are accepted, so ``none`` and asymmetric headers
        are rejected before the signature is checked. Expiry is compared
        against the service clock rather than the system time.

        Raises:
            TokenExpiredError: the token is past ``exp``.
            InvalidTokenError: any other parse, algorithm, signature or claim
                problem.
        """
        payload = self._decode(token)

        expires_at = payload["exp"]
        if not isinstance(expires_at, int | float) or isinstance(expires_at, bool):
            raise InvalidTokenError("Invalid token: exp is not a timestamp")
        if self._clock().timestamp() >= expires_at:
            raise TokenExpiredError("Token has expired")

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token: subject is not an integer") from e

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={
                    "require": REQUIRED_CLAIMS,
                    # exp is checked against the injected clock in verify_token
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
