"""Credential verification used by the login endpoint.

The catalog does not store users. Whether a login attempt succeeds is decided
by a pluggable ``CredentialVerifier`` so a real identity check can replace the
default random stand-in without touching token or middleware code.
"""

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialVerifier(Protocol):
    """Decides whether a login attempt succeeds."""

    def verify(self) -> bool: ...


class CoinFlipVerifier:
    """Accepts roughly half of all login attempts at random."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def verify(self) -> bool:
        return self._rng.randrange(2) == 1


class StaticVerifier:
    """Always returns the same decision."""

    def __init__(self, allow: bool):
        self.allow = allow

    def verify(self) -> bool:
        return self.allow
