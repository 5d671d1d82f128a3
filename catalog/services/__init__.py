# Catalog Services
from catalog.services.login import CoinFlipVerifier, CredentialVerifier, StaticVerifier
from catalog.services.products import ProductRepository, SortKey
from catalog.services.tokens import (
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
    TokenPair,
    TokenService,
    TokenSigningError,
)

__all__ = [
    "CoinFlipVerifier",
    "CredentialVerifier",
    "InvalidTokenError",
    "ProductRepository",
    "SortKey",
    "StaticVerifier",
    "TokenError",
    "TokenExpiredError",
    "TokenPair",
    "TokenService",
    "TokenSigningError",
]
