"""Dependencies resolving the per-application services from ``app.state``."""

from fastapi import Request

from catalog.services.login import CredentialVerifier
from catalog.services.products import ProductRepository
from catalog.services.tokens import TokenService


def get_product_repository(request: Request) -> ProductRepository:
    """Dependency to get the product repository."""
    return request.app.state.product_repository


def get_token_service(request: Request) -> TokenService:
    """Dependency to get the token service."""
    return request.app.state.token_service


def get_credential_verifier(request: Request) -> CredentialVerifier:
    """Dependency to get the login credential verifier."""
    return request.app.state.credential_verifier
