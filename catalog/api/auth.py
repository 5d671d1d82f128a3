"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request

from catalog.api.dependencies import get_credential_verifier, get_token_service
from catalog.api.errors import InternalError, InvalidCredentialsError
from catalog.middleware.auth import get_authenticated_subject
from catalog.schemas.auth import MessageResponse, TokenResponse
from catalog.services.login import CredentialVerifier
from catalog.services.tokens import TokenService, TokenSigningError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
async def login(
    request: Request,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    token_service: TokenService = Depends(get_token_service),
) -> TokenResponse:
    """Issue an access/refresh token pair if the credential check passes."""
    if not verifier.verify():
        logger.warning(f"Login rejected for {request.method} {request.url.path}")
        raise InvalidCredentialsError()

    subject = request.app.state.settings.login_subject_id
    try:
        pair = token_service.issue_token_pair(subject)
    except TokenSigningError:
        logger.exception("Error generating tokens")
        raise InternalError() from None

    return TokenResponse(access=pair.access, refresh=pair.refresh, expires_in=pair.expires_in)


@router.get(
    "/protected",
    response_model=int,
    responses={401: {"model": MessageResponse}},
)
async def protected(subject: int = Depends(get_authenticated_subject)) -> int:
    """Return the subject id of the bearer token."""
    return subject
