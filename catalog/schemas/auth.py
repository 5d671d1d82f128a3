"""Pydantic schemas for authentication API."""

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """Response with JWT tokens."""

    access: str
    refresh: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token expiry in seconds")


class MessageResponse(BaseModel):
    """Error envelope used by every failure response."""

    message: str
