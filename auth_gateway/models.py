"""
Data Models Module

This module defines Pydantic models for request/response validation
and serialization on the gateway's inbound surface.

Request fields are optional at the model level: presence of required
fields is checked by the route handlers, so a missing field is reported
as a 400 with the gateway's own message instead of a schema error.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Request Models
# ============================================================================

class LoginRequest(BaseModel):
    """Request model for the password login."""
    username: Optional[str] = Field(None, description="Username in the application realm")
    password: Optional[str] = Field(None, description="User password")


class RefreshRequest(BaseModel):
    """Request model for token refresh."""
    refresh_token: Optional[str] = Field(None, description="Refresh token issued by a previous login")


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    username: Optional[str] = Field(None, description="Username for the new account")
    email: Optional[str] = Field(None, description="Email address for the new account")
    password: Optional[str] = Field(None, description="Initial, non-temporary password")
    firstName: Optional[str] = Field(None, description="Given name")
    lastName: Optional[str] = Field(None, description="Family name")


# ============================================================================
# Response Models
# ============================================================================

class HealthResponse(BaseModel):
    status: int = Field(200, description="Fixed status code")
    message: str = Field("Everything is good!", description="Fixed status message")


class TokenResponse(BaseModel):
    """
    Token quadruple returned by the provider.

    Values are untyped so they pass through exactly as the provider sent them;
    keys the provider omitted stay unset and are excluded on serialization.
    """
    access_token: Any = Field(None, description="Access token")
    refresh_token: Any = Field(None, description="Refresh token")
    expires_in: Any = Field(None, description="Access token lifetime in seconds")
    token_type: Any = Field(None, description="Token type (normally Bearer)")


class VerifiedUser(BaseModel):
    """Subject identity remapped from the provider's user-info claims, values untouched."""
    firstName: Any = Field(None, description="given_name claim")
    lastName: Any = Field(None, description="family_name claim")
    email: Any = Field(None, description="email claim")
    username: Any = Field(None, description="preferred_username claim")
    sub: Any = Field(None, description="Provider-assigned subject identifier")
    email_verified: Any = Field(None, description="email_verified claim")


class VerifyResponse(BaseModel):
    valid: bool = Field(True, description="Whether the provider accepted the token")
    user: VerifiedUser


class RegisterResponse(BaseModel):
    message: str = Field("User registered successfully")


class SessionsResponse(BaseModel):
    sessions: List[Any] = Field(default_factory=list, description="Provider session records")


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(None, description="Provider error body or message")
