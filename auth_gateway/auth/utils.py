"""
Authentication utilities for request parsing and response reshaping.

This module handles:
- Extracting the bearer credential from the Authorization header
- Remapping provider user-info claims to the gateway's user shape
- Reshaping provider token responses into the token quadruple
"""

from typing import Any, Dict, Optional

from ..errors import Unauthenticated
from ..models import TokenResponse, VerifiedUser

BEARER_PREFIX = "Bearer "

# gateway field -> provider claim
USER_INFO_FIELDS = {
    "firstName": "given_name",
    "lastName": "family_name",
    "email": "email",
    "username": "preferred_username",
    "sub": "sub",
    "email_verified": "email_verified",
}

TOKEN_FIELDS = ("access_token", "refresh_token", "expires_in", "token_type")


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    The scheme match is case-sensitive and requires the trailing space.

    Raises:
        Unauthenticated: If the header is absent or uses another scheme
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("No token provided")

    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise Unauthenticated("No token provided")
    return token


def map_user_info(claims: Dict[str, Any]) -> VerifiedUser:
    """Remap provider user-info claims onto the gateway's user fields."""
    return VerifiedUser(
        **{field: claims[claim] for field, claim in USER_INFO_FIELDS.items() if claim in claims}
    )


def to_token_response(token_data: Dict[str, Any]) -> TokenResponse:
    """Keep only the token quadruple fields the provider actually returned."""
    return TokenResponse(**{field: token_data[field] for field in TOKEN_FIELDS if field in token_data})
