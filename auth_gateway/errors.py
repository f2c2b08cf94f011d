"""
Gateway error taxonomy.

Every failure the gateway reports to a caller is one of the exceptions below.
Provider failures are caught in the route handlers and re-raised as the
matching kind; the exception handler registered in main.py renders them as
JSON responses.
"""

from typing import Any, Dict, Optional

from fastapi import status


class GatewayError(Exception):
    """
    Base exception for errors reported to gateway callers.

    Attributes:
        error: Short human-readable error message
        details: Optional diagnostic detail (provider body or message)
        status_code: HTTP status returned to the caller
        extra: Additional top-level fields merged into the response body
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error: str = "Request failed"

    def __init__(
        self,
        error: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None,
        **extra: Any,
    ):
        self.error = error or self.default_error
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra
        super().__init__(self.error)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = dict(self.extra)
        body["error"] = self.error
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequest(GatewayError):
    """A required inbound field is missing. Never reaches the provider."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_error = "Invalid request"


class InvalidCredentials(GatewayError):
    """The provider rejected a password grant as unauthorized."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_error = "Invalid credentials"


class Unauthenticated(GatewayError):
    """Token missing, malformed, or rejected by the provider."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_error = "Unauthenticated"


class AuthenticationFailed(GatewayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "Authentication failed"


class RegistrationFailed(GatewayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "Registration failed"


class SessionLookupFailed(GatewayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "Failed to get user sessions"
