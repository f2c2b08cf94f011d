"""
Authentication routes bridging the gateway to the identity provider.

Each endpoint validates the presence of its required inputs, issues one
provider call (or two chained calls for admin operations) and reshapes the
result. Provider failures are mapped onto the error taxonomy in errors.py.

Endpoints:
----------
- GET  /api/auth                    : Health check
- GET  /api/auth/verify             : Validate a bearer token via userinfo
- POST /api/auth/login              : Password grant
- POST /api/auth/register           : Create a user through the admin API
- GET  /api/auth/sessions/{userId}  : List a user's active sessions
- POST /api/auth/refresh            : Refresh grant
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header, Request, status

from ..errors import (
    AuthenticationFailed,
    GatewayError,
    InvalidCredentials,
    InvalidRequest,
    RegistrationFailed,
    SessionLookupFailed,
    Unauthenticated,
)
from ..models import (
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    SessionsResponse,
    TokenResponse,
    VerifyResponse,
)
from ..provider import AdminClient, ProviderClient, ProviderError
from ..provider.client import response_details
from .utils import extract_bearer_token, map_user_info, to_token_response

logger = logging.getLogger(__name__)

auth_router = APIRouter(
    prefix="/api/auth",
    tags=["authentication"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


# ============================================================================
# Dependencies
# ============================================================================

def get_provider_client(request: Request) -> ProviderClient:
    """
    Dependency to get the provider client from app state.

    Raises:
        GatewayError: 503 if the lifespan has not initialized the client
    """
    client = getattr(request.app.state, "provider_client", None)
    if client is None:
        raise GatewayError(
            "Provider client not initialized",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return client


def get_admin_client(request: Request) -> AdminClient:
    client = getattr(request.app.state, "admin_client", None)
    if client is None:
        raise GatewayError(
            "Admin client not initialized",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return client


def _log_provider_error(operation: str, exc: ProviderError) -> None:
    logger.error(
        f"{operation} error: {exc}",
        extra={"operation": operation, "provider_status": exc.status_code},
    )


# ============================================================================
# Endpoints
# ============================================================================

@auth_router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Fixed health payload; never fails."""
    return HealthResponse()


@auth_router.get("/verify", response_model=VerifyResponse, response_model_exclude_unset=True)
async def verify_token(
    authorization: Optional[str] = Header(None),
    provider: ProviderClient = Depends(get_provider_client),
) -> VerifyResponse:
    """
    Verify a bearer token by asking the provider for its user info.

    No distinction is made between expired, malformed and unreachable:
    every provider failure is reported as Unauthenticated.
    """
    token = extract_bearer_token(authorization)

    try:
        claims = await provider.userinfo(token)
    except ProviderError as e:
        _log_provider_error("Token verification", e)
        raise Unauthenticated("Invalid token", details=e.details, valid=False) from e

    if not claims:
        raise Unauthenticated("User info not found", valid=False)

    return VerifyResponse(valid=True, user=map_user_info(claims))


@auth_router.post("/login", response_model=TokenResponse, response_model_exclude_unset=True)
async def login(
    credentials: LoginRequest,
    provider: ProviderClient = Depends(get_provider_client),
) -> TokenResponse:
    """Exchange username/password for the provider's token quadruple."""
    logger.info(f"Login attempt for username: {credentials.username}")
    if not credentials.username or not credentials.password:
        raise InvalidRequest("Username and password are required")

    try:
        token_data = await provider.password_grant(credentials.username, credentials.password)
    except ProviderError as e:
        _log_provider_error("Token request", e)
        if e.status_code == status.HTTP_401_UNAUTHORIZED:
            raise InvalidCredentials("Invalid credentials") from e
        raise AuthenticationFailed("Authentication failed", details=e.details) from e

    return to_token_response(token_data)


@auth_router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
async def register(
    registration: RegisterRequest,
    admin: AdminClient = Depends(get_admin_client),
) -> RegisterResponse:
    """
    Create a user in the application realm through the admin API.

    Success requires the creation call to answer 201 Created; any other
    status is reported as a failure even though no exception was raised.
    """
    if not registration.username or not registration.email or not registration.password:
        raise InvalidRequest("Missing required fields")

    user_representation = {
        "username": registration.username,
        "email": registration.email,
        "firstName": registration.firstName,
        "lastName": registration.lastName,
        "enabled": True,
        "emailVerified": True,
        "credentials": [
            {
                "type": "password",
                "value": registration.password,
                "temporary": False,
            },
        ],
    }

    try:
        response = await admin.call("POST", "/users", json=user_representation)
    except ProviderError as e:
        _log_provider_error("Registration", e)
        raise RegistrationFailed("Registration failed", details=e.details) from e

    if response.status_code != status.HTTP_201_CREATED:
        logger.error(
            f"User creation returned {response.status_code}",
            extra={"operation": "Registration", "provider_status": response.status_code},
        )
        raise RegistrationFailed(
            "Failed to register user",
            details={"status": response.status_code, "body": response_details(response)},
        )

    logger.info(f"Registered user: {registration.username}")
    return RegisterResponse()


@auth_router.get("/sessions/{userId}", response_model=SessionsResponse)
async def list_sessions(
    userId: str,
    admin: AdminClient = Depends(get_admin_client),
) -> SessionsResponse:
    """List active sessions of a user, identified by provider user id."""
    try:
        response = await admin.call("GET", f"/users/{quote(userId, safe='')}/sessions")
    except ProviderError as e:
        _log_provider_error("Session lookup", e)
        raise SessionLookupFailed(details=e.details) from e

    if not response.is_success:
        logger.error(
            f"Session lookup returned {response.status_code}",
            extra={"operation": "Session lookup", "provider_status": response.status_code},
        )
        raise SessionLookupFailed(details=response_details(response))

    try:
        sessions = response.json() if response.content else []
    except ValueError as e:
        raise SessionLookupFailed(details="Provider returned a non-JSON body") from e

    if not isinstance(sessions, list):
        raise SessionLookupFailed(details="Provider returned an unexpected payload")

    return SessionsResponse(sessions=sessions)


@auth_router.post("/refresh", response_model=TokenResponse, response_model_exclude_unset=True)
async def refresh_token(
    body: RefreshRequest,
    provider: ProviderClient = Depends(get_provider_client),
) -> TokenResponse:
    """Exchange a refresh token for a new token quadruple."""
    if not body.refresh_token:
        raise InvalidRequest("Missing refresh_token")

    try:
        token_data = await provider.refresh_grant(body.refresh_token)
    except ProviderError as e:
        _log_provider_error("Refresh token", e)
        raise Unauthenticated("Failed to refresh token", details=e.details) from e

    return to_token_response(token_data)
