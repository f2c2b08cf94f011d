"""
FastAPI Gateway Application Factory
===================================

This is the main entry point for the auth gateway that sits between web
clients and the Keycloak identity provider.

Architecture:
    Web Clients → Auth Gateway (this service) → Keycloak (OIDC + admin API)

Routers:
    - /api/auth/*   : Login, refresh, registration, token verification, sessions

Environment Variables Required:
    - KEYCLOAK_SERVER_URL: Keycloak base URL (e.g., "https://auth.example.com")
    - KEYCLOAK_REALM_NAME: Application realm
    - KEYCLOAK_CLIENT_ID: Confidential client id
    - KEYCLOAK_CLIENT_SECRET: Confidential client secret
    - KEYCLOAK_ADMIN_USERNAME: Master realm admin user
    - KEYCLOAK_ADMIN_PASSWORD: Master realm admin password

Optional:
    - PORT (default: 3001), HOST (default: 0.0.0.0)
    - ALLOWED_ORIGINS: Comma-separated CORS origins
    - PROVIDER_TIMEOUT_SECONDS (default: 10)
    - LOG_LEVEL (default: INFO)

Running the Service:
    auth-gateway
    python -m auth_gateway
    uvicorn auth_gateway.main:create_app --factory --port 3001
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth.routes import auth_router
from .config import Settings, get_settings
from .errors import GatewayError, InvalidRequest
from .provider import AdminClient, ProviderClient

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type", "Authorization", "Access-Control-Allow-Origin"]


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_http_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the outbound client shared by all requests."""
    timeout = httpx.Timeout(
        settings.PROVIDER_TIMEOUT_SECONDS,
        connect=min(5.0, settings.PROVIDER_TIMEOUT_SECONDS),
    )
    return httpx.AsyncClient(timeout=timeout, transport=transport)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management (outbound HTTP client)
        - CORS middleware
        - Route handlers
        - Exception handlers

    Args:
        settings: Settings to use; loaded from the environment when omitted
        transport: Optional httpx transport for the outbound client

    Returns:
        FastAPI: Configured application instance

    Raises:
        ValidationError: If required configuration is missing
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)

        http_client = build_http_client(settings, transport)
        provider_client = ProviderClient(http_client, settings)
        app.state.provider_client = provider_client
        app.state.admin_client = AdminClient(provider_client, settings)

        logger.info(
            f"Auth service started: keycloakUrl={settings.KEYCLOAK_SERVER_URL} "
            f"realm={settings.KEYCLOAK_REALM_NAME} clientId={settings.KEYCLOAK_CLIENT_ID}"
        )

        yield

        logger.info("Shutting down auth service")
        await http_client.aclose()
        app.state.provider_client = None
        app.state.admin_client = None

    app = FastAPI(
        title="Keycloak Auth Gateway",
        description="Authentication gateway forwarding login, registration and token operations to Keycloak",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    app.include_router(auth_router)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed or absent bodies are reported like missing fields
        error = InvalidRequest("Invalid request body", details=jsonable_errors(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a standardized error response.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_server_error",
                "details": str(exc) if settings.LOG_LEVEL == "DEBUG" else None
            }
        )

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip validation errors down to JSON-safe location/message pairs."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def run() -> None:
    """Console entry point: load settings and serve."""
    settings = get_settings()

    uvicorn.run(
        "auth_gateway.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
