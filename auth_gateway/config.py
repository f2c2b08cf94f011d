"""
Configuration module for the Keycloak Auth Gateway.

This module uses Pydantic Settings to load and validate environment variables
for the identity provider connection, administrative credentials, HTTP server
and CORS settings.

Environment variables are loaded from .env file or system environment.
Required values are validated when the settings are first built, so a
misconfigured gateway refuses to start instead of failing on the first
request that reaches the provider.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000,https://gateway-dawn-wildflower-3519.fly.dev"

# Realm and client used for administrative token grants
ADMIN_REALM = "master"
ADMIN_CLIENT_ID = "admin-cli"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Settings are frozen: they are built once at startup and handed to the
    provider clients and routes, never mutated afterwards.
    """

    # =========================================================================
    # Identity Provider (Keycloak)
    # =========================================================================

    KEYCLOAK_SERVER_URL: str = Field(
        ...,
        description="Base URL of the Keycloak server (e.g., https://auth.example.com)",
        min_length=1,
    )

    KEYCLOAK_REALM_NAME: str = Field(
        ...,
        description="Application realm that users authenticate against",
        min_length=1,
    )

    KEYCLOAK_CLIENT_ID: str = Field(
        ...,
        description="Confidential client used for password and refresh grants",
        min_length=1,
    )

    KEYCLOAK_CLIENT_SECRET: str = Field(
        ...,
        description="Secret of the confidential client",
        min_length=1,
    )

    # =========================================================================
    # Administrative Credentials (master realm)
    # =========================================================================

    KEYCLOAK_ADMIN_USERNAME: str = Field(
        ...,
        description="Master realm administrator used for user management calls",
        min_length=1,
    )

    KEYCLOAK_ADMIN_PASSWORD: str = Field(
        ...,
        description="Password of the master realm administrator",
        min_length=1,
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the gateway server",
    )

    PORT: int = Field(
        default=3001,
        description="Port to bind the gateway server",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    PROVIDER_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout applied to every outbound provider call",
        gt=0,
        le=120,
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    ALLOWED_ORIGINS: str = Field(
        default=DEFAULT_ALLOWED_ORIGINS,
        description="Comma-separated list of origins allowed to call the gateway with credentials",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if none configured.
        """
        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def realm_base_url(self) -> str:
        """OIDC base URL of the application realm."""
        return f"{self.KEYCLOAK_SERVER_URL}/realms/{self.KEYCLOAK_REALM_NAME}/protocol/openid-connect"

    @property
    def token_endpoint(self) -> str:
        return f"{self.realm_base_url}/token"

    @property
    def userinfo_endpoint(self) -> str:
        return f"{self.realm_base_url}/userinfo"

    @property
    def admin_token_endpoint(self) -> str:
        """Token endpoint of the master realm, used for administrative grants."""
        return f"{self.KEYCLOAK_SERVER_URL}/realms/{ADMIN_REALM}/protocol/openid-connect/token"

    @property
    def admin_realm_base_url(self) -> str:
        """Admin REST API base URL for the application realm."""
        return f"{self.KEYCLOAK_SERVER_URL}/admin/realms/{self.KEYCLOAK_REALM_NAME}"

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("KEYCLOAK_SERVER_URL")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """
        Validate the provider URL scheme and strip any trailing slash.

        Raises:
            ValueError: If the URL is not http(s)
        """
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"KEYCLOAK_SERVER_URL must start with http:// or https://, got: {v}"
            )
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}, got: {v}")
        return v


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.
    """
    return Settings()
