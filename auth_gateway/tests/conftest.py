"""
Shared fixtures for gateway tests.

The identity provider is replaced by an httpx.MockTransport whose handler
records every outbound request, so tests can assert both the gateway's
responses and exactly which provider calls were (or were not) made.
"""

from typing import Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from auth_gateway.config import Settings
from auth_gateway.main import create_app

PROVIDER_URL = "http://keycloak.test"
REALM = "app-realm"

TOKEN_PATH = f"/realms/{REALM}/protocol/openid-connect/token"
USERINFO_PATH = f"/realms/{REALM}/protocol/openid-connect/userinfo"
ADMIN_TOKEN_PATH = "/realms/master/protocol/openid-connect/token"
ADMIN_USERS_PATH = f"/admin/realms/{REALM}/users"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeProvider:
    """Route table of canned provider responses plus a request log."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, handler) -> None:
        """Register a handler, or a static httpx.Response, for method/path."""
        if isinstance(handler, httpx.Response):
            template = handler
            # A fresh Response per request; httpx binds each one to its request
            handler = lambda request: httpx.Response(  # noqa: E731
                template.status_code, headers=template.headers, content=template.content
            )
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not_found"})
        return handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings for testing"""
    return Settings(
        _env_file=None,
        KEYCLOAK_SERVER_URL=PROVIDER_URL,
        KEYCLOAK_REALM_NAME=REALM,
        KEYCLOAK_CLIENT_ID="gateway-client",
        KEYCLOAK_CLIENT_SECRET="gateway-secret",
        KEYCLOAK_ADMIN_USERNAME="admin",
        KEYCLOAK_ADMIN_PASSWORD="admin-password",
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def app(mock_settings, provider):
    """Create test FastAPI application wired to the fake provider"""
    return create_app(settings=mock_settings, transport=httpx.MockTransport(provider))


@pytest.fixture
def client(app):
    """Create test client (runs the lifespan so the provider client exists)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token_quadruple() -> Dict[str, object]:
    return {
        "access_token": "access-abc",
        "refresh_token": "refresh-def",
        "expires_in": 300,
        "token_type": "Bearer",
    }
