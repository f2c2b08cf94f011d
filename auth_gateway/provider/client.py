"""
Identity Provider Client
========================

Thin async wrapper around the Keycloak OpenID Connect endpoints.

Every method issues exactly one outbound request over the application-wide
httpx.AsyncClient. Non-2xx answers, timeouts and transport failures are
raised as ProviderError so that route handlers can map them onto the
gateway's error taxonomy.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import ADMIN_CLIENT_ID, Settings

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}
LOGIN_SCOPE = "openid profile email"


class ProviderError(Exception):
    """
    Raised when a provider call fails.

    Attributes:
        status_code: Provider HTTP status, or None for timeouts/network errors
        details: Parsed provider error body, raw text, or an error message
    """

    def __init__(self, status_code: Optional[int], details: Any):
        self.status_code = status_code
        self.details = details
        super().__init__(f"Provider request failed ({status_code}): {details}")


def response_details(response: httpx.Response) -> Any:
    """Return the JSON body of a response, falling back to its text."""
    if not response.content:
        return response.reason_phrase or f"HTTP {response.status_code}"
    try:
        return response.json()
    except ValueError:
        return response.text


class ProviderClient:
    """
    OIDC operations against the configured realm.

    Args:
        http_client: Shared AsyncClient (created in the app lifespan)
        settings: Frozen application settings
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings):
        self._http = http_client
        self._settings = settings

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request without checking the response status.

        Raises:
            ProviderError: On timeout or transport failure
        """
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Provider request timed out: {method} {url}")
            raise ProviderError(None, f"Provider request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Provider request failed: {method} {url}: {e}")
            raise ProviderError(None, str(e) or type(e).__name__) from e

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        response = await self.request(method, url, **kwargs)
        if not response.is_success:
            raise ProviderError(response.status_code, response_details(response))
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(response.status_code, "Provider returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise ProviderError(response.status_code, "Provider returned an unexpected payload")
        return data

    async def userinfo(self, token: str) -> Dict[str, Any]:
        """Fetch the user-info claims of a bearer token."""
        return await self._request_json(
            "GET",
            self._settings.userinfo_endpoint,
            headers={"Authorization": f"Bearer {token}"},
        )

    async def password_grant(self, username: str, password: str) -> Dict[str, Any]:
        """Exchange user credentials for tokens in the application realm."""
        payload = {
            "client_id": self._settings.KEYCLOAK_CLIENT_ID,
            "client_secret": self._settings.KEYCLOAK_CLIENT_SECRET,
            "username": username,
            "password": password,
            "grant_type": "password",
            "scope": LOGIN_SCOPE,
        }
        return await self._request_json(
            "POST", self._settings.token_endpoint, data=payload, headers=FORM_HEADERS
        )

    async def refresh_grant(self, refresh_token: str) -> Dict[str, Any]:
        payload = {
            "client_id": self._settings.KEYCLOAK_CLIENT_ID,
            "client_secret": self._settings.KEYCLOAK_CLIENT_SECRET,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return await self._request_json(
            "POST", self._settings.token_endpoint, data=payload, headers=FORM_HEADERS
        )

    async def admin_password_grant(self, username: str, password: str) -> Dict[str, Any]:
        """Obtain an administrative token from the master realm."""
        payload = {
            "grant_type": "password",
            "client_id": ADMIN_CLIENT_ID,
            "username": username,
            "password": password,
        }
        return await self._request_json(
            "POST", self._settings.admin_token_endpoint, data=payload, headers=FORM_HEADERS
        )
