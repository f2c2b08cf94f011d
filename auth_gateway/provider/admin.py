"""
Administrative client for the Keycloak admin REST API.

Each call fetches a fresh administrative token from the master realm and
only then issues the admin request with that token. The token lives in the
scope of a single call; nothing is cached between requests.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import Settings
from .client import ProviderClient, ProviderError

logger = logging.getLogger(__name__)


class AdminClient:
    """
    Perform admin-authenticated calls against the application realm.

    Args:
        provider: ProviderClient used for both the token grant and the call
        settings: Frozen application settings (admin credentials, realm)
    """

    def __init__(self, provider: ProviderClient, settings: Settings):
        self._provider = provider
        self._settings = settings

    async def _fetch_admin_token(self) -> str:
        token_data = await self._provider.admin_password_grant(
            self._settings.KEYCLOAK_ADMIN_USERNAME,
            self._settings.KEYCLOAK_ADMIN_PASSWORD,
        )
        admin_token = token_data.get("access_token")
        if not admin_token:
            raise ProviderError(None, "Administrative token response missing access_token")
        return admin_token

    async def call(self, method: str, path: str, json: Optional[Any] = None) -> httpx.Response:
        """
        Issue an admin call relative to /admin/realms/{realm}.

        The response is returned without a status check so callers can
        apply their own success rule.

        Args:
            method: HTTP method
            path: Path below the realm admin base URL, starting with "/"
            json: Optional JSON body

        Returns:
            The provider's response to the admin call

        Raises:
            ProviderError: If the token grant fails, or on timeout/transport errors
        """
        admin_token = await self._fetch_admin_token()

        url = f"{self._settings.admin_realm_base_url}{path}"
        logger.debug(f"Admin call {method} {path}")

        kwargs: dict = {"headers": {"Authorization": f"Bearer {admin_token}"}}
        if json is not None:
            kwargs["json"] = json
        return await self._provider.request(method, url, **kwargs)
