"""
Provider Package
================

Outbound side of the gateway: calls to the Keycloak OpenID Connect
endpoints and the admin REST API.

Main Components:
----------------
- client.py: ProviderClient (userinfo, password/refresh grants) and ProviderError
- admin.py: AdminClient (fresh admin token, then admin-authenticated call)
"""

from .admin import AdminClient
from .client import ProviderClient, ProviderError

__all__ = ["AdminClient", "ProviderClient", "ProviderError"]
