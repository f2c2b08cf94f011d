"""
Keycloak Auth Gateway
=====================

A thin HTTP gateway that forwards authentication operations (login, token
refresh, registration, session lookup and token verification) to a Keycloak
realm's OpenID Connect and admin REST endpoints.

The gateway keeps no state of its own: every operation translates the
inbound request into one or two provider calls and reshapes the result.

Packages:
    - auth: Inbound /api/auth routes and request/response reshaping
    - provider: Outbound Keycloak OIDC and admin clients

Modules:
    - config: Environment-sourced settings
    - errors: Gateway error taxonomy
    - models: Request/response models
    - main: Application factory and entry point
"""

__version__ = "1.0.0"
