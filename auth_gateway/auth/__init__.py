"""
Authentication Package

This package holds the gateway's inbound surface: the /api/auth routes that
translate client requests into Keycloak grant, userinfo and admin calls.

Modules:
- routes: Public authentication endpoints (/api/auth/login, /api/auth/verify, etc.)
- utils: Bearer header parsing and provider response reshaping
"""

from .routes import auth_router

__all__ = [
    "auth_router",
]
