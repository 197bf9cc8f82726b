"""API package for the Mandi multilingual marketplace.

This FastAPI application provides:
- Account registration for vendors and buyers (POST /api/auth/register)
- Login and token refresh (POST /api/auth/login, /api/auth/refresh)
- Language preference updates (PUT /api/auth/language)
"""

from mandi_api.main import create_app

__all__ = ["create_app"]
