"""FastAPI dependency injection for the auth service."""

from fastapi import Request

from apple_auth.oidc.auth_service import AppleAuthService


def get_auth_service(request: Request) -> AppleAuthService:
    """Return the service wired by the application factory."""
    return request.app.state.auth_service
