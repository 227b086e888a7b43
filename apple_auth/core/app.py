"""FastAPI application factory for the Sign in with Apple service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from apple_auth.api.routes_auth import router as auth_router
from apple_auth.core.errors import (
    AppleAuthError,
    KeyProviderError,
    MalformedTokenError,
    SignatureVerificationError,
    UnknownKeyIdError,
    UpstreamAuthError,
    UpstreamServiceError,
)
from apple_auth.core.settings import AppleAuthSettings
from apple_auth.oidc.auth_service import AppleAuthService
from apple_auth.oidc.client import AppleClient

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_INTERNAL_ERROR = 500
HTTP_BAD_GATEWAY = 502

_INVALID_TOKEN = (MalformedTokenError, UnknownKeyIdError, SignatureVerificationError)
_UPSTREAM_DOWN = (KeyProviderError, UpstreamServiceError)


def error_response(exc: AppleAuthError) -> JSONResponse:
    """Map a core failure onto an OAuth-style error response."""
    if isinstance(exc, UpstreamAuthError):
        return JSONResponse({"error": exc.error}, status_code=HTTP_BAD_REQUEST)
    if isinstance(exc, _INVALID_TOKEN):
        return JSONResponse({"error": "invalid_token"}, status_code=HTTP_UNAUTHORIZED)
    if isinstance(exc, _UPSTREAM_DOWN):
        return JSONResponse(
            {"error": "upstream_unavailable"}, status_code=HTTP_BAD_GATEWAY
        )
    return JSONResponse({"error": "server_error"}, status_code=HTTP_INTERNAL_ERROR)


def create_app(
    settings: AppleAuthSettings | None = None,
    service: AppleAuthService | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""
    client: AppleClient | None = None
    if service is None:
        settings = settings or AppleAuthSettings()
        client = AppleClient(settings)
        service = AppleAuthService.from_settings(settings, client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        if client is not None:
            client.close()

    app = FastAPI(
        title="Sign in with Apple",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.auth_service = service

    @app.exception_handler(AppleAuthError)
    async def _handle_auth_error(_request: Request, exc: AppleAuthError) -> JSONResponse:
        return error_response(exc)

    app.include_router(auth_router)

    return app
