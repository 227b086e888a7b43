"""Sign in with Apple token endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from apple_auth.api.deps import get_auth_service
from apple_auth.oidc.auth_service import AppleAuthService
from apple_auth.oidc.types import (
    AccessToken,
    GetAccessTokenRequest,
    GetTokensRequest,
    Tokens,
)

router = APIRouter(prefix="/auth/apple")


@router.post("/tokens")
def get_tokens(
    body: GetTokensRequest,
    service: Annotated[AppleAuthService, Depends(get_auth_service)],
) -> Tokens:
    """POST /auth/apple/tokens -- exchange an authorization code."""
    return service.get_tokens(body)


@router.post("/access-token")
def get_access_token(
    body: GetAccessTokenRequest,
    service: Annotated[AppleAuthService, Depends(get_auth_service)],
) -> AccessToken:
    """POST /auth/apple/access-token -- exchange a refresh token."""
    return service.get_access_token(body)
