"""Request and response shapes for the Sign in with Apple flows."""

from pydantic import BaseModel, ConfigDict


class TokenResponse(BaseModel):
    """Successful response from the provider's token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned by the token endpoint (RFC 6749 section 5.2)."""

    error: str = "invalid_request"
    error_description: str | None = None


class GetTokensRequest(BaseModel):
    """Identity token plus the authorization code from the app."""

    identity_token: str
    authorization_code: str
    redirect_uri: str | None = None


class GetAccessTokenRequest(BaseModel):
    """Identity token plus a previously issued refresh token."""

    identity_token: str
    refresh_token: str


class Tokens(BaseModel):
    """Tokens handed back after an authorization code exchange."""

    access_token: str
    refresh_token: str | None = None


class AccessToken(BaseModel):
    """Access token handed back after a refresh token exchange."""

    access_token: str
