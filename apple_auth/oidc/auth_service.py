"""Sign in with Apple flows: verify the identity token, then exchange.

See https://developer.apple.com/documentation/sign_in_with_apple/generate_and_validate_tokens
"""

from loguru import logger

from apple_auth.core.settings import AppleAuthSettings
from apple_auth.crypto.client_secret import ClientAssertionMinter
from apple_auth.crypto.id_token import IdentityTokenVerifier
from apple_auth.crypto.keys import CachedPrivateKeyLoader
from apple_auth.crypto.jwks import JWKSKeyResolver
from apple_auth.crypto.types import SigningIdentity, VerifiedClaims
from apple_auth.oidc.client import AppleClient
from apple_auth.oidc.types import (
    AccessToken,
    GetAccessTokenRequest,
    GetTokensRequest,
    Tokens,
)


class AppleAuthService:
    """Runs both token exchanges; every failure propagates to the caller."""

    def __init__(
        self,
        identity: SigningIdentity,
        client: AppleClient,
        verifier: IdentityTokenVerifier,
        minter: ClientAssertionMinter,
    ) -> None:
        self._identity = identity
        self._client = client
        self._verifier = verifier
        self._minter = minter

    @classmethod
    def from_settings(
        cls, settings: AppleAuthSettings, client: AppleClient | None = None
    ) -> "AppleAuthService":
        """Wire the service from settings with a cached private key."""
        audience = settings.app_bundle_id if settings.verify_audience else None
        verifier = IdentityTokenVerifier(
            JWKSKeyResolver(cache_ttl=settings.jwks_cache_ttl),
            issuer=settings.id_token_issuer,
            audience=audience,
        )
        return cls(
            identity=settings.signing_identity(),
            client=client or AppleClient(settings),
            verifier=verifier,
            minter=ClientAssertionMinter(key_loader=CachedPrivateKeyLoader()),
        )

    def verify_identity_token(self, identity_token: str) -> VerifiedClaims:
        return self._verifier.verify(identity_token, self._client.fetch_key_set)

    def get_tokens(self, request: GetTokensRequest) -> Tokens:
        """Exchange an authorization code for access and refresh tokens."""
        claims = self.verify_identity_token(request.identity_token)
        client_secret = self._minter.mint(self._identity)

        response = self._client.exchange_authorization_code(
            self._identity.subject,
            client_secret,
            request.authorization_code,
            redirect_uri=request.redirect_uri,
        )
        logger.info(f"Exchanged authorization code for sub {claims.sub}")
        return Tokens(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
        )

    def get_access_token(self, request: GetAccessTokenRequest) -> AccessToken:
        """Exchange a refresh token for a fresh access token."""
        claims = self.verify_identity_token(request.identity_token)
        client_secret = self._minter.mint(self._identity)

        response = self._client.exchange_refresh_token(
            self._identity.subject, client_secret, request.refresh_token
        )
        logger.info(f"Refreshed access token for sub {claims.sub}")
        return AccessToken(access_token=response.access_token)
