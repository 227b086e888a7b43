"""Application settings loaded from environment variables."""

from datetime import timedelta
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apple_auth.crypto.types import CLIENT_ASSERTION_ALG, SigningIdentity

MAX_ASSERTION_DAYS = 182  # 15777000 seconds, rounded down
APPLE_ISSUER = "https://appleid.apple.com"
TOKEN_URL_DEFAULT = "https://appleid.apple.com/auth/token"
KEYS_URL_DEFAULT = "https://appleid.apple.com/auth/keys"
HTTP_TIMEOUT_DEFAULT = 10.0


class AppleAuthSettings(BaseSettings):
    """Sign in with Apple credentials and endpoints.

    The signing fields have no defaults: a missing value fails at startup
    with a ``pydantic.ValidationError``.
    """

    model_config = SettingsConfigDict(env_prefix="APPLE_AUTH_", frozen=True)

    alg: str
    key_id: str
    team_id: str
    expiration_days: int
    audience: str
    app_bundle_id: str
    private_key_path: str

    resource_dir: str = "."
    token_url: str = TOKEN_URL_DEFAULT
    keys_url: str = KEYS_URL_DEFAULT
    http_timeout: float = HTTP_TIMEOUT_DEFAULT
    jwks_cache_ttl: int = 0
    id_token_issuer: str | None = APPLE_ISSUER
    verify_audience: bool = True

    @field_validator("alg")
    @classmethod
    def _require_es256(cls, value: str) -> str:
        if value != CLIENT_ASSERTION_ALG:
            raise ValueError(
                f"client assertions must be signed with {CLIENT_ASSERTION_ALG}"
            )
        return value

    @field_validator("expiration_days")
    @classmethod
    def _bound_expiration(cls, value: int) -> int:
        if not 0 < value <= MAX_ASSERTION_DAYS:
            raise ValueError(
                f"expiration_days must be between 1 and {MAX_ASSERTION_DAYS}"
            )
        return value

    def resolve_private_key_path(self) -> Path:
        """Resolve the key path against ``resource_dir`` when relative."""
        path = Path(self.private_key_path)
        if path.is_absolute():
            return path
        return Path(self.resource_dir) / path

    def signing_identity(self) -> SigningIdentity:
        """Build the immutable identity used to mint client assertions."""
        return SigningIdentity(
            issuer=self.team_id,
            subject=self.app_bundle_id,
            audience=self.audience,
            key_id=self.key_id,
            algorithm=self.alg,
            validity=timedelta(days=self.expiration_days),
            private_key_path=str(self.resolve_private_key_path()),
        )
