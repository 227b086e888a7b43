"""Identity token verification against the provider's key set."""

import jwt
from jwt.types import Options
from loguru import logger
from pydantic import ValidationError

from apple_auth.core.errors import SignatureVerificationError
from apple_auth.crypto.jwks import JWKSKeyResolver, KeySetFetcher
from apple_auth.crypto.token_parser import decompose
from apple_auth.crypto.types import VerifiedClaims

ID_TOKEN_ALGORITHMS = ["RS256"]
REQUIRED_CLAIMS = ["iss", "sub", "aud", "iat", "exp"]


class IdentityTokenVerifier:
    """Verifies RS256 identity tokens and returns their claims.

    Issuer and audience are only checked when configured; signature,
    ``exp`` and ``nbf`` (when present) are always checked.
    """

    def __init__(
        self,
        resolver: JWKSKeyResolver,
        *,
        issuer: str | None = None,
        audience: str | None = None,
        leeway: int = 0,
    ) -> None:
        self._resolver = resolver
        self._issuer = issuer
        self._audience = audience
        self._leeway = leeway

    def verify(self, token: str, fetch_key_set: KeySetFetcher) -> VerifiedClaims:
        """Verify ``token`` and return its claims.

        The header is decoded only to pick the key; the unmodified compact
        token is what gets verified.
        """
        parsed = decompose(token)
        public_key = self._resolver.resolve_public_key(parsed.kid, fetch_key_set)

        opts: Options = {"require": REQUIRED_CLAIMS}
        if self._audience is None:
            opts["verify_aud"] = False
        if self._issuer is None:
            opts["verify_iss"] = False
        try:
            raw = jwt.decode(
                token,
                public_key,
                algorithms=ID_TOKEN_ALGORITHMS,
                issuer=self._issuer,
                audience=self._audience,
                leeway=self._leeway,
                options=opts,
            )
            claims = VerifiedClaims.model_validate(raw)
        except jwt.PyJWTError as exc:
            logger.warning(f"Identity token rejected: {exc}")
            raise SignatureVerificationError(str(exc)) from exc
        except ValidationError as exc:
            logger.warning("Identity token claims have unexpected types")
            raise SignatureVerificationError("invalid identity token claims") from exc

        logger.debug(f"Identity token verified for sub {claims.sub}")
        return claims
