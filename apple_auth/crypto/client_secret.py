"""Client assertion (``client_secret``) minting for the token endpoint."""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import jwt
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey

from apple_auth.crypto.keys import load_private_key
from apple_auth.crypto.types import SigningIdentity

PrivateKeyLoader = Callable[[str | Path], EllipticCurvePrivateKey]


class ClientAssertionMinter:
    """Creates ES256-signed assertions that stand in for a client secret."""

    def __init__(self, key_loader: PrivateKeyLoader = load_private_key) -> None:
        self._key_loader = key_loader

    def mint(self, identity: SigningIdentity) -> str:
        """Sign a short-lived assertion for ``identity``."""
        private_key = self._key_loader(identity.private_key_path)
        now = datetime.now(UTC)
        payload = {
            "iss": identity.issuer,
            "iat": now,
            "exp": now + identity.validity,
            "aud": identity.audience,
            "sub": identity.subject,
        }
        return jwt.encode(
            payload,
            private_key,
            algorithm=identity.algorithm,
            headers={"kid": identity.key_id},
        )
