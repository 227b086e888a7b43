"""Shared test fixtures for apple_auth."""

import base64
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from apple_auth.core.settings import APPLE_ISSUER, AppleAuthSettings
from apple_auth.crypto.types import JWKEntry, JWKSet

KID = "W6WcOKB"
BUNDLE_ID = "com.example.app"
TEAM_ID = "TEAM123456"
ASSERTION_KID = "ABC123DEFG"
USER_SUB = "001234.abcdef0123456789.1234"


def int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def jwk_for(key: RSAPrivateKey, kid: str) -> JWKEntry:
    numbers = key.public_key().public_numbers()
    return JWKEntry(
        kty="RSA",
        kid=kid,
        use="sig",
        alg="RS256",
        n=int_to_base64url(numbers.n),
        e=int_to_base64url(numbers.e),
    )


@pytest.fixture(scope="session")
def rsa_key() -> RSAPrivateKey:
    """The provider's identity token signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key() -> RSAPrivateKey:
    """A key the provider never published."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key() -> EllipticCurvePrivateKey:
    """The service's client assertion key (the .p8 contents)."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def p8_path(tmp_path: Path, ec_key: EllipticCurvePrivateKey) -> Path:
    """Write the EC key as a PKCS#8 PEM file."""
    path = tmp_path / "AuthKey_ABC123DEFG.p8"
    path.write_bytes(
        ec_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def key_set(rsa_key: RSAPrivateKey, other_rsa_key: RSAPrivateKey) -> JWKSet:
    """Published key set containing ``rsa_key`` under ``KID``."""
    return JWKSet(keys=[jwk_for(other_rsa_key, "unrelated"), jwk_for(rsa_key, KID)])


@pytest.fixture
def make_id_token(rsa_key: RSAPrivateKey) -> Callable[..., str]:
    """Build an RS256 identity token as the provider would."""

    def _make(
        *,
        key: RSAPrivateKey | None = None,
        kid: str | None = KID,
        ttl: timedelta = timedelta(minutes=10),
        **overrides: Any,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "iss": APPLE_ISSUER,
            "sub": USER_SUB,
            "aud": BUNDLE_ID,
            "iat": now,
            "exp": now + ttl,
            "email": "user@privaterelay.appleid.com",
            "email_verified": True,
        }
        payload.update(overrides)
        headers = {"kid": kid} if kid is not None else None
        return jwt.encode(
            payload, key or rsa_key, algorithm="RS256", headers=headers
        )

    return _make


@pytest.fixture
def settings_env(monkeypatch: pytest.MonkeyPatch, p8_path: Path) -> None:
    """Set every required APPLE_AUTH_ variable."""
    monkeypatch.setenv("APPLE_AUTH_ALG", "ES256")
    monkeypatch.setenv("APPLE_AUTH_KEY_ID", ASSERTION_KID)
    monkeypatch.setenv("APPLE_AUTH_TEAM_ID", TEAM_ID)
    monkeypatch.setenv("APPLE_AUTH_EXPIRATION_DAYS", "30")
    monkeypatch.setenv("APPLE_AUTH_AUDIENCE", APPLE_ISSUER)
    monkeypatch.setenv("APPLE_AUTH_APP_BUNDLE_ID", BUNDLE_ID)
    monkeypatch.setenv("APPLE_AUTH_RESOURCE_DIR", str(p8_path.parent))
    monkeypatch.setenv("APPLE_AUTH_PRIVATE_KEY_PATH", p8_path.name)


@pytest.fixture
def settings(settings_env: None) -> AppleAuthSettings:
    return AppleAuthSettings()


@pytest.fixture
def jwk_factory() -> Callable[[RSAPrivateKey, str], JWKEntry]:
    return jwk_for
