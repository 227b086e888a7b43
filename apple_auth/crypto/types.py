"""Type definitions for compact tokens, key sets, and signing identity."""

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

CLIENT_ASSERTION_ALG = "ES256"


class ParsedToken(BaseModel):
    """A compact token split into decoded header, payload, and raw signature.

    Nothing here is trusted; it only selects the verification key.
    """

    model_config = ConfigDict(frozen=True)

    header: dict[str, Any]
    payload: dict[str, Any]
    signature: str

    @property
    def kid(self) -> str | None:
        kid = self.header.get("kid")
        return kid if isinstance(kid, str) else None


class JWKEntry(BaseModel):
    """Single JWK entry in the provider's key set."""

    model_config = ConfigDict(extra="allow", frozen=True)

    kty: str
    kid: str
    n: str = ""
    e: str = ""
    use: str | None = None
    alg: str | None = None


class JWKSet(BaseModel):
    """JSON Web Key Set as published by the provider."""

    keys: list[JWKEntry]


class SigningIdentity(BaseModel):
    """The service's own assertion-signing identity."""

    model_config = ConfigDict(frozen=True)

    issuer: str
    subject: str
    audience: str
    key_id: str
    algorithm: str = CLIENT_ASSERTION_ALG
    validity: timedelta
    private_key_path: str

    @field_validator("algorithm")
    @classmethod
    def _require_es256(cls, value: str) -> str:
        if value != CLIENT_ASSERTION_ALG:
            raise ValueError(f"unsupported assertion algorithm: {value}")
        return value


class VerifiedClaims(BaseModel):
    """Claims of an identity token whose signature has been verified."""

    model_config = ConfigDict(extra="allow", frozen=True)

    iss: str
    sub: str
    aud: str | list[str]
    iat: int | float
    exp: int | float
    email: str | None = None
    email_verified: bool | str | None = None
    nonce: str | None = None
