"""Typed failures raised by the Sign in with Apple core."""


class AppleAuthError(Exception):
    """Base class for every failure surfaced by this package."""


class MalformedTokenError(AppleAuthError):
    """A compact token is not three base64url JSON segments."""


class KeyLoadError(AppleAuthError):
    """The service's own private signing key is unavailable or unusable."""


class KeyProviderError(AppleAuthError):
    """The provider's published key set could not be fetched."""


class UnknownKeyIdError(AppleAuthError):
    """No key set entry matches the requested key id."""

    def __init__(self, kid: str | None) -> None:
        super().__init__(f"Cannot find kid: {kid}")
        self.kid = kid


class KeyReconstructionError(AppleAuthError):
    """A key set entry has an unsupported family or invalid numbers."""


class SignatureVerificationError(AppleAuthError):
    """Signature, expiration, or timestamp checks failed."""


class UpstreamAuthError(AppleAuthError):
    """The provider rejected a token exchange request."""

    def __init__(self, error: str, status_code: int) -> None:
        super().__init__(error)
        self.error = error
        self.status_code = status_code


class UpstreamServiceError(AppleAuthError):
    """The token endpoint was unreachable or failed server-side."""
