"""Resolution of the provider's public signing keys by key id."""

import threading
import time
from collections.abc import Callable

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from loguru import logger

from apple_auth.core.errors import KeyProviderError, UnknownKeyIdError
from apple_auth.crypto.keys import jwk_to_public_key
from apple_auth.crypto.types import JWKEntry, JWKSet

KeySetFetcher = Callable[[], JWKSet | None]


def find_entry(key_set: JWKSet, kid: str | None) -> JWKEntry:
    """Return the first entry whose kid matches, in published order."""
    for entry in key_set.keys:
        if entry.kid == kid:
            return entry
    raise UnknownKeyIdError(kid)


class JWKSKeyResolver:
    """Resolves a key id to an RSA public key from a freshly fetched key set.

    With ``cache_ttl`` above zero, reconstructed keys are kept per kid for
    that many seconds and a hit skips the fetch entirely. Keep the TTL well
    under the provider's rotation window.
    """

    def __init__(self, cache_ttl: int = 0) -> None:
        self._cache_ttl = cache_ttl
        self._cache: dict[str, tuple[RSAPublicKey, float]] = {}
        self._lock = threading.Lock()

    def resolve_public_key(
        self, kid: str | None, fetch_key_set: KeySetFetcher
    ) -> RSAPublicKey:
        """Fetch the key set and rebuild the key published under ``kid``."""
        cached = self._cached(kid)
        if cached is not None:
            return cached

        key_set = fetch_key_set()
        if key_set is None:
            raise KeyProviderError("provider key set is unavailable")

        try:
            entry = find_entry(key_set, kid)
        except UnknownKeyIdError:
            logger.warning(f"No published key for kid {kid!r}")
            raise

        public_key = jwk_to_public_key(entry)
        logger.debug(f"Resolved public key for kid {kid!r}")
        self._store(entry.kid, public_key)
        return public_key

    def invalidate(self) -> None:
        """Forget all cached keys."""
        with self._lock:
            self._cache.clear()

    def _cached(self, kid: str | None) -> RSAPublicKey | None:
        if self._cache_ttl <= 0 or kid is None:
            return None
        with self._lock:
            hit = self._cache.get(kid)
            if hit is None:
                return None
            public_key, stored_at = hit
            if time.monotonic() - stored_at >= self._cache_ttl:
                del self._cache[kid]
                return None
            return public_key

    def _store(self, kid: str, public_key: RSAPublicKey) -> None:
        if self._cache_ttl <= 0:
            return
        with self._lock:
            self._cache[kid] = (public_key, time.monotonic())
