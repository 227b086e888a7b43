"""HTTP client for the provider's key set and token endpoints."""

import httpx
from loguru import logger
from pydantic import ValidationError

from apple_auth.core.errors import UpstreamAuthError, UpstreamServiceError
from apple_auth.core.settings import AppleAuthSettings
from apple_auth.crypto.types import JWKSet
from apple_auth.oidc.types import ErrorResponse, TokenResponse

HTTP_CLIENT_ERROR_MIN = 400
HTTP_SERVER_ERROR_MIN = 500


class AppleClient:
    """Talks to ``appleid.apple.com``; timeouts are enforced here."""

    def __init__(
        self,
        settings: AppleAuthSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._token_url = settings.token_url
        self._keys_url = settings.keys_url
        self._http = httpx.Client(timeout=settings.http_timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def fetch_key_set(self) -> JWKSet | None:
        """GET the published key set; ``None`` on any failure."""
        try:
            response = self._http.get(self._keys_url)
            response.raise_for_status()
            return JWKSet.model_validate(response.json())
        except httpx.HTTPError as exc:
            logger.warning(f"Key set fetch from {self._keys_url} failed: {exc}")
        except (ValueError, ValidationError) as exc:
            logger.warning(f"Key set from {self._keys_url} is malformed: {exc}")
        return None

    def exchange_authorization_code(
        self,
        client_id: str,
        client_assertion: str,
        code: str,
        redirect_uri: str | None = None,
    ) -> TokenResponse:
        """Exchange an authorization code (grant_type=authorization_code)."""
        form = {
            "client_id": client_id,
            "client_secret": client_assertion,
            "code": code,
            "grant_type": "authorization_code",
        }
        if redirect_uri is not None:
            form["redirect_uri"] = redirect_uri
        return self._post_token(form)

    def exchange_refresh_token(
        self, client_id: str, client_assertion: str, refresh_token: str
    ) -> TokenResponse:
        """Exchange a refresh token (grant_type=refresh_token)."""
        form = {
            "client_id": client_id,
            "client_secret": client_assertion,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return self._post_token(form)

    def _post_token(self, form: dict[str, str]) -> TokenResponse:
        grant_type = form["grant_type"]
        try:
            response = self._http.post(self._token_url, data=form)
        except httpx.HTTPError as exc:
            logger.warning(f"Token endpoint unreachable ({grant_type}): {exc}")
            raise UpstreamServiceError(str(exc)) from exc

        status = response.status_code
        if HTTP_CLIENT_ERROR_MIN <= status < HTTP_SERVER_ERROR_MIN:
            error = _parse_error(response)
            logger.warning(f"Token endpoint rejected {grant_type}: {error.error}")
            raise UpstreamAuthError(error.error, status)
        if status >= HTTP_SERVER_ERROR_MIN:
            logger.warning(f"Token endpoint failed ({grant_type}): HTTP {status}")
            raise UpstreamServiceError(f"token endpoint returned HTTP {status}")

        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamServiceError("token endpoint returned a malformed body") from exc


def _parse_error(response: httpx.Response) -> ErrorResponse:
    try:
        return ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return ErrorResponse()
