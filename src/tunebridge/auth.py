"""Credential provider: resolves bearer tokens for the source and destination roles."""

import logging

import httpx

from tunebridge.config import APIConfig
from tunebridge.exceptions import AuthError
from tunebridge.models.spotify import TokenResponse

logger = logging.getLogger(__name__)


class CredentialProvider:
    """Resolves access tokens, minting fresh ones from refresh tokens.

    Never stores tokens. Used once per role before a job touches the
    provider.
    """

    def __init__(
        self,
        client_id: str | None,
        http: httpx.AsyncClient | None = None,
        config: APIConfig | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            client_id: OAuth client id used for the refresh grant. Without it
                refresh is impossible and only ready access tokens resolve.
            http: Optional httpx client. A short-lived one is created per
                refresh if not provided.
            config: Optional API configuration. Uses defaults if not provided.
        """
        self._client_id = client_id
        self._http = http
        self._config = config or APIConfig()

    async def ensure_token(
        self, current: str | None, refresh: str | None = None
    ) -> str | None:
        """Return a usable access token, or None if none can be obtained.

        Args:
            current: Access token supplied by the caller, if any.
            refresh: Refresh token used when ``current`` is missing.

        Returns:
            ``current`` when set, otherwise a freshly minted token, otherwise None.
        """
        if current:
            return current
        if not refresh or not self._client_id:
            return None
        try:
            tokens = await self.refresh_access_token(refresh)
        except AuthError as e:
            logger.warning("Token refresh failed: %s", e)
            return None
        return tokens.access_token

    async def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a new access token.

        Raises:
            AuthError: If no client id is configured or the exchange fails.
        """
        if not self._client_id:
            raise AuthError("Missing Spotify client id for token refresh")

        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self._client_id,
        }
        url = f"{self._config.accounts_url}/api/token"

        try:
            if self._http is not None:
                response = await self._http.post(url, data=data)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as http:
                    response = await http.post(url, data=data)
        except httpx.HTTPError as e:
            raise AuthError(f"Spotify token refresh failed: {e}") from e

        if not response.is_success:
            raise AuthError(
                f"Spotify token refresh failed: {response.status_code} "
                f"{response.reason_phrase} {response.text[:200]}".rstrip()
            )
        logger.debug("Refreshed Spotify access token")
        return TokenResponse.model_validate(response.json())
