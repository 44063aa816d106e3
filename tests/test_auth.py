"""Tests for the credential provider."""

from urllib.parse import parse_qs

import httpx
import pytest
from tunebridge import APIConfig, AuthError, CredentialProvider

ACCOUNTS = "https://accounts.test"


def make_provider(
    transport: httpx.MockTransport | None = None, client_id: str | None = "client-1"
) -> CredentialProvider:
    http = httpx.AsyncClient(transport=transport) if transport else None
    return CredentialProvider(
        client_id, http=http, config=APIConfig(accounts_url=ACCOUNTS)
    )


def token_endpoint(
    status: int = 200,
) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Mock accounts service recording the refresh requests it receives."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if status != 200:
            return httpx.Response(status, json={"error": "invalid_grant"})
        return httpx.Response(
            200,
            json={"access_token": "fresh", "token_type": "Bearer", "expires_in": 3600},
        )

    return httpx.MockTransport(handler), seen


class TestEnsureToken:
    """Tests for CredentialProvider.ensure_token."""

    @pytest.mark.asyncio
    async def test_returns_current_token_without_refreshing(self) -> None:
        transport, seen = token_endpoint()

        token = await make_provider(transport).ensure_token("current", "refresh")

        assert token == "current"
        assert seen == []

    @pytest.mark.asyncio
    async def test_refreshes_when_access_token_missing(self) -> None:
        transport, seen = token_endpoint()

        token = await make_provider(transport).ensure_token(None, "refresh-1")

        assert token == "fresh"
        assert str(seen[0].url) == f"{ACCOUNTS}/api/token"
        form = parse_qs(seen[0].content.decode())
        assert form == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["refresh-1"],
            "client_id": ["client-1"],
        }

    @pytest.mark.asyncio
    async def test_none_without_refresh_token(self) -> None:
        assert await make_provider().ensure_token(None, None) is None

    @pytest.mark.asyncio
    async def test_none_without_client_id(self) -> None:
        transport, seen = token_endpoint()

        token = await make_provider(transport, client_id=None).ensure_token(
            None, "refresh-1"
        )

        assert token is None
        assert seen == []

    @pytest.mark.asyncio
    async def test_none_when_refresh_rejected(self) -> None:
        transport, _seen = token_endpoint(status=400)

        assert await make_provider(transport).ensure_token("", "bad") is None


class TestRefreshAccessToken:
    """Tests for CredentialProvider.refresh_access_token."""

    @pytest.mark.asyncio
    async def test_rejected_refresh_raises_auth_error(self) -> None:
        transport, _seen = token_endpoint(status=400)

        with pytest.raises(AuthError, match="400"):
            await make_provider(transport).refresh_access_token("bad")

    @pytest.mark.asyncio
    async def test_network_error_raises_auth_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(AuthError):
            await make_provider(httpx.MockTransport(handler)).refresh_access_token("r")

    @pytest.mark.asyncio
    async def test_missing_client_id_raises_auth_error(self) -> None:
        with pytest.raises(AuthError, match="client id"):
            await make_provider(client_id=None).refresh_access_token("r")
