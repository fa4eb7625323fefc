"""Tests for the Google OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from codegen_share.auth.oauth.google import GoogleOAuthClient
from codegen_share.config.oauth import GoogleOAuthSettings
from codegen_share.exceptions import OAuthError


def make_settings() -> GoogleOAuthSettings:
    return GoogleOAuthSettings(
        client_id="client-id",
        client_secret="client-secret",
        base_url="https://codegen.example.com",
    )


def google_handler(
    token_status: int = 200, profile: dict[str, object] | None = None
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            form = parse_qs(request.content.decode())
            assert form["code"] == ["auth-code"]
            assert form["grant_type"] == ["authorization_code"]
            return httpx.Response(200, json={"access_token": "google-access"})
        if request.url.path == "/v1/userinfo":
            assert request.headers["authorization"] == "Bearer google-access"
            return httpx.Response(
                200,
                json=profile
                or {
                    "sub": "1234567890",
                    "email": "carol@example.com",
                    "email_verified": True,
                    "name": "Carol",
                },
            )
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def state_from(url: str) -> str:
    return parse_qs(urlparse(url).query)["state"][0]


class TestAuthorizationUrl:
    """Tests for the consent-screen redirect."""

    def test_begin_builds_url(self) -> None:
        client = GoogleOAuthClient(make_settings())
        url = client.begin()

        query = parse_qs(urlparse(url).query)
        assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
        assert query["client_id"] == ["client-id"]
        assert query["response_type"] == ["code"]
        assert query["redirect_uri"] == [
            "https://codegen.example.com/auth/google/callback"
        ]
        assert query["scope"] == ["openid profile email"]

    def test_each_flow_gets_its_own_state(self) -> None:
        client = GoogleOAuthClient(make_settings())
        assert state_from(client.begin()) != state_from(client.begin())


class TestAuthenticate:
    """Tests for completing the flow."""

    @pytest.mark.asyncio
    async def test_successful_flow(self) -> None:
        client = GoogleOAuthClient(
            make_settings(), http_client=httpx.AsyncClient(transport=google_handler())
        )
        state = state_from(client.begin())

        profile = await client.authenticate("auth-code", state)

        assert profile.provider_id == "1234567890"
        assert profile.email == "carol@example.com"
        assert profile.display_name == "Carol"

    @pytest.mark.asyncio
    async def test_state_is_single_use(self) -> None:
        client = GoogleOAuthClient(
            make_settings(), http_client=httpx.AsyncClient(transport=google_handler())
        )
        state = state_from(client.begin())
        await client.authenticate("auth-code", state)

        with pytest.raises(OAuthError, match="state"):
            await client.authenticate("auth-code", state)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [None, "", "forged-state"])
    async def test_unknown_state(self, state: str | None) -> None:
        client = GoogleOAuthClient(
            make_settings(), http_client=httpx.AsyncClient(transport=google_handler())
        )
        with pytest.raises(OAuthError):
            await client.authenticate("auth-code", state)

    @pytest.mark.asyncio
    async def test_missing_code(self) -> None:
        client = GoogleOAuthClient(
            make_settings(), http_client=httpx.AsyncClient(transport=google_handler())
        )
        with pytest.raises(OAuthError, match="authorization code"):
            await client.authenticate(None, state_from(client.begin()))

    @pytest.mark.asyncio
    async def test_rejected_code_exchange(self) -> None:
        client = GoogleOAuthClient(
            make_settings(),
            http_client=httpx.AsyncClient(transport=google_handler(token_status=400)),
        )
        with pytest.raises(OAuthError, match="token_exchange"):
            await client.authenticate("auth-code", state_from(client.begin()))

    @pytest.mark.asyncio
    async def test_unverified_email_is_dropped(self) -> None:
        transport = google_handler(
            profile={"sub": "42", "email": "x@example.com", "email_verified": False}
        )
        client = GoogleOAuthClient(
            make_settings(), http_client=httpx.AsyncClient(transport=transport)
        )

        profile = await client.authenticate("auth-code", state_from(client.begin()))

        assert profile.provider_id == "42"
        assert profile.email is None

    @pytest.mark.asyncio
    async def test_profile_without_id(self) -> None:
        client = GoogleOAuthClient(
            make_settings(),
            http_client=httpx.AsyncClient(
                transport=google_handler(profile={"email": "x@example.com"})
            ),
        )
        with pytest.raises(OAuthError, match="user id"):
            await client.authenticate("auth-code", state_from(client.begin()))
