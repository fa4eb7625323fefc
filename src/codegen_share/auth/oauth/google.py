"""Google OAuth 2.0 authorization-code client.

The client builds the authorization redirect, remembers the anti-forgery
``state`` for a few minutes, exchanges the returned code for an access token
and reads the user's profile. Everything that goes wrong on the way surfaces
as OAuthError.
"""

import secrets
from typing import Any
from urllib.parse import urlencode

import httpx
from cachetools import TTLCache
from structlog import get_logger

from codegen_share.auth.models import FederatedProfile
from codegen_share.config.oauth import GoogleOAuthSettings
from codegen_share.exceptions import OAuthError


logger = get_logger(__name__)

PENDING_STATES_MAXSIZE = 1024


def _truncate_error_text(response_text: str) -> str:
    if len(response_text) > 200:
        return f"{response_text[:100]}...{response_text[-50:]}"
    return response_text


class GoogleOAuthClient:
    """Authorization-code flow against Google's OAuth endpoints."""

    def __init__(
        self,
        settings: GoogleOAuthSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OAuth client.

        Args:
            settings: Google OAuth configuration
            http_client: Optional shared httpx client for connection pooling

        """
        self.settings = settings
        self._client = http_client
        self._owns_client = http_client is None
        # Abandoned flows are dropped when the TTL runs out
        self._pending_states: TTLCache[str, bool] = TTLCache(
            maxsize=PENDING_STATES_MAXSIZE, ttl=settings.state_ttl_seconds
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        return self._client

    def begin(self) -> str:
        """Start a login flow.

        Returns:
            URL of Google's consent screen to redirect the browser to

        """
        state = secrets.token_urlsafe(32)
        self._pending_states[state] = True
        return self.authorization_url(state)

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.settings.client_id or "",
            "redirect_uri": self.settings.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.settings.scopes),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{self.settings.authorize_url}?{urlencode(params)}"

    def consume_state(self, state: str | None) -> bool:
        """Check a callback's state. Each state is accepted at most once."""
        if not state:
            return False
        return self._pending_states.pop(state, None) is not None

    async def authenticate(
        self, code: str | None, state: str | None
    ) -> FederatedProfile:
        """Complete a login flow from the callback parameters.

        Raises:
            OAuthError: If the state is unknown, the code is missing, or
                Google rejects the exchange

        """
        if not self.consume_state(state):
            raise OAuthError("Invalid or expired OAuth state")
        if not code:
            raise OAuthError("No authorization code received")

        access_token = await self.exchange_code(code)
        return await self.fetch_profile(access_token)

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        data = {
            "code": code,
            "client_id": self.settings.client_id or "",
            "client_secret": self.settings.client_secret or "",
            "redirect_uri": self.settings.redirect_uri,
            "grant_type": "authorization_code",
        }
        payload = await self._request(
            "token_exchange", "POST", self.settings.token_url, data=data
        )
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise OAuthError("Token response did not contain an access token")
        return access_token

    async def fetch_profile(self, access_token: str) -> FederatedProfile:
        """Read the signed-in user's profile."""
        payload = await self._request(
            "userinfo",
            "GET",
            self.settings.userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        provider_id = payload.get("sub") or payload.get("id")
        if not provider_id:
            raise OAuthError("Profile response did not contain a user id")

        email = payload.get("email") if payload.get("email_verified", True) else None
        return FederatedProfile(
            provider_id=str(provider_id),
            email=email,
            display_name=payload.get("name"),
        )

    async def _request(
        self, operation: str, method: str, url: str, **kwargs: Any
    ) -> dict[str, Any]:
        try:
            response = await self._get_client().request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("oauth_request_failed", operation=operation, error=str(e))
            raise OAuthError(f"OAuth {operation} failed") from e

        if response.status_code != 200:
            logger.error(
                "oauth_request_rejected",
                operation=operation,
                status_code=response.status_code,
                response_preview=_truncate_error_text(response.text),
            )
            raise OAuthError(f"OAuth {operation} failed")

        try:
            payload: dict[str, Any] = response.json()
        except ValueError as e:
            raise OAuthError(f"OAuth {operation} returned invalid JSON") from e
        return payload

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
