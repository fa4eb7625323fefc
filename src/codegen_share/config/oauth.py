"""Google OAuth (federated login) settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleOAuthSettings(BaseSettings):
    """Google OAuth client configuration.

    Federated login routes are only mounted when both the client id and the
    client secret are present.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_",
        case_sensitive=False,
        extra="ignore",
    )

    client_id: str | None = Field(default=None)
    client_secret: str | None = Field(default=None)
    base_url: str = Field(
        default="http://localhost:5000",
        description="Public base URL used to build the callback URL",
    )
    callback_path: str = Field(default="/auth/google/callback")
    authorize_url: str = Field(default="https://accounts.google.com/o/oauth2/v2/auth")
    token_url: str = Field(default="https://oauth2.googleapis.com/token")
    userinfo_url: str = Field(
        default="https://openidconnect.googleapis.com/v1/userinfo"
    )
    scopes: list[str] = Field(default_factory=lambda: ["openid", "profile", "email"])
    state_ttl_seconds: int = Field(default=600, ge=30)
    timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def redirect_uri(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.callback_path}"
