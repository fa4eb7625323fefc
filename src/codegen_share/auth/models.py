"""Pydantic models for accounts, sessions and login requests."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Account(CamelModel):
    """Account record as held by the identity store."""

    id: int = Field(..., description="Monotonic account id, immutable")
    username: str = Field(..., description="Unique login name")
    password_hash: str = Field(..., description="scrypt digest and salt")
    federated_id: str | None = Field(
        default=None, description="Unique identity asserted by the OAuth provider"
    )
    rate_limit_remaining: int = Field(
        ..., ge=0, description="Requests left in the current quota window"
    )


class AccountPublic(CamelModel):
    """Account as returned to HTTP clients (no password material)."""

    id: int
    username: str
    federated_id: str | None = None
    rate_limit_remaining: int

    @classmethod
    def from_account(cls, account: Account) -> "AccountPublic":
        return cls(
            id=account.id,
            username=account.username,
            federated_id=account.federated_id,
            rate_limit_remaining=account.rate_limit_remaining,
        )


class Session(BaseModel):
    """Issued session handle."""

    token: str = Field(..., description="Signed session token")
    account_id: int
    expires_at: datetime
    remember: bool = False
    max_age_seconds: int = Field(..., description="Cookie max-age for this session")


class FederatedProfile(BaseModel):
    """Identity asserted by a federated identity provider."""

    provider_id: str = Field(..., min_length=1, description="Provider subject id")
    email: str | None = None
    display_name: str | None = None


class Credentials(CamelModel):
    """Username/password login or registration request."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=1024)
    remember_me: bool = False


class RegistrationRequest(Credentials):
    """Registration request; new passwords must be at least 6 characters."""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=1024)
