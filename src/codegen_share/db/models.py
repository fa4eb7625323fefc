"""SQLModel database models.

Timestamp columns are declared as timezone-aware ``DateTime`` and always bound
as aware UTC values. SQLite keeps them as text without an offset, so values
read back are re-tagged as UTC.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class AccountRecord(SQLModel, table=True):
    """Account row. Only the quota counter changes after insert."""

    __tablename__ = "accounts"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    federated_id: str | None = Field(default=None, unique=True, index=True)
    rate_limit_remaining: int = Field(default=0, ge=0)
    created_at: datetime = Field(
        default_factory=_utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class SharedArtifactRecord(SQLModel, table=True):
    """Published artifact row, keyed by its share id."""

    __tablename__ = "shared_artifacts"

    share_id: str = Field(primary_key=True)
    owner_id: int = Field(foreign_key="accounts.id", index=True)
    language: str
    prompt: str
    code: str
    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    is_public: bool = Field(default=True)
