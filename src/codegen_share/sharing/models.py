"""Pydantic models for shared artifacts."""

from datetime import datetime

from pydantic import Field

from codegen_share.auth.models import CamelModel


class SharedArtifact(CamelModel):
    """A published snippet reachable through its share id until it expires."""

    share_id: str = Field(..., description="Public, unguessable handle")
    owner_id: int = Field(..., description="Account that published the artifact")
    language: str
    prompt: str
    code: str
    created_at: datetime
    expires_at: datetime
    is_public: bool = True

    def is_expired(self, now: datetime) -> bool:
        """An artifact is visible strictly before its expiry instant."""
        return now >= self.expires_at


class ShareCreate(CamelModel):
    """Input model for publishing an artifact."""

    language: str = Field(..., min_length=1, max_length=50)
    prompt: str = Field(..., min_length=1, max_length=1000)
    code: str = Field(..., min_length=1, max_length=200_000)
    is_public: bool = True
