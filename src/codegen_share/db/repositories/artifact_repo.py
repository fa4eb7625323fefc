"""Shared-artifact repository for database operations."""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from codegen_share.db.engine import get_session
from codegen_share.db.models import SharedArtifactRecord, as_utc
from codegen_share.db.repositories.base import storage_operation
from codegen_share.sharing.models import SharedArtifact
from codegen_share.storage.base import ArtifactStore


def _to_artifact(record: SharedArtifactRecord) -> SharedArtifact:
    return SharedArtifact(
        share_id=record.share_id,
        owner_id=record.owner_id,
        language=record.language,
        prompt=record.prompt,
        code=record.code,
        created_at=as_utc(record.created_at),
        expires_at=as_utc(record.expires_at),
        is_public=record.is_public,
    )


class SqlArtifactStore(ArtifactStore):
    """Shared artifacts in SQLite, keyed by share id."""

    @storage_operation
    async def insert(self, artifact: SharedArtifact) -> bool:
        record = SharedArtifactRecord(
            share_id=artifact.share_id,
            owner_id=artifact.owner_id,
            language=artifact.language,
            prompt=artifact.prompt,
            code=artifact.code,
            created_at=as_utc(artifact.created_at),
            expires_at=as_utc(artifact.expires_at),
            is_public=artifact.is_public,
        )
        try:
            async with get_session() as session:
                session.add(record)
                await session.commit()
        except IntegrityError:
            # Primary key taken: the caller draws a new share id
            return False
        return True

    @storage_operation
    async def get(self, share_id: str) -> SharedArtifact | None:
        async with get_session() as session:
            record = await session.get(SharedArtifactRecord, share_id)
            return _to_artifact(record) if record else None

    @storage_operation
    async def delete(self, share_id: str) -> bool:
        async with get_session() as session:
            result = await session.execute(
                delete(SharedArtifactRecord).where(
                    col(SharedArtifactRecord.share_id) == share_id
                )
            )
            return bool(result.rowcount)

    @storage_operation
    async def list_by_owner(self, owner_id: int) -> list[SharedArtifact]:
        async with get_session() as session:
            result = await session.execute(
                select(SharedArtifactRecord)
                .where(SharedArtifactRecord.owner_id == owner_id)
                .order_by(col(SharedArtifactRecord.created_at).desc())
            )
            return [_to_artifact(record) for record in result.scalars().all()]

    @storage_operation
    async def list_all(self) -> list[SharedArtifact]:
        async with get_session() as session:
            result = await session.execute(select(SharedArtifactRecord))
            return [_to_artifact(record) for record in result.scalars().all()]

    @storage_operation
    async def delete_expired(self, now: datetime) -> int:
        async with get_session() as session:
            result = await session.execute(
                delete(SharedArtifactRecord).where(
                    col(SharedArtifactRecord.expires_at) <= as_utc(now)
                )
            )
            return int(result.rowcount or 0)
