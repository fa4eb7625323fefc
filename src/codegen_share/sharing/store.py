"""Shared-artifact store with unguessable ids and fixed retention."""

from datetime import timedelta

import shortuuid
from structlog import get_logger

from codegen_share.core.clock import Clock, utc_now
from codegen_share.exceptions import ShareIdCollisionError, StorageError
from codegen_share.sharing.models import SharedArtifact
from codegen_share.storage.base import ArtifactStore


logger = get_logger(__name__)

DEFAULT_RETENTION = timedelta(days=30)
DEFAULT_ID_LENGTH = 12


class SharedArtifactStore:
    """Publishes artifacts and serves them until they expire.

    Share ids are drawn from shortuuid's 57-symbol alphabet using the
    system CSPRNG. An id is never reused for a different artifact while the
    first one is still stored: inserts only succeed when the id is free.
    """

    def __init__(
        self,
        store: ArtifactStore,
        *,
        retention: timedelta = DEFAULT_RETENTION,
        id_length: int = DEFAULT_ID_LENGTH,
        max_attempts: int = 5,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.retention = retention
        self.id_length = id_length
        self.max_attempts = max_attempts
        self._clock = clock
        self._alphabet = shortuuid.ShortUUID()

    def _new_share_id(self) -> str:
        return self._alphabet.random(length=self.id_length)

    async def publish(
        self,
        owner_id: int,
        language: str,
        prompt: str,
        code: str,
        is_public: bool = True,
    ) -> SharedArtifact:
        """Store a new artifact under a fresh share id.

        Raises:
            ShareIdCollisionError: If every attempted id was already taken

        """
        created_at = self._clock()
        for attempt in range(1, self.max_attempts + 1):
            artifact = SharedArtifact(
                share_id=self._new_share_id(),
                owner_id=owner_id,
                language=language,
                prompt=prompt,
                code=code,
                created_at=created_at,
                expires_at=created_at + self.retention,
                is_public=is_public,
            )
            if await self.store.insert(artifact):
                logger.info(
                    "artifact_published",
                    share_id=artifact.share_id,
                    owner_id=owner_id,
                    language=language,
                )
                return artifact
            logger.warning("share_id_collision", attempt=attempt)

        raise ShareIdCollisionError(self.max_attempts)

    async def get(self, share_id: str) -> SharedArtifact | None:
        """Fetch a visible artifact.

        An expired artifact is deleted on the way out. A failed delete is
        logged and left for the next read or sweep.
        """
        artifact = await self.store.get(share_id)
        if artifact is None:
            return None
        if not artifact.is_expired(self._clock()):
            return artifact

        try:
            await self.store.delete(share_id)
            logger.info("artifact_expired_on_read", share_id=share_id)
        except StorageError as e:
            logger.warning(
                "artifact_expired_delete_failed", share_id=share_id, error=str(e)
            )
        return None

    async def list_by_owner(self, owner_id: int) -> list[SharedArtifact]:
        """List an owner's visible artifacts, newest first."""
        now = self._clock()
        artifacts = [
            artifact
            for artifact in await self.store.list_by_owner(owner_id)
            if not artifact.is_expired(now)
        ]
        artifacts.sort(key=lambda a: a.created_at, reverse=True)
        return artifacts

    async def purge_expired(self) -> int:
        """Delete every expired artifact.

        Returns:
            Number of artifacts deleted

        """
        deleted = await self.store.delete_expired(self._clock())
        if deleted:
            logger.info("artifacts_purged", count=deleted)
        return deleted
