"""Tests for the shared-artifact store."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from codegen_share.exceptions import ShareIdCollisionError, StorageError
from codegen_share.sharing.store import SharedArtifactStore
from codegen_share.storage.memory import InMemoryArtifactStore


class FlakyDeleteStore(InMemoryArtifactStore):
    """Backend whose deletes always fail."""

    async def delete(self, share_id: str) -> bool:
        raise StorageError("disk on fire")


@pytest.fixture
def backend() -> InMemoryArtifactStore:
    return InMemoryArtifactStore()


@pytest.fixture
def store(backend: InMemoryArtifactStore, clock) -> SharedArtifactStore:
    return SharedArtifactStore(backend, clock=clock)


async def publish(store: SharedArtifactStore, owner_id: int = 1, code: str = "x = 1"):
    return await store.publish(
        owner_id=owner_id, language="python", prompt="make x", code=code
    )


class TestPublish:
    """Tests for publishing artifacts."""

    @pytest.mark.asyncio
    async def test_publish_and_get(self, store: SharedArtifactStore, clock) -> None:
        artifact = await publish(store)

        assert len(artifact.share_id) == 12
        assert artifact.created_at == clock.now
        assert artifact.expires_at == clock.now + timedelta(days=30)
        assert artifact.is_public is True
        assert await store.get(artifact.share_id) == artifact

    @pytest.mark.asyncio
    async def test_share_ids_are_distinct(self, store: SharedArtifactStore) -> None:
        ids = {(await publish(store)).share_id for _ in range(200)}
        assert len(ids) == 200

    @pytest.mark.asyncio
    async def test_collision_draws_new_id(self, store: SharedArtifactStore) -> None:
        """Test that a taken id is never overwritten."""
        first = await publish(store, code="first")

        with patch.object(
            store, "_new_share_id", side_effect=[first.share_id, "freshid12345"]
        ):
            second = await publish(store, code="second")

        assert second.share_id == "freshid12345"
        kept = await store.get(first.share_id)
        assert kept is not None
        assert kept.code == "first"

    @pytest.mark.asyncio
    async def test_collisions_exhaust_attempts(
        self, backend: InMemoryArtifactStore, clock
    ) -> None:
        store = SharedArtifactStore(backend, max_attempts=3, clock=clock)
        taken = await publish(store)

        with patch.object(store, "_new_share_id", return_value=taken.share_id):
            with pytest.raises(ShareIdCollisionError):
                await publish(store)


class TestGet:
    """Tests for reading artifacts."""

    @pytest.mark.asyncio
    async def test_never_issued(self, store: SharedArtifactStore) -> None:
        assert await store.get("doesnotexist") is None

    @pytest.mark.asyncio
    async def test_visible_until_expiry(
        self, store: SharedArtifactStore, clock
    ) -> None:
        artifact = await publish(store)

        clock.advance(days=30, seconds=-1)
        assert await store.get(artifact.share_id) is not None

    @pytest.mark.asyncio
    async def test_expired_is_gone_and_purged(
        self, store: SharedArtifactStore, backend: InMemoryArtifactStore, clock
    ) -> None:
        """Test that an expired artifact is hidden and deleted on read."""
        artifact = await publish(store)

        clock.advance(days=30)
        assert await store.get(artifact.share_id) is None
        assert await backend.get(artifact.share_id) is None

        # Moving the clock back cannot resurrect it
        clock.advance(days=-30)
        assert await store.get(artifact.share_id) is None

    @pytest.mark.asyncio
    async def test_failed_lazy_delete_is_not_raised(self, clock) -> None:
        store = SharedArtifactStore(FlakyDeleteStore(), clock=clock)
        artifact = await publish(store)

        clock.advance(days=31)
        assert await store.get(artifact.share_id) is None


class TestListAndPurge:
    """Tests for owner listings and the eager sweep."""

    @pytest.mark.asyncio
    async def test_list_by_owner_newest_first(
        self, store: SharedArtifactStore, clock
    ) -> None:
        oldest = await publish(store, owner_id=1, code="a")
        clock.advance(minutes=1)
        middle = await publish(store, owner_id=1, code="b")
        clock.advance(minutes=1)
        newest = await publish(store, owner_id=1, code="c")
        await publish(store, owner_id=2, code="someone else")

        listed = await store.list_by_owner(1)
        assert [a.share_id for a in listed] == [
            newest.share_id,
            middle.share_id,
            oldest.share_id,
        ]

    @pytest.mark.asyncio
    async def test_list_hides_expired(self, store: SharedArtifactStore, clock) -> None:
        await publish(store, owner_id=1, code="old")
        clock.advance(days=20)
        recent = await publish(store, owner_id=1, code="recent")
        clock.advance(days=11)

        listed = await store.list_by_owner(1)
        assert [a.share_id for a in listed] == [recent.share_id]

    @pytest.mark.asyncio
    async def test_list_for_owner_without_artifacts(
        self, store: SharedArtifactStore
    ) -> None:
        assert await store.list_by_owner(99) == []

    @pytest.mark.asyncio
    async def test_purge_expired(
        self, store: SharedArtifactStore, backend: InMemoryArtifactStore, clock
    ) -> None:
        await publish(store, code="a")
        await publish(store, code="b")
        clock.advance(days=15)
        survivor = await publish(store, code="c")
        clock.advance(days=16)

        assert await store.purge_expired() == 2
        assert [a.share_id for a in await backend.list_all()] == [survivor.share_id]
        assert await store.purge_expired() == 0
