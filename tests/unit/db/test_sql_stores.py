"""Tests for the SQLite storage backend."""

import tempfile
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from codegen_share.db import AccountRecord, dispose_db, get_session, init_db
from codegen_share.db.repositories import SqlAccountStore, SqlArtifactStore
from codegen_share.exceptions import (
    DuplicateFederatedIdError,
    DuplicateUsernameError,
    NotFoundError,
)
from codegen_share.sharing.models import SharedArtifact


@pytest.fixture
async def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        await init_db(db_path)
        yield db_path
        await dispose_db()


def make_artifact(
    share_id: str, created_at: datetime, owner_id: int = 1, days: int = 30
) -> SharedArtifact:
    return SharedArtifact(
        share_id=share_id,
        owner_id=owner_id,
        language="rust",
        prompt="fn main",
        code='fn main() { println!("hi"); }',
        created_at=created_at,
        expires_at=created_at + timedelta(days=days),
    )


class TestSqlAccountStore:
    """Tests for SqlAccountStore."""

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, temp_db) -> None:
        store = SqlAccountStore()
        account = await store.create("alice", "hash", 50, federated_id="g-1")

        assert account.id == 1
        assert await store.get_by_id(account.id) == account
        assert await store.get_by_username("alice") == account
        assert await store.get_by_federated_id("g-1") == account
        assert await store.get_by_username("nobody") is None
        assert await store.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_ids_are_monotonic(self, temp_db) -> None:
        store = SqlAccountStore()
        first = await store.create("a", "hash", 50)
        second = await store.create("b", "hash", 50)
        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_duplicate_username(self, temp_db) -> None:
        store = SqlAccountStore()
        await store.create("alice", "hash", 50)
        with pytest.raises(DuplicateUsernameError):
            await store.create("alice", "other", 50)

    @pytest.mark.asyncio
    async def test_duplicate_federated_id(self, temp_db) -> None:
        store = SqlAccountStore()
        await store.create("alice", "hash", 50, federated_id="g-1")
        with pytest.raises(DuplicateFederatedIdError):
            await store.create("bob", "hash", 50, federated_id="g-1")

    @pytest.mark.asyncio
    async def test_consume_quota(self, temp_db) -> None:
        store = SqlAccountStore()
        account = await store.create("alice", "hash", 2)

        assert await store.consume_quota(account.id) == 1
        assert await store.consume_quota(account.id) == 0
        assert await store.consume_quota(account.id) is None

        stored = await store.get_by_id(account.id)
        assert stored is not None
        assert stored.rate_limit_remaining == 0

    @pytest.mark.asyncio
    async def test_consume_quota_unknown_account(self, temp_db) -> None:
        with pytest.raises(NotFoundError):
            await SqlAccountStore().consume_quota(404)

    @pytest.mark.asyncio
    async def test_set_quotas(self, temp_db) -> None:
        store = SqlAccountStore()
        alice = await store.create("alice", "hash", 0)
        await store.create("bob", "hash", 3)

        assert await store.set_quota(alice.id, 10) is True
        assert await store.set_quota(999, 10) is False
        assert await store.set_all_quotas(50) == 2


class TestSqlArtifactStore:
    """Tests for SqlArtifactStore."""

    @pytest.mark.asyncio
    async def test_insert_and_get_round_trip(self, temp_db) -> None:
        """Test that timestamps come back timezone-aware and unchanged."""
        store = SqlArtifactStore()
        created = datetime(2025, 3, 1, 12, 30, tzinfo=UTC)
        artifact = make_artifact("abcdefghijkl", created)

        assert await store.insert(artifact) is True
        fetched = await store.get("abcdefghijkl")

        assert fetched == artifact
        assert fetched is not None
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_insert_if_absent(self, temp_db) -> None:
        store = SqlArtifactStore()
        now = datetime.now(UTC)
        await store.insert(make_artifact("same-id", now))

        assert await store.insert(make_artifact("same-id", now, owner_id=2)) is False
        fetched = await store.get("same-id")
        assert fetched is not None
        assert fetched.owner_id == 1

    @pytest.mark.asyncio
    async def test_delete(self, temp_db) -> None:
        store = SqlArtifactStore()
        await store.insert(make_artifact("gone", datetime.now(UTC)))

        assert await store.delete("gone") is True
        assert await store.delete("gone") is False
        assert await store.get("gone") is None

    @pytest.mark.asyncio
    async def test_list_by_owner(self, temp_db) -> None:
        store = SqlArtifactStore()
        base = datetime(2025, 1, 1, tzinfo=UTC)
        await store.insert(make_artifact("older", base))
        await store.insert(make_artifact("newer", base + timedelta(hours=1)))
        await store.insert(make_artifact("theirs", base, owner_id=2))

        assert [a.share_id for a in await store.list_by_owner(1)] == [
            "newer",
            "older",
        ]
        assert len(await store.list_all()) == 3

    @pytest.mark.asyncio
    async def test_delete_expired(self, temp_db) -> None:
        store = SqlArtifactStore()
        base = datetime(2025, 1, 1, tzinfo=UTC)
        await store.insert(make_artifact("short", base, days=1))
        await store.insert(make_artifact("long", base, days=30))

        assert await store.delete_expired(base + timedelta(days=1)) == 1
        assert [a.share_id for a in await store.list_all()] == ["long"]

    @pytest.mark.asyncio
    async def test_offset_timestamps_normalized_to_utc(self, temp_db) -> None:
        """Test that non-UTC inputs are stored and compared as UTC instants."""
        store = SqlArtifactStore()
        plus_two = timezone(timedelta(hours=2))
        created = datetime(2025, 6, 1, 14, 0, tzinfo=plus_two)
        await store.insert(make_artifact("offset", created, days=1))

        fetched = await store.get("offset")
        assert fetched is not None
        assert fetched.created_at == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
        assert fetched.created_at.utcoffset() == timedelta(0)

        # One minute before expiry in UTC, expressed in the +02:00 zone
        just_before = datetime(2025, 6, 2, 13, 59, tzinfo=plus_two)
        assert await store.delete_expired(just_before) == 0
        assert await store.delete_expired(just_before + timedelta(minutes=1)) == 1


class TestSqlAccountTimestamps:
    """Tests for the account creation timestamp column."""

    @pytest.mark.asyncio
    async def test_created_at_defaults_to_now(self, temp_db) -> None:
        account = await SqlAccountStore().create("alice", "hash", 50)
        async with get_session() as session:
            record = await session.get(AccountRecord, account.id)

        assert record is not None
        assert abs(
            datetime.now(UTC) - record.created_at.replace(tzinfo=UTC)
        ) < timedelta(minutes=1)
